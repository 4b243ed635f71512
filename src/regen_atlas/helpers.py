"""General utility functions that are used in a variety of contexts.

The functions in this module are not specific to any one input dataset. If a function
is a general purpose dataframe cleaning or restructuring tool, applicable in more than
one stage of the report, it should probably live here.
"""

import numpy as np
import pandas as pd

import regen_atlas.logging_helpers

logger = regen_atlas.logging_helpers.get_logger(__name__)


def simplify_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Simplify column labels for use as snake_case field names.

    All column labels will be simplified by:

    * Replacing all non-alphanumeric characters with spaces.
    * Forcing all letters to be lower case.
    * Compacting internal whitespace to a single " ".
    * Stripping leading and trailing whitespace.
    * Replacing all remaining whitespace with underscores.

    Args:
        df: The DataFrame whose column labels to simplify.

    Returns:
        A dataframe with simplified column names.
    """
    df = df.copy()
    df.columns = (
        df.columns.astype(str)
        .str.replace(r"[^0-9a-zA-Z]+", " ", regex=True)
        .str.strip()
        .str.lower()
        .str.replace(r"\s+", " ", regex=True)
        .str.replace(" ", "_")
    )
    return df


def simplify_strings(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Simplify the strings contained in a set of dataframe columns.

    Removes Unicode control characters, strips leading and trailing whitespace and
    compacts all internal whitespace to a single space. Unlike column labels, the case
    of the values is preserved, since values like energy source names are shown in
    chart legends.

    Leaves null values unaltered. Casts other values with astype(str).

    Args:
        df: DataFrame whose columns are being cleaned up.
        columns: The labels of the string columns to be simplified.

    Returns:
        The whole DataFrame that was passed in, with the string columns cleaned up.
    """
    out_df = df.copy()
    for col in columns:
        if col in out_df.columns:
            notnull = out_df[col].notnull()
            out_df[col] = out_df[col].astype("object")
            out_df.loc[notnull, col] = (
                out_df.loc[notnull, col]
                .astype(str)
                .str.replace(r"[\x00-\x1f\x7f-\x9f]", "", regex=True)
                .str.strip()
                .str.replace(r"\s+", " ", regex=True)
            )
    return out_df


def oob_to_nan(
    df: pd.DataFrame,
    cols: list[str],
    lb: float | None = None,
    ub: float | None = None,
) -> pd.DataFrame:
    """Set non-numeric values and those outside of a given range to NaN.

    Args:
        df: The dataframe containing values to be altered.
        cols: Labels of the columns whose values are to be changed.
        lb: Lower bound, below which values are set to NaN. If None, don't use a lower
            bound.
        ub: Upper bound, above which values are set to NaN. If None, don't use an upper
            bound.

    Returns:
        The altered DataFrame.
    """
    out_df = df.copy()
    for col in cols:
        # Force column to be numeric if possible, NaN otherwise:
        out_df[col] = pd.to_numeric(out_df[col], errors="coerce")
        if lb is not None:
            out_df.loc[out_df[col] < lb, col] = np.nan
        if ub is not None:
            out_df.loc[out_df[col] > ub, col] = np.nan
    return out_df


def drop_columns_if_present(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Drop the listed columns, logging any that were not found.

    Source files change their layout between releases, so a missing column is worth
    a note in the log but not an error.
    """
    missing = [col for col in columns if col not in df.columns]
    if missing:
        logger.debug(f"Columns not present, nothing to drop: {missing}")
    return df.drop(columns=[col for col in columns if col in df.columns])


def convert_col_to_datetime(
    df: pd.DataFrame, date_col_name: str, date_format: str | None = None
) -> pd.DataFrame:
    """Convert a non-datetime column in a dataframe to datetime64.

    Values that can't be parsed become NaT rather than raising, and the number of such
    values is logged.

    Args:
        df: Dataframe with column to convert.
        date_col_name: name of the datetime column to convert.
        date_format: strftime format of the values, or None to let pandas infer it.

    Returns:
        Dataframe with the converted datetime column.
    """
    if not pd.api.types.is_datetime64_any_dtype(df[date_col_name]):
        df = df.copy()
        notnull = df[date_col_name].notnull()
        df[date_col_name] = pd.to_datetime(
            df[date_col_name].astype("string"), format=date_format, errors="coerce"
        )
        n_bad = (notnull & df[date_col_name].isnull()).sum()
        if n_bad:
            logger.warning(f"{n_bad} unparseable values in {date_col_name} set to NaT.")
    return df

