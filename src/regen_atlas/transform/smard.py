"""Turn SMARD production exports into a single regular time series.

The exports label each generation category with a German name followed by its unit
and resolution, e.g. ``Photovoltaik [MWh] Originalauflösungen``. Timestamps are local
time, either split over ``Datum`` and ``Anfang`` columns or combined in ``Datum von``.
"""

import pandas as pd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.extract.smard import DATE_COLUMNS
from regen_atlas.metadata import REPORT_RESOURCES
from regen_atlas.metadata.enums import GENERATION_CATEGORIES_SMARD

logger = regen_atlas.logging_helpers.get_logger(__name__)

TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M"


def parse_timestamps(df: pd.DataFrame) -> pd.DataFrame:
    """Replace the SMARD date and time columns with a ``datetime_local`` column.

    A directory may mix both export layouts, so each row takes its timestamp from
    ``Datum von`` where that is present, and from ``Datum`` and ``Anfang`` otherwise.

    Raises:
        ValueError: if neither ``Datum von`` nor both ``Datum`` and ``Anfang`` are
            present, or any timestamp is missing or can't be parsed.
    """
    has_combined = "Datum von" in df.columns
    has_split = {"Datum", "Anfang"}.issubset(df.columns)
    if not (has_combined or has_split):
        raise ValueError(
            "Cannot build timestamps: expected a 'Datum von' column, or 'Datum' "
            f"and 'Anfang' columns. Found {list(df.columns)}"
        )
    raw_ts = pd.Series(pd.NA, index=df.index, dtype="string")
    if has_combined:
        raw_ts = df["Datum von"].astype("string").str.strip()
    if has_split:
        split_ts = (
            df["Datum"].astype("string").str.strip()
            + " "
            + df["Anfang"].astype("string").str.strip()
        )
        raw_ts = raw_ts.fillna(split_ts)
    try:
        timestamps = pd.to_datetime(raw_ts, format=TIMESTAMP_FORMAT)
    except ValueError as err:
        raise ValueError(f"Unparseable SMARD timestamps: {err}") from err
    if n_missing := timestamps.isna().sum():
        raise ValueError(f"Missing SMARD timestamps in {n_missing} of {len(df)} rows.")
    return df.drop(columns=[col for col in DATE_COLUMNS if col in df.columns]).assign(
        datetime_local=timestamps.astype("datetime64[ns]")
    )


def rename_generation_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename production columns to ``{category}_mwh`` and drop unknown columns.

    The German category name is whatever precedes the unit in brackets. Columns that
    don't correspond to a known generation category are dropped with a warning, as are
    further columns for a category that already has one, e.g. a second resolution of
    the same series. The ``datetime_local`` and ``source_file`` columns are kept.
    """
    keep = [col for col in ["datetime_local", "source_file"] if col in df.columns]
    rename = {}
    repeated = []
    for col in df.columns:
        if col in keep:
            continue
        prefix = str(col).split("[")[0].strip()
        if prefix in GENERATION_CATEGORIES_SMARD:
            new_name = f"{GENERATION_CATEGORIES_SMARD[prefix]}_mwh"
            if new_name in rename.values():
                repeated.append(col)
            else:
                rename[col] = new_name
    if repeated:
        logger.warning(f"Dropping repeated SMARD category columns: {repeated}")
    unknown = [
        col
        for col in df.columns
        if col not in keep and col not in rename and col not in repeated
    ]
    if unknown:
        logger.warning(f"Dropping unrecognized SMARD columns: {unknown}")
    out = df[keep + list(rename)].rename(columns=rename).copy()
    for col in rename.values():
        out[col] = pd.to_numeric(out[col], errors="coerce")
    return out


def dedupe_timestamps(df: pd.DataFrame) -> pd.DataFrame:
    """Keep one copy of each interval, preferring rows from later files.

    Overlapping exports repeat the same intervals. Rows are assumed to be in file
    order, and the last file to cover an interval wins. Timestamps are local time,
    so when clocks go back the repeated hour appears twice within a single file.
    Those rows are distinct intervals: a timestamp's n-th occurrence within one file
    only replaces its n-th occurrence in another. The result is sorted by time.
    """
    n_rows = len(df)
    if "source_file" in df.columns:
        files = df["source_file"]
    else:
        files = pd.Series(0, index=df.index)
    occurrence = df.groupby([files, df["datetime_local"]], sort=False).cumcount()
    out = (
        df.assign(_occurrence=occurrence)
        .drop_duplicates(subset=["datetime_local", "_occurrence"], keep="last")
        .sort_values(["datetime_local", "_occurrence"], kind="stable")
        .drop(columns="_occurrence")
        .reset_index(drop=True)
    )
    if n_dupes := n_rows - len(out):
        logger.info(f"Dropped {n_dupes} rows with duplicate timestamps.")
    return out


def resample_generation(df: pd.DataFrame, freq: str = "h") -> pd.DataFrame:
    """Sum production onto a regular time grid.

    Values are energies, so they are summed within each interval. Intervals with no
    data at all are null rather than zero, so gaps stay visible. The two occurrences of
    the local hour repeated when clocks go back are summed into the same interval.

    Args:
        df: Production with a ``datetime_local`` column and ``*_mwh`` columns.
        freq: pandas frequency alias of the output grid.

    Raises:
        ValueError: if ``freq`` is finer than the resolution of the data, which would
            require splitting energy values between intervals.
    """
    value_cols = [col for col in df.columns if col.endswith("_mwh")]
    offset = pd.tseries.frequencies.to_offset(freq)
    step = df["datetime_local"].drop_duplicates().sort_values().diff().min()
    too_fine = isinstance(offset, pd.offsets.Tick) and step > pd.Timedelta(offset)
    if pd.notna(step) and too_fine:
        raise ValueError(
            f"Cannot resample data with a {step} resolution to the finer {freq} grid."
        )
    out = (
        df.set_index("datetime_local")[value_cols]
        .resample(freq)
        .sum(min_count=1)
        .reset_index()
    )
    logger.info(f"Resampled {len(df)} rows to {len(out)} intervals of {freq}.")
    return out


def generation_to_long(
    df: pd.DataFrame, categories: list[str] | None = None
) -> pd.DataFrame:
    """Reshape wide production data to one row per timestamp and category.

    Args:
        df: Wide production table with ``datetime_local`` and ``{category}_mwh``
            columns.
        categories: Categories to include. All categories with any data if None.

    Returns:
        Dataframe with ``datetime_local``, ``generation_category`` and
        ``production_mwh`` columns, sorted by time and category. Categories without
        any non-null values are left out.
    """
    if categories is None:
        value_cols = [col for col in df.columns if col.endswith("_mwh")]
    else:
        value_cols = [f"{cat}_mwh" for cat in categories if f"{cat}_mwh" in df.columns]
    value_cols = [col for col in value_cols if df[col].notna().any()]
    long = df.melt(
        id_vars=["datetime_local"],
        value_vars=value_cols,
        var_name="generation_category",
        value_name="production_mwh",
    )
    long["generation_category"] = long["generation_category"].str.removesuffix("_mwh")
    return long.sort_values(["datetime_local", "generation_category"]).reset_index(
        drop=True
    )


@asset(required_resource_keys={"report_settings"}, compute_kind="pandas")
def core_smard__generation(context, raw_smard__generation: pd.DataFrame) -> pd.DataFrame:
    """Production by generation category on a regular time grid."""
    settings = context.resources.report_settings.generation
    generation = (
        raw_smard__generation.pipe(parse_timestamps)
        .pipe(rename_generation_columns)
        .pipe(dedupe_timestamps)
        .pipe(resample_generation, freq=settings.resample_freq)
    )
    resource = REPORT_RESOURCES["core_smard__generation"]
    return resource.enforce_schema(resource.format_df(generation))
