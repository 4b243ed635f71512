"""Extract the renewable power plant list published by Open Power System Data.

The list is a single comma delimited CSV with one row per generation unit. Identifier
columns like postcodes and plant keys must be read as strings, or leading zeros are
lost.
"""

from pathlib import Path
from typing import Any

import pandas as pd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)

READ_CSV_KWARGS: dict[str, Any] = {
    "dtype": {
        "eeg_id": "string",
        "dso_id": "string",
        "postcode": "string",
        "municipality_code": "string",
    },
    "low_memory": False,
}
"""Keyword arguments that are passed to :meth:`pandas.read_csv`.

Columns are referred to by their names as they appear in the CSV header. Dtypes for
columns that are absent from a given release are ignored.
"""


def read_plants_csv(path: str | Path) -> pd.DataFrame:
    """Read the power plant list into a dataframe.

    Args:
        path: location of the plant list CSV.

    Raises:
        FileNotFoundError: if there is no file at ``path``.

    Returns:
        The plant list, with its original column names.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Power plant list not found at {path}")
    logger.info(f"Reading power plant list from {path}")
    df = pd.read_csv(path, **READ_CSV_KWARGS)
    logger.info(f"Read {len(df)} plant records with {df.shape[1]} columns.")
    return df


@asset(required_resource_keys={"report_settings"}, compute_kind="pandas")
def raw_opsd__plants(context) -> pd.DataFrame:
    """The power plant list as published."""
    settings = context.resources.report_settings
    return read_plants_csv(RegenPaths().input_file(settings.plants.plants_csv))
