"""Extract electricity production time series exported from SMARD.

SMARD exports are semicolon delimited, use a German decimal comma and ``.`` as the
thousands separator, and mark missing values with ``-``. The portal limits the length
of a single export, so a multi-year series arrives as a directory of files whose
periods may overlap.
"""

from pathlib import Path
from typing import Any

import pandas as pd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)

DATE_COLUMNS: list[str] = ["Datum", "Anfang", "Ende", "Datum von", "Datum bis"]
"""Date and time columns found in the old and new SMARD export layouts."""

READ_CSV_KWARGS: dict[str, Any] = {
    "sep": ";",
    "decimal": ",",
    "thousands": ".",
    "na_values": ["-"],
    "encoding": "utf-8-sig",
    # Dates like 01.01.2023 must not be mistaken for numbers with thousands separators
    "dtype": {col: "string" for col in DATE_COLUMNS},
}
"""Keyword arguments that are passed to :meth:`pandas.read_csv`."""


def read_generation_csv(path: str | Path) -> pd.DataFrame:
    """Read a single SMARD production export."""
    df = pd.read_csv(path, **READ_CSV_KWARGS)
    logger.debug(f"Read {len(df)} rows from {Path(path).name}")
    return df


def read_generation_dir(directory: str | Path, pattern: str = "*.csv") -> pd.DataFrame:
    """Read and concatenate all of the SMARD exports in a directory.

    Files are read in sorted filename order, so that when periods overlap the file
    that sorts last comes last. Each row is tagged with the name of the file it came
    from in a ``source_file`` column.

    Args:
        directory: Directory containing the exports.
        pattern: Glob pattern selecting the exports within the directory.

    Raises:
        FileNotFoundError: if the directory doesn't exist or no files match.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Time series directory not found at {directory}")
    paths = sorted(directory.glob(pattern))
    if not paths:
        raise FileNotFoundError(f"No files matching {pattern} found in {directory}")
    logger.info(f"Reading {len(paths)} production time series files from {directory}")
    return pd.concat(
        [read_generation_csv(path).assign(source_file=path.name) for path in paths],
        ignore_index=True,
    )


@asset(required_resource_keys={"report_settings"}, compute_kind="pandas")
def raw_smard__generation(context) -> pd.DataFrame:
    """Electricity production by generation category, as exported."""
    settings = context.resources.report_settings.generation
    return read_generation_dir(
        RegenPaths().input_file(settings.generation_dir),
        pattern=settings.file_pattern,
    )
