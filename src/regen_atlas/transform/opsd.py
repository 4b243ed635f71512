"""Clean the renewable power plant list and give each plant a point geometry."""

import geopandas as gpd
import pandas as pd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.helpers import (
    convert_col_to_datetime,
    drop_columns_if_present,
    oob_to_nan,
    simplify_columns,
    simplify_strings,
)
from regen_atlas.metadata import REPORT_RESOURCES
from regen_atlas.metadata.constants import CRS_GEOGRAPHIC
from regen_atlas.settings import PlantSettings

logger = regen_atlas.logging_helpers.get_logger(__name__)

RENAME_COLUMNS: dict[str, str] = {
    "eeg_id": "plant_id",
    "energy_source_level_2": "energy_source",
    "electrical_capacity": "capacity_mw",
    "lat": "latitude",
    "lon": "longitude",
}
"""Source column names and the field names they are given."""

REQUIRED_COLUMNS: list[str] = [
    "energy_source",
    "commissioning_date",
    "capacity_mw",
    "latitude",
    "longitude",
]
"""Columns without which the plant list can't be used at all."""

RENEWABLE_LEVEL_1 = "Renewable energy"


def _assign_plant_ids(df: pd.DataFrame) -> pd.Series:
    """Build a unique identifier for every row.

    The EEG key is used where it exists. Rows without one get an ID derived from their
    position in the source file. Keys that appear more than once get a numeric suffix,
    so that the first occurrence of ``E123`` becomes ``E123-0``.
    """
    generated = pd.Series(
        [f"opsd-{n}" for n in range(len(df.index))], index=df.index, dtype="string"
    )
    if "plant_id" in df.columns:
        ids = df["plant_id"].astype("string").str.strip().replace("", pd.NA)
        ids = ids.fillna(generated)
    else:
        ids = generated
    dupes = ids.duplicated(keep=False)
    if dupes.any():
        logger.warning(f"{dupes.sum()} plants share a plant ID with another plant.")
        suffix = ids[dupes].groupby(ids[dupes]).cumcount().astype("string")
        ids[dupes] = ids[dupes] + "-" + suffix
    return ids


def clean_plants(raw: pd.DataFrame, settings: PlantSettings) -> pd.DataFrame:
    """Clean up the power plant list and apply the configured filters.

    * Standardize column names, drop unused columns and rename the rest to their
      field names.
    * Give every plant a unique ``plant_id``.
    * Keep only renewable units with one of the selected energy sources.
    * Parse commissioning dates and derive the commissioning year.
    * Drop decommissioned units unless they are explicitly requested.
    * Drop units commissioned outside of the selected year range.
    * Drop units without a positive capacity.

    Raises:
        ValueError: if any of the columns the report depends on are missing.
    """
    df = (
        simplify_columns(raw)
        .pipe(drop_columns_if_present, settings.drop_columns)
        .rename(columns=RENAME_COLUMNS)
    )
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Power plant list is missing required columns: {missing}")
    n_raw = len(df)
    df["plant_id"] = _assign_plant_ids(df)
    df = simplify_strings(
        df,
        [
            "energy_source_level_1",
            "energy_source",
            "technology",
            "federal_state",
            "municipality",
        ],
    )

    if "energy_source_level_1" in df.columns:
        df = df.loc[df["energy_source_level_1"] == RENEWABLE_LEVEL_1].drop(
            columns="energy_source_level_1"
        )
    df = df.loc[df["energy_source"].isin(settings.energy_sources)].copy()

    df = convert_col_to_datetime(df, "commissioning_date")
    if "decommissioning_date" in df.columns:
        df = convert_col_to_datetime(df, "decommissioning_date")
        if not settings.include_decommissioned:
            df = df.loc[df["decommissioning_date"].isna()]
        df = df.drop(columns="decommissioning_date")
    df["commissioning_year"] = df["commissioning_date"].dt.year.astype("Int64")
    if settings.first_year is not None:
        df = df.loc[df["commissioning_year"].ge(settings.first_year).fillna(False)]
    if settings.last_year is not None:
        df = df.loc[df["commissioning_year"].le(settings.last_year).fillna(False)]

    df = oob_to_nan(df, ["capacity_mw"])
    df = df.loc[df["capacity_mw"] > 0]

    logger.info(
        f"Kept {len(df)} of {n_raw} plants with energy sources "
        f"{settings.energy_sources}."
    )
    return df.reset_index(drop=True)


def plants_to_geodataframe(
    df: pd.DataFrame, crs: str = CRS_GEOGRAPHIC
) -> gpd.GeoDataFrame:
    """Build point geometries from the plant coordinates.

    Latitudes outside of [-90, 90], longitudes outside of [-180, 180] and
    non-numeric coordinates are treated as missing. Plants without usable coordinates
    can't be placed on a map, so they are dropped.

    Args:
        df: Plant table with ``latitude`` and ``longitude`` columns in degrees.
        crs: Coordinate reference system of the coordinates.
    """
    df = oob_to_nan(df, ["latitude"], lb=-90, ub=90).pipe(
        oob_to_nan, ["longitude"], lb=-180, ub=180
    )
    no_coords = df["latitude"].isna() | df["longitude"].isna()
    if no_coords.any():
        logger.warning(
            f"Dropping {no_coords.sum()} of {len(df)} plants with missing or invalid "
            "coordinates."
        )
    df = df.loc[~no_coords].reset_index(drop=True)
    return gpd.GeoDataFrame(
        df,
        geometry=gpd.points_from_xy(df["longitude"], df["latitude"]),
        crs=crs,
    )


@asset(required_resource_keys={"report_settings"}, compute_kind="geopandas")
def core_opsd__plants(context, raw_opsd__plants: pd.DataFrame) -> gpd.GeoDataFrame:
    """Cleaned renewable generation units with point locations."""
    settings = context.resources.report_settings.plants
    plants = clean_plants(raw_opsd__plants, settings).pipe(plants_to_geodataframe)
    return REPORT_RESOURCES["core_opsd__plants"].enforce_schema(plants)
