"""Select and clean the NUTS regions the plants are aggregated to."""

import geopandas as gpd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.analysis.spatial import add_area_km2, check_gdf, polygonize
from regen_atlas.helpers import simplify_columns, simplify_strings
from regen_atlas.metadata import REPORT_RESOURCES
from regen_atlas.metadata.constants import CRS_EQUAL_AREA, CRS_GEOGRAPHIC
from regen_atlas.settings import RegionSettings

logger = regen_atlas.logging_helpers.get_logger(__name__)

RENAME_COLUMNS: dict[str, str] = {
    "name_latn": "region_name",
    "cntr_code": "country_code",
    "levl_code": "nuts_level",
}
"""Eurostat attribute names (after simplification) and their field names."""


def clean_regions(raw: gpd.GeoDataFrame, settings: RegionSettings) -> gpd.GeoDataFrame:
    """Keep the regions of one country at one NUTS level, in geographic coordinates.

    Invalid boundaries are repaired and the area of every region is measured in an
    equal area projection.

    Raises:
        ValueError: if the boundaries have no CRS, lack the Eurostat attributes, or
            contain no regions for the configured country and level.
    """
    if raw.crs is None:
        raise ValueError("NUTS region boundaries have no coordinate reference system")
    gdf = simplify_columns(raw).rename(columns=RENAME_COLUMNS)
    if "region_name" not in gdf.columns and "nuts_name" in gdf.columns:
        gdf = gdf.rename(columns={"nuts_name": "region_name"})
    missing = [
        col
        for col in ["nuts_id", "region_name", "country_code", "nuts_level"]
        if col not in gdf.columns
    ]
    if missing:
        raise ValueError(f"NUTS region boundaries are missing attributes: {missing}")
    gdf = simplify_strings(gdf, ["nuts_id", "region_name", "country_code"])

    selected = (gdf["country_code"] == settings.country_code) & (
        gdf["nuts_level"].astype(int) == settings.nuts_level
    )
    gdf = gdf.loc[selected]
    if gdf.empty:
        raise ValueError(
            f"No NUTS {settings.nuts_level} regions found for "
            f"{settings.country_code}."
        )

    gdf = gdf.to_crs(CRS_GEOGRAPHIC)
    invalid = ~gdf.geometry.is_valid
    if invalid.any():
        logger.info(f"Repairing {invalid.sum()} invalid region boundaries.")
        gdf.loc[invalid, gdf.geometry.name] = (
            gdf.geometry[invalid].make_valid().apply(polygonize)
        )
    check_gdf(gdf)
    gdf = add_area_km2(gdf, crs=CRS_EQUAL_AREA)
    logger.info(
        f"Selected {len(gdf)} NUTS {settings.nuts_level} regions in "
        f"{settings.country_code} covering {gdf['area_km2'].sum():,.0f} km2."
    )
    return gdf.sort_values("nuts_id").reset_index(drop=True)


@asset(required_resource_keys={"report_settings"}, compute_kind="geopandas")
def core_nuts__regions(
    context, raw_nuts__regions: gpd.GeoDataFrame
) -> gpd.GeoDataFrame:
    """NUTS regions of the configured country and level, with their areas."""
    settings = context.resources.report_settings.regions
    regions = clean_regions(raw_nuts__regions, settings)
    return REPORT_RESOURCES["core_nuts__regions"].enforce_schema(regions)
