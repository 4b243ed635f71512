"""Extract Eurostat NUTS region boundaries from a shapefile."""

from pathlib import Path

import geopandas as gpd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)


def read_nuts_regions(path: str | Path) -> gpd.GeoDataFrame:
    """Read NUTS region boundaries.

    Any vector format GeoPandas can read works, but Eurostat distributes the boundaries
    as shapefiles covering every level of the hierarchy and every country, so they
    need to be filtered before use.

    Args:
        path: location of the shapefile (or a zip archive containing it).

    Raises:
        FileNotFoundError: if there is nothing at ``path``.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"NUTS region boundaries not found at {path}")
    logger.info(f"Reading NUTS region boundaries from {path}")
    gdf = gpd.read_file(path)
    logger.info(f"Read {len(gdf)} region geometries in {gdf.crs}.")
    return gdf


@asset(required_resource_keys={"report_settings"}, compute_kind="geopandas")
def raw_nuts__regions(context) -> gpd.GeoDataFrame:
    """NUTS region boundaries for all levels and countries."""
    settings = context.resources.report_settings
    return read_nuts_regions(RegenPaths().input_file(settings.regions.nuts_shapefile))
