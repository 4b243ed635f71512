"""Spatial operations for assigning plants to regions."""

import warnings

import geopandas as gpd
import pandas as pd
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

import regen_atlas.logging_helpers
from regen_atlas.metadata.constants import CRS_EQUAL_AREA

logger = regen_atlas.logging_helpers.get_logger(__name__)


def check_gdf(gdf: gpd.GeoDataFrame) -> None:
    """Check that GeoDataFrame contains (Multi)Polygon geometries with non-zero area.

    Args:
        gdf: GeoDataFrame.

    Raises:
        TypeError: Object is not a GeoDataFrame.
        AttributeError: GeoDataFrame has no geometry.
        ValueError: GeoDataFrame has no coordinate reference system.
        ValueError: Geometry contains null geometries.
        ValueError: Geometry contains non-(Multi)Polygon geometries.
        ValueError: Geometry contains (Multi)Polygon geometries with zero area.
        ValueError: MultiPolygon contains Polygon geometries with zero area.
    """
    if not isinstance(gdf, gpd.GeoDataFrame):
        raise TypeError("Object is not a GeoDataFrame")
    if gdf._geometry_column_name not in gdf.columns:
        raise AttributeError("GeoDataFrame has no geometry")
    if gdf.crs is None:
        raise ValueError("GeoDataFrame has no coordinate reference system")
    if gdf.geometry.isna().any():
        raise ValueError("Geometry contains null geometries")
    if not gdf.geometry.geom_type.isin(["Polygon", "MultiPolygon"]).all():
        raise ValueError("Geometry contains non-(Multi)Polygon geometries")
    with warnings.catch_warnings():
        # Only zero versus non-zero matters here, so geographic areas are fine.
        warnings.filterwarnings("ignore", "Geometry is in a geographic CRS", UserWarning)
        if not gdf.geometry.area.all():
            raise ValueError(
                "Geometry contains (Multi)Polygon geometries with zero area"
            )
    is_mpoly = gdf.geometry.geom_type == "MultiPolygon"
    for mpoly in gdf.geometry[is_mpoly]:
        for poly in mpoly.geoms:
            if not poly.area:
                raise ValueError(
                    "MultiPolygon contains Polygon geometries with zero area"
                )


def check_points(gdf: gpd.GeoDataFrame) -> None:
    """Check that GeoDataFrame contains only non-null Point geometries.

    Raises:
        TypeError: Object is not a GeoDataFrame.
        ValueError: GeoDataFrame has no coordinate reference system.
        ValueError: Geometry contains null or non-Point geometries.
    """
    if not isinstance(gdf, gpd.GeoDataFrame):
        raise TypeError("Object is not a GeoDataFrame")
    if gdf.crs is None:
        raise ValueError("GeoDataFrame has no coordinate reference system")
    if gdf.geometry.isna().any():
        raise ValueError("Geometry contains null geometries")
    if not (gdf.geometry.geom_type == "Point").all():
        raise ValueError("Geometry contains non-Point geometries")


def polygonize(geom: BaseGeometry) -> Polygon | MultiPolygon:
    """Convert geometry to (Multi)Polygon.

    Repairing an invalid boundary can leave stray lines and points behind in a
    GeometryCollection. Those are dropped.

    Args:
        geom: Geometry to convert to (Multi)Polygon.

    Returns:
        Geometry converted to (Multi)Polygon, with all zero-area components removed.

    Raises:
        ValueError: Geometry has zero area.
    """
    polys = []
    # Explode geometries to polygons
    if isinstance(geom, GeometryCollection):
        for g in geom.geoms:
            if isinstance(g, Polygon):
                polys.append(g)
            elif isinstance(g, MultiPolygon):
                polys.extend(g.geoms)
    elif isinstance(geom, MultiPolygon):
        polys.extend(geom.geoms)
    elif isinstance(geom, Polygon):
        polys.append(geom)
    # Remove zero-area polygons
    polys = [p for p in polys if p.area]
    if not polys:
        raise ValueError("Geometry has zero area")
    if len(polys) == 1:
        return polys[0]
    return MultiPolygon(polys)


def add_area_km2(gdf: gpd.GeoDataFrame, crs: str = CRS_EQUAL_AREA) -> gpd.GeoDataFrame:
    """Add the area of each geometry in square kilometers.

    Areas are measured after projecting to an equal area CRS. The geometries that are
    returned stay in their original CRS.

    Args:
        gdf: GeoDataFrame with (Multi)Polygon geometries.
        crs: Equal area coordinate reference system to measure areas in.

    Returns:
        Copy of ``gdf`` with an ``area_km2`` column.
    """
    check_gdf(gdf)
    out = gdf.copy()
    out["area_km2"] = gdf.geometry.to_crs(crs).area.to_numpy() / 1e6
    return out


def assign_regions(
    points: gpd.GeoDataFrame,
    regions: gpd.GeoDataFrame,
    id_col: str = "nuts_id",
) -> gpd.GeoDataFrame:
    """Assign each point to the region that contains it.

    Points are joined to the regions they intersect, so points exactly on a boundary
    are not lost. A point touching more than one region is kept once, attributed to
    the region listed first in ``regions``. Points outside all regions keep a null
    region ID.

    Args:
        points: GeoDataFrame of Point geometries.
        regions: GeoDataFrame of (Multi)Polygon geometries with a unique ``id_col``.
            Reprojected to the CRS of ``points`` if needed.
        id_col: Column identifying the regions.

    Returns:
        ``points`` with one row per input point and an ``id_col`` column, and a fresh
        range index.
    """
    check_points(points)
    check_gdf(regions)
    if not regions[id_col].is_unique:
        raise ValueError(f"Region identifiers in {id_col} are not unique")
    if regions.crs != points.crs:
        regions = regions.to_crs(points.crs)
    points = points.drop(columns=[id_col], errors="ignore").reset_index(drop=True)
    right = regions[[id_col, regions.geometry.name]].reset_index(drop=True)
    joined = gpd.sjoin(points, right, how="left", predicate="intersects")
    n_multi = len(joined.index) - len(points.index)
    if n_multi:
        logger.debug(f"{n_multi} extra region matches for boundary points discarded.")
    joined = (
        joined.sort_values("index_right", kind="stable")
        .loc[lambda df: ~df.index.duplicated(keep="first")]
        .sort_index()
        .drop(columns="index_right")
    )
    n_unmatched = joined[id_col].isna().sum()
    if n_unmatched:
        logger.warning(
            f"{n_unmatched} of {len(points)} points fall outside of every region."
        )
    return joined


def region_totals(
    df: pd.DataFrame,
    by: list[str],
    value_col: str,
    count_col: str,
) -> pd.DataFrame:
    """Sum a value and count the rows within groups, dropping groups with null keys."""
    return df.groupby(by, observed=True, dropna=True, as_index=False).agg(
        **{value_col: (value_col, "sum"), count_col: (value_col, "size")}
    )
