"""Tests for spatial operations on plants and regions."""

import re

import geopandas as gpd
import pandas as pd
import pytest
from geopandas import GeoDataFrame
from shapely.geometry import GeometryCollection, LineString, MultiPolygon, Point, Polygon, box

from regen_atlas.analysis.spatial import (
    add_area_km2,
    assign_regions,
    check_gdf,
    check_points,
    polygonize,
)

POLY = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
ZERO_POLY = Polygon([(0, 0), (0, 0), (0, 0), (0, 0)])


@pytest.mark.parametrize(
    "gdf,exc,pattern",
    [
        (None, TypeError, r"Object is not a GeoDataFrame"),
        (GeoDataFrame({"x": [0]}), AttributeError, r"GeoDataFrame has no geometry"),
        (
            GeoDataFrame(geometry=[POLY]),
            ValueError,
            r"GeoDataFrame has no coordinate reference system",
        ),
        (
            GeoDataFrame(geometry=[GeometryCollection()], crs="EPSG:3035"),
            ValueError,
            r"Geometry contains non-(Multi)Polygon geometries",
        ),
        (
            GeoDataFrame(geometry=[ZERO_POLY], crs="EPSG:3035"),
            ValueError,
            r"Geometry contains (Multi)Polygon geometries with zero area",
        ),
        (
            GeoDataFrame(geometry=[MultiPolygon([POLY, ZERO_POLY])], crs="EPSG:3035"),
            ValueError,
            r"MultiPolygon contains Polygon geometries with zero area",
        ),
    ],
)
def test_check_gdf(gdf, exc, pattern):
    """Test GeoDataFrame validation function."""
    with pytest.raises(exc) as err:
        check_gdf(gdf)
    assert err.match(re.escape(pattern))

    assert check_gdf(GeoDataFrame(geometry=[POLY], crs="EPSG:3035")) is None


def test_check_points():
    assert check_points(GeoDataFrame(geometry=[Point(0, 0)], crs="EPSG:4326")) is None
    with pytest.raises(ValueError, match="non-Point"):
        check_points(GeoDataFrame(geometry=[POLY], crs="EPSG:4326"))
    with pytest.raises(ValueError, match="coordinate reference system"):
        check_points(GeoDataFrame(geometry=[Point(0, 0)]))


def test_polygonize():
    """Test conversion of Geometries into (Multi)Polygons."""
    # A collection with one non-zero-area Polygon is returned as a Polygon.
    result1 = polygonize(GeometryCollection([POLY, ZERO_POLY, LineString([(0, 0), (1, 1)])]))
    assert result1.geom_type == "Polygon"
    assert result1.area == 1.0

    # A collection with multiple non-zero-area polygons is returned as a MultiPolygon.
    result2 = polygonize(GeometryCollection([POLY, box(2, 2, 3, 3)]))
    assert result2.geom_type == "MultiPolygon"
    assert result2.area == 2.0

    # Zero-area geometries are not allowed.
    with pytest.raises(ValueError, match="Geometry has zero area"):
        polygonize(ZERO_POLY)


def test_add_area_km2():
    """Areas are measured in the equal area CRS, geometries keep their CRS."""
    gdf = GeoDataFrame(
        {"name": ["a"]}, geometry=[box(4_000_000, 3_000_000, 4_010_000, 3_020_000)]
    ).set_crs("EPSG:3035")
    out = add_area_km2(gdf.to_crs("EPSG:4326"))
    assert out.crs.to_epsg() == 4326
    assert out["area_km2"].iloc[0] == pytest.approx(200.0, rel=1e-3)
    assert "area_km2" not in gdf.columns


@pytest.fixture
def regions() -> gpd.GeoDataFrame:
    return GeoDataFrame(
        {"nuts_id": ["W", "E"]},
        geometry=[box(0, 0, 1, 1), box(1, 0, 2, 1)],
        crs="EPSG:4326",
    )


def test_assign_regions(regions):
    points = GeoDataFrame(
        {"plant_id": ["in_w", "in_e", "border", "outside"]},
        geometry=[Point(0.5, 0.5), Point(1.5, 0.5), Point(1.0, 0.5), Point(5, 5)],
        crs="EPSG:4326",
        index=[10, 11, 12, 13],
    )
    out = assign_regions(points, regions)
    assert len(out) == len(points)
    assert list(out["plant_id"]) == ["in_w", "in_e", "border", "outside"]
    assigned = out.set_index("plant_id")["nuts_id"]
    assert assigned["in_w"] == "W"
    assert assigned["in_e"] == "E"
    # A point on a shared boundary goes to exactly one region, the first listed.
    assert assigned["border"] == "W"
    assert pd.isna(assigned["outside"])


def test_assign_regions_reprojects(regions):
    points = GeoDataFrame(
        {"plant_id": ["a"]}, geometry=[Point(1.5, 0.5)], crs="EPSG:4326"
    ).to_crs("EPSG:3035")
    out = assign_regions(points, regions)
    assert out["nuts_id"].item() == "E"
    assert out.crs.to_epsg() == 3035


def test_assign_regions_duplicate_region_ids(regions):
    points = GeoDataFrame(geometry=[Point(0.5, 0.5)], crs="EPSG:4326")
    with pytest.raises(ValueError, match="not unique"):
        assign_regions(points, regions.assign(nuts_id="X"))
