"""Tests for regional capacity totals, density classes and choropleth maps."""

import geopandas as gpd
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import box

from regen_atlas.analysis.capacity_density import (
    bivariate_classes,
    capacity_by_region_year,
    capacity_density,
    classify_quantiles,
    classify_terciles,
    plot_bivariate_choropleth,
    plot_quantile_choropleth,
)
from regen_atlas.metadata.enums import BIVARIATE_PALETTE


@pytest.fixture
def regions() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {
            "nuts_id": ["R1", "R2", "R3"],
            "region_name": ["One", "Two", "Three"],
            "area_km2": [100.0, 200.0, 100.0],
        },
        geometry=[box(0, 0, 1, 1), box(1, 0, 3, 1), box(3, 0, 4, 1)],
        crs="EPSG:3035",
    )


@pytest.fixture
def plants() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "plant_id": [f"P{n}" for n in range(8)],
            "nuts_id": ["R1", "R2", "R2", "R3", "R1", "R2", None, "R1"],
            "energy_source": [
                "Solar",
                "Solar",
                "Solar",
                "Solar",
                "Wind",
                "Wind",
                "Wind",
                "Bioenergy",
            ],
            "capacity_mw": [1.0, 1.0, 3.0, 3.0, 9.0, 10.0, 50.0, 2.0],
            "commissioning_year": pd.array(
                [2010, 2010, 2015, 2020, 2012, None, 2012, 2011], dtype="Int64"
            ),
        }
    )


@pytest.mark.parametrize(
    "values,k,expected",
    [
        ([1, 2, 3, 4, 5, 6], 3, [1, 1, 2, 2, 3, 3]),
        ([0.0, 0.0, 0.0], 5, [1, 1, 1]),
        ([1.0, np.nan, 3.0], 2, [1, pd.NA, 2]),
        ([0, 0, 0, 0, 1, 2], 3, [1, 1, 1, 1, 2, 2]),
        ([np.nan, np.nan], 3, [pd.NA, pd.NA]),
    ],
)
def test_classify_quantiles(values, k, expected):
    series = pd.Series(values, index=list("abcdef")[: len(values)])
    out = classify_quantiles(series, k)
    assert out.dtype == "Int64"
    assert out.index.equals(series.index)
    pd.testing.assert_series_equal(
        out,
        pd.Series(expected, index=series.index, dtype="Int64"),
        check_names=False,
    )


def test_classify_quantiles_rejects_zero_classes():
    with pytest.raises(ValueError, match="must be positive"):
        classify_quantiles(pd.Series([1.0, 2.0]), 0)


def test_classify_terciles():
    out = classify_terciles(pd.Series([30.0, 10.0, 20.0]))
    assert list(out) == [3, 1, 2]


def test_capacity_by_region_year(plants):
    out = capacity_by_region_year(plants)
    # The plant without a region and the plant without a year are left out.
    assert out["plant_count"].sum() == 6
    r2_solar = out.loc[(out["nuts_id"] == "R2") & (out["energy_source"] == "Solar")]
    assert list(r2_solar["commissioning_year"]) == [2010, 2015]
    assert list(r2_solar["capacity_mw"]) == [1.0, 3.0]
    assert list(r2_solar["cumulative_capacity_mw"]) == [1.0, 4.0]
    assert list(out.columns) == [
        "nuts_id",
        "commissioning_year",
        "energy_source",
        "capacity_mw",
        "plant_count",
        "cumulative_capacity_mw",
    ]


def test_capacity_density_fills_missing_combinations(plants, regions):
    out = capacity_density(plants, regions, energy_sources=["Solar", "Wind"])
    assert isinstance(out, gpd.GeoDataFrame)
    assert out.crs == regions.crs
    assert len(out) == 6
    density = out.set_index(["nuts_id", "energy_source"])["capacity_density_mw_km2"]
    assert density[("R1", "Solar")] == pytest.approx(0.01)
    assert density[("R2", "Solar")] == pytest.approx(0.02)
    assert density[("R3", "Solar")] == pytest.approx(0.03)
    assert density[("R2", "Wind")] == pytest.approx(0.05)
    # A region without plants of a source has zero capacity, not a null.
    assert density[("R3", "Wind")] == 0.0
    counts = out.set_index(["nuts_id", "energy_source"])["plant_count"]
    assert counts[("R3", "Wind")] == 0
    # Bioenergy wasn't requested.
    assert set(out["energy_source"]) == {"Solar", "Wind"}


def test_capacity_density_as_of_year(plants, regions):
    out = capacity_density(plants, regions, energy_sources=["Solar", "Wind"], year=2012)
    capacity = out.set_index(["nuts_id", "energy_source"])["capacity_mw"]
    assert capacity[("R2", "Solar")] == 1.0
    assert capacity[("R3", "Solar")] == 0.0
    # The wind plant without a commissioning year is not counted.
    assert capacity[("R2", "Wind")] == 0.0
    assert capacity[("R1", "Wind")] == 9.0


def test_capacity_density_classes_per_source(plants, regions):
    out = capacity_density(
        plants, regions, energy_sources=["Solar", "Wind"], quantile_classes=3
    )
    classes = out.set_index(["nuts_id", "energy_source"])["quantile_class"]
    assert [classes[(r, "Solar")] for r in ["R1", "R2", "R3"]] == [1, 2, 3]
    assert [classes[(r, "Wind")] for r in ["R1", "R2", "R3"]] == [3, 2, 1]


def test_bivariate_classes(plants, regions):
    density = capacity_density(plants, regions, energy_sources=["Solar", "Wind"])
    out = bivariate_classes(density, x_source="Solar", y_source="Wind")
    assert isinstance(out, gpd.GeoDataFrame)
    assert list(out["nuts_id"]) == ["R1", "R2", "R3"]
    assert list(out["bivariate_class"]) == ["A3", "B2", "C1"]
    assert list(out["bivariate_color"]) == [
        BIVARIATE_PALETTE["A3"],
        BIVARIATE_PALETTE["B2"],
        BIVARIATE_PALETTE["C1"],
    ]
    assert out["x_capacity_density_mw_km2"].tolist() == pytest.approx(
        [0.01, 0.02, 0.03]
    )


def test_bivariate_classes_missing_source(plants, regions):
    density = capacity_density(plants, regions, energy_sources=["Solar", "Wind"])
    with pytest.raises(ValueError, match="Hydro"):
        bivariate_classes(density, x_source="Solar", y_source="Hydro")


def test_capacity_maps(plants, regions):
    density = capacity_density(plants, regions, energy_sources=["Solar", "Wind"])
    fig = plot_quantile_choropleth(density, "Solar")
    assert isinstance(fig, plt.Figure)
    legend = fig.axes[0].get_legend()
    assert legend.get_title().get_text() == "MW/km²"
    assert len(legend.get_texts()) == 3
    plt.close(fig)

    fig = plot_bivariate_choropleth(
        bivariate_classes(density, "Solar", "Wind"), x_label="Solar", y_label="Wind"
    )
    (legend_ax,) = fig.axes[0].child_axes
    assert len(legend_ax.patches) == 9
    plt.close(fig)

    with pytest.raises(ValueError, match="Hydro"):
        plot_quantile_choropleth(density, "Hydro")
