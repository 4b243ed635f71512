"""Tests for assembling the HTML report."""

import base64
import subprocess
import sys
from datetime import datetime

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from regen_atlas.report.figures import ReportFigure, encode_png, save_figure
from regen_atlas.report.render import (
    annual_generation,
    figure_context,
    render_report,
    table_context,
    top_regions,
)


@pytest.fixture
def png_figure(tmp_path) -> ReportFigure:
    fig, ax = plt.subplots()
    ax.plot([0, 1], [0, 1])
    path = save_figure(fig, tmp_path / "figures" / "line.png", dpi=20)
    return ReportFigure(name="line", title="A line", caption="Goes up & right.", path=path)


def test_save_figure_closes_figure(tmp_path):
    fig, _ = plt.subplots()
    number = fig.number
    path = save_figure(fig, tmp_path / "nested" / "dir" / "empty.png", dpi=20)
    assert path.exists()
    assert not plt.fignum_exists(number)


def test_encode_png(png_figure):
    uri = encode_png(png_figure.path)
    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri.removeprefix(prefix)) == png_figure.path.read_bytes()


def test_table_context():
    df = pd.DataFrame(
        {
            "plant_count": [1234, 5],
            "total_capacity_mw": [1234.56, 0.01234],
            "first_commissioning_year": pd.array([2001, None], dtype="Int64"),
        },
        index=pd.Index(["Solar", "Wind"], name="energy_source"),
    )
    ctx = table_context(df, "Plants")
    assert ctx["title"] == "Plants"
    assert ctx["columns"] == [
        "energy source",
        "plant count",
        "total capacity mw",
        "first commissioning year",
    ]
    assert [cell["text"] for cell in ctx["rows"][0]] == ["Solar", "1,234", "1,234.6", "2,001"]
    assert [cell["text"] for cell in ctx["rows"][1]] == ["Wind", "5", "0.0123", ""]
    assert [cell["number"] for cell in ctx["rows"][0]] == [False, True, True, True]


def test_top_regions():
    density = pd.DataFrame(
        {
            "nuts_id": ["A", "A", "B", "B", "C", "C"],
            "region_name": ["a", "a", "b", "b", "c", "c"],
            "energy_source": ["Solar", "Wind"] * 3,
            "capacity_mw": [1.0, 1.0, 10.0, 0.0, 3.0, 3.0],
            "area_km2": [10.0, 10.0, 20.0, 20.0, 100.0, 100.0],
        }
    )
    top = top_regions(density, n=2)
    assert list(top.index.get_level_values("nuts_id")) == ["B", "A"]
    assert top["capacity_density_mw_km2"].tolist() == [0.5, 0.2]


def test_annual_generation():
    long = pd.DataFrame(
        {
            "datetime_local": pd.to_datetime(
                ["2022-12-31 23:00", "2023-01-01 00:00", "2023-01-01 00:00"]
            ),
            "generation_category": ["biomass", "biomass", "nuclear"],
            "production_mwh": [1000.0, 2500.0, np.nan],
        }
    )
    out = annual_generation(long, ["biomass"])
    assert list(out.columns) == ["biomass_gwh"]
    assert out.loc[2022, "biomass_gwh"] == 1.0
    assert out.loc[2023, "biomass_gwh"] == 2.5


def test_render_report(png_figure):
    sections = [
        {
            "title": "Charts <and> tables",
            "tables": [table_context(pd.DataFrame({"x": [1.5]}), "Numbers")],
            "figures": [figure_context(png_figure)],
        }
    ]
    html = render_report(
        title="Test report",
        sections=sections,
        settings={"Energy sources": "Solar, Wind"},
        description="An example.",
        generated_at=datetime(2024, 5, 1, 12, 30),
    )
    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Test report</title>" in html
    assert "Generated 2024-05-01 12:30" in html
    assert "An example." in html
    assert "Solar, Wind" in html
    assert '<figure id="line">' in html
    assert 'src="data:image/png;base64,' in html
    # Text is escaped.
    assert "Charts &lt;and&gt; tables" in html
    assert "Goes up &amp; right." in html
    assert '<td class="number">1.5</td>' in html


@pytest.mark.parametrize(
    "module",
    [
        "regen_atlas.report.render",
        "regen_atlas.report.figures",
        "regen_atlas.analysis.capacity_density",
        "regen_atlas.analysis.plant_statistics",
    ],
)
def test_modules_import_in_any_order(module):
    """Each module can be imported first in a fresh interpreter."""
    result = subprocess.run(  # noqa: S603
        [sys.executable, "-c", f"import {module}"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert result.returncode == 0, result.stderr
