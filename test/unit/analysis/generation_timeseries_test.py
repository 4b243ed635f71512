"""Tests for the calendar heatmap and stream graph of electricity production."""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from regen_atlas.analysis.generation_timeseries import (
    WEEKDAYS,
    calendar_matrix,
    daily_totals,
    plot_calendar_heatmap,
    plot_stream_graph,
    stream_order,
)


@pytest.fixture
def long() -> pd.DataFrame:
    """Six hourly values for each of three categories, over two days."""
    times = pd.to_datetime(
        [
            "2023-01-01 00:00",
            "2023-01-01 12:00",
            "2023-01-01 23:00",
            "2023-01-02 00:00",
            "2023-01-02 01:00",
            "2023-01-09 00:00",
        ]
    )
    return pd.DataFrame(
        {
            "datetime_local": np.tile(times, 3),
            "generation_category": np.repeat(
                ["wind_onshore", "photovoltaics", "biomass"], len(times)
            ),
            "production_mwh": [10.0, 20.0, 30.0, 40.0, np.nan, 5.0]
            + [1.0, 2.0, 3.0, 4.0, np.nan, np.nan]
            + [0.5, 0.5, 0.5, 0.5, np.nan, 1.0],
        }
    )


def test_daily_totals(long):
    daily = daily_totals(long)
    assert daily.index.name == "date"
    assert list(daily.index) == list(pd.to_datetime(["2023-01-01", "2023-01-02", "2023-01-09"]))
    assert daily.loc["2023-01-01"] == 67.5
    assert daily.loc["2023-01-02"] == 44.5
    assert daily.loc["2023-01-09"] == 6.0


def test_daily_totals_of_categories(long):
    daily = daily_totals(long, categories=["photovoltaics"])
    assert daily.loc["2023-01-01"] == 6.0
    # Every photovoltaics value on this day is missing.
    assert pd.isna(daily.loc["2023-01-09"])


@pytest.mark.parametrize("year,n_weeks", [(2023, 53), (2024, 53), (2012, 54)])
def test_calendar_matrix_shape(year, n_weeks):
    days = pd.date_range(f"{year}-01-01", f"{year}-12-31", freq="D")
    daily = pd.Series(1.0, index=days)
    matrix = calendar_matrix(daily, year)
    assert matrix.shape == (7, n_weeks)
    assert list(matrix.index) == WEEKDAYS
    assert matrix.notna().sum().sum() == len(days)


def test_calendar_matrix_positions():
    daily = pd.Series(
        [1.0, 2.0, 3.0],
        index=pd.to_datetime(["2023-01-01", "2023-01-02", "2023-12-31"]),
    )
    matrix = calendar_matrix(daily, 2023)
    # 2023 starts on a Sunday, so the first column only holds one day of the year.
    assert matrix.loc["Sun", 0] == 1.0
    assert matrix.loc["Mon", 1] == 2.0
    assert matrix.loc["Sun", 52] == 3.0
    assert matrix[0].isna().sum() == 6
    assert matrix.notna().sum().sum() == 3


def test_plot_calendar_heatmap(long):
    daily = daily_totals(long)
    fig = plot_calendar_heatmap(daily)
    heatmap_ax = fig.axes[0]
    assert heatmap_ax.get_title(loc="left") == "2023"
    assert [t.get_text() for t in heatmap_ax.get_yticklabels()] == WEEKDAYS
    # One panel and its colorbar.
    assert len(fig.axes) == 2
    plt.close(fig)

    fig = plot_calendar_heatmap(daily, years=[2022, 2023])
    assert len(fig.axes) == 3
    plt.close(fig)

    with pytest.raises(ValueError, match="No daily production"):
        plot_calendar_heatmap(pd.Series([np.nan], index=pd.to_datetime(["2023-01-01"])))


def test_stream_order():
    wide = pd.DataFrame({"small": [1.0], "large": [10.0], "medium": [5.0], "tiny": [0.1]})
    assert stream_order(wide) == ["tiny", "medium", "large", "small"]


def test_plot_stream_graph(long):
    fig = plot_stream_graph(long, freq="D")
    ax = fig.axes[0]
    labels = [t.get_text() for t in ax.get_legend().get_texts()]
    assert sorted(labels) == ["biomass", "photovoltaics", "wind onshore"]
    # Largest category in the middle of the stream.
    assert labels[1] == "wind onshore"
    plt.close(fig)

    fig = plot_stream_graph(long, categories=["biomass"], freq="D")
    assert [t.get_text() for t in fig.axes[0].get_legend().get_texts()] == ["biomass"]
    plt.close(fig)

    with pytest.raises(ValueError, match="No production values"):
        plot_stream_graph(long, categories=["nuclear"])
