"""Descriptive statistics and charts of the power plant list."""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.metadata.enums import ENERGY_SOURCE_COLORS
from regen_atlas.report.figures import ReportFigure, save_figure
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)


def summarize_plants(plants: pd.DataFrame) -> pd.DataFrame:
    """Count plants and describe their capacities by energy source.

    Returns:
        One row per energy source, plus a final ``Total`` row, with the plant count,
        total, mean and median capacity, and the first and last commissioning year.
    """
    df = pd.DataFrame(plants).assign(
        energy_source=lambda x: x["energy_source"].astype(str)
    )

    def _describe(group: pd.DataFrame) -> pd.Series:
        return pd.Series(
            {
                "plant_count": len(group),
                "total_capacity_mw": group["capacity_mw"].sum(),
                "mean_capacity_mw": group["capacity_mw"].mean(),
                "median_capacity_mw": group["capacity_mw"].median(),
                "first_commissioning_year": group["commissioning_year"].min(),
                "last_commissioning_year": group["commissioning_year"].max(),
            }
        )

    by_source = [
        _describe(group).rename(source) for source, group in df.groupby("energy_source")
    ]
    summary = pd.DataFrame(by_source + [_describe(df).rename("Total")])
    summary.index.name = "energy_source"
    return summary.astype(
        {
            "plant_count": int,
            "total_capacity_mw": float,
            "mean_capacity_mw": float,
            "median_capacity_mw": float,
            "first_commissioning_year": "Int64",
            "last_commissioning_year": "Int64",
        }
    )


def plot_capacity_histogram(plants: pd.DataFrame, bins: int = 40) -> plt.Figure:
    """Histogram of unit capacities for each energy source, on log scaled bins.

    Unit sizes range from rooftop solar of a few kW to offshore wind farms of
    hundreds of MW, so bins are spaced evenly in log space.
    """
    sources = sorted(plants["energy_source"].astype(str).unique())
    if not sources:
        raise ValueError("No plants to plot.")
    fig, axes = plt.subplots(
        nrows=len(sources),
        figsize=(9, 2.2 * len(sources)),
        sharex=True,
        squeeze=False,
        facecolor="white",
    )
    capacity = plants["capacity_mw"].astype(float)
    positive = capacity[capacity > 0]
    lo, hi = positive.min(), positive.max()
    if lo == hi:
        edges = np.array([lo / 2, hi * 2])
    else:
        edges = np.logspace(np.log10(lo), np.log10(hi), bins + 1)
    for source, ax in zip(sources, axes.flat, strict=True):
        is_source = plants["energy_source"].astype(str) == source
        values = capacity[is_source & (capacity > 0)]
        ax.hist(values, bins=edges, color=ENERGY_SOURCE_COLORS.get(source, "grey"))
        ax.set_xscale("log")
        ax.set_ylabel("Units")
        ax.set_title(f"{source} ({len(values):,} units)", loc="left", fontsize="medium")
    axes.flat[-1].set_xlabel("Unit capacity [MW]")
    fig.tight_layout()
    return fig


def commissioned_capacity_by_year(plants: pd.DataFrame) -> pd.DataFrame:
    """Capacity commissioned per year, with one column per energy source."""
    return (
        pd.DataFrame(plants)
        .dropna(subset=["commissioning_year"])
        .assign(energy_source=lambda x: x["energy_source"].astype(str))
        .pivot_table(
            index="commissioning_year",
            columns="energy_source",
            values="capacity_mw",
            aggfunc="sum",
            fill_value=0.0,
        )
        .sort_index()
    )


def plot_commissioning_histogram(plants: pd.DataFrame) -> plt.Figure:
    """Stacked bar chart of the capacity commissioned each year by energy source."""
    by_year = commissioned_capacity_by_year(plants)
    fig, ax = plt.subplots(figsize=(12, 5), facecolor="white")
    bottom = np.zeros(len(by_year.index))
    years = by_year.index.astype(int)
    for source in by_year.columns:
        ax.bar(
            years,
            by_year[source] / 1e3,
            bottom=bottom,
            width=0.9,
            label=source,
            color=ENERGY_SOURCE_COLORS.get(source, "grey"),
        )
        bottom += by_year[source].to_numpy() / 1e3
    ax.set_xlabel("Commissioning year")
    ax.set_ylabel("Capacity commissioned [GW]")
    ax.legend(loc="upper left", frameon=False)
    ax.set_title("Capacity commissioned per year")
    return fig


def plot_cumulative_capacity(capacity_by_year: pd.DataFrame) -> plt.Figure:
    """Stacked area chart of installed capacity over time by energy source.

    Args:
        capacity_by_year: Capacity commissioned per region, year and energy source,
            as in ``out_opsd__capacity_by_region_year``.
    """
    by_year = (
        capacity_by_year.assign(
            energy_source=capacity_by_year["energy_source"].astype(str)
        )
        .pivot_table(
            index="commissioning_year",
            columns="energy_source",
            values="capacity_mw",
            aggfunc="sum",
            fill_value=0.0,
        )
        .sort_index()
        .cumsum()
    )
    years = by_year.index.astype(int)
    fig, ax = plt.subplots(figsize=(12, 5), facecolor="white")
    ax.stackplot(
        years,
        *[by_year[source] / 1e3 for source in by_year.columns],
        labels=by_year.columns,
        colors=[ENERGY_SOURCE_COLORS.get(s, "grey") for s in by_year.columns],
    )
    ax.set_xlim(years.min(), years.max())
    ax.set_xlabel("Year")
    ax.set_ylabel("Installed capacity [GW]")
    ax.legend(loc="upper left", frameon=False)
    ax.set_title("Installed capacity")
    return fig


@asset(required_resource_keys={"report_settings"}, compute_kind="matplotlib")
def chart__plant_statistics(
    context,
    out_opsd__plants_with_regions: pd.DataFrame,
    out_opsd__capacity_by_region_year: pd.DataFrame,
) -> list[ReportFigure]:
    """Histograms of unit capacity and commissioning year, and capacity growth."""
    dpi = context.resources.report_settings.figure_dpi
    figures_dir = RegenPaths().figures_dir
    plants = pd.DataFrame(out_opsd__plants_with_regions.drop(columns="geometry"))
    charts = [
        (
            "capacity_histogram",
            "Unit capacity",
            "Number of units by capacity, on a logarithmic scale.",
            plot_capacity_histogram(plants),
        ),
        (
            "commissioning_histogram",
            "Commissioning year",
            "Capacity commissioned each year, by energy source.",
            plot_commissioning_histogram(plants),
        ),
        (
            "cumulative_capacity",
            "Installed capacity",
            (
                "Running total of commissioned capacity, for plants located in one "
                "of the mapped regions."
            ),
            plot_cumulative_capacity(out_opsd__capacity_by_region_year),
        ),
    ]
    return [
        ReportFigure(
            name=name,
            title=title,
            caption=caption,
            path=save_figure(fig, figures_dir / f"{name}.png", dpi=dpi),
        )
        for name, title, caption, fig in charts
    ]
