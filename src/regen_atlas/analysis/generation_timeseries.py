"""Charts of electricity production over time.

Two views of the production time series are drawn: a calendar heatmap of daily
renewable production, with one row per weekday and one column per week, and a
stream graph showing how the mix of generation categories shifts through the year.
"""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.metadata import REPORT_RESOURCES
from regen_atlas.metadata.enums import GENERATION_CATEGORY_COLORS
from regen_atlas.report.figures import ReportFigure, save_figure
from regen_atlas.transform.smard import generation_to_long
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTHS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]


################################################################################
# Calendar heatmap
################################################################################
def daily_totals(
    long: pd.DataFrame, categories: list[str] | None = None
) -> pd.Series:
    """Total production per calendar day across generation categories.

    Days on which every value is missing are null rather than zero.

    Args:
        long: Production in long form, as in ``out_smard__generation_long``.
        categories: Categories to add up. All categories if None.

    Returns:
        Production in MWh indexed by day.
    """
    df = long
    if categories is not None:
        df = long.loc[long["generation_category"].astype(str).isin(categories)]
    daily = (
        df.groupby(df["datetime_local"].dt.floor("D"))["production_mwh"]
        .sum(min_count=1)
        .rename("production_mwh")
    )
    daily.index.name = "date"
    return daily


def calendar_matrix(daily: pd.Series, year: int) -> pd.DataFrame:
    """Lay out one year of daily values as a weekday by week grid.

    Weeks start on Monday, and the first column holds the week containing January
    1st. Depending on the weekday the year starts on, it spans 53 or 54 columns.
    Cells before January 1st or after December 31st, and days without data, are NaN.

    Args:
        daily: Values indexed by day.
        year: Calendar year to lay out.

    Returns:
        Dataframe with weekday abbreviations as its index and week numbers (from 0)
        as its columns.
    """
    days = pd.date_range(f"{year}-01-01", f"{year}-12-31", freq="D")
    values = daily.reindex(days).to_numpy(dtype=float)
    offset = days[0].weekday()
    cols = (np.arange(len(days)) + offset) // 7
    matrix = np.full((7, cols[-1] + 1), np.nan)
    matrix[days.weekday, cols] = values
    return pd.DataFrame(matrix, index=WEEKDAYS)


def plot_calendar_heatmap(
    daily: pd.Series,
    years: list[int] | None = None,
    cmap: str = "YlGn",
) -> plt.Figure:
    """Draw a calendar heatmap of daily production, one panel per year.

    All panels share one color scale, so years can be compared directly.

    Args:
        daily: Production in MWh indexed by day.
        years: Years to draw. Every year with data if None.
        cmap: Name of a matplotlib colormap.
    """
    if years is None:
        years = sorted(daily.dropna().index.year.unique())
    if not years:
        raise ValueError("No daily production values to plot.")
    gwh = daily / 1e3
    vmin, vmax = gwh.min(), gwh.max()
    fig, axes = plt.subplots(
        nrows=len(years),
        figsize=(16, 2.6 * len(years)),
        squeeze=False,
        facecolor="white",
    )
    image = None
    for year, ax in zip(years, axes.flat, strict=True):
        matrix = calendar_matrix(gwh, year)
        image = ax.imshow(
            matrix.to_numpy(),
            aspect="equal",
            cmap=cmap,
            vmin=vmin,
            vmax=vmax,
            interpolation="nearest",
        )
        ax.set_yticks(range(len(WEEKDAYS)), labels=WEEKDAYS, fontsize="small")
        first_days = pd.date_range(f"{year}-01-01", periods=12, freq="MS")
        offset = first_days[0].weekday()
        ax.set_xticks(
            [(day.dayofyear - 1 + offset) // 7 for day in first_days],
            labels=MONTHS,
            fontsize="small",
        )
        ax.set_title(str(year), loc="left")
        ax.tick_params(length=0)
        for spine in ax.spines.values():
            spine.set_visible(False)
    fig.colorbar(image, ax=axes.ravel().tolist(), label="GWh per day", shrink=0.8)
    return fig


################################################################################
# Stream graph
################################################################################
def stream_order(wide: pd.DataFrame) -> list[str]:
    """Order columns inside-out by their totals.

    The largest series goes in the middle of the stream, and smaller series are
    placed alternately above and below it, which keeps the layers that wiggle the
    most away from the edges.
    """
    order: list[str] = []
    for n, col in enumerate(wide.sum().sort_values(ascending=False).index):
        if n % 2:
            order.insert(0, col)
        else:
            order.append(col)
    return order


def plot_stream_graph(
    long: pd.DataFrame,
    categories: list[str] | None = None,
    freq: str = "W",
) -> plt.Figure:
    """Draw a stream graph of production by generation category.

    Production is summed into intervals of ``freq`` and the layers are stacked
    around a baseline that minimizes their wiggle.

    Args:
        long: Production in long form, as in ``out_smard__generation_long``.
        categories: Categories to draw. All categories in ``long`` if None.
        freq: pandas frequency alias of the stream's time step.
    """
    df = long.assign(generation_category=long["generation_category"].astype(str))
    if categories is not None:
        df = df.loc[df["generation_category"].isin(categories)]
    if df.empty:
        raise ValueError("No production values to plot.")
    wide = (
        df.pivot_table(
            index="datetime_local",
            columns="generation_category",
            values="production_mwh",
            aggfunc="sum",
        )
        .resample(freq)
        .sum()
        / 1e3
    )
    order = stream_order(wide)
    fig, ax = plt.subplots(figsize=(14, 6), facecolor="white")
    ax.stackplot(
        wide.index,
        *[wide[col].to_numpy() for col in order],
        labels=[col.replace("_", " ") for col in order],
        colors=[GENERATION_CATEGORY_COLORS.get(col, "grey") for col in order],
        baseline="wiggle",
    )
    ax.set_xlim(wide.index.min(), wide.index.max())
    ax.set_ylabel(f"GWh per interval ({freq})")
    ax.set_yticks([])
    handles, labels = ax.get_legend_handles_labels()
    ax.legend(
        handles[::-1],
        labels[::-1],
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
        frameon=False,
    )
    ax.set_title("Electricity production by generation category")
    for side in ["left", "right", "top"]:
        ax.spines[side].set_visible(False)
    return fig


################################################################################
# Assets
################################################################################
@asset(compute_kind="pandas")
def out_smard__generation_long(core_smard__generation: pd.DataFrame) -> pd.DataFrame:
    """Production in long form, one row per timestamp and category."""
    long = generation_to_long(core_smard__generation)
    return REPORT_RESOURCES["out_smard__generation_long"].enforce_schema(long)


@asset(required_resource_keys={"report_settings"}, compute_kind="matplotlib")
def chart__generation(
    context, out_smard__generation_long: pd.DataFrame
) -> list[ReportFigure]:
    """Calendar heatmap and stream graph of renewable production."""
    settings = context.resources.report_settings
    categories = settings.generation.categories
    figures_dir = RegenPaths().figures_dir
    names = ", ".join(cat.replace("_", " ") for cat in categories)

    daily = daily_totals(out_smard__generation_long, categories)
    heatmap = plot_calendar_heatmap(daily, years=settings.generation.calendar_years)
    stream = plot_stream_graph(
        out_smard__generation_long, categories, freq=settings.generation.stream_freq
    )
    return [
        ReportFigure(
            name="calendar_heatmap",
            title="Daily production",
            caption=f"Daily production from {names}. Empty cells have no data.",
            path=save_figure(
                heatmap,
                figures_dir / "calendar_heatmap.png",
                dpi=settings.figure_dpi,
            ),
        ),
        ReportFigure(
            name="stream_graph",
            title="Production mix",
            caption=(
                f"Production from {names}, summed over intervals of "
                f"{settings.generation.stream_freq}."
            ),
            path=save_figure(
                stream, figures_dir / "stream_graph.png", dpi=settings.figure_dpi
            ),
        ),
    ]
