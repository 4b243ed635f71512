"""Aggregate plant capacity to regions and classify regions by capacity density.

Capacity density is the installed capacity of an energy source within a region
divided by the region's area (MW/km2). Regions are classed into quantiles of density
for single source choropleth maps, and into terciles of two densities for a bivariate
map that shows where two sources are built out together.
"""

import geopandas as gpd
import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from dagster import asset
from matplotlib.colors import to_hex
from matplotlib.patches import Patch, Rectangle

import regen_atlas.logging_helpers
from regen_atlas.analysis.spatial import assign_regions, region_totals
from regen_atlas.metadata import REPORT_RESOURCES
from regen_atlas.metadata.enums import BIVARIATE_CLASS_LETTERS, BIVARIATE_PALETTE
from regen_atlas.report.figures import ReportFigure, save_figure
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)

NO_DATA_COLOR = "#d9d9d9"


################################################################################
# Aggregation
################################################################################
def capacity_by_region_year(plants: pd.DataFrame) -> pd.DataFrame:
    """Sum capacity commissioned per region, year and energy source.

    Plants outside every region or without a commissioning year are left out. The
    running total of capacity over commissioning years is reported per region and
    energy source in ``cumulative_capacity_mw``.
    """
    df = plants.dropna(subset=["nuts_id", "commissioning_year"])
    if n_dropped := len(plants) - len(df):
        logger.info(
            f"{n_dropped} plants without a region or commissioning year are left out "
            "of the yearly capacity totals."
        )
    df = df.assign(energy_source=df["energy_source"].astype(str))
    out = region_totals(
        df,
        by=["nuts_id", "commissioning_year", "energy_source"],
        value_col="capacity_mw",
        count_col="plant_count",
    ).sort_values(["nuts_id", "energy_source", "commissioning_year"])
    out["cumulative_capacity_mw"] = out.groupby(["nuts_id", "energy_source"])[
        "capacity_mw"
    ].cumsum()
    return out.reset_index(drop=True)


def classify_quantiles(series: pd.Series, k: int) -> pd.Series:
    """Class values into ``k`` quantiles, numbered from 1 (lowest).

    When many values are equal (e.g. regions without any capacity) quantile edges
    coincide. Duplicate edges are collapsed, so fewer than ``k`` classes may result.
    If all values are equal they share class 1. Null values stay null.

    Args:
        series: Values to classify.
        k: Number of quantiles requested.

    Returns:
        Series of nullable integer class numbers with the same index as ``series``.
    """
    if k < 1:
        raise ValueError(f"Number of quantiles must be positive, got {k}")
    values = pd.to_numeric(series, errors="coerce").astype(float)
    classes = pd.Series(pd.NA, index=series.index, dtype="Int64")
    notnull = values.notna()
    if not notnull.any():
        return classes
    if values[notnull].nunique() == 1:
        classes[notnull] = 1
        return classes
    codes = pd.qcut(values[notnull], q=k, labels=False, duplicates="drop")
    classes[notnull] = codes.astype(int) + 1
    return classes


def classify_terciles(series: pd.Series) -> pd.Series:
    """Class values into terciles, numbered 1 to 3. See :func:`classify_quantiles`."""
    return classify_quantiles(series, 3)


def capacity_density(
    plants: pd.DataFrame,
    regions: gpd.GeoDataFrame,
    energy_sources: list[str],
    year: int | None = None,
    quantile_classes: int = 5,
) -> gpd.GeoDataFrame:
    """Calculate capacity density for every region and energy source.

    Every combination of region and energy source is reported, with zero capacity
    where a region has no plants of a source. Density quantile classes are computed
    separately for each energy source.

    Args:
        plants: Plants with ``nuts_id``, ``energy_source``, ``capacity_mw`` and
            ``commissioning_year`` columns.
        regions: Regions with ``nuts_id``, ``region_name`` and ``area_km2``.
        energy_sources: Energy sources to report.
        year: Only count plants commissioned in or before this year. Plants without
            a commissioning year are then left out. If None, count all plants.
        quantile_classes: Number of density quantiles to class regions into.
    """
    if year is not None:
        plants = plants.loc[plants["commissioning_year"].le(year).fillna(False)]
    plants = plants.dropna(subset=["nuts_id"])
    plants = plants.assign(energy_source=plants["energy_source"].astype(str))
    totals = region_totals(
        plants,
        by=["nuts_id", "energy_source"],
        value_col="capacity_mw",
        count_col="plant_count",
    ).set_index(["nuts_id", "energy_source"])
    grid = pd.MultiIndex.from_product(
        [regions["nuts_id"], energy_sources], names=["nuts_id", "energy_source"]
    )
    totals = totals.reindex(grid, fill_value=0).reset_index()
    out = regions[["nuts_id", "region_name", "area_km2", regions.geometry.name]].merge(
        totals, on="nuts_id", how="inner"
    )
    out["capacity_density_mw_km2"] = out["capacity_mw"] / out["area_km2"]
    out["quantile_class"] = pd.concat(
        [
            classify_quantiles(group["capacity_density_mw_km2"], quantile_classes)
            for _, group in out.groupby("energy_source")
        ]
    )
    logger.info(
        f"Calculated capacity density for {regions['nuts_id'].nunique()} regions and "
        f"{len(energy_sources)} energy sources."
    )
    return out


def bivariate_classes(
    density: gpd.GeoDataFrame,
    x_source: str,
    y_source: str,
    palette: dict[str, str] = BIVARIATE_PALETTE,
) -> gpd.GeoDataFrame:
    """Class every region by the terciles of two capacity densities.

    The x tercile is labeled with a letter (A is lowest) and the y tercile with a
    digit (1 is lowest), so ``C1`` is a region with high x and low y density.

    Args:
        density: Output of :func:`capacity_density`.
        x_source: Energy source on the horizontal axis of the legend.
        y_source: Energy source on the vertical axis of the legend.
        palette: Color for each of the nine bivariate classes.

    Raises:
        ValueError: if either energy source is absent from ``density``.
    """
    sources = set(density["energy_source"].astype(str))
    if missing := sorted({x_source, y_source} - sources):
        raise ValueError(f"No capacity density calculated for {missing}")
    wide = density.assign(energy_source=density["energy_source"].astype(str)).pivot(
        index="nuts_id", columns="energy_source", values="capacity_density_mw_km2"
    )
    classes = pd.DataFrame(
        {
            "x_capacity_density_mw_km2": wide[x_source],
            "y_capacity_density_mw_km2": wide[y_source],
            "x_class": classify_terciles(wide[x_source]),
            "y_class": classify_terciles(wide[y_source]),
        }
    ).reset_index()
    letters = np.array(BIVARIATE_CLASS_LETTERS)
    has_class = classes["x_class"].notna() & classes["y_class"].notna()
    classes["bivariate_class"] = pd.Series(pd.NA, index=classes.index, dtype="string")
    classes.loc[has_class, "bivariate_class"] = [
        f"{letters[x - 1]}{y}"
        for x, y in zip(
            classes.loc[has_class, "x_class"],
            classes.loc[has_class, "y_class"],
            strict=True,
        )
    ]
    classes["bivariate_color"] = classes["bivariate_class"].map(palette)
    regions = density.drop_duplicates(subset="nuts_id")[
        ["nuts_id", "region_name", density.geometry.name]
    ]
    return regions.merge(classes, on="nuts_id", how="left").reset_index(drop=True)


################################################################################
# Maps
################################################################################
def plot_quantile_choropleth(
    density: gpd.GeoDataFrame,
    energy_source: str,
    cmap: str = "YlGnBu",
) -> plt.Figure:
    """Map the capacity density quantile class of every region for one source.

    The legend lists the range of densities found in each class.
    """
    gdf = density.loc[density["energy_source"].astype(str) == energy_source]
    if gdf.empty:
        raise ValueError(f"No capacity density calculated for {energy_source}")
    n_classes = int(gdf["quantile_class"].max())
    colormap = matplotlib.colormaps[cmap].resampled(max(n_classes, 2))
    class_colors = {n: to_hex(colormap(n - 1)) for n in range(1, n_classes + 1)}

    fig, ax = plt.subplots(figsize=(7, 9), facecolor="white")
    gdf.plot(
        ax=ax,
        color=gdf["quantile_class"].map(class_colors).fillna(NO_DATA_COLOR).tolist(),
        edgecolor="white",
        linewidth=0.1,
    )
    handles = []
    for n, color in class_colors.items():
        in_class = gdf.loc[gdf["quantile_class"] == n, "capacity_density_mw_km2"]
        if in_class.empty:
            continue
        handles.append(
            Patch(
                facecolor=color,
                label=f"{in_class.min():.3g} to {in_class.max():.3g}",
            )
        )
    ax.legend(handles=handles, title="MW/km²", loc="upper left", fontsize="small")
    ax.set_title(f"{energy_source} capacity density")
    ax.set_axis_off()
    return fig


def plot_bivariate_choropleth(
    bivariate: gpd.GeoDataFrame,
    x_label: str,
    y_label: str,
    palette: dict[str, str] = BIVARIATE_PALETTE,
) -> plt.Figure:
    """Map bivariate classes with a 3x3 color grid legend."""
    fig, ax = plt.subplots(figsize=(7, 9), facecolor="white")
    bivariate.plot(
        ax=ax,
        color=bivariate["bivariate_color"].fillna(NO_DATA_COLOR).tolist(),
        edgecolor="white",
        linewidth=0.1,
    )
    ax.set_title(f"{x_label} and {y_label} capacity density")
    ax.set_axis_off()

    n = len(BIVARIATE_CLASS_LETTERS)
    legend_ax = ax.inset_axes([0.0, 0.02, 0.2, 0.2])
    for i, letter in enumerate(BIVARIATE_CLASS_LETTERS):
        for j in range(n):
            legend_ax.add_patch(
                Rectangle(
                    (i, j),
                    1,
                    1,
                    facecolor=palette[f"{letter}{j + 1}"],
                    edgecolor="white",
                )
            )
    legend_ax.set_xlim(0, n)
    legend_ax.set_ylim(0, n)
    legend_ax.set_aspect("equal")
    legend_ax.set_xticks([])
    legend_ax.set_yticks([])
    legend_ax.set_xlabel(f"{x_label} →", fontsize="small")
    legend_ax.set_ylabel(f"{y_label} →", fontsize="small")
    for spine in legend_ax.spines.values():
        spine.set_visible(False)
    return fig


################################################################################
# Assets
################################################################################
@asset(compute_kind="geopandas")
def out_opsd__plants_with_regions(
    core_opsd__plants: gpd.GeoDataFrame, core_nuts__regions: gpd.GeoDataFrame
) -> gpd.GeoDataFrame:
    """Plants with the NUTS region that contains them."""
    plants = assign_regions(core_opsd__plants, core_nuts__regions, id_col="nuts_id")
    return REPORT_RESOURCES["out_opsd__plants_with_regions"].enforce_schema(plants)


@asset(compute_kind="pandas")
def out_opsd__capacity_by_region_year(
    out_opsd__plants_with_regions: gpd.GeoDataFrame,
) -> pd.DataFrame:
    """Capacity commissioned per region, year and energy source."""
    capacity = capacity_by_region_year(pd.DataFrame(out_opsd__plants_with_regions))
    return REPORT_RESOURCES["out_opsd__capacity_by_region_year"].enforce_schema(
        capacity
    )


@asset(required_resource_keys={"report_settings"}, compute_kind="geopandas")
def out_opsd__capacity_density(
    context,
    out_opsd__plants_with_regions: gpd.GeoDataFrame,
    core_nuts__regions: gpd.GeoDataFrame,
) -> gpd.GeoDataFrame:
    """Capacity density and its quantile class for every region and source."""
    settings = context.resources.report_settings
    density = capacity_density(
        pd.DataFrame(out_opsd__plants_with_regions.drop(columns="geometry")),
        core_nuts__regions,
        energy_sources=settings.plants.energy_sources,
        year=settings.maps.density_year,
        quantile_classes=settings.maps.quantile_classes,
    )
    return REPORT_RESOURCES["out_opsd__capacity_density"].enforce_schema(density)


@asset(required_resource_keys={"report_settings"}, compute_kind="geopandas")
def out_opsd__bivariate_classes(
    context, out_opsd__capacity_density: gpd.GeoDataFrame
) -> gpd.GeoDataFrame:
    """Bivariate tercile classes of two capacity densities per region."""
    maps = context.resources.report_settings.maps
    classes = bivariate_classes(
        out_opsd__capacity_density,
        x_source=maps.bivariate_x,
        y_source=maps.bivariate_y,
        palette=maps.palette,
    )
    return REPORT_RESOURCES["out_opsd__bivariate_classes"].enforce_schema(classes)


@asset(required_resource_keys={"report_settings"}, compute_kind="matplotlib")
def chart__capacity_maps(
    context,
    out_opsd__capacity_density: gpd.GeoDataFrame,
    out_opsd__bivariate_classes: gpd.GeoDataFrame,
) -> list[ReportFigure]:
    """Capacity density choropleth maps, one per source plus a bivariate map."""
    settings = context.resources.report_settings
    figures_dir = RegenPaths().figures_dir
    as_of = settings.maps.density_year or "the latest data"
    figures = []
    for source in settings.plants.energy_sources:
        fig = plot_quantile_choropleth(out_opsd__capacity_density, source)
        figures.append(
            ReportFigure(
                name=f"capacity_density_{source.lower()}",
                title=f"{source} capacity density",
                caption=(
                    f"Installed {source.lower()} capacity per km² as of {as_of}, "
                    f"classed into up to {settings.maps.quantile_classes} quantiles."
                ),
                path=save_figure(
                    fig,
                    figures_dir / f"capacity_density_{source.lower()}.png",
                    dpi=settings.figure_dpi,
                ),
            )
        )
    x, y = settings.maps.bivariate_x, settings.maps.bivariate_y
    fig = plot_bivariate_choropleth(
        out_opsd__bivariate_classes, x_label=x, y_label=y, palette=settings.maps.palette
    )
    figures.append(
        ReportFigure(
            name="capacity_density_bivariate",
            title=f"{x} and {y} capacity density",
            caption=(
                f"Regions classed by terciles of {x.lower()} and {y.lower()} capacity "
                "density. The darkest regions rank high on both."
            ),
            path=save_figure(
                fig,
                figures_dir / "capacity_density_bivariate.png",
                dpi=settings.figure_dpi,
            ),
        )
    )
    return figures
