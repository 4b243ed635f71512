"""Assemble the report tables and charts into a single HTML page."""

from datetime import datetime
from pathlib import Path
from typing import Any

import jinja2
import pandas as pd
from dagster import asset

import regen_atlas.logging_helpers
from regen_atlas.report.figures import ReportFigure, encode_png
from regen_atlas.report.templates import REPORT_HTML
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)


def _format_cell(value: Any) -> dict[str, Any]:
    if pd.isna(value):
        return {"text": "", "number": False}
    if isinstance(value, bool):
        return {"text": str(value), "number": False}
    if isinstance(value, int) or (isinstance(value, float) and value.is_integer()):
        return {"text": f"{int(value):,}", "number": True}
    if isinstance(value, float):
        text = f"{value:.3g}" if abs(value) < 1 else f"{value:,.1f}"
        return {"text": text, "number": True}
    return {"text": str(value), "number": False}


def table_context(df: pd.DataFrame, title: str) -> dict[str, Any]:
    """Prepare a dataframe for display in the report template.

    The index is shown as the first column. Numbers are formatted with thousands
    separators and right aligned.
    """
    df = df.reset_index()
    return {
        "title": title,
        "columns": [str(col).replace("_", " ") for col in df.columns],
        "rows": [
            [_format_cell(value) for value in row]
            for row in df.astype(object).itertuples(index=False, name=None)
        ],
    }


def figure_context(figure: ReportFigure) -> dict[str, Any]:
    """Prepare a rendered chart for embedding in the report template."""
    return {
        "name": figure.name,
        "title": figure.title,
        "caption": figure.caption,
        "src": encode_png(figure.path),
    }


def top_regions(density: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """The ``n`` regions with the highest capacity density across all sources."""
    return (
        pd.DataFrame(density)
        .groupby(["nuts_id", "region_name"], observed=True)
        .agg(capacity_mw=("capacity_mw", "sum"), area_km2=("area_km2", "first"))
        .assign(capacity_density_mw_km2=lambda x: x["capacity_mw"] / x["area_km2"])
        .sort_values("capacity_density_mw_km2", ascending=False)
        .head(n)
    )


def annual_generation(long: pd.DataFrame, categories: list[str]) -> pd.DataFrame:
    """Production per year and generation category in GWh."""
    df = long.loc[long["generation_category"].astype(str).isin(categories)]
    return (
        df.assign(
            year=df["datetime_local"].dt.year,
            generation_category=df["generation_category"].astype(str),
        )
        .pivot_table(
            index="year",
            columns="generation_category",
            values="production_mwh",
            aggfunc="sum",
        )
        .div(1e3)
        .rename(columns=lambda col: f"{col}_gwh")
    )


def render_report(
    title: str,
    sections: list[dict[str, Any]],
    settings: dict[str, Any],
    description: str | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Render the report as a single self-contained HTML page.

    Args:
        title: Report title.
        sections: Each section has a ``title``, a list of ``tables`` as produced by
            :func:`table_context` and a list of ``figures`` as produced by
            :func:`figure_context`.
        settings: Settings to list at the top of the report.
        description: Introductory paragraph.
        generated_at: Time stamp shown in the report. Defaults to now.
    """
    if generated_at is None:
        generated_at = datetime.now()
    template = jinja2.Environment(
        loader=jinja2.BaseLoader(), autoescape=True
    ).from_string(REPORT_HTML)
    return template.render(
        title=title,
        description=description,
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M"),
        settings=settings,
        sections=sections,
    )


@asset(required_resource_keys={"report_settings"}, compute_kind="jinja2")
def report__html(
    context,
    out_opsd__plants_with_regions: pd.DataFrame,
    out_opsd__capacity_density: pd.DataFrame,
    out_smard__generation_long: pd.DataFrame,
    chart__plant_statistics: list[ReportFigure],
    chart__capacity_maps: list[ReportFigure],
    chart__generation: list[ReportFigure],
) -> Path:
    """The rendered report."""
    from regen_atlas.analysis.plant_statistics import summarize_plants

    settings = context.resources.report_settings
    sections = [
        {
            "title": "Power plants",
            "tables": [
                table_context(
                    summarize_plants(out_opsd__plants_with_regions),
                    "Plants by energy source",
                )
            ],
            "figures": [figure_context(fig) for fig in chart__plant_statistics],
        },
        {
            "title": "Capacity density",
            "tables": [
                table_context(
                    top_regions(out_opsd__capacity_density),
                    "Regions with the highest capacity density",
                )
            ],
            "figures": [figure_context(fig) for fig in chart__capacity_maps],
        },
        {
            "title": "Electricity production",
            "tables": [
                table_context(
                    annual_generation(
                        out_smard__generation_long, settings.generation.categories
                    ),
                    "Annual production [GWh]",
                )
            ],
            "figures": [figure_context(fig) for fig in chart__generation],
        },
    ]
    html = render_report(
        title=settings.title,
        sections=sections,
        settings=settings.summary(),
        description=settings.description,
    )
    path = RegenPaths().output_file(settings.report_filename)
    path.write_text(html, encoding="utf-8")
    logger.info(f"Wrote report to {path}")
    return path
