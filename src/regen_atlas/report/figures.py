"""Saving charts to disk and embedding them in the report."""

import base64
from pathlib import Path
from typing import NamedTuple

import matplotlib.pyplot as plt

import regen_atlas.logging_helpers

logger = regen_atlas.logging_helpers.get_logger(__name__)


class ReportFigure(NamedTuple):
    """A chart that has been rendered to a PNG file, and how to present it."""

    name: str
    title: str
    caption: str
    path: Path


def save_figure(fig: plt.Figure, path: str | Path, dpi: int = 150) -> Path:
    """Write a figure to a PNG file and close it.

    Parent directories are created as needed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    logger.debug(f"Saved figure to {path}")
    return path


def encode_png(path: str | Path) -> str:
    """Return the contents of a PNG file as a base64 data URI."""
    data = base64.b64encode(Path(path).read_bytes()).decode("ascii")
    return f"data:image/png;base64,{data}"
