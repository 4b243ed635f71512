"""Render the report's charts and assemble them into an HTML page."""

from . import figures, render, templates  # noqa: F401
