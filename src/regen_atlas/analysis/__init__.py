"""Modules that aggregate the cleaned tables and draw the report's charts."""

from . import (  # noqa: F401
    capacity_density,
    generation_timeseries,
    plant_statistics,
    spatial,
)
