"""Metadata describing the tables built for the report."""

from . import classes, constants, enums, fields, resources  # noqa: F401

REPORT_RESOURCES: dict[str, classes.Resource] = {
    name: classes.Resource.from_id(name) for name in resources.RESOURCE_METADATA
}
"""All table resources, keyed by the name of the asset that produces them."""
