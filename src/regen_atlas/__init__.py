"""Descriptive analytics of renewable power plants and electricity production."""

from importlib.metadata import version

from . import (  # noqa: F401
    analysis,
    etl,
    extract,
    helpers,
    logging_helpers,
    metadata,
    report,
    resources,
    settings,
    transform,
    workspace,
)

logging_helpers.configure_root_logger()

__version__ = version("regen-atlas")
__docformat__ = "restructuredtext en"
__description__ = (
    "Maps, histograms and time series charts of renewable power in one report."
)
