"""Tools for locating the inputs and outputs of a report run."""

from . import setup  # noqa: F401
