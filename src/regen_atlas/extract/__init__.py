"""Modules implementing the "Extract" step of the report pipeline.

Each module in this subpackage reads one kind of local input file (the power plant
list, the region boundaries, the production time series) into a dataframe, changing
as little as possible. Cleaning is left to :mod:`regen_atlas.transform`.
"""

from . import nuts, opsd, smard  # noqa: F401
