"""Modules implementing the "Transform" step of the report pipeline.

Each module cleans one of the extracted inputs into a ``core_`` table with a
well-defined schema (see :mod:`regen_atlas.metadata.resources`).
"""

from . import nuts, opsd, smard  # noqa: F401
