"""Entry point for running the report build as ``python -m regen_atlas``."""

import sys

from regen_atlas.etl.cli import regen_report

if __name__ == "__main__":
    sys.exit(regen_report())
