"""Dagster definitions for building the report."""

import itertools

from dagster import (
    AssetsDefinition,
    Definitions,
    define_asset_job,
    load_assets_from_modules,
)

import regen_atlas.analysis
import regen_atlas.extract
import regen_atlas.logging_helpers
import regen_atlas.report
import regen_atlas.transform
from regen_atlas.etl.asset_checks import asset_check_from_schema
from regen_atlas.metadata import REPORT_RESOURCES
from regen_atlas.resources import report_settings

logger = regen_atlas.logging_helpers.get_logger(__name__)

raw_module_groups = {
    "raw_opsd": [regen_atlas.extract.opsd],
    "raw_nuts": [regen_atlas.extract.nuts],
    "raw_smard": [regen_atlas.extract.smard],
}

core_module_groups = {
    "core_opsd": [regen_atlas.transform.opsd],
    "core_nuts": [regen_atlas.transform.nuts],
    "core_smard": [regen_atlas.transform.smard],
}

out_module_groups = {
    "out_capacity": [regen_atlas.analysis.capacity_density],
    "out_plants": [regen_atlas.analysis.plant_statistics],
    "out_generation": [regen_atlas.analysis.generation_timeseries],
    "report": [regen_atlas.report.render],
}

all_asset_modules = raw_module_groups | core_module_groups | out_module_groups
default_assets = list(
    itertools.chain.from_iterable(
        load_assets_from_modules(modules, group_name=group_name)
        for group_name, modules in all_asset_modules.items()
    )
)

default_asset_checks = [
    check
    for check in (
        asset_check_from_schema(asset_key, REPORT_RESOURCES)
        for asset_def in default_assets
        if isinstance(asset_def, AssetsDefinition)
        for asset_key in asset_def.keys
    )
    if check is not None
]

default_resources = {
    "report_settings": report_settings,
}

defs: Definitions = Definitions(
    assets=default_assets,
    asset_checks=default_asset_checks,
    resources=default_resources,
    jobs=[
        define_asset_job(
            name="report_full",
            description="Build every table and chart, and render the report.",
        ),
    ],
)
"""A collection of dagster assets, resources, and jobs for building the report."""
