"""Definitions of the tables produced while building the report."""

from typing import Any

from regen_atlas.metadata.enums import GENERATION_CATEGORIES

RESOURCE_METADATA: dict[str, dict[str, Any]] = {
    "core_opsd__plants": {
        "description": "Renewable generation units with a point location.",
        "schema": {
            "fields": [
                "plant_id",
                "energy_source",
                "technology",
                "commissioning_date",
                "commissioning_year",
                "capacity_mw",
                "federal_state",
                "municipality",
                "latitude",
                "longitude",
                "geometry",
            ],
            "primary_key": ["plant_id"],
            "required": ["latitude", "longitude", "capacity_mw", "energy_source"],
        },
    },
    "core_nuts__regions": {
        "description": "NUTS region boundaries at the configured level.",
        "schema": {
            "fields": [
                "nuts_id",
                "region_name",
                "country_code",
                "nuts_level",
                "area_km2",
                "geometry",
            ],
            "primary_key": ["nuts_id"],
        },
    },
    "out_opsd__plants_with_regions": {
        "description": "Renewable generation units with the region that contains them.",
        "schema": {
            "fields": [
                "plant_id",
                "nuts_id",
                "energy_source",
                "technology",
                "commissioning_date",
                "commissioning_year",
                "capacity_mw",
                "federal_state",
                "municipality",
                "latitude",
                "longitude",
                "geometry",
            ],
            "primary_key": ["plant_id"],
        },
    },
    "out_opsd__capacity_by_region_year": {
        "description": (
            "Capacity commissioned per region, year and energy source, with the "
            "running total over years."
        ),
        "schema": {
            "fields": [
                "nuts_id",
                "commissioning_year",
                "energy_source",
                "capacity_mw",
                "plant_count",
                "cumulative_capacity_mw",
            ],
            "primary_key": ["nuts_id", "commissioning_year", "energy_source"],
        },
    },
    "out_opsd__capacity_density": {
        "description": "Installed capacity per unit area for every region and source.",
        "schema": {
            "fields": [
                "nuts_id",
                "region_name",
                "energy_source",
                "capacity_mw",
                "plant_count",
                "area_km2",
                "capacity_density_mw_km2",
                "quantile_class",
                "geometry",
            ],
            "primary_key": ["nuts_id", "energy_source"],
        },
    },
    "out_opsd__bivariate_classes": {
        "description": "Bivariate tercile classes of two capacity densities per region.",
        "schema": {
            "fields": [
                "nuts_id",
                "region_name",
                "x_capacity_density_mw_km2",
                "y_capacity_density_mw_km2",
                "x_class",
                "y_class",
                "bivariate_class",
                "bivariate_color",
                "geometry",
            ],
            "primary_key": ["nuts_id"],
        },
    },
    "core_smard__generation": {
        "description": (
            "Electricity production per generation category on a regular time grid."
        ),
        "schema": {
            "fields": ["datetime_local"]
            + [f"{category}_mwh" for category in GENERATION_CATEGORIES],
            "primary_key": ["datetime_local"],
        },
    },
    "out_smard__generation_long": {
        "description": "Electricity production in long form, one row per category.",
        "schema": {
            "fields": ["datetime_local", "generation_category", "production_mwh"],
            "primary_key": ["datetime_local", "generation_category"],
        },
    },
}
