"""Field metadata."""

from typing import Any

from regen_atlas.metadata.enums import (
    ENERGY_SOURCES_OPSD,
    GENERATION_CATEGORIES,
    NUTS_LEVELS,
)

FIELD_METADATA: dict[str, dict[str, Any]] = {
    "area_km2": {
        "type": "number",
        "description": "Area of the region, computed in an equal-area projection.",
        "unit": "km2",
        "constraints": {"minimum": 0},
    },
    "bivariate_class": {
        "type": "string",
        "description": (
            "Combined tercile class of two capacity densities. The letter is the "
            "tercile of the x energy source and the digit the tercile of the y "
            "energy source, e.g. C1 is high x and low y."
        ),
    },
    "bivariate_color": {
        "type": "string",
        "description": "Hex color of the bivariate class in the choropleth palette.",
    },
    "capacity_density_mw_km2": {
        "type": "number",
        "description": "Installed capacity per unit of region area.",
        "unit": "MW/km2",
        "constraints": {"minimum": 0},
    },
    "capacity_mw": {
        "type": "number",
        "description": "Net electrical capacity.",
        "unit": "MW",
        "constraints": {"minimum": 0},
    },
    "commissioning_date": {
        "type": "date",
        "description": "Date the unit was first connected to the grid.",
    },
    "commissioning_year": {
        "type": "integer",
        "description": "Calendar year of the commissioning date.",
    },
    "country_code": {
        "type": "string",
        "description": "Two letter country code used by Eurostat.",
    },
    "cumulative_capacity_mw": {
        "type": "number",
        "description": (
            "Capacity commissioned in the region for the energy source up to and "
            "including the year."
        ),
        "unit": "MW",
        "constraints": {"minimum": 0},
    },
    "datetime_local": {
        "type": "datetime",
        "description": "Start of the reporting interval in German local time.",
    },
    "energy_source": {
        "type": "string",
        "description": "Renewable energy source category of the unit.",
        "constraints": {"enum": ENERGY_SOURCES_OPSD},
    },
    "federal_state": {
        "type": "string",
        "description": "Federal state the unit is located in.",
    },
    "generation_category": {
        "type": "string",
        "description": "Generation category as reported on SMARD.",
        "constraints": {"enum": GENERATION_CATEGORIES},
    },
    "geometry": {
        "type": "geometry",
        "description": "Point location of a plant or polygon boundary of a region.",
    },
    "latitude": {
        "type": "number",
        "description": "Latitude of the unit.",
        "unit": "degrees",
        "constraints": {"minimum": -90, "maximum": 90},
    },
    "longitude": {
        "type": "number",
        "description": "Longitude of the unit.",
        "unit": "degrees",
        "constraints": {"minimum": -180, "maximum": 180},
    },
    "municipality": {
        "type": "string",
        "description": "Name of the municipality the unit is located in.",
    },
    "nuts_id": {
        "type": "string",
        "description": "NUTS region code.",
    },
    "nuts_level": {
        "type": "integer",
        "description": "Level of the NUTS hierarchy, 0 (country) to 3.",
        "constraints": {"enum": NUTS_LEVELS},
    },
    "plant_count": {
        "type": "integer",
        "description": "Number of units.",
        "constraints": {"minimum": 0},
    },
    "plant_id": {
        "type": "string",
        "description": (
            "Identifier of the unit. The EEG plant key where one was reported, "
            "otherwise a generated row identifier."
        ),
    },
    "production_mwh": {
        "type": "number",
        "description": "Electricity produced during the interval.",
        "unit": "MWh",
    },
    "quantile_class": {
        "type": "integer",
        "description": "Quantile class of the value, from 1 (lowest) upward.",
        "constraints": {"minimum": 1},
    },
    "region_name": {
        "type": "string",
        "description": "Latin script name of the region.",
    },
    "technology": {
        "type": "string",
        "description": "Generation technology of the unit, where reported.",
    },
    "x_capacity_density_mw_km2": {
        "type": "number",
        "description": "Capacity density of the bivariate map's x energy source.",
        "unit": "MW/km2",
    },
    "x_class": {
        "type": "integer",
        "description": "Tercile class of the x energy source's capacity density.",
        "constraints": {"minimum": 1, "maximum": 3},
    },
    "y_capacity_density_mw_km2": {
        "type": "number",
        "description": "Capacity density of the bivariate map's y energy source.",
        "unit": "MW/km2",
    },
    "y_class": {
        "type": "integer",
        "description": "Tercile class of the y energy source's capacity density.",
        "constraints": {"minimum": 1, "maximum": 3},
    },
}

FIELD_METADATA |= {
    f"{category}_mwh": {
        "type": "number",
        "description": f"Electricity produced from {category.replace('_', ' ')}.",
        "unit": "MWh",
    }
    for category in GENERATION_CATEGORIES
}
"""Wide generation table columns, one per SMARD generation category."""
