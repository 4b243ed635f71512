"""Enumerations of valid field values."""

ENERGY_SOURCES_OPSD: list[str] = [
    "Bioenergy",
    "Geothermal",
    "Hydro",
    "Marine",
    "Solar",
    "Wind",
]
"""Values of ``energy_source_level_2`` for renewable units in the OPSD plant list."""

GENERATION_CATEGORIES_SMARD: dict[str, str] = {
    "Biomasse": "biomass",
    "Wasserkraft": "hydropower",
    "Wind Offshore": "wind_offshore",
    "Wind Onshore": "wind_onshore",
    "Photovoltaik": "photovoltaics",
    "Sonstige Erneuerbare": "other_renewable",
    "Kernenergie": "nuclear",
    "Braunkohle": "lignite",
    "Steinkohle": "hard_coal",
    "Erdgas": "natural_gas",
    "Pumpspeicher": "pumped_storage",
    "Sonstige Konventionelle": "other_conventional",
}
"""SMARD column header prefixes and the generation category names we use for them."""

GENERATION_CATEGORIES: list[str] = list(GENERATION_CATEGORIES_SMARD.values())

RENEWABLE_GENERATION_CATEGORIES: list[str] = [
    "biomass",
    "hydropower",
    "wind_offshore",
    "wind_onshore",
    "photovoltaics",
    "other_renewable",
]

NUTS_LEVELS: list[int] = [0, 1, 2, 3]

BIVARIATE_CLASS_LETTERS: list[str] = ["A", "B", "C"]
"""Labels of the x-axis terciles in a bivariate class, from low to high."""

BIVARIATE_PALETTE: dict[str, str] = {
    "A1": "#e8e8e8",
    "B1": "#b5c0da",
    "C1": "#6c83b5",
    "A2": "#b8d6be",
    "B2": "#90b2b3",
    "C2": "#567994",
    "A3": "#73ae80",
    "B3": "#5a9178",
    "C3": "#2a5a5b",
}
"""Default 3x3 bivariate color scheme, keyed by x tercile letter and y tercile digit."""

ENERGY_SOURCE_COLORS: dict[str, str] = {
    "Bioenergy": "#6a994e",
    "Geothermal": "#bc4749",
    "Hydro": "#1d70a2",
    "Marine": "#2ec4b6",
    "Solar": "#f2c14e",
    "Wind": "#7fb7be",
}

GENERATION_CATEGORY_COLORS: dict[str, str] = {
    "biomass": "#6a994e",
    "hydropower": "#1d70a2",
    "wind_offshore": "#2f5d8a",
    "wind_onshore": "#7fb7be",
    "photovoltaics": "#f2c14e",
    "other_renewable": "#a7c957",
    "nuclear": "#9b5de5",
    "lignite": "#7f5539",
    "hard_coal": "#3d3d3d",
    "natural_gas": "#e76f51",
    "pumped_storage": "#48cae4",
    "other_conventional": "#adb5bd",
}
