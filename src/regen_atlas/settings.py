"""Module for validating report settings."""

import importlib.resources
from pathlib import Path
from typing import Any, Self

import fsspec
import pandas as pd
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

import regen_atlas.logging_helpers
from regen_atlas.metadata.enums import (
    BIVARIATE_CLASS_LETTERS,
    BIVARIATE_PALETTE,
    ENERGY_SOURCES_OPSD,
    GENERATION_CATEGORIES,
    NUTS_LEVELS,
    RENEWABLE_GENERATION_CATEGORIES,
)

logger = regen_atlas.logging_helpers.get_logger(__name__)

DEFAULT_SETTINGS_YML = (
    importlib.resources.files("regen_atlas.package_data.settings")
    / "report_default.yml"
)
"""Settings file used when the report is run without one."""


class FrozenBaseModel(BaseModel):
    """BaseModel with global configuration."""

    model_config: ConfigDict = ConfigDict(frozen=True, extra="forbid")


def _check_frequency(freq: str) -> str:
    """Ensure a string is a pandas frequency alias, e.g. ``h``, ``D`` or ``W``."""
    try:
        pd.tseries.frequencies.to_offset(freq)
    except ValueError as err:
        raise ValueError(f"{freq!r} is not a valid pandas frequency.") from err
    return freq


class PlantSettings(FrozenBaseModel):
    """An immutable pydantic model for the power plant list inputs and filters."""

    plants_csv: str = "renewable_power_plants_DE.csv"
    """CSV file of plant attributes, relative to the input directory."""

    energy_sources: list[str] = [
        source for source in ENERGY_SOURCES_OPSD if source != "Marine"
    ]
    """Energy sources to keep. Others are dropped during cleaning."""

    drop_columns: list[str] = [
        "energy_source_level_3",
        "voltage_level",
        "tso",
        "dso",
        "dso_id",
        "postcode",
        "municipality_code",
        "address",
        "data_source",
        "comment",
        "nuts_1_region",
        "nuts_2_region",
        "nuts_3_region",
    ]
    """Source columns not used anywhere in the report."""

    first_year: int | None = None
    """Drop plants commissioned before this year."""

    last_year: int | None = None
    """Drop plants commissioned after this year."""

    include_decommissioned: bool = False
    """Keep units that report a decommissioning date."""

    @field_validator("energy_sources")
    @classmethod
    def energy_sources_are_known(cls, energy_sources: list[str]) -> list[str]:
        """Ensure only known renewable energy sources are requested."""
        if unknown := sorted(set(energy_sources) - set(ENERGY_SOURCES_OPSD)):
            raise ValueError(f"Unknown energy sources requested: {unknown}")
        if not energy_sources:
            raise ValueError("At least one energy source must be selected.")
        return energy_sources

    @model_validator(mode="after")
    def years_in_order(self: Self):
        """Ensure the year range isn't reversed."""
        if (
            self.first_year is not None
            and self.last_year is not None
            and self.first_year > self.last_year
        ):
            raise ValueError(
                f"first_year {self.first_year} is after last_year {self.last_year}."
            )
        return self


class RegionSettings(FrozenBaseModel):
    """An immutable pydantic model for the region boundary inputs."""

    nuts_shapefile: str = "NUTS_RG_01M_2021_4326.shp"
    """Shapefile of NUTS regions, relative to the input directory."""

    country_code: str = Field(default="DE", pattern=r"^[A-Z]{2}$")
    """Eurostat country code of the regions to keep."""

    nuts_level: int = 3
    """NUTS level of the regions the plants are aggregated to."""

    @field_validator("nuts_level")
    @classmethod
    def nuts_level_exists(cls, nuts_level: int) -> int:
        """Ensure the NUTS level is one of 0, 1, 2 or 3."""
        if nuts_level not in NUTS_LEVELS:
            raise ValueError(f"NUTS level must be one of {NUTS_LEVELS}, got {nuts_level}")
        return nuts_level


class GenerationSettings(FrozenBaseModel):
    """An immutable pydantic model for the electricity production time series."""

    generation_dir: str = "smard"
    """Directory of SMARD CSV exports, relative to the input directory."""

    file_pattern: str = "*.csv"
    """Glob pattern selecting the time series files within the directory."""

    resample_freq: str = "h"
    """Regular time grid the production values are resampled to."""

    stream_freq: str = "W"
    """Time step of the stream graph."""

    categories: list[str] = RENEWABLE_GENERATION_CATEGORIES
    """Generation categories shown in the calendar heatmap and stream graph."""

    calendar_years: list[int] | None = None
    """Years to draw in the calendar heatmap. All years in the data if None."""

    @field_validator("resample_freq", "stream_freq")
    @classmethod
    def frequency_is_valid(cls, freq: str) -> str:
        """Ensure the time steps are pandas frequency aliases."""
        return _check_frequency(freq)

    @field_validator("categories")
    @classmethod
    def categories_are_known(cls, categories: list[str]) -> list[str]:
        """Ensure only SMARD generation categories are requested."""
        if unknown := sorted(set(categories) - set(GENERATION_CATEGORIES)):
            raise ValueError(f"Unknown generation categories requested: {unknown}")
        if not categories:
            raise ValueError("At least one generation category must be selected.")
        return categories


class MapSettings(FrozenBaseModel):
    """An immutable pydantic model for the capacity density maps."""

    density_year: int | None = None
    """Map the capacity installed by the end of this year. All plants if None."""

    quantile_classes: int = Field(default=5, ge=2, le=9)
    """Number of quantile classes in the single energy source maps."""

    bivariate_x: str = "Solar"
    """Energy source on the horizontal axis of the bivariate legend."""

    bivariate_y: str = "Wind"
    """Energy source on the vertical axis of the bivariate legend."""

    palette: dict[str, str] = BIVARIATE_PALETTE
    """Color of each bivariate class, keyed like ``A1`` (low x, low y)."""

    @field_validator("palette")
    @classmethod
    def palette_is_complete(cls, palette: dict[str, str]) -> dict[str, str]:
        """Ensure there's exactly one color for each of the 9 bivariate classes."""
        expected = {
            f"{letter}{digit}"
            for letter in BIVARIATE_CLASS_LETTERS
            for digit in range(1, len(BIVARIATE_CLASS_LETTERS) + 1)
        }
        if set(palette) != expected:
            raise ValueError(
                f"Bivariate palette needs colors for exactly {sorted(expected)}."
            )
        return palette

    @model_validator(mode="after")
    def bivariate_sources_differ(self: Self):
        """Ensure the bivariate map compares two different energy sources."""
        if self.bivariate_x == self.bivariate_y:
            raise ValueError(
                f"Bivariate map needs two different sources, got {self.bivariate_x} twice."
            )
        return self


class ReportSettings(FrozenBaseModel):
    """Main settings validation class."""

    title: str = "Renewable power in Germany"
    description: str | None = None

    plants: PlantSettings = PlantSettings()
    regions: RegionSettings = RegionSettings()
    generation: GenerationSettings = GenerationSettings()
    maps: MapSettings = MapSettings()

    figure_dpi: int = Field(default=150, gt=0)
    report_filename: str = "report.html"

    @model_validator(mode="after")
    def bivariate_sources_selected(self: Self):
        """Ensure the bivariate map only uses energy sources that survive cleaning."""
        missing = {self.maps.bivariate_x, self.maps.bivariate_y} - set(
            self.plants.energy_sources
        )
        if missing:
            raise ValueError(
                f"Bivariate map sources {sorted(missing)} are not in the selected "
                f"energy sources {self.plants.energy_sources}."
            )
        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ReportSettings":
        """Create a ReportSettings instance from a yaml_file path.

        Args:
            path: path to a yaml file; this could be remote.

        Returns:
            A report settings object.
        """
        with fsspec.open(str(path)) as f:
            yaml_file = yaml.safe_load(f)
        return cls.model_validate(yaml_file or {})

    @classmethod
    def from_default(cls) -> "ReportSettings":
        """Load the settings file that ships with the package."""
        return cls.from_yaml(str(DEFAULT_SETTINGS_YML))

    def summary(self) -> dict[str, Any]:
        """Return the settings that shape the report's contents, for display."""
        return {
            "Energy sources": ", ".join(self.plants.energy_sources),
            "Commissioning years": (
                f"{self.plants.first_year or 'all'} to {self.plants.last_year or 'all'}"
            ),
            "Regions": (
                f"NUTS {self.regions.nuts_level} regions in {self.regions.country_code}"
            ),
            "Capacity as of": self.maps.density_year or "latest data",
            "Bivariate map": f"{self.maps.bivariate_x} vs. {self.maps.bivariate_y}",
            "Time series grid": self.generation.resample_freq,
            "Generation categories": ", ".join(self.generation.categories),
        }
