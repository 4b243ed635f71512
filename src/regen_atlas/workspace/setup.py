"""Tools for setting up and managing report workspaces."""

import os
from pathlib import Path
from typing import Self

from pydantic import DirectoryPath, NewPath, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

import regen_atlas.logging_helpers

logger = regen_atlas.logging_helpers.get_logger(__name__)

PotentialDirectoryPath = DirectoryPath | NewPath


class RegenPaths(BaseSettings):
    """These settings provide access to the report input and output directories.

    It is primarily configured via REGEN_INPUT and REGEN_OUTPUT environment
    variables. Other paths of relevance are derived from these.
    """

    regen_input: PotentialDirectoryPath
    regen_output: PotentialDirectoryPath
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def create_directories(self: Self):
        """Create input and output directories if they don't already exist."""
        self.input_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self

    @property
    def input_dir(self) -> Path:
        """Path to the directory holding the raw input files."""
        return Path(self.regen_input).absolute()

    @property
    def output_dir(self) -> Path:
        """Path to the directory the report is rendered into."""
        return Path(self.regen_output).absolute()

    @property
    def figures_dir(self) -> Path:
        """Path to the directory individual chart PNGs are written to."""
        figures = self.output_dir / "figures"
        figures.mkdir(parents=True, exist_ok=True)
        return figures

    def input_file(self, name: str | Path) -> Path:
        """Path to a file or directory in the input directory.

        Absolute paths are returned unchanged, so settings files may point at inputs
        that live outside of the workspace.
        """
        path = Path(name)
        if path.is_absolute():
            return path
        return self.input_dir / path

    def output_file(self, filename: str) -> Path:
        """Path to file in the output directory."""
        return self.output_dir / filename

    @staticmethod
    def set_path_overrides(
        input_dir: str | None = None,
        output_dir: str | None = None,
    ) -> None:
        """Set REGEN_INPUT and/or REGEN_OUTPUT env variables.

        Args:
            input_dir: if set, overrides REGEN_INPUT env variable.
            output_dir: if set, overrides REGEN_OUTPUT env variable.
        """
        if input_dir:
            os.environ["REGEN_INPUT"] = input_dir
        if output_dir:
            os.environ["REGEN_OUTPUT"] = output_dir
