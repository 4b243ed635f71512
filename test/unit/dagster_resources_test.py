"""Test Dagster Resources."""

import pytest
from dagster import build_init_resource_context
from pydantic import ValidationError

from regen_atlas.resources import report_settings
from regen_atlas.settings import ReportSettings


def test_default_settings():
    """Without a settings file, the packaged settings are used."""
    init_context = build_init_resource_context()
    assert report_settings(init_context) == ReportSettings.from_default()


def test_settings_from_file(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("title: From a file\nfigure_dpi: 72\n")
    init_context = build_init_resource_context(config={"settings_yml": str(path)})
    settings = report_settings(init_context)
    assert settings.title == "From a file"
    assert settings.figure_dpi == 72


def test_invalid_settings_file(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text("regions:\n  nuts_level: 7\n")
    init_context = build_init_resource_context(config={"settings_yml": str(path)})
    with pytest.raises(ValidationError):
        _ = report_settings(init_context)
