"""Collection of Dagster resources for the report."""

from dagster import Field, resource

from regen_atlas.settings import ReportSettings


@resource(
    config_schema={
        "settings_yml": Field(
            str,
            description=(
                "Path to a report settings file. The settings that ship with the "
                "package are used if empty."
            ),
            default_value="",
        ),
    },
)
def report_settings(init_context) -> ReportSettings:
    """Dagster resource for parameterizing the report assets.

    This resource allows us to point a run at a different settings file in the
    Dagster UI.
    """
    settings_yml = init_context.resource_config["settings_yml"]
    if settings_yml:
        return ReportSettings.from_yaml(settings_yml)
    return ReportSettings.from_default()
