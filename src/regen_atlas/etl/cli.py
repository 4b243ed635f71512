"""A command line interface (CLI) for building the report."""

import pathlib
import sys

import click

import regen_atlas
from regen_atlas.etl import defs
from regen_atlas.settings import ReportSettings
from regen_atlas.workspace.setup import RegenPaths

logger = regen_atlas.logging_helpers.get_logger(__name__)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument(
    "settings_yml",
    required=False,
    type=click.Path(
        exists=True,
        dir_okay=False,
        resolve_path=True,
        path_type=pathlib.Path,
    ),
)
@click.option(
    "--input-dir",
    type=click.Path(file_okay=False, resolve_path=True, path_type=pathlib.Path),
    help="Directory holding the input files. Overrides REGEN_INPUT.",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, resolve_path=True, path_type=pathlib.Path),
    help="Directory the report is written to. Overrides REGEN_OUTPUT.",
)
@click.option(
    "--logfile",
    help="If specified, write logs to this file.",
    type=click.Path(
        exists=False,
        resolve_path=True,
        path_type=pathlib.Path,
    ),
)
@click.option(
    "--loglevel",
    default="INFO",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
)
def regen_report(
    settings_yml: pathlib.Path | None,
    input_dir: pathlib.Path | None,
    output_dir: pathlib.Path | None,
    logfile: pathlib.Path | None,
    loglevel: str,
):
    """Build the renewable power report, as specified by the file SETTINGS_YML.

    If no settings file is given, the default settings that ship with the package are
    used.
    """
    regen_atlas.logging_helpers.configure_root_logger(
        logfile=logfile, loglevel=loglevel.upper()
    )
    RegenPaths.set_path_overrides(
        input_dir=str(input_dir) if input_dir else None,
        output_dir=str(output_dir) if output_dir else None,
    )
    # Validate the settings before starting any work.
    settings = (
        ReportSettings.from_yaml(settings_yml)
        if settings_yml
        else ReportSettings.from_default()
    )
    paths = RegenPaths()
    logger.info(f"Reading inputs from {paths.input_dir}")

    run_config = {
        "resources": {
            "report_settings": {
                "config": {"settings_yml": str(settings_yml) if settings_yml else ""}
            },
        },
    }
    result = defs.get_job_def("report_full").execute_in_process(
        run_config=run_config,
        raise_on_error=False,
    )

    if not result.success:
        for event in result.all_events:
            if event.event_type_value == "STEP_FAILURE":
                raise RuntimeError(event.event_specific_data.error.message)
        raise RuntimeError("Report run failed without a step failure.")
    logger.info(f"Report completed: {paths.output_file(settings.report_filename)}")


if __name__ == "__main__":
    sys.exit(regen_report())
