"""Configure logging for the regen_atlas package."""

import logging

import coloredlogs
from dagster import get_dagster_logger


def get_logger(name: str):
    """Return a logger below the 'regen_atlas' root logger.

    Modules pass their ``__name__``, which already starts with 'regen_atlas'. Anything
    else is prefixed so that it still picks up the root logger's handlers.
    """
    if name != "regen_atlas" and not name.startswith("regen_atlas."):
        name = f"regen_atlas.{name}"
    return get_dagster_logger(name)


def configure_root_logger(
    logfile: str | None = None,
    loglevel: str = "INFO",
    dependency_loglevels: dict[str, int] | None = None,
    propagate: bool = False,
) -> None:
    """Configure the root regen_atlas logger.

    Args:
        logfile: Path to logfile or None.
        loglevel: Level of detail at which to log, by default INFO.
        dependency_loglevels: Dictionary mapping dependency name to desired loglevel.
            This allows us to filter excessive logs from dependencies.
        propagate: Whether to propagate logs to ancestor loggers. Useful for ensuring
            that pytest has access to our logs during testing.
    """
    if dependency_loglevels is None:
        dependency_loglevels = {
            "fiona": logging.WARNING,
            "pyogrio": logging.WARNING,
            "matplotlib": logging.WARNING,
        }
    for dependency_name, dependency_loglevel in dependency_loglevels.items():
        logging.getLogger(dependency_name).setLevel(dependency_loglevel)

    logger = get_dagster_logger("regen_atlas")
    log_format = "%(asctime)s [%(levelname)8s] %(name)s:%(lineno)s %(message)s"
    logger.setLevel(loglevel)
    coloredlogs.install(fmt=log_format, level=loglevel, logger=logger)

    logger.addHandler(logging.NullHandler())

    if logfile is not None:
        file_logger = logging.FileHandler(logfile)
        file_logger.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_logger)

    logger.propagate = propagate
