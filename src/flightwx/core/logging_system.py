"""Logging setup for flightwx.

Wraps the standard library logging module. Configuration is read from a
YAML file in ``logging.config.dictConfig`` format when one is given,
otherwise a plain console handler is installed.

Typical usage:
    from flightwx.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    logger = get_logger(__name__)
    logger.info("Resolving forecast for %s", "EFHK")
"""

import logging
import logging.config
from pathlib import Path
from typing import Any

import yaml

DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DEFAULT_LEVEL = logging.INFO

_initialized = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Logger name, normally ``__name__``.

    Returns:
        Standard library logger.
    """
    return logging.getLogger(name)


def load_logging_config(config_path: str | Path) -> dict[str, Any] | None:
    """Read a YAML logging configuration.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Configuration dictionary, or None if the file is missing or invalid.
    """
    path = Path(config_path)
    if not path.exists():
        return None

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logging.getLogger(__name__).warning("Invalid logging config %s: %s", path, e)
        return None

    if not isinstance(config, dict):
        return None
    config.setdefault("version", 1)
    return config


def initialize_logging(config_path: str | Path | None = None, level: int | None = None) -> None:
    """Initialize logging for the application.

    Args:
        config_path: Optional YAML dictConfig file.
        level: Optional root level override applied after configuration.
    """
    global _initialized

    config = load_logging_config(config_path) if config_path is not None else None
    if config is not None:
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(level=DEFAULT_LEVEL, format=DEFAULT_FORMAT)

    if level is not None:
        logging.getLogger().setLevel(level)

    _initialized = True
    get_logger(__name__).debug("Logging initialized (config=%s)", config_path)


def is_initialized() -> bool:
    """Check whether initialize_logging() has run."""
    return _initialized
