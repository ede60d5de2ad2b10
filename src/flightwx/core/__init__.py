"""Core infrastructure for flightwx."""

from flightwx.core.logging_system import get_logger, initialize_logging

__all__ = ["get_logger", "initialize_logging"]
