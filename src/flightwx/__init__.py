"""flightwx: aviation weather decoding and hourly flight category forecasts."""

from flightwx.version import __version__

__all__ = ["__version__"]
