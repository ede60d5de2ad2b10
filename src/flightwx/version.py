"""Version information for flightwx.

The VERSION file at the project root wins in a source checkout; an
installed distribution reports its package metadata instead.
"""

from importlib import metadata
from pathlib import Path

__version__ = "0.1.0"  # Fallback version
__license__ = "MIT"

_VERSION_FILE = Path(__file__).resolve().parents[2] / "VERSION"  # src/flightwx -> root


def get_version() -> str:
    """Get the current version string.

    Returns:
        Version string (e.g., "0.1.0").
    """
    if _VERSION_FILE.exists():
        text = _VERSION_FILE.read_text(encoding="utf-8").strip()
        if text:
            return text

    try:
        return metadata.version("flightwx")
    except metadata.PackageNotFoundError:
        return __version__


def get_about_info() -> dict[str, str]:
    """Get name, version and license for display."""
    return {
        "name": "flightwx",
        "version": get_version(),
        "license": __license__,
        "description": "METAR decoding and TAF flight category timelines",
    }
