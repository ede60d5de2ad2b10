"""Flight category comparison and display helpers.

The classification itself lives with the models (classify) so derived
properties can use it; it is re-exported here.
"""

from flightwx.weather.models import UNRESTRICTED, FlightCategory, classify

__all__ = [
    "CATEGORY_LETTERS",
    "UNRESTRICTED",
    "category_letter",
    "classify",
    "is_worse",
    "worst_category",
]

# Single-letter codes for compact timeline display
CATEGORY_LETTERS = {
    FlightCategory.VFR: "V",
    FlightCategory.MVFR: "M",
    FlightCategory.BIR: "B",
    FlightCategory.IFR: "I",
    FlightCategory.LIFR: "L",
}


def is_worse(candidate: FlightCategory | None, reference: FlightCategory | None) -> bool:
    """Check whether candidate is strictly more severe than reference.

    A missing candidate is never worse; any category is worse than a
    missing reference.
    """
    if candidate is None:
        return False
    if reference is None:
        return True
    return candidate.severity > reference.severity


def worst_category(*categories: FlightCategory | None) -> FlightCategory | None:
    """Most severe of the given categories, ignoring None."""
    present = [c for c in categories if c is not None]
    if not present:
        return None
    return max(present, key=lambda c: c.severity)


def category_letter(category: FlightCategory | None) -> str:
    """Single-letter code for a category, "?" when unknown."""
    if category is None:
        return "?"
    return CATEGORY_LETTERS[category]
