"""Present weather groups (RA, -SHRA, FZFG, +TSRAGR, ...).

Groups are kept verbatim for display and decoded on demand.
"""

import re
from collections.abc import Iterable

INTENSITY = {"-": "light", "+": "heavy"}

DESCRIPTORS = {
    "MI": "shallow",
    "BC": "patches of",
    "PR": "partial",
    "DR": "low drifting",
    "BL": "blowing",
    "SH": "showers of",
    "TS": "thunderstorm with",
    "FZ": "freezing",
}

PHENOMENA = {
    "DZ": "drizzle",
    "RA": "rain",
    "SN": "snow",
    "SG": "snow grains",
    "PL": "ice pellets",
    "GR": "hail",
    "GS": "small hail",
    "UP": "unknown precipitation",
    "BR": "mist",
    "FG": "fog",
    "FU": "smoke",
    "VA": "volcanic ash",
    "DU": "dust",
    "SA": "sand",
    "HZ": "haze",
    "PY": "spray",
    "PO": "dust whirls",
    "SQ": "squalls",
    "FC": "funnel cloud",
    "SS": "sandstorm",
    "DS": "duststorm",
}

# Descriptors of short-lived convective weather
TRANSIENT_DESCRIPTORS = ("SH", "TS")

# Obscurations that persist regardless of convective activity
PERSISTENT_PHENOMENA = frozenset({"BR", "FG", "HZ", "FU", "VA", "DU", "SA", "PY", "SS", "DS"})

_DESC = "|".join(DESCRIPTORS)
_CODES = "|".join(PHENOMENA)

# Observation groups: a phenomenon code is mandatory
WEATHER_PATTERN = re.compile(rf"^([+-]?)(?:VC)?((?:{_DESC})?(?:{_CODES})+)$")

# Looser form used to decode forecast strings, where TS and VCSH stand alone
_GROUP_PATTERN = re.compile(
    rf"^(?P<intensity>[+-]?)(?P<vicinity>VC)?(?P<descriptor>{_DESC})?(?P<codes>(?:{_CODES})*)$"
)


def is_weather_group(token: str) -> bool:
    """Check whether a report token is a present weather group."""
    return WEATHER_PATTERN.match(token) is not None


def split_weather_group(token: str) -> tuple[str, bool, str | None, list[str]] | None:
    """Split a weather group into its parts.

    Args:
        token: Group such as "-SHRA" or "VCTS".

    Returns:
        (intensity, in_vicinity, descriptor, phenomenon codes), or None if the
        token is not a weather group.
    """
    match = _GROUP_PATTERN.match(token)
    if not match:
        return None
    descriptor = match.group("descriptor")
    raw_codes = match.group("codes")
    if not descriptor and not raw_codes:
        return None
    codes = [raw_codes[i : i + 2] for i in range(0, len(raw_codes), 2)]
    return match.group("intensity"), bool(match.group("vicinity")), descriptor, codes


def split_weather_string(text: str | None) -> tuple[str, ...]:
    """Split a space-separated weather string into groups."""
    if not text:
        return ()
    return tuple(text.split())


def describe_weather(token: str) -> str:
    """Decode a weather group into plain English.

    Unknown groups are returned unchanged.

    Examples:
        "-SHRA" -> "light showers of rain"
        "FZFG" -> "freezing fog"
        "+TSRAGR" -> "heavy thunderstorm with rain and hail"
    """
    parts = split_weather_group(token)
    if parts is None:
        return token
    intensity, vicinity, descriptor, codes = parts

    words = []
    if intensity:
        words.append(INTENSITY[intensity])
    names = [PHENOMENA[code] for code in codes]
    if descriptor:
        label = DESCRIPTORS[descriptor]
        if not names:
            # TS or SH standing alone
            label = {"TS": "thunderstorm", "SH": "showers"}.get(descriptor, label)
        words.append(label)
    if names:
        words.append(" and ".join(names))
    if vicinity:
        words.append("in vicinity")
    return " ".join(words)


def merge_weather(*groups: Iterable[str]) -> tuple[str, ...]:
    """Concatenate weather groups, dropping repeats but keeping first-seen order."""
    merged: list[str] = []
    for group in groups:
        for token in group:
            if token not in merged:
                merged.append(token)
    return tuple(merged)


def is_transient_only(tokens: Iterable[str]) -> bool:
    """Check whether weather is purely showery/thunderstorm activity.

    True when every group carries SH or TS and no persistent obscuration
    (mist, fog, haze, ...) is present. An empty list is not transient.
    """
    tokens = list(tokens)
    if not tokens:
        return False
    for token in tokens:
        parts = split_weather_group(token)
        if parts is None:
            return False
        _, _, descriptor, codes = parts
        if descriptor not in TRANSIENT_DESCRIPTORS:
            return False
        if any(code in PERSISTENT_PHENOMENA for code in codes):
            return False
    return True
