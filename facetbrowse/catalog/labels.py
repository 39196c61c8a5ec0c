"""Value normalization and label formatting for facet options."""

import re
import unicodedata

from facetbrowse.catalog.models import AttributeValue

# Invisible characters that sneak in from spreadsheets and copy/paste
_INVISIBLE = re.compile("[\u200e\u200f\u00a0]")
_WHITESPACE = re.compile(r"\s+")
_CAPACITY = re.compile(r"^(\d+(?:\.\d+)?)\s*([kmgt])b?$", re.IGNORECASE)
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

CAPACITY_KEYS = ("ram", "storage", "rom", "memory")

_UNIT_POWERS = {"k": 1, "m": 2, "g": 3, "t": 4}


def normalize_value(value: AttributeValue) -> str:
    """Normalize a value for use as an option id and for comparisons.

    Applies NFKD, strips invisible characters, collapses whitespace,
    trims and lower-cases.

    >>> normalize_value("  Space Grey ")
    'space grey'
    >>> normalize_value("Deep  Blue")
    'deep blue'
    """
    text = stringify(value)
    text = unicodedata.normalize("NFKD", text)
    text = _INVISIBLE.sub("", text)
    return _WHITESPACE.sub(" ", text).strip().lower()


def stringify(value: AttributeValue) -> str:
    """Render an attribute value as text (booleans as true/false)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_capacity_key(key: str) -> bool:
    """Check if a facet key holds byte capacities (RAM, storage...)."""
    lowered = key.lower()
    return any(k in lowered for k in CAPACITY_KEYS)


def capacity_value(value: str) -> float:
    """Convert a capacity like "512GB" or "1 T" to bytes (0 if unparseable)."""
    cleaned = _INVISIBLE.sub("", value).replace(" ", "").lower()
    match = _CAPACITY.match(cleaned)
    if not match:
        return 0
    number = float(match.group(1))
    return number * 1024 ** _UNIT_POWERS[match.group(2).lower()]


def format_label(value: AttributeValue, key: str | None = None) -> str:
    """Format an option label for display.

    Capacity-like keys render as "<number> <UNIT>B"; everything else is
    whitespace-collapsed and title-cased per word.

    Args:
        value: Raw option value.
        key: Facet key the value belongs to.

    Returns:
        Display label.
    """
    text = _INVISIBLE.sub("", stringify(value)).strip()
    if key and is_capacity_key(key):
        match = _CAPACITY.match(text)
        if match:
            return f"{match.group(1)} {match.group(2).upper()}B"
    text = _WHITESPACE.sub(" ", text).lower()
    return re.sub(r"\b[a-z]", lambda m: m.group(0).upper(), text)


def title_from_key(key: str) -> str:
    """Derive a facet title from an attribute key.

    >>> title_from_key("screenSize")
    'Screen Size'
    >>> title_from_key("panel")
    'Panel'
    """
    if not key:
        return key
    spaced = _CAMEL_BOUNDARY.sub(" ", key)
    return spaced[0].upper() + spaced[1:]


def humanize_slug(slug: str) -> str:
    """Turn a category slug into a title ("smart-phones" -> "Smart Phones")."""
    text = _WHITESPACE.sub(" ", re.sub(r"[-_]", " ", slug)).strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)
