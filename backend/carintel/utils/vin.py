"""
VIN shape checks and free-text VIN scanning.

A VIN is 17 characters over A-Z/0-9 with I, O and Q excluded.
"""

import re

_VIN_RE = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$", re.IGNORECASE)
_VIN_SCAN_RE = re.compile(r"\b([A-HJ-NPR-Z0-9]{17})\b", re.IGNORECASE)


def is_valid_vin(vin: str | None) -> bool:
    """True when vin has the 17-character VIN shape."""
    if not vin or len(vin) != 17:
        return False
    return bool(_VIN_RE.match(vin))


def find_vin(text: str | None) -> str | None:
    """Return the first VIN-shaped token in text, upper-cased."""
    if not text:
        return None
    match = _VIN_SCAN_RE.search(text)
    if match:
        return match.group(1).upper()
    return None
