"""
VIN decoder using NHTSA vPIC API (free, no auth required).

Decodes a 17-character VIN to year/make/model/engine details.
Decode failure is never fatal: callers get None and treat specs as unknown.
"""

import logging
import re

import httpx

from carintel.config import settings
from carintel.schemas.analysis import VinSpecs
from carintel.utils.vin import is_valid_vin

logger = logging.getLogger(__name__)

NHTSA_DECODE_URL = "https://vpic.nhtsa.dot.gov/api/vehicles/DecodeVin/{vin}?format=json"

_CORPORATE_SUFFIX_RE = re.compile(
    r"\b(CORP|CORPORATION|INC|LLC|MOTOR|CO|COMPANY|NORTH AMERICA|USA|GROUP|HOLDINGS)\b\.?",
    re.IGNORECASE,
)

# Marques that are written in capitals, not title case
_UPPERCASE_MAKES = {"BMW", "GMC", "MG", "RAM"}

_MAKE_ALIASES = {
    "fca": "Chrysler/Jeep",
    "stellantis": "Chrysler/Jeep",
    "volkswagen group": "Volkswagen",
}

# vPIC variable name -> VinSpecs field
_VARIABLES = {
    "Model Year": "year",
    "Make": "make",
    "Model": "model",
    "Trim": "trim",
    "Engine Model": "engine",
    "Displacement (L)": "displacement",
    "Engine Number of Cylinders": "cylinders",
    "Fuel Type - Primary": "fuel_type",
    "Transmission Style": "transmission",
    "Drive Type": "drive_type",
    "Number of Seats": "seats",
    "Body Class": "body_class",
}


def validate_vin(vin: str) -> str | None:
    """Validate a VIN string. Returns error message or None if valid."""
    if not vin or len(vin) != 17:
        return "VIN must be exactly 17 characters"
    if not is_valid_vin(vin):
        return "VIN contains invalid characters (I, O, Q not allowed)"
    return None


def normalize_make(raw_make: str) -> str:
    """
    Turn a vPIC manufacturer label into a consumer-facing brand name.
    "TOYOTA MOTOR CORPORATION" -> "Toyota", "FCA US LLC" -> "Chrysler/Jeep".
    """
    if not raw_make:
        return ""

    alias = _MAKE_ALIASES.get(" ".join(raw_make.lower().split()))
    if alias:
        return alias

    stripped = " ".join(_CORPORATE_SUFFIX_RE.sub(" ", raw_make).replace(",", " ").split())
    if not stripped:
        return ""

    alias = _MAKE_ALIASES.get(stripped.lower())
    if alias:
        return alias
    # "FCA US" after "LLC" is stripped
    alias = _MAKE_ALIASES.get(stripped.split()[0].lower())
    if alias:
        return alias

    words = []
    for word in stripped.split():
        if word.upper() in _UPPERCASE_MAKES:
            words.append(word.upper())
        else:
            words.append("-".join(part.capitalize() for part in word.split("-")))
    return " ".join(words)


def _variable_map(data: dict) -> dict[str, str]:
    """Build Variable -> Value from a DecodeVin payload, skipping blanks."""
    values = {}
    results = data.get("Results")
    if not isinstance(results, list):
        return values
    for item in results:
        if not isinstance(item, dict):
            continue
        variable = item.get("Variable")
        value = item.get("Value")
        if variable and isinstance(value, str) and value.strip():
            values[variable] = value.strip()
    return values


async def decode_vin(vin: str) -> VinSpecs | None:
    """Decode a VIN using NHTSA vPIC API. Returns None when it can't."""
    vin = (vin or "").upper().strip()

    if not is_valid_vin(vin):
        return None

    try:
        url = NHTSA_DECODE_URL.format(vin=vin)
        async with httpx.AsyncClient(timeout=settings.vin_decode_timeout) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"NHTSA decode request failed for VIN {vin}: {e!r}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Malformed NHTSA decode payload for VIN {vin}")
        return None

    values = _variable_map(data)
    if not values:
        logger.warning(f"No decode results from NHTSA for VIN {vin}")
        return None

    fields = {field: values.get(variable, "") for variable, field in _VARIABLES.items()}
    fields["make"] = normalize_make(fields["make"])

    return VinSpecs(vin=vin, **fields)
