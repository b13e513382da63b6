"""
NHTSA recalls lookup (free, no auth required).

Recall lookup is best-effort: a failed request never aborts a VIN
analysis. lookup_recalls() reports the failure as data so callers can
tell "no recalls" apart from "recall check failed"; fetch_recalls()
returns only the list.
"""

import logging
import re
from dataclasses import dataclass, field

import httpx

from carintel.config import settings
from carintel.schemas.analysis import Recall

logger = logging.getLogger(__name__)

NHTSA_RECALLS_URL = "https://api.nhtsa.gov/recalls/recallsByVehicle"

_CRITICAL_RE = re.compile(r"\b(fire|stall|brakes|do not drive)\b", re.IGNORECASE)


@dataclass
class RecallLookup:
    recalls: list[Recall] = field(default_factory=list)
    ok: bool = True
    reason: str | None = None


def classify_recall(summary: str | None, notes: str | None = None) -> bool:
    """True when the recall text mentions a drive-safety keyword."""
    return bool(_CRITICAL_RE.search(summary or "") or _CRITICAL_RE.search(notes or ""))


def _parse_recall(item: dict) -> Recall:
    summary = item.get("Summary") or ""
    return Recall(
        recall_id=item.get("NHTSACampaignNumber"),
        affected_component=item.get("Component"),
        description=summary,
        remedy_action=item.get("Remedy"),
        is_critical=classify_recall(summary, item.get("Notes")),
    )


async def lookup_recalls(make: str, model: str, year: str) -> RecallLookup:
    """Query NHTSA for recalls on a make/model/year."""
    params = {"make": make, "model": model, "modelYear": year}
    try:
        async with httpx.AsyncClient(timeout=settings.recall_timeout) as client:
            response = await client.get(NHTSA_RECALLS_URL, params=params)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"NHTSA recall lookup failed for {year} {make} {model}: {e!r}")
        return RecallLookup(ok=False, reason=f"Recall lookup failed: {type(e).__name__}")

    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        logger.warning(f"Malformed NHTSA recall payload for {year} {make} {model}")
        return RecallLookup(ok=False, reason="Recall lookup returned a malformed payload")

    recalls = [
        _parse_recall(item)
        for item in results
        if isinstance(item, dict) and (item.get("Component") or "UNKNOWN").strip().upper() != "UNKNOWN"
    ]
    logger.info(f"{len(recalls)} recalls found for {year} {make} {model}")
    return RecallLookup(recalls=recalls)


async def fetch_recalls(make: str, model: str, year: str) -> list[Recall]:
    """Recalls for a make/model/year; empty on any failure."""
    return (await lookup_recalls(make, model, year)).recalls
