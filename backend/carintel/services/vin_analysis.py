"""
VIN analysis pipeline.

cache -> decode -> recalls -> service-history scrape -> verdict -> cache write

Stages run strictly in sequence because each consumes the previous one's
output. Only the cache and the browser are optional/slow; everything after
the cache lookup is best-effort and degrades into data instead of raising.
"""

import asyncio
import logging
import time

from carintel.config import settings
from carintel.schemas.analysis import (
    AnalysisMeta,
    HistorySection,
    SafetySection,
    VehicleSpecs,
    VinAnalysis,
    VinSpecs,
)
from carintel.services.cache import AnalysisCache
from carintel.services.recalls import RecallLookup, lookup_recalls
from carintel.services.service_history import scrape_service_history
from carintel.services.verdict import generate_verdict
from carintel.services.vin_decoder import decode_vin
from carintel.utils.browser import BrowserLauncher

logger = logging.getLogger(__name__)


async def _decode(vin: str) -> VinSpecs | None:
    try:
        return await asyncio.wait_for(decode_vin(vin), timeout=settings.vin_decode_timeout)
    except TimeoutError:
        logger.warning(f"VIN decode timed out for {vin}")
        return None


async def _recalls(specs: VinSpecs | None) -> RecallLookup:
    if specs is None or not (specs.make and specs.model and specs.year):
        return RecallLookup(ok=False, reason="Vehicle specs unknown, recall check skipped")
    try:
        return await asyncio.wait_for(
            lookup_recalls(specs.make, specs.model, specs.year),
            timeout=settings.recall_timeout,
        )
    except TimeoutError:
        logger.warning(f"Recall lookup timed out for {specs.year} {specs.make} {specs.model}")
        return RecallLookup(ok=False, reason="Recall lookup timed out")


def _vehicle_specs(specs: VinSpecs | None) -> VehicleSpecs:
    if specs is None:
        return VehicleSpecs()
    return VehicleSpecs(
        year=specs.year or "Unknown",
        make=specs.make or "Unknown",
        model=specs.model or "Unknown",
        trim=specs.trim,
    )


async def run_analysis(
    vin: str,
    cache: AnalysisCache | None = None,
    launcher: BrowserLauncher | None = None,
) -> VinAnalysis:
    """Build (or fetch from cache) the VinAnalysis for a VIN."""
    vin = vin.upper().strip()

    if cache is not None:
        cached = await cache.get(vin)
        if cached is not None:
            return cached

    started = time.monotonic()
    logger.info(f"Running VIN analysis for {vin}")

    specs = await _decode(vin)
    recall_lookup = await _recalls(specs)
    maintenance = await scrape_service_history(vin, launcher=launcher)

    sentinel = next((event for event in maintenance if event.is_error), None)
    history = HistorySection(
        status="degraded" if sentinel else "ok",
        reason=sentinel.error if sentinel else None,
        maintenance=maintenance,
    )
    safety = SafetySection(
        status="ok" if recall_lookup.ok else "degraded",
        reason=recall_lookup.reason,
        recalls=recall_lookup.recalls,
    )

    analysis = VinAnalysis(
        meta=AnalysisMeta(vin=vin, timestamp=int(time.time() * 1000)),
        specs=_vehicle_specs(specs),
        safety=safety,
        history=history,
        verdict=generate_verdict(recall_lookup.recalls, maintenance, recalls_degraded=not recall_lookup.ok),
    )

    if cache is not None:
        await cache.put(vin, analysis)

    logger.info(
        f"VIN analysis for {vin} finished in {time.monotonic() - started:.1f}s "
        f"(score={analysis.verdict.score}, recommendation={analysis.verdict.recommendation})"
    )
    return analysis


async def compare_vins(vins: list[str], cache: AnalysisCache | None) -> list[VinAnalysis]:
    """Previously computed analyses for several VINs; never computes new ones."""
    if cache is None:
        return []
    return await cache.get_many(vins)
