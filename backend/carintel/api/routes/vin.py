"""
VIN API routes.

- /vin/analyze: full verification (decode, recalls, service history, verdict)
- /vin/decode: NHTSA vPIC decode only
- /vin/compare: previously cached analyses for several VINs
"""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from carintel.config import settings
from carintel.services.vin_analysis import compare_vins, run_analysis
from carintel.services.vin_decoder import decode_vin, validate_vin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vin", tags=["vin"])


class AnalyzeRequest(BaseModel):
    vin: str | None = None


class CompareRequest(BaseModel):
    vins: list[str] = Field(default_factory=list)


def _cache(request: Request):
    return getattr(request.app.state, "cache", None)


def _launcher(request: Request):
    return getattr(request.app.state, "launcher", None)


@router.post("/analyze")
async def analyze_vin_endpoint(req: AnalyzeRequest, request: Request):
    """Run (or serve from cache) the VIN analysis within the request budget."""
    vin = (req.vin or "").upper().strip()
    if not vin:
        raise HTTPException(status_code=400, detail="VIN required")
    error = validate_vin(vin)
    if error:
        raise HTTPException(status_code=400, detail=error)

    try:
        analysis = await asyncio.wait_for(
            run_analysis(vin, cache=_cache(request), launcher=_launcher(request)),
            timeout=settings.analysis_budget_seconds,
        )
    except TimeoutError:
        logger.error(f"VIN analysis for {vin} exceeded {settings.analysis_budget_seconds}s")
        raise HTTPException(status_code=504, detail="Analysis Timed Out or Failed")
    except Exception as e:
        logger.error(f"VIN analysis for {vin} failed: {e!r}")
        raise HTTPException(status_code=504, detail="Analysis Timed Out or Failed")

    return analysis.model_dump()


@router.get("/decode")
async def decode_vin_endpoint(
    vin: str = Query(..., description="17-character VIN to decode", min_length=17, max_length=17),
):
    """Decode a VIN to year/make/model/engine using NHTSA vPIC API (free, no auth)."""
    error = validate_vin(vin.upper().strip())
    if error:
        raise HTTPException(status_code=400, detail=error)

    specs = await decode_vin(vin)
    if specs is None:
        raise HTTPException(status_code=404, detail="VIN could not be decoded")
    return specs.model_dump()


@router.post("/compare")
async def compare_vins_endpoint(req: CompareRequest, request: Request):
    """Cached analyses for the requested VINs; VINs never analyzed are omitted."""
    vins = [v.upper().strip() for v in req.vins if v and v.strip()]
    if not vins:
        raise HTTPException(status_code=400, detail="No VINs provided")

    reports = await compare_vins(vins, _cache(request))
    return {"reports": [report.model_dump() for report in reports]}
