"""
Listing import API routes.

Turns marketplace listing URLs into normalized vehicle records.
"""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from carintel.config import settings
from carintel.ingestion import get_all_scrapers, scrape_many, scrape_vehicle
from carintel.ingestion.base import NoAdapterError, ScrapeFailed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import", tags=["import"])


class ImportUrlRequest(BaseModel):
    url: str | None = None


class BatchImportRequest(BaseModel):
    urls: list[str] = Field(default_factory=list)


@router.post("/url")
async def import_url(req: ImportUrlRequest):
    """Scrape one listing URL."""
    url = (req.url or "").strip()
    if not url:
        raise HTTPException(status_code=400, detail="Invalid URL provided")

    logger.info(f"[URL Import] Scraping URL: {url}")
    try:
        vehicle = await scrape_vehicle(url)
    except NoAdapterError:
        raise HTTPException(status_code=422, detail=f"Unsupported site: {url}")
    except ScrapeFailed as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"success": True, "vehicle": vehicle.model_dump(by_alias=True)}


@router.post("/batch")
async def import_batch(req: BatchImportRequest):
    """Scrape several listing URLs one after another, reporting failures per URL."""
    urls = [u.strip() for u in req.urls if u and u.strip()]
    if not urls:
        raise HTTPException(status_code=400, detail="No URLs provided")
    if len(urls) > settings.batch_import_max_urls:
        raise HTTPException(
            status_code=400,
            detail=f"At most {settings.batch_import_max_urls} URLs per batch",
        )

    result = await scrape_many(urls)
    return result.model_dump(by_alias=True)


@router.get("/sources")
async def list_sources():
    """Marketplaces that have a scraper, in resolution order."""
    return {"sources": [scraper.source_name for scraper in get_all_scrapers()]}
