"""
Scraper registry for listing sources.

Scrapers are kept in a fixed, ordered list and resolved first-match-wins.
Registration order is part of the contract: today's scrapers match
disjoint hostnames, but a new scraper whose can_handle() could overlap an
existing one must be registered in the order it should win.
"""
import logging
from typing import List

from carintel.ingestion.base import BaseScraper, NoAdapterError, ScrapeFailed
from carintel.schemas.vehicle import BatchImportError, BatchImportResult, ScrapedVehicle

logger = logging.getLogger(__name__)

_registry: List[BaseScraper] = []


def register_scraper(scraper: BaseScraper) -> None:
    """Append a scraper to the end of the resolution order."""
    _registry.append(scraper)


def get_all_scrapers() -> List[BaseScraper]:
    """Return all registered scrapers in resolution order."""
    return list(_registry)


def resolve_scraper(url: str) -> BaseScraper:
    """Return the first scraper whose can_handle(url) is true."""
    for scraper in _registry:
        if scraper.can_handle(url):
            return scraper
    raise NoAdapterError(url)


async def scrape_vehicle(url: str) -> ScrapedVehicle:
    """
    Resolve a scraper for url and run it.

    Raises NoAdapterError when no source matches, ScrapeFailed for
    anything that goes wrong inside the scraper.
    """
    scraper = resolve_scraper(url)
    logger.info(f"Scraping {url} with {scraper.source_name}")
    try:
        return await scraper.scrape(url)
    except Exception as e:
        logger.warning(f"{scraper.source_name} scrape failed for {url}: {e}")
        raise ScrapeFailed(url, e) from e


async def scrape_many(urls: List[str]) -> BatchImportResult:
    """
    Scrape several listing URLs one at a time.

    Sequential on purpose so target sites are not hammered; a failing URL
    is reported in `errors` and does not stop the batch.
    """
    result = BatchImportResult()
    for index, url in enumerate(urls, start=1):
        logger.info(f"Batch import {index}/{len(urls)}: {url}")
        try:
            result.vehicles.append(await scrape_vehicle(url))
        except NoAdapterError:
            result.errors.append(BatchImportError(url=url, error=f"Unsupported site: {url}"))
        except ScrapeFailed as e:
            result.errors.append(BatchImportError(url=url, error=str(e)))
    return result


def _register_all() -> None:
    """Register every scraper in resolution order."""
    from carintel.ingestion.craigslist import CraigslistScraper
    from carintel.ingestion.autotempest import AutoTempestScraper

    register_scraper(CraigslistScraper())
    register_scraper(AutoTempestScraper())


_register_all()
