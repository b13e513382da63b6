"""
Base scraper interface and error types for all listing sources.
"""

import re
from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from carintel.schemas.vehicle import ScrapedVehicle
from carintel.utils.scraping import fetch_html

_TITLE_YEAR_RE = re.compile(r"^((?:19|20)\d{2})\s*")


def parse_title_vehicle(title: str) -> tuple[int | None, str | None, str | None]:
    """
    Split a listing title like "2015 Toyota Camry XLE" into
    (2015, "Toyota", "Camry XLE"). Missing pieces come back as None.
    """
    title = " ".join((title or "").split())
    year = None
    match = _TITLE_YEAR_RE.match(title)
    if match:
        year = int(match.group(1))
        title = title[match.end():]

    make, _, model = title.partition(" ")
    return year, make or None, model or None


def split_make_model(text: str) -> tuple[str | None, str | None]:
    """Split a combined "make model" token on its first whitespace."""
    make, _, model = " ".join((text or "").split()).partition(" ")
    return make or None, model or None


class ScraperError(Exception):
    """Base class for listing import failures."""


class NoAdapterError(ScraperError):
    """No registered scraper handles the URL."""

    def __init__(self, url: str):
        super().__init__(f"No scraper found for URL: {url}")
        self.url = url


class ExtractionError(ScraperError):
    """The scraper could not produce any vehicle data from the page."""


class ScrapeFailed(ScraperError):
    """Uniform wrapper for any failure inside a scraper."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"Scraping failed for {url}: {cause}")
        self.url = url
        self.cause = cause


class BaseScraper(ABC):
    """Base class for all marketplace listing scrapers."""

    def __init__(self, source_name: str):
        self.source_name = source_name

    @abstractmethod
    def can_handle(self, url: str) -> bool:
        """Cheap host check; must not touch the network."""

    @abstractmethod
    def parse(self, html: str, url: str) -> ScrapedVehicle:
        """Parse fetched markup into a ScrapedVehicle."""

    async def scrape(self, url: str) -> ScrapedVehicle:
        """Fetch and parse a listing page."""
        if not self.can_handle(url):
            raise ExtractionError(f"{self.source_name} cannot handle {url}")

        html = await fetch_html(url)
        if not html or not html.strip():
            raise ExtractionError(f"Empty page returned for {url}")

        return self.parse(html, url)

    @staticmethod
    def soup(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    @staticmethod
    def text_of(soup: BeautifulSoup, selector: str) -> str:
        """Stripped text of the first match for selector, or ''."""
        el = soup.select_one(selector)
        return el.get_text(strip=True) if el else ""
