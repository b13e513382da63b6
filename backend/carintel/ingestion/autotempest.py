"""
AutoTempest listing scraper.

AutoTempest detail links often redirect to the originating dealer or
marketplace page. Whatever HTML comes back is parsed with generic
selectors; the VIN is the most valuable field, so it gets the deepest
fallback chain.
"""

import logging

from bs4 import BeautifulSoup

from carintel.ingestion.base import BaseScraper, parse_title_vehicle
from carintel.schemas.vehicle import ScrapedVehicle
from carintel.utils.scraping import parse_int
from carintel.utils.vin import find_vin

logger = logging.getLogger(__name__)

_TITLE_SUFFIX = "- AutoTempest.com"


class AutoTempestScraper(BaseScraper):
    """AutoTempest detail page scraper."""

    def __init__(self):
        super().__init__("autotempest")

    def can_handle(self, url: str) -> bool:
        return "autotempest.com" in url

    def parse(self, html: str, url: str) -> ScrapedVehicle:
        soup = self.soup(html)

        title = self.text_of(soup, "h1")
        if not title and soup.title:
            title = soup.title.get_text(strip=True).replace(_TITLE_SUFFIX, "").strip()

        price_text = (
            self.text_of(soup, ".price")
            or self.text_of(soup, ".listing-detail-price")
            or self._itemprop(soup, "price")
        )
        mileage_text = (
            self.text_of(soup, ".mileage")
            or self.text_of(soup, ".listing-detail-mileage")
            or self._itemprop(soup, "mileageFromOdometer")
        )

        year, make, model = parse_title_vehicle(title)

        return ScrapedVehicle(
            title=title,
            price=parse_int(price_text),
            mileage=parse_int(mileage_text),
            vin=self._find_vin(soup),
            year=year,
            make=make,
            model=model,
            # Detail pages rarely carry a seller description
            description=title,
            images=self._parse_images(soup),
            source_url=url,
        )

    @staticmethod
    def _itemprop(soup: BeautifulSoup, name: str) -> str:
        el = soup.select_one(f"[itemprop='{name}']")
        if not el:
            return ""
        return el.get("content") or el.get_text(strip=True)

    @staticmethod
    def _find_vin(soup: BeautifulSoup) -> str | None:
        for el in soup.select(".spec, .detail, dd, td"):
            text = el.get_text(" ", strip=True)
            if len(text) < 17:
                continue
            vin = find_vin(text)
            if vin:
                return vin

        body = soup.body or soup
        return find_vin(body.get_text(" "))

    @staticmethod
    def _parse_images(soup: BeautifulSoup) -> list[str]:
        images = []
        for img in soup.select("img.listing-image, .gallery img, [itemprop='image']"):
            src = img.get("src") or img.get("data-src") or ""
            if src.startswith("http") and src not in images:
                images.append(src)
        return images
