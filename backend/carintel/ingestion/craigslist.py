"""
Craigslist listing scraper.

Parses a single Craigslist "cars & trucks" posting. Markup differs by
region and template version, so every field falls back independently:
dedicated element -> attribute group -> regex scan -> URL-derived guess.
"""

import logging
import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from carintel.ingestion.base import BaseScraper, parse_title_vehicle, split_make_model
from carintel.schemas.vehicle import ScrapedVehicle
from carintel.utils.scraping import parse_int
from carintel.utils.vin import find_vin, is_valid_vin

logger = logging.getLogger(__name__)

_TRAILING_PAREN_RE = re.compile(r"\(([^)]+)\)$")
_QR_BOILERPLATE = "QR Code Link to This Post"
_VIN_LABELS = ("vin", "vin number", "vehicle id")


class CraigslistScraper(BaseScraper):
    """Craigslist posting scraper."""

    def __init__(self):
        super().__init__("craigslist")

    def can_handle(self, url: str) -> bool:
        return "craigslist.org" in url

    def parse(self, html: str, url: str) -> ScrapedVehicle:
        soup = self.soup(html)

        title = self.text_of(soup, "#titletextonly")
        price = parse_int(self.text_of(soup, ".price") or self._itemprop_price(soup))

        attributes = self._parse_attributes(soup)
        description = self._parse_description(soup)

        mileage = parse_int(attributes.get("odometer") or attributes.get("mileage"))

        make = model = None
        make_model = self.text_of(soup, ".makemodel")
        if make_model:
            make, model = split_make_model(make_model)
            model = model or make_model

        year, title_make, title_model = parse_title_vehicle(title)
        if year is None:
            year = parse_int(self.text_of(soup, ".attrgroup .year"))
        elif not make_model:
            # Only trust the title split when it starts with a model year
            make, model = title_make, title_model

        return ScrapedVehicle(
            title=title,
            price=price,
            mileage=mileage,
            vin=self._find_vin(soup, attributes, description, title),
            year=year,
            make=make,
            model=model,
            description=description,
            images=self._parse_images(soup),
            source_url=url,
            location=self._parse_location(soup, url),
            condition_exterior=attributes.get("condition"),
            transmission=attributes.get("transmission"),
            fuel_type=attributes.get("fuel"),
            title_status=attributes.get("title status"),
            exterior_color=attributes.get("paint color"),
        )

    @staticmethod
    def _itemprop_price(soup: BeautifulSoup) -> str:
        el = soup.select_one("[itemprop='price']")
        if not el:
            return ""
        return el.get("content") or el.get_text(strip=True)

    @staticmethod
    def _parse_attributes(soup: BeautifulSoup) -> dict[str, str]:
        """Collect label -> value pairs from the .attrgroup blocks."""
        attributes: dict[str, str] = {}

        # <div class="attr"><span class="labl">odometer:</span><span class="valu">123,456</span></div>
        for attr in soup.select(".attrgroup .attr"):
            label_el = attr.select_one(".labl")
            value_el = attr.select_one(".valu")
            if not label_el or not value_el:
                continue
            label = label_el.get_text(strip=True).replace(":", "", 1).strip().lower()
            value = value_el.get_text(" ", strip=True)
            if label and value:
                attributes[label] = value

        # Older template: <span>odometer: <b>123456</b></span>
        for span in soup.select(".attrgroup span"):
            text = span.get_text(strip=True)
            if ":" not in text:
                continue
            parts = [p.strip() for p in text.split(":")]
            key, value = parts[0].lower(), parts[1]
            if key and value and key not in attributes:
                attributes[key] = value

        return attributes

    @staticmethod
    def _parse_description(soup: BeautifulSoup) -> str:
        body = soup.select_one("#postingbody")
        if not body:
            return ""
        # Own text only; child blocks hold print/QR boilerplate
        text = "".join(body.find_all(string=True, recursive=False))
        return text.replace(_QR_BOILERPLATE, "").strip()

    @staticmethod
    def _find_vin(soup: BeautifulSoup, attributes: dict[str, str], description: str, title: str) -> str | None:
        for label in _VIN_LABELS:
            value = (attributes.get(label) or "").strip().upper()
            if is_valid_vin(value):
                return value

        for text in (description, title):
            vin = find_vin(text)
            if vin:
                return vin

        body = soup.body or soup
        return find_vin(body.get_text(" "))

    def _parse_location(self, soup: BeautifulSoup, url: str) -> str | None:
        location = self.text_of(soup, ".postingtitletext small").replace("(", "").replace(")", "").strip()
        if location:
            return location

        # "2015 Toyota Camry - $11,500 (Dallas)"
        full_title = self.text_of(soup, ".postingtitle")
        match = _TRAILING_PAREN_RE.search(full_title)
        if match:
            return match.group(1).strip()

        hostname = urlparse(url).hostname or ""
        parts = hostname.split(".")
        if len(parts) >= 3 and parts[0]:
            return parts[0].capitalize()
        return None

    @staticmethod
    def _parse_images(soup: BeautifulSoup) -> list[str]:
        images = [a["href"] for a in soup.select("#thumbs a[href]") if a["href"]]
        if images:
            return images

        img = soup.select_one(".swipe .slide img[src]")
        if img:
            return [img["src"]]
        return []
