"""
Service-history scrape from vehiclehistory.com via stealth Playwright.

There is no JSON API for this data, so the VIN report page is opened in a
headless browser, the "service history" tab is clicked, and the rendered
timeline is parsed. The browser launch and the navigation+interaction
sequence each run under the same hard ceiling. Failures never raise: the
caller gets a single sentinel MaintenanceEvent instead, so the verdict
always receives a list.
"""

import asyncio
import logging

from bs4 import BeautifulSoup
from playwright.async_api import Browser, async_playwright

from carintel.config import settings
from carintel.schemas.analysis import BROWSER_LAUNCH_FAILED, HISTORY_UNAVAILABLE, MaintenanceEvent
from carintel.utils.browser import BrowserLauncher, get_launcher, open_page
from carintel.utils.scraping import parse_int

logger = logging.getLogger(__name__)

VEHICLE_HISTORY_URL = "https://www.vehiclehistory.com/vin-report/{vin}"
SERVICE_TAB_SELECTOR = 'a[data-target="#service-history"]'


def parse_timeline(html: str) -> list[MaintenanceEvent]:
    """Parse the rendered .timeline-item entries of a VIN report page."""
    soup = BeautifulSoup(html, "html.parser")
    events = []
    for item in soup.select(".timeline-item"):
        date_el = item.select_one(".service-history-date")
        mileage_el = item.select_one(".service-history-mileage")
        description_el = item.select_one(".service-history-description")

        date = date_el.get_text(strip=True) if date_el else ""
        description = description_el.get_text(" ", strip=True) if description_el else ""
        if not date and not description:
            continue

        events.append(
            MaintenanceEvent(
                date=date or None,
                mileage=parse_int(mileage_el.get_text(strip=True)) if mileage_el else None,
                description=description or None,
            )
        )
    return events


async def _read_history(browser: Browser, vin: str) -> list[MaintenanceEvent]:
    url = VEHICLE_HISTORY_URL.format(vin=vin)
    async with open_page(browser) as page:
        # DOM content only; waiting for network idle blows the budget
        await page.goto(url, wait_until="domcontentloaded")

        tab = page.locator(SERVICE_TAB_SELECTOR)
        if await tab.is_visible():
            await tab.click()
            await page.wait_for_timeout(settings.service_tab_settle_ms)

        html = await page.content()

    return parse_timeline(html)


async def _close_browser(browser: Browser) -> None:
    try:
        await browser.close()
    except Exception as e:
        logger.warning(f"Browser close failed: {e!r}")


async def scrape_service_history(
    vin: str,
    launcher: BrowserLauncher | None = None,
    timeout: float | None = None,
) -> list[MaintenanceEvent]:
    """
    Scrape the service-history timeline for a VIN.

    Returns the parsed events (possibly empty), or exactly one sentinel
    event carrying `error` when the page timed out, was blocked, or the
    browser could not be launched.
    """
    vin = vin.upper().strip()
    launcher = launcher or get_launcher()
    timeout = settings.browser_timeout_seconds if timeout is None else timeout

    try:
        async with async_playwright() as playwright:
            browser = await asyncio.wait_for(launcher.launch(playwright), timeout=timeout)
            try:
                events = await asyncio.wait_for(_read_history(browser, vin), timeout=timeout)
            except Exception as e:
                logger.warning(f"Service history unavailable for {vin}: {e!r}")
                return [MaintenanceEvent(error=HISTORY_UNAVAILABLE)]
            finally:
                await _close_browser(browser)
    except Exception as e:
        logger.error(f"Browser launch failed ({launcher.name}): {e!r}")
        return [MaintenanceEvent(error=BROWSER_LAUNCH_FAILED)]

    logger.info(f"{len(events)} service records scraped for {vin}")
    return events
