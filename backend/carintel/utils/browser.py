"""
Playwright browser launch strategies.

Two launch profiles exist:
- "local": the installed Chrome channel, for development machines.
- "serverless": a pre-packaged Chromium binary at a fixed path, for
  runtimes that cannot install a full browser.

The profile is chosen once at process start (see get_launcher) and the
resulting launcher is handed to the service-history runner. Browsers are
never shared: each caller launches its own and must close it.
Every page is opened through open_page(), which applies playwright-stealth.
"""

import logging
import random
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager

from playwright.async_api import Browser, Playwright
from playwright_stealth import Stealth

from carintel.config import settings

logger = logging.getLogger(__name__)

_stealth = Stealth()

# Viewport and User-Agent rotation pools
_VIEWPORTS = [
    {"width": 1366, "height": 768},
    {"width": 1440, "height": 900},
    {"width": 1536, "height": 864},
    {"width": 1920, "height": 1080},
]

_USER_AGENTS = [
    ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    ),
    ("Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"),
]

_STEALTH_ARGS = ["--disable-blink-features=AutomationControlled"]

# Flags for single-process Chromium inside a read-only, shm-less sandbox
_SERVERLESS_ARGS = [
    "--disable-background-networking",
    "--disable-default-apps",
    "--disable-dev-shm-usage",
    "--disable-extensions",
    "--disable-gpu",
    "--disable-setuid-sandbox",
    "--disable-sync",
    "--hide-scrollbars",
    "--mute-audio",
    "--no-first-run",
    "--no-sandbox",
    "--no-zygote",
    "--single-process",
]


class BrowserLauncher(ABC):
    """Launches a headless Chromium for one automation run."""

    name: str = ""

    @abstractmethod
    async def launch(self, playwright: Playwright) -> Browser:
        """Launch and return a new browser. The caller owns and closes it."""


class LocalChromeLauncher(BrowserLauncher):
    """Installed Chrome channel, used on developer machines."""

    name = "local"

    async def launch(self, playwright: Playwright) -> Browser:
        return await playwright.chromium.launch(channel="chrome", headless=True, args=_STEALTH_ARGS)


class ServerlessChromiumLauncher(BrowserLauncher):
    """Pre-packaged Chromium binary, used in serverless deployments."""

    name = "serverless"

    def __init__(self, executable_path: str):
        self.executable_path = executable_path

    async def launch(self, playwright: Playwright) -> Browser:
        return await playwright.chromium.launch(
            executable_path=self.executable_path,
            headless=True,
            args=_SERVERLESS_ARGS + _STEALTH_ARGS,
        )


def get_launcher(profile: str | None = None) -> BrowserLauncher:
    """Pick the launcher for a profile name (defaults to settings.browser_profile)."""
    profile = profile or settings.browser_profile
    if profile == "local":
        launcher = LocalChromeLauncher()
    elif profile == "serverless":
        launcher = ServerlessChromiumLauncher(settings.chromium_executable_path)
    else:
        raise ValueError(f"Unknown browser profile: {profile}")
    logger.info(f"Browser launch profile: {launcher.name}")
    return launcher


@asynccontextmanager
async def open_page(browser: Browser, timeout_ms: int | None = None):
    """
    Context manager that creates a stealth page and closes it on exit.

    Usage:
        async with open_page(browser) as page:
            await page.goto("https://example.com")
            html = await page.content()
    """
    if timeout_ms is None:
        timeout_ms = int(settings.browser_timeout_seconds * 1000)

    context = await browser.new_context(
        viewport=random.choice(_VIEWPORTS),
        user_agent=random.choice(_USER_AGENTS),
        locale="en-US",
        timezone_id="America/New_York",
        java_script_enabled=True,
    )
    try:
        context.set_default_timeout(timeout_ms)
        await _stealth.apply_stealth_async(context)
        page = await context.new_page()
        try:
            yield page
        finally:
            await page.close()
    finally:
        await context.close()
