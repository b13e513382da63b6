"""Tests for shared scraping utilities."""

import httpx
import pytest
import respx

from carintel.utils.scraping import FetchError, default_headers, fetch_html, parse_int

LISTING_URL = "https://dallas.craigslist.org/cto/d/dallas-2012-honda-civic/7712345678.html"


class TestParseInt:
    def test_dollar_amount(self):
        assert parse_int("$6,500") == 6500

    def test_mileage_with_unit(self):
        assert parse_int("123,456 mi") == 123456

    def test_whitespace_and_newlines(self):
        assert parse_int("  \n$42\t ") == 42

    def test_empty_string(self):
        assert parse_int("") is None

    def test_none(self):
        assert parse_int(None) is None

    def test_no_digits(self):
        assert parse_int("Contact for price") is None


class TestDefaultHeaders:
    def test_has_browser_user_agent(self):
        assert "Mozilla" in default_headers()["User-Agent"]

    def test_has_accept_and_language(self):
        headers = default_headers()
        assert "text/html" in headers["Accept"]
        assert headers["Accept-Language"].startswith("en-US")

    def test_has_cache_control(self):
        assert default_headers()["Cache-Control"] == "no-cache"

    def test_is_fixed(self):
        assert default_headers() == default_headers()


class TestFetchHtml:
    @respx.mock
    @pytest.mark.asyncio
    async def test_returns_body(self):
        route = respx.get(LISTING_URL).mock(return_value=httpx.Response(200, text="<html>ok</html>"))

        html = await fetch_html(LISTING_URL)

        assert html == "<html>ok</html>"
        sent = route.calls.last.request
        assert "Mozilla" in sent.headers["User-Agent"]
        assert sent.headers["Accept-Language"] == "en-US,en;q=0.9"

    @respx.mock
    @pytest.mark.asyncio
    async def test_custom_headers_override(self):
        route = respx.get(LISTING_URL).mock(return_value=httpx.Response(200, text="ok"))

        await fetch_html(LISTING_URL, headers={"Referer": "https://example.com/"})

        assert route.calls.last.request.headers["Referer"] == "https://example.com/"

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_2xx_raises_fetch_error(self):
        respx.get(LISTING_URL).mock(return_value=httpx.Response(403, text="blocked"))

        with pytest.raises(FetchError) as exc_info:
            await fetch_html(LISTING_URL)

        assert exc_info.value.status == 403
        assert exc_info.value.url == LISTING_URL
        assert "403" in str(exc_info.value)

    @respx.mock
    @pytest.mark.asyncio
    async def test_single_attempt(self):
        route = respx.get(LISTING_URL).mock(return_value=httpx.Response(503))

        with pytest.raises(FetchError):
            await fetch_html(LISTING_URL)

        assert route.call_count == 1

    @respx.mock
    @pytest.mark.asyncio
    async def test_network_error_raises_fetch_error(self):
        respx.get(LISTING_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(FetchError) as exc_info:
            await fetch_html(LISTING_URL)

        assert exc_info.value.status is None
