"""Tests for the page fetcher. requests.get is always patched."""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests

from errors import UpstreamFetchError
from scraper import fetch_page, is_valid_url, site_has_robots_txt, robots_txt_url


def _response(status_code=200, text="<html></html>", reason="OK"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.reason = reason
    resp.text = text
    resp.encoding = "utf-8"
    resp.elapsed = timedelta(milliseconds=340)
    return resp


@pytest.fixture
def no_sleep():
    with patch("scraper.time.sleep") as sleep:
        yield sleep


class TestIsValidUrl:

    @pytest.mark.parametrize("value", [
        "https://example.com",
        "http://example.com/path?q=1",
        "https://sub.example.co.uk:8443/",
    ])
    def test_valid(self, value):
        assert is_valid_url(value) is True

    @pytest.mark.parametrize("value", [
        "not-a-url",
        "",
        None,
        "example.com",
        "/relative/path",
        "ftp://example.com/file",
        "https://",
        "mailto:someone@example.com",
    ])
    def test_invalid(self, value):
        assert is_valid_url(value) is False


class TestFetchPage:

    def test_success(self, settings):
        with patch("scraper.requests.get", return_value=_response(text="<p>hi</p>")) as get:
            page = fetch_page("https://example.com/", settings)
        assert page.html == "<p>hi</p>"
        assert page.status_code == 200
        assert page.response_time_ms == 340
        assert get.call_args.kwargs["timeout"] == settings.fetch_timeout_seconds
        assert "User-Agent" in get.call_args.kwargs["headers"]

    def test_http_error_status(self, settings):
        with patch("scraper.requests.get", return_value=_response(404, reason="Not Found")) as get:
            with pytest.raises(UpstreamFetchError) as exc_info:
                fetch_page("https://example.com/missing", settings)
        assert exc_info.value.reason == UpstreamFetchError.HTTP_STATUS
        assert exc_info.value.status == 404
        assert "Not Found" in exc_info.value.message
        assert get.call_count == 1

    def test_timeout_is_retried_once(self, settings, no_sleep):
        with patch("scraper.requests.get", side_effect=requests.Timeout("read timed out")) as get:
            with pytest.raises(UpstreamFetchError) as exc_info:
                fetch_page("https://slow.example.com/", settings)
        assert exc_info.value.reason == UpstreamFetchError.TIMEOUT
        assert get.call_count == 2
        assert no_sleep.call_count == 1

    def test_retry_recovers(self, settings, no_sleep):
        side_effect = [requests.ConnectionError("Connection refused"), _response()]
        with patch("scraper.requests.get", side_effect=side_effect) as get:
            page = fetch_page("https://example.com/", settings)
        assert page.status_code == 200
        assert get.call_count == 2

    def test_dns_failure_not_retried(self, settings, no_sleep):
        error = requests.ConnectionError(
            "HTTPSConnectionPool: Failed to establish a new connection: "
            "[Errno -2] Name or service not known"
        )
        with patch("scraper.requests.get", side_effect=error) as get:
            with pytest.raises(UpstreamFetchError) as exc_info:
                fetch_page("https://nope.invalid/", settings)
        assert exc_info.value.reason == UpstreamFetchError.DNS
        assert get.call_count == 1
        no_sleep.assert_not_called()

    def test_refused(self, settings, no_sleep):
        with patch("scraper.requests.get", side_effect=requests.ConnectionError("Connection refused")) as get:
            with pytest.raises(UpstreamFetchError) as exc_info:
                fetch_page("https://example.com/", settings)
        assert exc_info.value.reason == UpstreamFetchError.REFUSED
        assert get.call_count == 2

    @pytest.mark.parametrize("error", [
        requests.exceptions.SSLError("certificate verify failed"),
        requests.TooManyRedirects("Exceeded 30 redirects."),
        requests.exceptions.InvalidURL("Failed to parse"),
    ])
    def test_non_transient_errors_not_retried(self, settings, no_sleep, error):
        with patch("scraper.requests.get", side_effect=error) as get:
            with pytest.raises(UpstreamFetchError) as exc_info:
                fetch_page("https://example.com/", settings)
        assert exc_info.value.reason == UpstreamFetchError.PROTOCOL
        assert exc_info.value.status_code == 400
        assert get.call_count == 1
        no_sleep.assert_not_called()


class TestRobotsTxt:

    def test_url(self):
        assert robots_txt_url("https://example.com/a/b?c=1") == "https://example.com/robots.txt"

    def test_present(self, settings):
        with patch("scraper.requests.get", return_value=_response(200)):
            assert site_has_robots_txt("https://example.com/", settings) is True

    def test_missing(self, settings):
        with patch("scraper.requests.get", return_value=_response(404)):
            assert site_has_robots_txt("https://example.com/", settings) is False

    def test_network_error(self, settings):
        with patch("scraper.requests.get", side_effect=requests.ConnectionError("boom")):
            assert site_has_robots_txt("https://example.com/", settings) is False

    def test_uses_its_own_short_timeout_once(self, settings):
        with patch("scraper.requests.get", side_effect=requests.Timeout("read timed out")) as get:
            assert site_has_robots_txt("https://example.com/", settings) is False
        get.assert_called_once()
        assert get.call_args.kwargs["timeout"] == settings.robots_timeout_seconds
        assert settings.robots_timeout_seconds < settings.fetch_timeout_seconds
