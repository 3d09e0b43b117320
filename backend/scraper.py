"""Page fetcher: download a target URL's HTML for the extractor.

Every request carries a bounded timeout. Timeouts and refused connections are
retried with exponential backoff; DNS failures, TLS and other request errors
and non-2xx statuses are not.
Failures raise UpstreamFetchError and never yield partial HTML.
"""

import logging
import random
import time
from urllib.parse import urlparse, urlunparse

import requests

from config import Settings, get_settings
from errors import UpstreamFetchError
from models import FetchedPage

logger = logging.getLogger(__name__)

_REQUEST_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_DNS_TOKENS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "nameresolutionerror",
    "failed to resolve",
)

_RETRYABLE_REASONS = {UpstreamFetchError.TIMEOUT, UpstreamFetchError.REFUSED}


def is_valid_url(value: object) -> bool:
    """Absolute http(s) URL with a host."""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme.lower() in {"http", "https"} and bool(parsed.hostname)


def _classify(exc: requests.RequestException) -> str:
    if isinstance(exc, requests.Timeout):
        return UpstreamFetchError.TIMEOUT
    # SSLError subclasses ConnectionError but a bad certificate is not transient
    if isinstance(exc, requests.exceptions.SSLError) or not isinstance(exc, requests.ConnectionError):
        return UpstreamFetchError.PROTOCOL
    msg = str(exc).lower()
    if any(token in msg for token in _DNS_TOKENS):
        return UpstreamFetchError.DNS
    return UpstreamFetchError.REFUSED


def _headers(settings: Settings) -> dict:
    headers = dict(_REQUEST_HEADERS)
    headers["User-Agent"] = settings.fetch_user_agent
    return headers


def fetch_page(url: str, settings: Settings | None = None) -> FetchedPage:
    """
    GET `url` and return its HTML.
    Raises UpstreamFetchError(reason=timeout|dns|http-status|refused|protocol).
    """
    settings = settings or get_settings()
    attempts = settings.fetch_max_retries + 1
    last_error: UpstreamFetchError | None = None

    for attempt in range(attempts):
        try:
            response = requests.get(
                url,
                timeout=settings.fetch_timeout_seconds,
                headers=_headers(settings),
            )
        except requests.RequestException as exc:
            reason = _classify(exc)
            last_error = UpstreamFetchError(reason, f"Failed to fetch URL: {reason}")
            if reason in _RETRYABLE_REASONS and attempt < attempts - 1:
                delay = settings.fetch_retry_base_seconds * (2 ** attempt) + random.uniform(0, 0.1)
                logger.warning("Fetch %s failed (%s), retrying in %.2fs", url, reason, delay)
                time.sleep(delay)
                continue
            logger.warning("Fetch %s failed: %s", url, exc)
            raise last_error from exc

        if not response.ok:
            logger.warning("Fetch %s returned HTTP %s", url, response.status_code)
            raise UpstreamFetchError(
                UpstreamFetchError.HTTP_STATUS,
                f"Failed to fetch URL: {response.reason or response.status_code}",
                status=response.status_code,
            )

        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = response.apparent_encoding or "utf-8"

        return FetchedPage(
            url=url,
            html=response.text,
            status_code=response.status_code,
            response_time_ms=int(response.elapsed.total_seconds() * 1000),
        )

    raise last_error or UpstreamFetchError(UpstreamFetchError.REFUSED)


def robots_txt_url(url: str) -> str:
    parsed = urlparse(url)
    return urlunparse((parsed.scheme, parsed.netloc, "/robots.txt", "", "", ""))


def site_has_robots_txt(url: str, settings: Settings | None = None) -> bool:
    """True when the target origin serves /robots.txt.

    Single attempt on its own short timeout, so a slow origin adds at most
    robots_timeout_seconds to an analysis. Never raises.
    """
    settings = settings or get_settings()
    try:
        response = requests.get(
            robots_txt_url(url),
            timeout=settings.robots_timeout_seconds,
            headers=_headers(settings),
        )
    except requests.RequestException as exc:
        logger.info("robots.txt lookup for %s failed: %s", url, exc)
        return False
    return response.status_code == 200
