"""
Shared fixtures for the MetaScope test suite.

Everything runs WITHOUT network access: the fetcher and the Anthropic client
are patched in the tests that reach them.
"""

import pytest

from config import Settings
from models import ExtractedMetadata


FULL_PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Example Store | Handmade Ceramic Mugs and Bowls</title>
  <meta name="description" content="Shop handmade ceramic mugs, bowls and plates from independent potters. Free shipping on orders over fifty dollars, easy returns.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="robots" content="index, follow">
  <meta property="og:title" content="Example Store">
  <meta property="og:description" content="Handmade ceramics">
  <meta property="og:image" content="https://example.com/og.png">
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:title" content="Example Store on Twitter">
  <meta name="twitter:description" content="Handmade ceramics, shipped">
  <meta name="twitter:image" content="https://example.com/tw.png">
  <link rel="canonical" href="https://example.com/products">
  <script type="application/ld+json">{"@type": "Store", "name": "Example Store"}</script>
</head>
<body>
  <h1>Handmade Ceramics</h1>
  <h2>Mugs</h2>
  <img src="/a.png" alt="A mug">
  <img src="/b.png" alt="">
  <img src="/c.png">
  <a href="/about">About</a>
  <a href="https://example.com/contact">Contact</a>
  <a href="https://elsewhere.org/">Elsewhere</a>
</body>
</html>
"""


@pytest.fixture
def settings():
    """Settings with fast retries, no robots.txt lookup and no API key."""
    return Settings(
        fetch_timeout_seconds=2.0,
        fetch_max_retries=1,
        fetch_retry_base_seconds=0.0,
        check_robots_txt=False,
        robots_timeout_seconds=0.5,
        anthropic_api_key="",
        store_backend="memory",
    )


@pytest.fixture
def full_page_html():
    return FULL_PAGE_HTML


@pytest.fixture
def make_meta():
    """Factory for ExtractedMetadata with everything present and passing."""

    def _make(**overrides) -> ExtractedMetadata:
        values = dict(
            title="T" * 45,
            meta_description="D" * 140,
            og_title="OG title",
            og_description="OG description",
            og_image="https://example.com/og.png",
            twitter_card="summary",
            twitter_title="Tw title",
            twitter_description="Tw description",
            twitter_image="https://example.com/tw.png",
            canonical="https://example.com/",
            robots="index, follow",
            word_count=250,
            heading_structure=True,
            image_count=3,
            image_with_alt_count=2,
            internal_link_count=4,
            has_viewport_tag=True,
            has_structured_data=True,
            is_https=True,
        )
        values.update(overrides)
        return ExtractedMetadata(**values)

    return _make
