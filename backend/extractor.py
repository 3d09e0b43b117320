"""Markup extractor: pull SEO metadata and structural counts out of raw HTML.

Pure transformation over (html, source_url). Missing elements are reported as
absent (None), never as errors.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, NavigableString

from errors import MalformedInputError
from models import ExtractedMetadata

_WHITESPACE = re.compile(r"\s+")
_SUBORDINATE_HEADINGS = ["h2", "h3", "h4", "h5", "h6"]
_INVISIBLE_PARENTS = {"script", "style", "template", "noscript"}
_HEAD_ONLY = ["head", "title"]
_LD_JSON = "application/ld+json"


def _attr_matcher(value: str):
    """Case-insensitive exact match for attribute values like name="Description"."""
    wanted = value.lower()

    def match(attr: Optional[str]) -> bool:
        return attr is not None and attr.strip().lower() == wanted

    return match


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> Optional[str]:
    tag = soup.find("meta", attrs={attr: _attr_matcher(value)})
    if tag is None:
        return None
    return tag.get("content") or ""


def _canonical_href(soup: BeautifulSoup) -> Optional[str]:
    for link in soup.find_all("link", rel=True):
        rel = link.get("rel")
        values = rel if isinstance(rel, list) else str(rel).split()
        if any(v.lower() == "canonical" for v in values):
            return link.get("href") or ""
    return None


def _title_text(soup: BeautifulSoup, og_title: Optional[str]) -> Optional[str]:
    tag = soup.find("title")
    title = tag.get_text().strip() if tag is not None else None
    if title:
        return title
    if og_title:
        return og_title
    return title


def _visible_body_text(soup: BeautifulSoup) -> str:
    # html.parser does not synthesise <body>; without one, walk the whole tree
    # but leave out anything that belongs to the document head
    root = soup.body
    outside_body = root is None
    if outside_body:
        root = soup
    parts = []
    for node in root.find_all(string=True):
        # comments, doctypes and script/style strings are NavigableString subclasses
        if type(node) is not NavigableString:
            continue
        if node.parent is not None and node.parent.name in _INVISIBLE_PARENTS:
            continue
        if outside_body and node.find_parent(_HEAD_ONLY) is not None:
            continue
        parts.append(str(node))
    return "".join(parts)


def count_words(text: str) -> int:
    """Naive whitespace split: an empty string counts as one token."""
    return len(_WHITESPACE.split(text))


def has_heading_structure(soup: BeautifulSoup) -> bool:
    return len(soup.find_all("h1")) == 1 and len(soup.find_all(_SUBORDINATE_HEADINGS)) > 0


def is_internal_href(href: str, hostname: str) -> bool:
    """Root-relative hrefs, or any href that mentions the hostname.

    The hostname test is a plain substring check, so
    "https://other.com/?ref=example.com" counts as internal for example.com.
    """
    if href.startswith("/"):
        return True
    return bool(hostname) and hostname in href


def count_internal_links(soup: BeautifulSoup, hostname: str) -> int:
    return sum(
        1
        for a in soup.find_all("a", href=True)
        if is_internal_href(a["href"], hostname)
    )


def _has_structured_data(soup: BeautifulSoup) -> bool:
    return soup.find("script", attrs={"type": _attr_matcher(_LD_JSON)}) is not None


def extract(html: str, source_url: str) -> ExtractedMetadata:
    """
    Parse `html` fetched from `source_url` and return its metadata.
    Raises MalformedInputError only if `html` is not markup text at all.
    """
    if isinstance(html, bytes):
        try:
            html = html.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInputError("Document is not valid UTF-8 text") from exc
    if not isinstance(html, str):
        raise MalformedInputError(f"Expected markup text, got {type(html).__name__}")

    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:
        raise MalformedInputError(str(exc) or MalformedInputError.public_message) from exc

    parsed_url = urlparse(source_url)
    hostname = (parsed_url.hostname or "").lower()

    og_title = _meta_content(soup, "property", "og:title")
    images = soup.find_all("img")

    return ExtractedMetadata(
        title=_title_text(soup, og_title),
        meta_description=_meta_content(soup, "name", "description"),
        og_title=og_title,
        og_description=_meta_content(soup, "property", "og:description"),
        og_image=_meta_content(soup, "property", "og:image"),
        twitter_card=_meta_content(soup, "name", "twitter:card"),
        twitter_title=_meta_content(soup, "name", "twitter:title"),
        twitter_description=_meta_content(soup, "name", "twitter:description"),
        twitter_image=_meta_content(soup, "name", "twitter:image"),
        canonical=_canonical_href(soup),
        robots=_meta_content(soup, "name", "robots"),
        word_count=count_words(_visible_body_text(soup)),
        heading_structure=has_heading_structure(soup),
        image_count=len(images),
        image_with_alt_count=sum(1 for img in images if img.has_attr("alt")),
        internal_link_count=count_internal_links(soup, hostname),
        has_viewport_tag=soup.find("meta", attrs={"name": _attr_matcher("viewport")}) is not None,
        has_structured_data=_has_structured_data(soup),
        is_https=parsed_url.scheme.lower() == "https",
    )
