"""Data models and types used across the backend.

Request/response schemas for the HTTP layer are in schemas.py.
Types for the extractor, audit engine and stores live here.
"""

from dataclasses import dataclass
from typing import Optional, TypedDict


class FindingStatus:
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class ExtractedMetadata:
    """Fields pulled out of one HTML document.

    String fields are None when the tag is absent and "" when it is present
    but empty.
    """

    title: Optional[str] = None
    meta_description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    canonical: Optional[str] = None
    robots: Optional[str] = None

    word_count: int = 0
    heading_structure: bool = False
    image_count: int = 0
    image_with_alt_count: int = 0
    internal_link_count: int = 0
    has_viewport_tag: bool = False
    has_structured_data: bool = False
    is_https: bool = False


TEXT_FIELDS = (
    "title",
    "meta_description",
    "og_title",
    "og_description",
    "og_image",
    "twitter_card",
    "twitter_title",
    "twitter_description",
    "twitter_image",
    "canonical",
    "robots",
)


@dataclass(frozen=True)
class AuditFinding:
    type: str
    status: str
    title: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class FetchedPage:
    """Raw document returned by the fetcher."""

    url: str
    html: str
    status_code: int
    response_time_ms: int = 0


class StoredAnalysis(TypedDict, total=False):
    """Record shape persisted by the result stores."""

    id: int
    user_id: Optional[int]
    url: str
    title: Optional[str]
    meta_description: Optional[str]
    og_title: Optional[str]
    og_description: Optional[str]
    og_image: Optional[str]
    twitter_card: Optional[str]
    twitter_title: Optional[str]
    twitter_description: Optional[str]
    twitter_image: Optional[str]
    canonical: Optional[str]
    robots: Optional[str]
    seo_score: Optional[int]
    audit_results: Optional[list]
    ai_suggestions: Optional[list]
    created_at: str
