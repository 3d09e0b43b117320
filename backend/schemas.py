"""Pydantic schemas for API request/response.

Fields are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeRequest(CamelModel):
    """Request body for POST /api/analyze."""

    url: str = ""

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, value: object) -> str:
        return str(value or "").strip()


class AuditResultItem(CamelModel):
    type: str
    status: Literal["pass", "warn", "fail"]
    title: str
    description: str
    value: Optional[str] = None


class TechnicalSeo(CamelModel):
    has_https: bool
    is_mobile_friendly: bool
    has_robots_txt: bool
    page_speed: str


class ContentAnalysis(CamelModel):
    word_count: int
    heading_structure: bool
    image_alt_count: int
    missing_alt_count: int
    internal_links: int


class AnalysisResponse(CamelModel):
    """Full result returned by POST /api/analyze."""

    url: str
    title: str = ""
    meta_description: str = ""
    og_title: str = ""
    og_description: str = ""
    og_image: str = ""
    twitter_card: str = ""
    twitter_title: str = ""
    twitter_description: str = ""
    twitter_image: str = ""
    canonical: str = ""
    robots: str = ""
    seo_score: int
    score_label: str
    audit_results: list[AuditResultItem]
    technical_seo: TechnicalSeo
    content_analysis: ContentAnalysis


class GenerateRequest(CamelModel):
    """Request body for POST /api/generate."""

    type: str = ""
    url: str = ""
    current_title: Optional[str] = None
    current_description: Optional[str] = None

    @field_validator("type", "url", mode="before")
    @classmethod
    def normalize_text_fields(cls, value: object) -> str:
        return str(value or "").strip()


class SuggestionResponse(CamelModel):
    type: str
    title: str
    content: str
    character_count: int


class SaveAnalysisRequest(CamelModel):
    """Insert payload for POST /api/save-analysis."""

    user_id: Optional[int] = None
    url: str
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
    seo_score: Optional[int] = None
    audit_results: Optional[Any] = None
    ai_suggestions: Optional[Any] = None


class StoredAnalysisResponse(SaveAnalysisRequest):
    """A saved analysis as returned by the store endpoints."""

    id: int
    created_at: str


class ErrorResponse(BaseModel):
    error: str
