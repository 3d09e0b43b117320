"""Analysis pipeline: fetch -> extract -> audit -> AnalysisResponse."""

import logging
from dataclasses import asdict

from config import Settings
from errors import ValidationError
from extractor import extract
from models import TEXT_FIELDS, AuditFinding, ExtractedMetadata, FetchedPage
from schemas import AnalysisResponse, AuditResultItem, ContentAnalysis, TechnicalSeo
from scoring import audit, score_label
from scraper import fetch_page, is_valid_url, site_has_robots_txt

logger = logging.getLogger(__name__)

FAST_RESPONSE_MS = 1000
SLOW_RESPONSE_MS = 2500


def page_speed_label(response_time_ms: int) -> str:
    if response_time_ms < FAST_RESPONSE_MS:
        return "Good"
    if response_time_ms < SLOW_RESPONSE_MS:
        return "Needs Improvement"
    return "Poor"


def build_result(
    url: str,
    meta: ExtractedMetadata,
    findings: list[AuditFinding],
    score: int,
    response_time_ms: int = 0,
    has_robots_txt: bool = False,
) -> AnalysisResponse:
    """Project extractor output and audit findings onto the response shape.

    Absent tags are reported as empty strings here and nowhere earlier.
    """
    text_values = {name: getattr(meta, name) or "" for name in TEXT_FIELDS}
    return AnalysisResponse(
        url=url,
        **text_values,
        seo_score=score,
        score_label=score_label(score),
        audit_results=[AuditResultItem(**asdict(f)) for f in findings],
        technical_seo=TechnicalSeo(
            has_https=meta.is_https,
            is_mobile_friendly=meta.has_viewport_tag,
            has_robots_txt=has_robots_txt,
            page_speed=page_speed_label(response_time_ms),
        ),
        content_analysis=ContentAnalysis(
            word_count=meta.word_count,
            heading_structure=meta.heading_structure,
            image_alt_count=meta.image_with_alt_count,
            missing_alt_count=meta.image_count - meta.image_with_alt_count,
            internal_links=meta.internal_link_count,
        ),
    )


def analyze_page(page: FetchedPage, has_robots_txt: bool = False) -> AnalysisResponse:
    meta = extract(page.html, page.url)
    findings, score = audit(meta)
    return build_result(
        page.url,
        meta,
        findings,
        score,
        response_time_ms=page.response_time_ms,
        has_robots_txt=has_robots_txt,
    )


def analyze_url(url: str, settings: Settings) -> AnalysisResponse:
    """
    Pipeline: validate url -> fetch -> extract -> audit.
    Raises ValidationError or UpstreamFetchError before any extraction happens.
    """
    if not is_valid_url(url):
        raise ValidationError("Invalid URL provided")

    page = fetch_page(url, settings)
    has_robots_txt = site_has_robots_txt(url, settings) if settings.check_robots_txt else False
    result = analyze_page(page, has_robots_txt=has_robots_txt)
    logger.info("Analyzed %s: score=%s", url, result.seo_score)
    return result
