"""
Audit & scoring engine.

Scoring model:
- Six rules, evaluated in the fixed order of RULES. Each rule yields exactly
  one finding and awards the points listed for the finding's status.
- Technical factors (https, viewport tag, heading structure) add 5 points each
  and produce no finding.
- The raw sum is clamped to [0, 100]. The table below already tops out at 100.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from models import AuditFinding, ExtractedMetadata, FindingStatus

MAX_SCORE = 100

# Outcome categories used to key each rule's message table.
MISSING = "missing"
TOO_SHORT = "too_short"
TOO_LONG = "too_long"
OK = "ok"
PRESENT = "present"


@dataclass(frozen=True)
class LengthRule:
    """Pass inside [min_length, max_length], warn outside it, fail when empty."""

    type: str
    title: str
    selector: Callable[[ExtractedMetadata], Optional[str]]
    min_length: int
    max_length: int
    weights: dict = field(default_factory=dict)
    messages: dict = field(default_factory=dict)

    def evaluate(self, meta: ExtractedMetadata) -> AuditFinding:
        value = self.selector(meta) or ""
        length = len(value)
        if length == 0:
            status, outcome = FindingStatus.FAIL, MISSING
        elif length < self.min_length:
            status, outcome = FindingStatus.WARN, TOO_SHORT
        elif length > self.max_length:
            status, outcome = FindingStatus.WARN, TOO_LONG
        else:
            status, outcome = FindingStatus.PASS, OK
        return AuditFinding(
            type=self.type,
            status=status,
            title=self.title,
            description=self.messages[outcome],
            value=value,
        )


@dataclass(frozen=True)
class PresenceRule:
    """Pass when the selected value is truthy, otherwise `absent_status`."""

    type: str
    title: str
    selector: Callable[[ExtractedMetadata], object]
    absent_status: str = FindingStatus.FAIL
    weights: dict = field(default_factory=dict)
    messages: dict = field(default_factory=dict)
    report_value: bool = True

    def evaluate(self, meta: ExtractedMetadata) -> AuditFinding:
        selected = self.selector(meta)
        present = bool(selected)
        value = None
        if self.report_value:
            value = selected if isinstance(selected, str) else ""
        return AuditFinding(
            type=self.type,
            status=FindingStatus.PASS if present else self.absent_status,
            title=self.title,
            description=self.messages[PRESENT if present else MISSING],
            value=value,
        )


TITLE_RULE = LengthRule(
    type="title",
    title="Page Title",
    selector=lambda m: m.title,
    min_length=30,
    max_length=60,
    weights={FindingStatus.PASS: 20, FindingStatus.WARN: 10, FindingStatus.FAIL: 0},
    messages={
        MISSING: "No title tag found",
        TOO_SHORT: "Title is too short (< 30 characters)",
        TOO_LONG: "Title is too long (> 60 characters)",
        OK: "Well-structured title tag found",
    },
)

DESCRIPTION_RULE = LengthRule(
    type="description",
    title="Meta Description",
    selector=lambda m: m.meta_description,
    min_length=120,
    max_length=160,
    weights={FindingStatus.PASS: 20, FindingStatus.WARN: 10, FindingStatus.FAIL: 0},
    messages={
        MISSING: "No meta description found",
        TOO_SHORT: "Description is too short (< 120 characters)",
        TOO_LONG: "Description is too long (> 160 characters)",
        OK: "Well-structured meta description found",
    },
)

OG_IMAGE_RULE = PresenceRule(
    type="og_image",
    title="Open Graph Image",
    selector=lambda m: m.og_image,
    weights={FindingStatus.PASS: 15, FindingStatus.FAIL: 0},
    messages={
        PRESENT: "Open Graph image found",
        MISSING: "No og:image meta tag found. This affects social media sharing.",
    },
)

# canonical has no fail state
CANONICAL_RULE = PresenceRule(
    type="canonical",
    title="Canonical URL",
    selector=lambda m: m.canonical,
    absent_status=FindingStatus.WARN,
    weights={FindingStatus.PASS: 10, FindingStatus.WARN: 0},
    messages={
        PRESENT: "Proper canonical tag implementation found",
        MISSING: "No canonical URL specified",
    },
)

TWITTER_CARD_RULE = PresenceRule(
    type="twitter_card",
    title="Twitter Card",
    selector=lambda m: m.twitter_card,
    weights={FindingStatus.PASS: 10, FindingStatus.FAIL: 0},
    messages={
        PRESENT: "Twitter card meta tags found",
        MISSING: "No Twitter card meta tags found",
    },
)

SCHEMA_RULE = PresenceRule(
    type="schema",
    title="Schema Markup",
    selector=lambda m: m.has_structured_data,
    weights={FindingStatus.PASS: 10, FindingStatus.FAIL: 0},
    messages={
        PRESENT: "Structured data found",
        MISSING: "No structured data found. Consider adding JSON-LD schema.",
    },
    report_value=False,
)

RULES = (
    TITLE_RULE,
    DESCRIPTION_RULE,
    OG_IMAGE_RULE,
    CANONICAL_RULE,
    TWITTER_CARD_RULE,
    SCHEMA_RULE,
)
RULES_BY_TYPE = {rule.type: rule for rule in RULES}

TECHNICAL_POINTS = (
    ("https", 5, lambda m: m.is_https),
    ("viewport", 5, lambda m: m.has_viewport_tag),
    ("heading_structure", 5, lambda m: m.heading_structure),
)

SCORE_LABELS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)


def run_rules(meta: ExtractedMetadata) -> list[AuditFinding]:
    return [rule.evaluate(meta) for rule in RULES]


def score_breakdown(findings: list[AuditFinding], meta: ExtractedMetadata) -> list[tuple[str, int]]:
    """Points awarded per rule (in rule order) followed by technical factors."""
    breakdown: list[tuple[str, int]] = []
    for finding in findings:
        rule = RULES_BY_TYPE.get(finding.type)
        points = rule.weights.get(finding.status, 0) if rule is not None else 0
        breakdown.append((finding.type, points))
    for name, points, check in TECHNICAL_POINTS:
        breakdown.append((name, points if check(meta) else 0))
    return breakdown


def calculate_seo_score(findings: list[AuditFinding], meta: ExtractedMetadata) -> int:
    raw = sum(points for _, points in score_breakdown(findings, meta))
    return max(0, min(raw, MAX_SCORE))


def audit(meta: ExtractedMetadata) -> tuple[list[AuditFinding], int]:
    """Return (ordered findings, score 0-100) for extracted metadata."""
    findings = run_rules(meta)
    return findings, calculate_seo_score(findings, meta)


def score_label(score: int) -> str:
    for threshold, label in SCORE_LABELS:
        if score >= threshold:
            return label
    return "Poor"
