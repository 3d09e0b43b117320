"""
Copy suggestions (title, meta description, Open Graph text) from Claude.

Claude API key must be defined in the environment or in a .env file in the
backend root:

ANTHROPIC_API_KEY=your_real_key_here

Any failure of the model call is recovered with a fixed fallback text for the
requested kind; generate_suggestion never raises.
"""

import logging
from typing import Optional, TypedDict

from anthropic import Anthropic

from config import Settings, get_settings
from errors import UpstreamModelError

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = """You are an SEO copywriter.
Reply with the requested text only: no quotes, no labels, no markdown, no explanation."""

PROMPT_TEMPLATES = {
    "description": (
        "Generate an engaging SEO meta description for the website: {url}. "
        "Current title: {current_title}. The description should be between 120-160 "
        "characters and compelling for search results."
    ),
    "title": (
        "Generate an SEO-optimized page title for the website: {url}. "
        "Current description: {current_description}. The title should be between "
        "30-60 characters and include relevant keywords."
    ),
    "og_tags": (
        "Generate Open Graph title and description for the website: {url}. "
        "Make them engaging for social media sharing."
    ),
}
DEFAULT_PROMPT = "Generate SEO content for {kind} for the website: {url}"

SUGGESTION_TITLES = {
    "description": "Improved Meta Description",
    "title": "Optimized Page Title",
}
DEFAULT_SUGGESTION_TITLE = "AI Generated Content"
FALLBACK_SUGGESTION_TITLE = "AI Generated Content (Fallback)"

FALLBACK_SUGGESTIONS = {
    "description": (
        "Discover our comprehensive solution for your needs. Learn more about our "
        "services, features, and how we can help you achieve your goals. Get started today."
    ),
    "title": "Professional Services | Your Trusted Partner",
    "og_tags": "Your comprehensive solution for professional services and expert guidance.",
}
DEFAULT_FALLBACK = "Generated content suggestion"


class Suggestion(TypedDict):
    type: str
    title: str
    content: str
    characterCount: int


def build_prompt(
    kind: str,
    url: str,
    current_title: Optional[str] = None,
    current_description: Optional[str] = None,
) -> str:
    template = PROMPT_TEMPLATES.get(kind, DEFAULT_PROMPT)
    return template.format(
        kind=kind,
        url=url,
        current_title=(current_title or "").strip() or "Not provided",
        current_description=(current_description or "").strip() or "Not provided",
    )


def fallback_suggestion(kind: str) -> Suggestion:
    content = FALLBACK_SUGGESTIONS.get(kind, DEFAULT_FALLBACK)
    return {
        "type": kind,
        "title": FALLBACK_SUGGESTION_TITLE,
        "content": content,
        "characterCount": len(content),
    }


def _extract_response_text(response: object) -> str:
    content = ""
    for block in getattr(response, "content", []) or []:
        text = getattr(block, "text", None)
        if text:
            content += text
    return content.strip()


def _call_claude(prompt: str, settings: Settings) -> str:
    if not settings.anthropic_api_key:
        raise UpstreamModelError("ANTHROPIC_API_KEY not configured")

    try:
        client = Anthropic(api_key=settings.anthropic_api_key)
        response = client.messages.create(
            model=settings.claude_model,
            max_tokens=settings.suggestion_max_tokens,
            system=SYSTEM_MESSAGE,
            messages=[{"role": "user", "content": prompt}],
            temperature=settings.suggestion_temperature,
        )
    except Exception as exc:
        raise UpstreamModelError(str(exc)) from exc

    content = _extract_response_text(response)
    if not content:
        raise UpstreamModelError("Empty Claude response content.")
    return content


def generate_suggestion(
    kind: str,
    url: str,
    current_title: Optional[str] = None,
    current_description: Optional[str] = None,
    settings: Settings | None = None,
) -> Suggestion:
    """
    Ask Claude for replacement copy of the given kind.
    On API/key/network failure, returns the static fallback. Never raises.
    """
    settings = settings or get_settings()
    prompt = build_prompt(kind, url, current_title, current_description)
    try:
        content = _call_claude(prompt, settings)
    except UpstreamModelError as exc:
        logger.warning("Suggestion model call failed for kind=%s: %s; using fallback", kind, exc)
        return fallback_suggestion(kind)

    return {
        "type": kind,
        "title": SUGGESTION_TITLES.get(kind, DEFAULT_SUGGESTION_TITLE),
        "content": content,
        "characterCount": len(content),
    }
