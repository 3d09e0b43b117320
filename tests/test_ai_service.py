"""Tests for the suggestion generator and its fallback path."""

from dataclasses import replace
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from ai_service import (
    DEFAULT_FALLBACK,
    FALLBACK_SUGGESTION_TITLE,
    FALLBACK_SUGGESTIONS,
    build_prompt,
    generate_suggestion,
)


@pytest.fixture
def keyed_settings(settings):
    return replace(settings, anthropic_api_key="test-key")


def _claude_reply(text):
    client = MagicMock()
    client.messages.create.return_value = SimpleNamespace(
        content=[SimpleNamespace(text=text)],
        stop_reason="end_turn",
    )
    return client


class TestPrompts:

    def test_description_prompt_mentions_current_title(self):
        prompt = build_prompt("description", "https://example.com", current_title="Home")
        assert "https://example.com" in prompt
        assert "Current title: Home" in prompt
        assert "120-160" in prompt

    def test_title_prompt_defaults_missing_description(self):
        prompt = build_prompt("title", "https://example.com")
        assert "Current description: Not provided" in prompt
        assert "30-60" in prompt

    def test_unknown_kind_uses_generic_prompt(self):
        prompt = build_prompt("h1", "https://example.com")
        assert prompt == "Generate SEO content for h1 for the website: https://example.com"


class TestGenerateSuggestion:

    def test_success(self, keyed_settings):
        client = _claude_reply("  Handmade Ceramic Mugs | Example Store  ")
        with patch("ai_service.Anthropic", return_value=client):
            result = generate_suggestion("title", "https://example.com", settings=keyed_settings)
        assert result == {
            "type": "title",
            "title": "Optimized Page Title",
            "content": "Handmade Ceramic Mugs | Example Store",
            "characterCount": len("Handmade Ceramic Mugs | Example Store"),
        }
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == keyed_settings.claude_model
        assert kwargs["max_tokens"] == keyed_settings.suggestion_max_tokens

    def test_description_title(self, keyed_settings):
        with patch("ai_service.Anthropic", return_value=_claude_reply("Some copy")):
            result = generate_suggestion("description", "https://example.com", settings=keyed_settings)
        assert result["title"] == "Improved Meta Description"

    def test_og_tags_title(self, keyed_settings):
        with patch("ai_service.Anthropic", return_value=_claude_reply("Some copy")):
            result = generate_suggestion("og_tags", "https://example.com", settings=keyed_settings)
        assert result["title"] == "AI Generated Content"

    @pytest.mark.parametrize("kind", ["title", "description", "og_tags"])
    def test_api_failure_uses_fallback(self, keyed_settings, kind):
        client = MagicMock()
        client.messages.create.side_effect = RuntimeError("529 overloaded")
        with patch("ai_service.Anthropic", return_value=client):
            result = generate_suggestion(kind, "https://example.com", settings=keyed_settings)
        assert result["type"] == kind
        assert result["title"] == FALLBACK_SUGGESTION_TITLE
        assert result["content"] == FALLBACK_SUGGESTIONS[kind]
        assert result["characterCount"] == len(FALLBACK_SUGGESTIONS[kind])

    def test_missing_api_key_uses_fallback_without_calling_api(self, settings):
        with patch("ai_service.Anthropic") as anthropic_cls:
            result = generate_suggestion("title", "https://example.com", settings=settings)
        anthropic_cls.assert_not_called()
        assert result["content"] == FALLBACK_SUGGESTIONS["title"]

    def test_empty_reply_uses_fallback(self, keyed_settings):
        with patch("ai_service.Anthropic", return_value=_claude_reply("   ")):
            result = generate_suggestion("description", "https://example.com", settings=keyed_settings)
        assert result["content"] == FALLBACK_SUGGESTIONS["description"]

    def test_unknown_kind_fallback(self, settings):
        result = generate_suggestion("h1", "https://example.com", settings=settings)
        assert result["content"] == DEFAULT_FALLBACK
        assert result["characterCount"] == len(DEFAULT_FALLBACK)
