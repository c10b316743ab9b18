"""Tests for shared normalization helpers."""

import pytest

from llm_connector_hub.core.normalization import (
    build_usage,
    estimate_tokens,
    extract_text_content,
    parse_data_url,
    split_system_messages,
    system_message,
    to_data_url,
    truncate_to_tokens,
    usage_from_mapping,
    user_message,
)
from llm_connector_hub.models import Message, MessageRole, TextPart


class TestMessageHelpers:
    def test_builders_set_roles(self):
        assert system_message("s").role == MessageRole.SYSTEM
        assert user_message("u").role == MessageRole.USER

    def test_extract_text_skips_images(self):
        message = Message(
            role="user",
            content=[
                TextPart(text="first"),
                {"type": "image_url", "image_url": "https://example.com/cat.png"},
                TextPart(text="second"),
            ],
        )
        assert extract_text_content(message) == "first\nsecond"

    def test_split_system_messages(self):
        messages = [
            system_message("Be brief."),
            user_message("Hi"),
            system_message("Answer in French."),
        ]
        system, rest = split_system_messages(messages)
        assert system == "Be brief.\n\nAnswer in French."
        assert [m.role for m in rest] == [MessageRole.USER]

    def test_split_without_system(self):
        system, rest = split_system_messages([user_message("Hi")])
        assert system is None
        assert len(rest) == 1

    def test_data_url_round_trip(self):
        url = to_data_url("QUJD", "image/png")
        assert url == "data:image/png;base64,QUJD"
        assert parse_data_url(url) == ("image/png", "QUJD")

    def test_parse_data_url_rejects_plain_urls(self):
        assert parse_data_url("https://example.com/a.png") is None


class TestUsageHelpers:
    def test_absent_usage_is_none(self):
        assert build_usage(None, None) is None
        assert usage_from_mapping(None, "a", "b") is None
        assert usage_from_mapping({}, "a", "b") is None

    def test_missing_counter_counts_as_zero(self):
        usage = usage_from_mapping({"input_tokens": 7}, "input_tokens", "output_tokens")
        assert usage.prompt_tokens == 7
        assert usage.completion_tokens == 0
        assert usage.total_tokens == 7

    def test_zero_counter_omitted_by_gemini(self):
        usage = usage_from_mapping(
            {"promptTokenCount": 5, "totalTokenCount": 5}, "promptTokenCount", "candidatesTokenCount"
        )
        assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (5, 0, 5)


class TestTokenHeuristics:
    @pytest.mark.parametrize("text,expected", [("", 0), ("abc", 1), ("abcd", 1), ("abcde", 2)])
    def test_estimate_tokens(self, text, expected):
        assert estimate_tokens(text) == expected

    def test_truncate_to_tokens(self):
        assert truncate_to_tokens("abcdefghij", 2) == "abcdefgh"
        assert truncate_to_tokens("short", 10) == "short"
        assert truncate_to_tokens("anything", 0) == ""
