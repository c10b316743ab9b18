"""Tests for the known model limit tables."""

from llm_connector_hub.config import get_max_output_tokens, get_model_info, list_models


class TestModelLimits:
    def test_known_models(self):
        assert get_max_output_tokens("anthropic", "claude-3-haiku-20240307") == 4096
        assert get_max_output_tokens("openai", "gpt-4o-mini") == 16384
        assert get_max_output_tokens("google", "gemini-1.0-pro") == 2048

    def test_azure_uses_openai_models(self):
        assert get_max_output_tokens("azure", "gpt-4o") == get_max_output_tokens("openai", "gpt-4o")

    def test_unknown_model_has_no_limit(self):
        """An unlisted model is "no known limit", never zero."""
        assert get_max_output_tokens("openai", "ft:gpt-4o-mini:acme") is None
        assert get_model_info("anthropic", "claude-unreleased") is None

    def test_unknown_provider(self):
        assert get_model_info("bedrock", "anything") is None
        assert list_models("bedrock") == []

    def test_list_models_sorted(self):
        models = list_models("google")
        assert models == sorted(models)
        assert "gemini-1.5-flash" in models

    def test_model_info(self):
        info = get_model_info("openai", "gpt-4o")
        assert info.supports_vision
        assert info.context_window == 128000
