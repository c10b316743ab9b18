"""Shared pytest fixtures for LLM Connector Hub tests."""

import pytest

from llm_connector_hub.models import CompletionRequest, FunctionDefinition, ToolDefinition
from llm_connector_hub.core.normalization import system_message, user_message
from llm_connector_hub.providers.anthropic import AnthropicConfig, AnthropicProvider
from llm_connector_hub.providers.azure import AzureOpenAIConfig, AzureOpenAIProvider
from llm_connector_hub.providers.google import GoogleConfig, GoogleProvider
from llm_connector_hub.providers.openai import OpenAIConfig, OpenAIProvider
from llm_connector_hub.reliability import RetryManager
from tests.helpers.http_mocks import FakeSleep, MockServer


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end tests across the provider facade")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep vendor credentials and .env files of the host out of tests."""
    for name in (
        "OPENAI_API_KEY", "OPENAI_ORGANIZATION_ID", "OPENAI_ORG_ID", "OPENAI_BASE_URL",
        "ANTHROPIC_API_KEY", "ANTHROPIC_BASE_URL", "ANTHROPIC_API_VERSION",
        "AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_RESOURCE_NAME",
        "AZURE_OPENAI_DEPLOYMENT_NAME", "AZURE_OPENAI_API_VERSION",
        "GOOGLE_API_KEY", "GEMINI_API_KEY", "GOOGLE_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_server():
    """Fake vendor endpoint recording requests."""
    return MockServer()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def retry_manager(fake_sleep):
    """RetryManager that records delays instead of sleeping."""
    return RetryManager(sleep=fake_sleep)


@pytest.fixture
def openai_provider(mock_server, retry_manager):
    config = OpenAIConfig(api_key="sk-test", max_retries=2)
    return OpenAIProvider(config, client=mock_server.client(), retry_manager=retry_manager)


@pytest.fixture
def anthropic_provider(mock_server, retry_manager):
    config = AnthropicConfig(api_key="sk-ant-test", max_retries=2)
    return AnthropicProvider(config, client=mock_server.client(), retry_manager=retry_manager)


@pytest.fixture
def azure_provider(mock_server, retry_manager):
    config = AzureOpenAIConfig(
        api_key="azure-test",
        resource_name="contoso",
        deployment_name="gpt4o-prod",
        max_retries=2,
    )
    return AzureOpenAIProvider(config, client=mock_server.client(), retry_manager=retry_manager)


@pytest.fixture
def google_provider(mock_server, retry_manager):
    config = GoogleConfig(api_key="google-test", max_retries=2)
    return GoogleProvider(config, client=mock_server.client(), retry_manager=retry_manager)


@pytest.fixture
def simple_request():
    """System prompt plus one user turn."""
    return CompletionRequest(
        model="test-model",
        messages=[system_message("You are terse."), user_message("Hello")],
    )


@pytest.fixture
def weather_tool():
    return ToolDefinition(
        function=FunctionDefinition(
            name="get_weather",
            description="Current weather for a city",
            parameters={
                "type": "object",
                "properties": {"location": {"type": "string"}},
                "required": ["location"],
            },
        )
    )
