import pytest

from chat_core.domain.exceptions import ValidationError
from chat_core.providers import create_client
from chat_core.providers.openai_client import OpenAIClient
from chat_core.providers.registry import OPENAI_CONFIG, get_model_label


class SettingsStub:
    openai_api_url = "https://llm.example.org/v1/chat/completions"
    openai_api_token = "sk-test-key-123"
    openai_selected_model = "gpt-4o-mini"
    openai_streaming_enabled = True
    temperature = 0.2
    proxy_url = "http://proxy.local:8080"
    http_timeout = 60.0


def test_create_client_from_settings():
    client = create_client(SettingsStub(), system_prompt="Hi")
    assert isinstance(client, OpenAIClient)
    assert client.model == "gpt-4o-mini"
    assert client.api_key == "sk-test-key-123"
    assert client.streaming is True
    assert client.api_url == "https://llm.example.org/v1/chat/completions"
    assert client.temperature == 0.2
    assert client.system_prompt == "Hi"


def test_create_client_requires_token():
    class NoToken(SettingsStub):
        openai_api_token = ""

    with pytest.raises(ValidationError) as exc:
        create_client(NoToken())
    assert exc.value.code == "MISSING_API_KEY"


def test_create_client_default_settings(monkeypatch):
    monkeypatch.setattr("chat_core.providers.settings", SettingsStub())
    assert create_client().model == "gpt-4o-mini"


def test_client_setters():
    client = OpenAIClient("gpt-4")
    assert client.streaming is False
    assert client.api_url == OPENAI_CONFIG.api_url
    client.api_key = "new-key-12345"
    client.streaming = True
    assert client.api_key == "new-key-12345"
    assert client.streaming is True


def test_model_catalogue():
    assert OPENAI_CONFIG.api_url == "https://api.openai.com/v1/chat/completions"
    assert get_model_label("gpt-4o") == "GPT-4o"
    assert get_model_label("my-local-model") is None
    assert len(OPENAI_CONFIG.models) == 10
