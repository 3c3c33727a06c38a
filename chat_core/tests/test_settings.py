from chat_core.config.settings import DEFAULT_API_URL, DEFAULT_MODEL, ChatSettings


def test_defaults(monkeypatch):
    monkeypatch.delenv("OPENAI_API_URL", raising=False)
    monkeypatch.delenv("OPENAI_SELECTED_MODEL", raising=False)
    cfg = ChatSettings(openai_api_url="", openai_selected_model="")
    assert cfg.openai_api_url == DEFAULT_API_URL
    assert cfg.openai_selected_model == DEFAULT_MODEL
    assert cfg.temperature == 0.5


def test_proxy_url_requires_host_and_port():
    assert ChatSettings(proxy_host="proxy.local").proxy_url is None
    assert ChatSettings(proxy_host="proxy.local", proxy_port=3128).proxy_url == "http://proxy.local:3128"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("OPENAI_STREAMING_ENABLED", "1")
    monkeypatch.setenv("OPENAI_API_TOKEN", "sk-env-token-123")
    cfg = ChatSettings()
    assert cfg.openai_streaming_enabled is True
    assert cfg.openai_api_token == "sk-env-token-123"
