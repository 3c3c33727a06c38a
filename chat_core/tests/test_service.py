import threading

import pytest

from chat_core.api import service
from chat_core.domain.exceptions import ApiError
from chat_core.domain.models import ChatMessage


class ClientStub:
    model = "gpt-4o"

    def __init__(self):
        self.calls = []

    def send_messages(self, messages, context_resources=None, sink=None, cancel=None, system_prompt=None):
        self.calls.append(("messages", list(messages), context_resources, system_prompt))
        return "reply"

    def send_chat(self, chat, sink=None, cancel=None, system_prompt=None):
        self.calls.append(("chat", chat, system_prompt))
        return "legacy reply"


def test_run_chat_uses_default_client(monkeypatch):
    stub = ClientStub()
    monkeypatch.setattr(service, "_client", stub)
    msgs = [ChatMessage(role="user", content="hi")]
    assert service.run_chat(msgs, system_prompt="sys") == "reply"
    assert stub.calls == [("messages", msgs, None, "sys")]


def test_run_legacy_chat_translates_history(monkeypatch):
    stub = ClientStub()
    monkeypatch.setattr(service, "_client", stub)
    history = [{"is_user": True, "message": "q"}, {"is_user": False, "message": "a"}]
    assert service.run_legacy_chat(history) == "legacy reply"
    chat = stub.calls[0][1]
    assert [m.is_user for m in chat.messages] == [True, False]
    assert [m.message for m in chat.messages] == ["q", "a"]


def test_run_legacy_chat_logs_and_reraises(monkeypatch, caplog):
    class FailingClient(ClientStub):
        def send_chat(self, chat, sink=None, cancel=None, system_prompt=None):
            self.calls.append(("chat", chat, cancel))
            raise ApiError(code="API_ERROR", message="boom", http_status=500)

    stub = FailingClient()
    monkeypatch.setattr(service, "_client", stub)
    cancel = threading.Event()
    with pytest.raises(ApiError):
        service.run_legacy_chat([{"is_user": True, "message": "q"}], cancel=cancel)
    assert stub.calls[0][2] is cancel
    assert any(r.getMessage() == "Legacy chat failed: boom" for r in caplog.records)
