import pytest

from chat_core.domain.conversation import chat_to_messages
from chat_core.domain.exceptions import ValidationError
from chat_core.domain.models import (
    Chat,
    ChatMessage,
    ImageUrlBlock,
    LegacyChat,
    LegacyChatMessage,
    TextBlock,
)


def test_legacy_chat_roles():
    chat = LegacyChat(messages=[LegacyChatMessage(True, "q"), LegacyChatMessage(False, "a")])
    msgs = chat_to_messages(chat)
    assert msgs == [ChatMessage(role="user", content="q"), ChatMessage(role="assistant", content="a")]


def test_new_chat_passthrough():
    m = ChatMessage(role="user", content=[TextBlock("look"), ImageUrlBlock("https://x/y.png")])
    msgs = chat_to_messages(Chat(messages=[m]))
    assert msgs == [m]
    assert msgs[0].to_payload()["content"] == [
        {"type": "text", "text": "look"},
        {"type": "image_url", "image_url": {"url": "https://x/y.png", "detail": "high"}},
    ]


def test_invalid_chat_type():
    with pytest.raises(ValidationError) as exc:
        chat_to_messages(["not", "a", "chat"])
    assert exc.value.code == "INVALID_CHAT_TYPE"
