"""聊天对象归一化。

调用方可能传入旧版 LegacyChat 或新版 Chat，这里统一转换为
ChatMessage 序列，之后交给 request_builder 处理。
"""

from typing import List, Union

from chat_core.domain.exceptions import ValidationError
from chat_core.domain.models import Chat, ChatMessage, LegacyChat


ChatInput = Union[LegacyChat, Chat]


def chat_to_messages(chat: ChatInput) -> List[ChatMessage]:
    if isinstance(chat, Chat):
        return list(chat.messages)
    if isinstance(chat, LegacyChat):
        return [
            ChatMessage(role="user" if m.is_user else "assistant", content=m.message)
            for m in chat.messages
        ]
    raise ValidationError(
        code="INVALID_CHAT_TYPE",
        message=f"Invalid chat object type: {type(chat).__name__}",
    )
