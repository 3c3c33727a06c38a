"""Provider 抽象接口。

上层（页面组件、API 服务）不直接依赖具体的 HTTP 实现，而是依赖此协议：

- 负责：把消息与背景资料转成具体 API 请求，并把响应解析为完整回复文本。
- 流式模式下，每个增量同时推送给 sink。
"""

import threading
from typing import Optional, Protocol, Sequence

from chat_core.domain.conversation import ChatInput
from chat_core.domain.models import ChatMessage, ContextResource
from chat_core.providers.sinks import DeltaSink


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - send_messages: 发送已构造好的消息序列（可附带背景资料）。
    - send_chat: 发送新旧两种聊天对象。
    """

    name: str

    def send_messages(
        self,
        messages: Sequence[ChatMessage],
        context_resources: Optional[Sequence[ContextResource]] = None,
        sink: Optional[DeltaSink] = None,
        cancel: Optional[threading.Event] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        ...

    def send_chat(
        self,
        chat: ChatInput,
        sink: Optional[DeltaSink] = None,
        cancel: Optional[threading.Event] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        ...
