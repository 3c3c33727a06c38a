"""对外 API 服务模块。

提供简化的函数接口供页面组件等上层应用调用。
"""

import threading
from typing import List, Optional, Sequence

from chat_core.domain.models import ChatMessage, ContextResource, LegacyChat, LegacyChatMessage
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers import create_client
from chat_core.providers.openai_client import OpenAIClient
from chat_core.providers.sinks import DeltaSink


_client: Optional[OpenAIClient] = None


def get_default_client() -> OpenAIClient:
    """获取默认客户端实例（单例），首次调用时读取配置。"""
    global _client
    if _client is None:
        _client = create_client()
    return _client


def run_chat(
    messages: Sequence[ChatMessage],
    system_prompt: str = "",
    context_resources: Optional[Sequence[ContextResource]] = None,
    sink: Optional[DeltaSink] = None,
    cancel: Optional[threading.Event] = None,
) -> str:
    """发送一轮对话。

    Args:
        messages: 对话消息（按时间顺序）
        system_prompt: 系统提示词（可选）
        context_resources: 背景资料（可选）
        sink: 流式增量的接收方（仅流式模式生效）
        cancel: 置位后中止流式传输

    Returns:
        助手的完整回复文本

    Raises:
        各种 domain.exceptions 中定义的异常
    """
    client = get_default_client()
    try:
        return client.send_messages(
            messages, context_resources, sink=sink, cancel=cancel, system_prompt=system_prompt
        )
    except Exception as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {
            "model": client.model,
            "error": str(e),
        }})
        raise


def run_legacy_chat(
    history: List[dict],
    system_prompt: str = "",
    sink: Optional[DeltaSink] = None,
    cancel: Optional[threading.Event] = None,
) -> str:
    """以旧版格式发送对话，history 中每项为 {"is_user": bool, "message": str}。"""
    chat = LegacyChat(messages=[
        LegacyChatMessage(is_user=bool(item.get("is_user")), message=item.get("message", ""))
        for item in history
    ])
    client = get_default_client()
    try:
        return client.send_chat(chat, sink=sink, cancel=cancel, system_prompt=system_prompt)
    except Exception as e:
        logger.error(f"Legacy chat failed: {e}", extra={"extra": {
            "model": client.model,
            "error": str(e),
        }})
        raise
