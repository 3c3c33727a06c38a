"""Chat Core 顶层包。

该包提供 OpenAI 兼容 chat/completions 端点的客户端实现，
包括配置加载、领域模型、请求体构造、流式响应重组与结构化日志。
"""

from chat_core.domain.models import ChatMessage, ContextResource, StreamDelta
from chat_core.providers import OpenAIClient, create_client

__all__ = ["ChatMessage", "ContextResource", "OpenAIClient", "StreamDelta", "create_client"]
