"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护端点与模型列表 (registry)。
- 组装请求体 (request_builder) 与重组流式响应 (stream_parser)。
- 提供具体的 HTTP 客户端 (openai_client)。
"""

from typing import Optional

from chat_core.config.settings import settings
from chat_core.domain.exceptions import ValidationError
from chat_core.providers.base import ProviderClient
from chat_core.providers.openai_client import OpenAIClient


def create_client(cfg=None, system_prompt: str = "") -> OpenAIClient:
    """根据配置创建客户端，默认取全局 settings。

    配置只在这里读取一次，之后客户端不再访问 settings。
    """

    cfg = cfg or settings
    api_key: Optional[str] = getattr(cfg, "openai_api_token", None)
    if not api_key:
        raise ValidationError(code="MISSING_API_KEY", message="OpenAI API token not configured")
    return OpenAIClient(
        model=cfg.openai_selected_model,
        api_key=api_key,
        streaming=bool(cfg.openai_streaming_enabled),
        api_url=cfg.openai_api_url,
        temperature=getattr(cfg, "temperature", None),
        proxy_url=getattr(cfg, "proxy_url", None),
        timeout=getattr(cfg, "http_timeout", None),
        system_prompt=system_prompt,
    )


__all__ = ["OpenAIClient", "ProviderClient", "create_client"]
