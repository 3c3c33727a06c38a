"""OpenAI chat/completions 客户端。

本模块负责：

1. 用 request_builder 组装请求体。
2. 通过 httpx 发送 POST 请求（可走代理），区分网络错误与 HTTP 错误。
3. 非流式：解析单个 JSON 响应，取 choices[0].message.content。
4. 流式：逐块读取响应体，交给 stream_parser 重组出增量，
   每个增量先推给 sink，再追加到完整回复里，两者顺序一致、各恰好一次。

每次调用都新建自己的 httpx.Client、缓冲与拼接结果，调用之间不共享可变状态。
"""

import json
import threading
from typing import List, Optional, Sequence

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from chat_core.config.settings import DEFAULT_API_URL
from chat_core.domain.conversation import ChatInput, chat_to_messages
from chat_core.domain.exceptions import (
    ApiError,
    AuthenticationError,
    MalformedResponseError,
    TransportError,
)
from chat_core.domain.models import ChatMessage, ChatPayload, ContextResource, StreamDelta
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.registry import OPENAI_CONFIG
from chat_core.providers.request_builder import build_payload, encode_payload
from chat_core.providers.sinks import DeltaSink
from chat_core.providers.stream_parser import StreamState, feed, first_choice, flush


RESPONSE_EXCERPT_LIMIT = 500


class _ResponseMessage(BaseModel):
    content: Optional[str] = None


class _Choice(BaseModel):
    message: Optional[_ResponseMessage] = None


class _ErrorDetail(BaseModel):
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    error: Optional[_ErrorDetail] = None


def extract_error_message(body: str) -> Optional[str]:
    """尝试从错误响应中取出 error.message，取不到返回 None。"""

    try:
        parsed = ErrorResponse.model_validate(json.loads(body))
    except (json.JSONDecodeError, SchemaError):
        return None
    if parsed.error is None:
        return None
    return parsed.error.message


def parse_completion(body: str) -> str:
    """解析非流式响应，返回 choices[0].message.content。"""

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            code="MALFORMED_RESPONSE",
            message=f"Invalid JSON response from OpenAI API: {e}",
            http_status=502,
        )
    try:
        choice = _Choice.model_validate(first_choice(data))
    except SchemaError:
        choice = _Choice()
    if choice.message is None or choice.message.content is None:
        raise MalformedResponseError(
            code="MALFORMED_RESPONSE",
            message="Unexpected API response structure from OpenAI",
            http_status=502,
        )
    return choice.message.content


class OpenAIClient:
    """OpenAI 兼容端点的客户端实现。

    - name: Provider 名称（供日志使用）。
    - send_messages / send_chat: 对外调用入口，返回完整回复文本。
    """

    name = "openai"

    def __init__(
        self,
        model: str,
        api_key: str = "",
        *,
        streaming: bool = False,
        api_url: Optional[str] = None,
        temperature: Optional[float] = None,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = None,
        system_prompt: str = "",
    ):
        self.model = model
        self._api_key = api_key
        self._streaming = streaming
        self._api_url = api_url or DEFAULT_API_URL
        self.temperature = OPENAI_CONFIG.default_temperature if temperature is None else temperature
        self._proxy_url = proxy_url
        # None 表示不设超时，由调用方控制整个操作的时长
        self._timeout = timeout
        self.system_prompt = system_prompt

    @property
    def api_key(self) -> str:
        return self._api_key

    @api_key.setter
    def api_key(self, value: str) -> None:
        self._api_key = value

    @property
    def streaming(self) -> bool:
        return self._streaming

    @streaming.setter
    def streaming(self, value: bool) -> None:
        self._streaming = value

    @property
    def api_url(self) -> str:
        return self._api_url

    # ---- 对外接口 ----

    def send_messages(
        self,
        messages: Sequence[ChatMessage],
        context_resources: Optional[Sequence[ContextResource]] = None,
        sink: Optional[DeltaSink] = None,
        cancel: Optional[threading.Event] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        """发送消息序列，背景资料会作为独立的 user 消息插在对话之前。

        system_prompt 只作用于本次调用，为 None 时使用 self.system_prompt。
        """

        payload = build_payload(
            self.system_prompt if system_prompt is None else system_prompt,
            context_resources,
            messages,
            model=self.model,
            temperature=self.temperature,
            streaming=self._streaming,
        )
        return self.send(payload, sink=sink, cancel=cancel)

    def send_chat(
        self,
        chat: ChatInput,
        sink: Optional[DeltaSink] = None,
        cancel: Optional[threading.Event] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        """发送聊天对象，接受 LegacyChat 与 Chat 两种类型。"""

        return self.send_messages(
            chat_to_messages(chat), sink=sink, cancel=cancel, system_prompt=system_prompt
        )

    def send(
        self,
        payload: ChatPayload,
        sink: Optional[DeltaSink] = None,
        cancel: Optional[threading.Event] = None,
    ) -> str:
        """执行一次请求。sink 与 cancel 只在 payload.stream 为 True 时生效。

        cancel 在每个增量推送前和每个字节块处理后检查，并不会打断正在阻塞的读取：
        服务端停止发送数据时，线程会一直停在 iter_bytes() 中，直到下一个块到达
        或传输层报错。需要限时的调用方应配置 http_timeout（读超时会转为 TransportError）。
        """

        body = encode_payload(payload)
        try:
            with httpx.Client(timeout=self._timeout, proxy=self._proxy_url, trust_env=False) as client:
                if payload.stream:
                    return self._send_stream(client, body, sink, cancel)
                return self._send_buffered(client, body)
        except httpx.RequestError as e:
            logger.error("OpenAI API transport failed", extra={"extra": {
                "url": self._api_url,
                "error": str(e),
            }})
            raise TransportError(code="NETWORK_ERROR", message=f"HTTP Error: {e}", http_status=502)

    # ---- 辅助方法 ----

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _send_buffered(self, client: httpx.Client, body: bytes) -> str:
        resp = client.post(self._api_url, content=body, headers=self._headers())
        if resp.status_code != 200:
            self._raise_for_status(resp.status_code, resp.text)
        return parse_completion(resp.text)

    def _send_stream(
        self,
        client: httpx.Client,
        body: bytes,
        sink: Optional[DeltaSink],
        cancel: Optional[threading.Event],
    ) -> str:
        parts: List[str] = []
        with client.stream("POST", self._api_url, content=body, headers=self._headers()) as resp:
            if resp.status_code != 200:
                resp.read()
                self._raise_for_status(resp.status_code, resp.text)
            state = StreamState()
            for chunk in resp.iter_bytes():
                state, deltas = feed(state, chunk)
                if not self._emit(deltas, sink, parts, cancel):
                    logger.info("OpenAI stream aborted", extra={"extra": {
                        "url": self._api_url,
                        "deltas": len(parts),
                    }})
                    return "".join(parts)
            self._emit(flush(state), sink, parts, cancel)
        return "".join(parts)

    @staticmethod
    def _emit(
        deltas: List[StreamDelta],
        sink: Optional[DeltaSink],
        parts: List[str],
        cancel: Optional[threading.Event],
    ) -> bool:
        """推送并累积增量；检测到取消时返回 False，之后的增量不再推送。"""

        for delta in deltas:
            if cancel is not None and cancel.is_set():
                return False
            if sink is not None:
                sink(delta)
            parts.append(delta.content)
        return not (cancel is not None and cancel.is_set())

    def _raise_for_status(self, status: int, body: str) -> None:
        logger.error("OpenAI API request failed", extra={"extra": {
            "http_status": status,
            "url": self._api_url,
            "has_api_key": bool(self._api_key),
            "response_excerpt": (body or "")[:RESPONSE_EXCERPT_LIMIT],
        }})
        message = extract_error_message(body) or f"HTTP Error: {status}"
        if status == 401:
            raise AuthenticationError(
                code="INVALID_API_KEY",
                message=f"Invalid API key: {message}",
                http_status=401,
            )
        raise ApiError(code="API_ERROR", message=message, http_status=status)
