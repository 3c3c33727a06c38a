"""统一的消息与请求数据模型。

本模块定义了客户端内部共享的标准数据结构：

- ChatMessage: 一条对话消息（system/user/assistant），内容为纯文本或内容块序列。
- TextBlock / ImageUrlBlock: 多模态内容块。
- ContextResource: 调用方注入的背景资料（页面文本、文件、图片、PDF 页）。
- ChatPayload: 发给 chat/completions 端点的请求体。
- StreamDelta: 流式响应中的一段增量文本。

所有结构都是请求级别的，不做持久化。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from chat_core.domain.exceptions import ValidationError


# 消息角色（与 OpenAI chat/completions 的 role 字段对应）
Role = Literal["system", "user", "assistant"]

# 背景资料类型
ResourceKind = Literal["page_context", "text_file", "image_file", "pdf_page"]

TEXT_KINDS = ("page_context", "text_file")
IMAGE_KINDS = ("image_file", "pdf_page")


@dataclass(frozen=True)
class TextBlock:
    """文本内容块。"""

    text: str

    def to_payload(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ImageUrlBlock:
    """图片引用内容块，detail 默认为 high。"""

    url: str
    detail: str = "high"

    def to_payload(self) -> Dict[str, Any]:
        return {"type": "image_url", "image_url": {"url": self.url, "detail": self.detail}}


ContentBlock = Union[TextBlock, ImageUrlBlock]
TextOrBlocks = Union[str, Sequence[ContentBlock]]


@dataclass(frozen=True)
class ChatMessage:
    """一条对话消息。

    - role: 消息角色。
    - content: 纯文本，或按顺序排列的内容块（顺序有意义，原样保留）。
    """

    role: Role
    content: TextOrBlocks

    def to_payload(self) -> Dict[str, Any]:
        content = self.content
        if isinstance(content, (list, tuple)):
            content = [block.to_payload() for block in content]
        return {"role": self.role, "content": content}


@dataclass(frozen=True)
class ContextResource:
    """一份背景资料。

    content_or_url: 对文本类资料为正文，对图片/PDF 页为可访问的 URL。
    """

    kind: ResourceKind
    title: str
    content_or_url: str
    mime_type: Optional[str] = None
    page_number: Optional[int] = None
    source_file: Optional[str] = None

    def __post_init__(self):
        if self.kind not in TEXT_KINDS + IMAGE_KINDS:
            raise ValidationError(
                code="INVALID_RESOURCE",
                message=f"Unsupported context resource kind: {self.kind!r}",
            )

    @property
    def is_image(self) -> bool:
        return self.kind in IMAGE_KINDS


@dataclass(frozen=True)
class ChatPayload:
    """chat/completions 请求体。

    不变式：system 消息（如果有）总在第一位，背景资料消息（如果有）紧随其后。
    """

    messages: List[ChatMessage]
    model: str
    temperature: float
    stream: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages": [m.to_payload() for m in self.messages],
            "model": self.model,
            "temperature": self.temperature,
            "stream": self.stream,
        }


@dataclass(frozen=True)
class StreamDelta:
    """流式响应中的单个增量。"""

    content: str


@dataclass
class LegacyChatMessage:
    """旧版聊天记录中的一条消息，只区分用户与助手。"""

    is_user: bool
    message: str


@dataclass
class LegacyChat:
    """旧版聊天对象。"""

    messages: List[LegacyChatMessage] = field(default_factory=list)


@dataclass
class Chat:
    """新版聊天对象，直接保存 ChatMessage。"""

    messages: List[ChatMessage] = field(default_factory=list)
    title: Optional[str] = None
