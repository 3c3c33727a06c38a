"""请求体构造。

把 (system prompt, 背景资料, 对话消息) 组装成 chat/completions 请求体：

1. system prompt 非空时作为第一条 system 消息。
2. 有背景资料时，追加一条 user 消息，内容为内容块序列：
   开始标记、每份资料的 {描述, 正文或图片, 分隔线}、结束标记。
3. 原样追加对话消息。

build_payload 是纯函数，不读取也不修改任何共享状态。
"""

import json
from typing import List, Optional, Sequence

from chat_core.domain.exceptions import EncodingError
from chat_core.domain.models import (
    ChatMessage,
    ChatPayload,
    ContentBlock,
    ContextResource,
    ImageUrlBlock,
    TextBlock,
)


CONTEXT_OPEN = "[BEGIN KNOWLEDGE BASE CONTEXT]\n"
CONTEXT_CLOSE = (
    "[END KNOWLEDGE BASE CONTEXT]\n"
    "You may refer to this context when answering future questions."
)
RESOURCE_SEPARATOR = "---"


def describe_resource(resource: ContextResource) -> str:
    """生成资料描述，例如 `**Slides** (pdf_page) [Type: application/pdf, Page: 3]`。"""

    desc = f"**{resource.title}** ({resource.kind})"
    metadata = []
    if resource.mime_type is not None:
        metadata.append(f"Type: {resource.mime_type}")
    if resource.page_number is not None:
        metadata.append(f"Page: {resource.page_number}")
    if resource.source_file is not None:
        metadata.append(f"Source: {resource.source_file}")
    if metadata:
        desc += " [" + ", ".join(metadata) + "]"
    return desc


def build_context_message(resources: Sequence[ContextResource]) -> ChatMessage:
    blocks: List[ContentBlock] = [TextBlock(CONTEXT_OPEN)]
    for resource in resources:
        blocks.append(TextBlock(describe_resource(resource)))
        if resource.is_image:
            blocks.append(ImageUrlBlock(url=resource.content_or_url, detail="high"))
        else:
            blocks.append(TextBlock("Content:\n" + resource.content_or_url))
        blocks.append(TextBlock(RESOURCE_SEPARATOR))
    blocks.append(TextBlock(CONTEXT_CLOSE))
    return ChatMessage(role="user", content=blocks)


def encode_payload(payload: ChatPayload) -> bytes:
    """序列化请求体，失败时抛出 EncodingError。"""

    try:
        return json.dumps(payload.to_dict(), ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError, AttributeError) as e:
        raise EncodingError(code="ENCODING_ERROR", message=f"Failed to encode API payload: {e}")


def build_payload(
    system_prompt: str,
    context_resources: Optional[Sequence[ContextResource]],
    conversation_messages: Sequence[ChatMessage],
    model: str,
    temperature: float,
    streaming: bool,
) -> ChatPayload:
    messages: List[ChatMessage] = []
    if system_prompt:
        messages.append(ChatMessage(role="system", content=system_prompt))
    if context_resources:
        messages.append(build_context_message(context_resources))
    messages.extend(conversation_messages)

    payload = ChatPayload(messages=messages, model=model, temperature=temperature, stream=streaming)
    # 提前序列化一次，保证返回的 payload 一定可以发送
    encode_payload(payload)
    return payload
