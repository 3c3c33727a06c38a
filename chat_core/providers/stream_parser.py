"""流式响应重组。

chat/completions 的流式响应是 SSE 风格的文本：

    data: {"choices": [{"delta": {"content": "He"}}]}

    data: [DONE]

传输层按任意边界切分字节块，一行可能被拆到两个块里。
feed() 是纯状态转移函数：(state, chunk) -> (new_state, deltas)，
不完整的末尾行保存在 state.buffer 里，拼到下一个块前面再切行。
按字节缓冲，避免多字节 UTF-8 字符被拆开后解码出错。

单帧 JSON 损坏或结构不符都直接丢弃，不会中断整个流。
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from chat_core.domain.models import StreamDelta


DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class _Delta(BaseModel):
    content: Optional[str] = None


class _StreamChoice(BaseModel):
    delta: Optional[_Delta] = None


def first_choice(data: Any) -> Any:
    """取出 choices[0]，文档不是对象或 choices 不是非空列表时返回 None。

    只看第一个候选，其余候选的结构不影响结果。
    """

    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    return choices[0]


@dataclass(frozen=True)
class StreamState:
    buffer: bytes = b""


def parse_line(line: str) -> Optional[StreamDelta]:
    """解析一行，返回增量；非 data 行、结束标记、坏帧都返回 None。"""

    line = line.strip()
    if not line or not line.startswith(DATA_PREFIX):
        return None
    data = line[len(DATA_PREFIX):]
    if data == DONE_SENTINEL:
        return None
    try:
        choice = _StreamChoice.model_validate(first_choice(json.loads(data)))
    except (json.JSONDecodeError, SchemaError):
        return None
    delta = choice.delta
    if delta is None or delta.content is None:
        return None
    return StreamDelta(content=delta.content)


def _parse_lines(raw_lines: List[bytes]) -> List[StreamDelta]:
    deltas: List[StreamDelta] = []
    for raw in raw_lines:
        delta = parse_line(raw.decode("utf-8", errors="replace"))
        if delta is not None:
            deltas.append(delta)
    return deltas


def feed(state: StreamState, chunk: bytes) -> Tuple[StreamState, List[StreamDelta]]:
    """处理一个字节块，返回新状态和本块产出的增量（按到达顺序）。"""

    *complete, rest = (state.buffer + chunk).split(b"\n")
    return StreamState(buffer=rest), _parse_lines(complete)


def flush(state: StreamState) -> List[StreamDelta]:
    """传输结束时处理缓冲中没有换行结尾的最后一行。"""

    if not state.buffer:
        return []
    return _parse_lines([state.buffer])
