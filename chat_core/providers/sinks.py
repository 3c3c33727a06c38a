"""流式增量的输出通道。

任何 `Callable[[StreamDelta], None]` 都可以作为 sink；
这里提供两个常用实现。
"""

import json
from typing import Callable, List, TextIO

from chat_core.domain.models import StreamDelta


DeltaSink = Callable[[StreamDelta], None]


class CollectingSink:
    """把收到的增量按顺序保存在列表里。"""

    def __init__(self):
        self.deltas: List[StreamDelta] = []

    def __call__(self, delta: StreamDelta) -> None:
        self.deltas.append(delta)

    @property
    def texts(self) -> List[str]:
        return [d.content for d in self.deltas]


class SseWriterSink:
    """把增量重新编码为 SSE 事件写入文本流，并立即 flush。

    输出格式：`data: {"type": "chunk", "content": "..."}\\n\\n`，
    便于直接转发给浏览器端的 EventSource。
    """

    def __init__(self, stream: TextIO):
        self._stream = stream

    def __call__(self, delta: StreamDelta) -> None:
        event = json.dumps({"type": "chunk", "content": delta.content}, ensure_ascii=False)
        self._stream.write(f"data: {event}\n\n")
        self._stream.flush()
