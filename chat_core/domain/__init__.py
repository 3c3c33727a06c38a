"""领域层模型与协议。

包含：
- models: ChatMessage / ContextResource / ChatPayload / StreamDelta 等请求级模型。
- conversation: 将新旧两种聊天对象统一转换为 ChatMessage 序列。
- exceptions: 业务异常类型定义。
"""
