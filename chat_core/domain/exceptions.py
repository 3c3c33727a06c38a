"""统一业务异常模型。

客户端抛出的所有错误都继承自 BusinessError，
便于调用方统一捕获，并按 code / http_status 给出用户提示。
异常信息中不会包含 API 密钥。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 url、provider 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class EncodingError(BusinessError):
    """请求体无法序列化为 JSON。"""


class TransportError(BusinessError):
    """网络层错误：连接失败、传输中断、超时等，发生在拿到 HTTP 响应之前。"""


class AuthenticationError(BusinessError):
    """Provider 返回 401。"""


class ApiError(BusinessError):
    """Provider 返回 401 以外的非 200 状态码。"""

    @property
    def status(self) -> int:
        return self.http_status


class MalformedResponseError(BusinessError):
    """状态码为 200，但响应体不是合法 JSON 或结构不符合预期。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
