"""Error hierarchy for the tutor chat proxy.

Every failure raised by the gateway or the completion client is a
``ChatServiceError``. Each class carries the HTTP status and the user-facing
message the gateway reports; ``str(exc)`` is the raw detail.
"""


class ChatServiceError(Exception):
    """Base class for all tutor errors."""

    status_code: int = 502
    user_message: str = "DeepSeek API call failed"


class InvalidRequestError(ChatServiceError):
    """The inbound request body is missing, malformed, or has no message."""

    status_code = 400
    user_message = "Invalid request"


class ConfigurationError(ChatServiceError):
    """The provider API key is not configured."""

    status_code = 500
    user_message = "Server configuration error"


class UpstreamStatusError(ChatServiceError):
    """The provider answered with a non-2xx status."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class AuthError(UpstreamStatusError):
    status_code = 401
    user_message = "API密钥无效或已过期"


class RateLimitError(UpstreamStatusError):
    status_code = 429
    user_message = "API调用频率超限，请稍后再试"


class UpstreamTimeoutError(ChatServiceError, TimeoutError):
    """The provider did not answer within the request timeout."""

    status_code = 504
    user_message = "API请求超时，请重试"


class TransportError(ChatServiceError):
    """DNS or connection failure before a response arrived."""

    status_code = 503
    user_message = "无法连接到DeepSeek服务器，请检查网络连接"


class MalformedResponseError(ChatServiceError):
    """The response JSON lacks choices or message content."""

    user_message = "DeepSeek服务器返回了无效的响应格式"


class ResponseParseError(ChatServiceError):
    """The response body could not be decoded."""

    user_message = "DeepSeek服务器返回了无效的响应格式"
