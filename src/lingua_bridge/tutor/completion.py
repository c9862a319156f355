"""
DeepSeek chat completion client using LiteLLM.

Each call makes exactly one attempt: no retries, no streaming. The outcome
(response, provider error, or timeout) settles a single-shot latch, so a late
response after a timeout can never produce a second result.
"""

import asyncio
import json
import logging
from typing import Any

import httpx
import litellm
from litellm import acompletion as litellm_acompletion
from pydantic import BaseModel, ConfigDict, Field

from lingua_bridge.tutor.config import TutorSettings, get_settings
from lingua_bridge.tutor.errors import (
    AuthError,
    ChatServiceError,
    ConfigurationError,
    MalformedResponseError,
    RateLimitError,
    ResponseParseError,
    TransportError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)
from lingua_bridge.tutor.prompts import build_messages
from lingua_bridge.tutor.translation import split_translation

PROVIDER = "deepseek"

# LiteLLM wraps socket and DNS failures in InternalServerError / APIError
# without chaining the original exception, so these phrases are all that is left.
CONNECTION_FAILURE_MARKERS = (
    "cannot connect to host",
    "connection error",
    "connection refused",
    "connection reset",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "network is unreachable",
    "server disconnected",
)
NON_JSON_MARKER = "unable to get json response"

_LITELLM_WRAPPERS = (
    litellm.APIError,
    litellm.InternalServerError,
    litellm.ServiceUnavailableError,
    litellm.BadGatewayError,
)

logger = logging.getLogger(__name__)


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    content: str


class CompletionRequest(BaseModel):
    """Request body sent to the chat-completions endpoint."""

    model_config = ConfigDict(frozen=True)

    model: str
    messages: tuple[ChatMessage, ...]
    max_tokens: int = 1200
    temperature: float = 0.7
    stream: bool = False
    frequency_penalty: float = 0.3
    presence_penalty: float = 0.3

    @classmethod
    def for_message(cls, message: str, settings: TutorSettings) -> "CompletionRequest":
        """Build the request for one learner message using configured parameters."""
        return cls(
            model=settings.model,
            messages=tuple(ChatMessage(**m) for m in build_messages(message)),
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            frequency_penalty=settings.frequency_penalty,
            presence_penalty=settings.presence_penalty,
        )

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump()
        payload["messages"] = [m.model_dump() for m in self.messages]
        return payload


class CompletionResult(BaseModel):
    """Split reply returned to the client UI."""

    text: str
    translation: str
    success: bool = True
    tokens: dict[str, Any] = Field(default_factory=dict)


class CompletionLatch:
    """
    Resolve-once guard around a future.

    The first call to ``resolve`` or ``reject`` settles the latch and returns
    True; every later call is ignored and returns False.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def resolve(self, value: Any) -> bool:
        if self._future.done():
            return False
        self._future.set_result(value)
        return True

    def reject(self, exc: BaseException) -> bool:
        if self._future.done():
            return False
        self._future.set_exception(exc)
        return True

    async def wait(self) -> Any:
        return await self._future


def _error_field(text: str | None) -> str | None:
    """Pull ``error.message`` out of the first JSON object embedded in text."""
    if not text:
        return None
    start = text.find("{")
    if start == -1:
        return None
    try:
        data, _ = json.JSONDecoder().raw_decode(text[start:])
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


def _upstream_message(exc: BaseException, status: int) -> str:
    response = getattr(exc, "response", None)
    candidates = (
        getattr(response, "text", None),
        getattr(exc, "message", None),
        str(exc),
    )
    for candidate in candidates:
        message = _error_field(candidate if isinstance(candidate, str) else None)
        if message:
            return message
    return f"DeepSeek API returned status {status}"


def _describe_cause(exc: BaseException) -> str:
    cause = exc.__cause__ or exc.__context__
    if cause is None:
        return str(exc)
    return f"{exc} (cause: {type(cause).__name__}: {cause})"


def _chained_network_error(exc: BaseException) -> BaseException | None:
    seen: set[int] = set()
    current = exc.__cause__ or exc.__context__
    while current is not None and id(current) not in seen:
        if isinstance(current, (OSError, httpx.NetworkError)):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def _is_connection_failure(exc: BaseException) -> bool:
    if isinstance(exc, litellm.APIConnectionError):
        return True
    if _chained_network_error(exc) is not None:
        return True
    if not isinstance(exc, _LITELLM_WRAPPERS):
        return False
    text = str(exc).lower()
    return any(marker in text for marker in CONNECTION_FAILURE_MARKERS)


def _is_unparseable_body(exc: BaseException) -> bool:
    if isinstance(exc, json.JSONDecodeError):
        return True
    return isinstance(exc, _LITELLM_WRAPPERS) and NON_JSON_MARKER in str(exc).lower()


def _provider_usage(usage: Any) -> dict[str, Any]:
    """Usage as the provider sent it, without the null detail keys LiteLLM adds."""
    if not isinstance(usage, dict):
        return {}
    return {key: value for key, value in usage.items() if value is not None}


def translate_error(exc: BaseException) -> BaseException:
    """
    Map a LiteLLM (or decoding) exception onto the tutor error hierarchy.

    Connection and body-decoding failures are recognised before the HTTP
    status, since LiteLLM reports both with a synthetic status code.
    Exceptions that match no known kind are returned unchanged; the gateway
    reports those as a generic upstream failure.
    """
    if isinstance(exc, ChatServiceError):
        return exc
    if isinstance(exc, litellm.Timeout):
        return UpstreamTimeoutError(f"Request timeout - DeepSeek API did not respond: {exc}")
    if _is_unparseable_body(exc):
        return ResponseParseError(f"Failed to parse DeepSeek response: {exc}")
    if _is_connection_failure(exc):
        return TransportError(f"HTTP request failed: {_describe_cause(exc)}")

    status = getattr(exc, "status_code", None)
    if isinstance(status, int) and not 200 <= status < 300:
        message = f"{_upstream_message(exc, status)} (Status: {status})"
        if status == 401:
            return AuthError(message, upstream_status=status)
        if status == 429:
            return RateLimitError(message, upstream_status=status)
        return UpstreamStatusError(message, upstream_status=status)
    return exc


class CompletionClient:
    """
    Single-attempt client for the DeepSeek chat-completions API.

    Args:
        settings: Configuration holding the API key and request parameters
                  (uses the global settings if not provided)

    Raises:
        ConfigurationError: If no API key is configured

    Example:
        >>> client = CompletionClient(TutorSettings(deepseek_api_key="sk-..."))
        >>> result = await client.complete('How to use "it" in English?')
        >>> print(result.text, result.translation)
    """

    def __init__(self, settings: TutorSettings | None = None) -> None:
        s = settings or get_settings()
        if not s.has_api_key:
            raise ConfigurationError("DEEPSEEK_API_KEY environment variable is not set")
        self.settings = s

    def build_request(self, message: str) -> CompletionRequest:
        return CompletionRequest.for_message(message, self.settings)

    async def _send(self, request: CompletionRequest) -> Any:
        return await litellm_acompletion(
            **request.to_payload(),
            custom_llm_provider=PROVIDER,
            api_key=self.settings.deepseek_api_key,
            api_base=self.settings.deepseek_api_base,
            timeout=self.settings.request_timeout,
            num_retries=0,
            extra_headers={
                "User-Agent": self.settings.user_agent,
                "Accept": "application/json",
            },
        )

    async def _call(self, request: CompletionRequest) -> Any:
        """Run the request, settling on the first of response, error or timeout."""
        loop = asyncio.get_running_loop()
        latch = CompletionLatch()
        task = asyncio.ensure_future(self._send(request))
        timeout_ms = int(self.settings.request_timeout * 1000)

        def on_done(fut: asyncio.Future[Any]) -> None:
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is None:
                latch.resolve(fut.result())
            elif not latch.reject(translate_error(exc)):
                logger.warning("Ignoring late DeepSeek error after settle: %s", exc)

        def on_timeout() -> None:
            error = UpstreamTimeoutError(
                f"Request timeout - DeepSeek API did not respond in {timeout_ms}ms"
            )
            if latch.reject(error):
                logger.error("Request timeout after %d ms, aborting request", timeout_ms)
                task.cancel()

        task.add_done_callback(on_done)
        timer = loop.call_later(self.settings.request_timeout, on_timeout)
        try:
            return await latch.wait()
        finally:
            timer.cancel()

    def _parse_response(self, response: Any) -> CompletionResult:
        try:
            data = response.model_dump()
        except (TypeError, ValueError) as exc:
            raise ResponseParseError(f"Failed to parse DeepSeek response: {exc}") from exc

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            logger.error("Invalid DeepSeek response format - missing choices: %s", data)
            raise MalformedResponseError(
                "Invalid response format from DeepSeek API: missing choices array"
            )

        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            logger.error("Invalid DeepSeek response format - missing message content: %s", first)
            raise MalformedResponseError(
                "Invalid response format from DeepSeek API: missing message content"
            )

        logger.info("AI content extracted, length: %d", len(content))
        text, translation = split_translation(content)
        logger.info("English part length: %d, Chinese part length: %d", len(text), len(translation))
        return CompletionResult(
            text=text,
            translation=translation,
            tokens=_provider_usage(data.get("usage")),
        )

    async def complete(self, message: str) -> CompletionResult:
        """
        Ask the teaching assistant one question.

        Args:
            message: The learner's non-empty message

        Returns:
            CompletionResult with the English answer, its Chinese translation
            and the provider's usage metadata

        Raises:
            ChatServiceError: On any provider, transport, timeout or format failure
        """
        request = self.build_request(message)
        payload_size = len(json.dumps(request.to_payload(), ensure_ascii=False).encode("utf-8"))
        logger.info(
            "Calling DeepSeek API (model=%s, body=%d bytes, timeout=%.0fs)",
            request.model,
            payload_size,
            self.settings.request_timeout,
        )
        response = await self._call(request)
        logger.info("DeepSeek API response received")
        return self._parse_response(response)
