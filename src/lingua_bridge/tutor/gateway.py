"""
Transport-agnostic request gateway.

Validates the inbound request, calls the completion client, and maps every
outcome to a status code and JSON body. All responses carry CORS headers;
the request origin is logged but never enforced.
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from lingua_bridge.tutor.completion import CompletionClient, CompletionResult
from lingua_bridge.tutor.config import TutorSettings, get_settings
from lingua_bridge.tutor.errors import ChatServiceError, ConfigurationError, InvalidRequestError

logger = logging.getLogger(__name__)

ALLOW_HEADERS = "Content-Type, Authorization"
ALLOW_METHODS = "POST, OPTIONS"
PREFLIGHT_MAX_AGE = "86400"
ERROR_HELP = "Please check your API key and network connection"
GENERIC_FAILURE = "DeepSeek API call failed"
MESSAGE_PREVIEW_CHARS = 100


@dataclass(frozen=True)
class IncomingRequest:
    """One HTTP call as seen by the gateway."""

    method: str
    body: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def origin(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == "origin":
                return value
        return "Unknown"


@dataclass(frozen=True)
class GatewayResponse:
    status_code: int
    headers: dict[str, str]
    body: str = ""

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


class ChatPayload(BaseModel):
    """Parsed request body."""

    message: str

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message must not be empty")
        return value


def cors_headers(full: bool = False) -> dict[str, str]:
    headers = {"Access-Control-Allow-Origin": "*"}
    if full:
        headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
    return headers


def _json_response(
    status_code: int,
    content: Mapping[str, Any],
    extra_headers: Mapping[str, str] | None = None,
) -> GatewayResponse:
    headers = {"Content-Type": "application/json", **cors_headers()}
    if extra_headers:
        headers.update(extra_headers)
    return GatewayResponse(
        status_code=status_code,
        headers=headers,
        body=json.dumps(content, ensure_ascii=False),
    )


def _preview(message: str) -> str:
    if len(message) > MESSAGE_PREVIEW_CHARS:
        return f"{message[:MESSAGE_PREVIEW_CHARS]}..."
    return message


def preflight_response() -> GatewayResponse:
    headers = cors_headers(full=True)
    headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
    return GatewayResponse(status_code=200, headers=headers, body="")


def error_response(exc: BaseException) -> GatewayResponse:
    """Map a failure raised while calling the provider to an error response."""
    if isinstance(exc, ChatServiceError):
        status_code, user_message = exc.status_code, exc.user_message
    else:
        status_code, user_message = 502, GENERIC_FAILURE
    return _json_response(
        status_code,
        {
            "success": False,
            "error": user_message,
            "details": str(exc),
            "help": ERROR_HELP,
        },
    )


def parse_payload(body: str | None) -> ChatPayload:
    """
    Parse and validate the raw request body.

    Raises:
        InvalidRequestError: With the user-facing reason as its message
    """
    if not body:
        raise InvalidRequestError("Request body is required")

    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON body: %s", exc)
        raise InvalidRequestError("Invalid JSON format in request body") from exc

    try:
        payload = ChatPayload.model_validate(parsed)
    except ValidationError as exc:
        raise InvalidRequestError("Message content is required") from exc

    logger.info(
        "Received message: %r (length %d)", _preview(payload.message), len(payload.message)
    )
    return payload


async def handle_request(
    request: IncomingRequest,
    settings: TutorSettings | None = None,
    client_factory: Callable[[TutorSettings], CompletionClient] = CompletionClient,
) -> GatewayResponse:
    """
    Handle one chat request.

    Args:
        request: Method, raw body and headers of the inbound call
        settings: Optional settings instance (uses global if not provided)
        client_factory: Builds the completion client from settings; tests
                        inject fakes here

    Returns:
        GatewayResponse ready to be written by the hosting surface
    """
    method = request.method.upper()
    logger.info("Chat request: method=%s origin=%s", method, request.origin)

    if method == "OPTIONS":
        logger.info("Handling OPTIONS preflight request")
        return preflight_response()

    if method != "POST":
        logger.error("Invalid HTTP method: %s", method)
        return _json_response(
            405,
            {
                "success": False,
                "error": "Method Not Allowed",
                "message": "Only POST requests are allowed",
            },
            extra_headers={"Access-Control-Allow-Methods": ALLOW_METHODS},
        )

    try:
        payload = parse_payload(request.body)
    except InvalidRequestError as exc:
        logger.error("Rejected request: %s", exc)
        return _json_response(exc.status_code, {"success": False, "error": str(exc)})

    s = settings or get_settings()
    if not s.has_api_key:
        logger.error("DEEPSEEK_API_KEY environment variable is not set")
        return _json_response(
            ConfigurationError.status_code,
            {
                "success": False,
                "error": ConfigurationError.user_message,
                "message": "API key is not configured. Please contact the administrator.",
            },
        )
    logger.info("API key found, length: %d", len(s.deepseek_api_key or ""))

    try:
        client = client_factory(s)
        result: CompletionResult = await client.complete(payload.message)
    except Exception as exc:
        logger.exception("Chat request failed: %s", exc)
        return error_response(exc)

    logger.info(
        "DeepSeek API call successful (text=%d chars, translation=%d chars)",
        len(result.text),
        len(result.translation),
    )
    return _json_response(200, result.model_dump(), extra_headers=cors_headers(full=True))
