"""Pydantic response models documenting the chat route in OpenAPI."""

from typing import Any

from pydantic import BaseModel


class ChatRequest(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned by the chat route."""

    success: bool = False
    error: str
    message: str | None = None
    details: str | None = None
    help: str | None = None


class HealthResponse(BaseModel):
    status: str


CHAT_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"model": ErrorResponse}
    for status in (400, 401, 405, 429, 500, 502, 503, 504)
}
