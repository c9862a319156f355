"""FastAPI HTTP gateway for the English tutor chat proxy."""

import json
import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from lingua_bridge.tutor.config import get_settings
from lingua_bridge.tutor.gateway import ERROR_HELP, cors_headers
from lingua_bridge.tutor.server.routes import router

REQUEST_ID_PREFIX = "req_"

current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)

logger = logging.getLogger(__name__)


# --- Structured JSON logging ---
class _JSONFormatter(logging.Formatter):
    """Structured JSON log formatter with required observability fields."""

    def format(self, record: logging.LogRecord) -> str:
        settings = get_settings()
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "service": settings.service_name,
            "environment": settings.service_environment,
            "logger": record.name,
        }
        if hasattr(record, "request_id"):
            log_data["requestId"] = record.request_id
        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


class _RequestIDFilter(logging.Filter):
    """Stamp records emitted while serving a request with its id."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = current_request_id.get()
        if request_id is not None and not hasattr(record, "request_id"):
            record.request_id = request_id
        return True


def _configure_logging() -> None:
    """Configure structured JSON logging for the server."""
    handler = logging.StreamHandler()
    handler.setFormatter(_JSONFormatter())
    handler.addFilter(_RequestIDFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: configure logging and report whether the API key is present."""
    _configure_logging()
    if get_settings().has_api_key:
        logger.info("DeepSeek API key configured")
    else:
        logger.warning("DEEPSEEK_API_KEY is not set; chat requests will fail with 500")
    yield


app = FastAPI(title="Lingua Bridge English Tutor", lifespan=lifespan)


# --- Request ID middleware (raw ASGI for performance) ---
class RequestIDMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = f"{REQUEST_ID_PREFIX}{secrets.token_urlsafe(16)}"
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers
            await send(message)

        token = current_request_id.set(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            current_request_id.reset(token)


# cast() needed because ty cannot match raw ASGI middleware classes to the
# _MiddlewareFactory[P] ParamSpec protocol used by add_middleware.
app.add_middleware(cast(Any, RequestIDMiddleware))


# --- Exception handlers ---
@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "details": str(exc),
            "help": ERROR_HELP,
        },
        headers=cors_headers(),
    )


# --- Routes ---
app.include_router(router)
