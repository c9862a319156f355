"""Serverless entry point for API Gateway / Netlify style function events."""

import asyncio
import base64
import logging
from typing import Any

from lingua_bridge.tutor.gateway import IncomingRequest, handle_request

logger = logging.getLogger(__name__)


def _event_body(event: dict[str, Any]) -> str | None:
    body = event.get("body")
    if body is None:
        return None
    if event.get("isBase64Encoded"):
        return base64.b64decode(body).decode("utf-8", errors="replace")
    return body


def _event_method(event: dict[str, Any]) -> str:
    # REST API events carry httpMethod; HTTP API v2 events nest it under requestContext.
    method = event.get("httpMethod")
    if method is None:
        method = event.get("requestContext", {}).get("http", {}).get("method", "")
    return method


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Run one chat request and return a proxy-integration response dict."""
    request = IncomingRequest(
        method=_event_method(event),
        body=_event_body(event),
        headers=event.get("headers") or {},
    )
    response = asyncio.run(handle_request(request))
    return {
        "statusCode": response.status_code,
        "headers": response.headers,
        "body": response.body,
    }
