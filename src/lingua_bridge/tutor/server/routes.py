"""API route handlers for the HTTP gateway."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from lingua_bridge.tutor.completion import CompletionResult
from lingua_bridge.tutor.gateway import IncomingRequest, handle_request
from lingua_bridge.tutor.server.models import CHAT_RESPONSES, ChatRequest, HealthResponse

router = APIRouter()

# Everything except POST is answered by the gateway itself (preflight or 405).
OTHER_METHODS = ["GET", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.get("/health")
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.post(
    "/",
    response_model=CompletionResult,
    responses=CHAT_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ChatRequest.model_json_schema()}},
        }
    },
)
@router.api_route("/", methods=OTHER_METHODS, include_in_schema=False)
async def chat_endpoint(request: Request) -> Response:
    # Read the raw body so the gateway can report missing or invalid JSON itself.
    raw = await request.body()
    incoming = IncomingRequest(
        method=request.method,
        body=raw.decode("utf-8", errors="replace") if raw else None,
        headers=dict(request.headers),
    )
    result = await handle_request(incoming)
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )
