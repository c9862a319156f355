"""
Lingua Bridge English Tutor

Chat proxy for an English-learning UI:
- Forwards learner questions to DeepSeek with a fixed teaching prompt
- Splits each answer into English text and a Chinese translation
- Serves the result over FastAPI or as a serverless function
"""

from typing import TYPE_CHECKING

__version__ = "0.1.0"

from lingua_bridge.tutor.completion import (
    CompletionClient,
    CompletionLatch,
    CompletionRequest,
    CompletionResult,
)
from lingua_bridge.tutor.config import (
    TutorSettings,
    configure,
    get_settings,
    reset_settings,
    set_settings,
)
from lingua_bridge.tutor.gateway import GatewayResponse, IncomingRequest, handle_request
from lingua_bridge.tutor.translation import extract_translation, split_translation

# The server pulls in FastAPI, so it is only imported on first access.
if TYPE_CHECKING:
    from lingua_bridge.tutor.server.app import app as server_app

__all__ = [
    # Version
    "__version__",
    # Completion
    "CompletionClient",
    "CompletionLatch",
    "CompletionRequest",
    "CompletionResult",
    # Translation
    "extract_translation",
    "split_translation",
    # Gateway
    "GatewayResponse",
    "IncomingRequest",
    "handle_request",
    # Config
    "get_settings",
    "set_settings",
    "reset_settings",
    "configure",
    "TutorSettings",
    # Server
    "server_app",
]


def __getattr__(name: str):
    """Lazy import for the ASGI app."""
    if name == "server_app":
        from lingua_bridge.tutor.server.app import app

        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
