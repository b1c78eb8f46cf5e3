"""
API layer for the advisor chat.
"""

from .routes import router
from .schemas import ChatRequest, ChatResponse, HealthResponse

__all__ = [
    "router",
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
]
