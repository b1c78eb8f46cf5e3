"""
Chat pipeline components.
"""

from .models import (
    Profile,
    ChatMessage,
    QuoteRequest,
    CarrierQuote,
    ChatTurnResult,
    LeadCreate,
    LeadUpdate,
)
from .engine import (
    extract_profile,
    estimate_coverage,
    score_completeness,
    is_ready_for_quotes,
    build_quote_request,
)

__all__ = [
    "Profile",
    "ChatMessage",
    "QuoteRequest",
    "CarrierQuote",
    "ChatTurnResult",
    "LeadCreate",
    "LeadUpdate",
    "extract_profile",
    "estimate_coverage",
    "score_completeness",
    "is_ready_for_quotes",
    "build_quote_request",
]
