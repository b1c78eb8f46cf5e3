"""
Pydantic schemas for API request/response validation.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from lifequote.pipeline.models import (
    CarrierQuote,
    ChatMessage,
    ChatTurnMetadata,
    Profile,
    QuoteRequest,
)


class ChatRequest(BaseModel):
    """Request body for one chat turn."""
    model_config = ConfigDict(populate_by_name=True)

    messages: List[ChatMessage] = Field(default_factory=list)
    user_profile: Profile = Field(default_factory=Profile, alias="userProfile")
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    user_id: Optional[str] = Field(default=None, alias="userId")


class ChatResponse(BaseModel):
    """Assistant reply plus everything the UI needs to render the turn."""
    message: str
    user_profile: Dict[str, Any] = Field(default_factory=dict)
    quotes: List[CarrierQuote] = Field(default_factory=list)
    show_lead_form: bool = False
    metadata: ChatTurnMetadata

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "message": "Great news, here are a few options for you!",
            "user_profile": {"age": 29, "income": 75000, "dependents": 2, "marital_status": "married"},
            "quotes": [],
            "show_lead_form": False,
            "metadata": {
                "quotes_generated": 0,
                "conversation_id": "9f1c2e0a7b5d4c3e8a6f1b2d3c4e5f60",
                "database_connected": True,
                "profile_completeness": 46,
                "coverage_amount": 1200000,
            },
        }
    })


class ProfileAnalyzeRequest(BaseModel):
    """Free text to run through the profile engine."""
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., min_length=1, description="User-authored conversation text")
    user_profile: Profile = Field(default_factory=Profile, alias="userProfile")


class ProfileAnalyzeResponse(BaseModel):
    """Engine output for a piece of text."""
    user_profile: Dict[str, Any] = Field(default_factory=dict)
    coverage_amount: int
    profile_completeness: int
    ready_for_quotes: bool
    missing_fields: List[str] = Field(default_factory=list)


class QuotesRequest(BaseModel):
    """Profile to price."""
    model_config = ConfigDict(populate_by_name=True)

    user_profile: Profile = Field(..., alias="userProfile")
    term: Optional[int] = Field(default=None, ge=5, le=40, description="Term length in years")


class QuotesResponse(BaseModel):
    """Priced offers for a profile."""
    quote_request: QuoteRequest
    quotes: List[CarrierQuote] = Field(default_factory=list)
    best_quote: Optional[CarrierQuote] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(default="healthy")
    version: str
    mongodb_connected: bool
    llm_configured: bool
    timestamp: datetime = Field(default_factory=datetime.utcnow)
