"""
API routes for the life insurance advisor.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional
from fastapi import APIRouter, HTTPException, Query

from lifequote import __version__
from lifequote.config import get_settings
from lifequote.core.conversation_store import ConversationStore
from lifequote.core.lead_store import LeadStore
from lifequote.core.user_store import UserStore
from lifequote.core.mongodb_client import ping
from lifequote.exceptions import (
    DuplicateLeadError,
    DuplicateUserError,
    LeadNotFoundError,
    ProfileNotReadyError,
    UserNotFoundError,
)
from lifequote.pipeline import engine
from lifequote.pipeline.models import LeadCreate, LeadUpdate, UserCreate, UserProfileUpdate
from lifequote.pipeline.orchestrator import ChatPipeline
from lifequote.pipeline.steps import QuoteGenerationStep, QuoteReadinessStep
from lifequote.api.schemas import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ProfileAnalyzeRequest,
    ProfileAnalyzeResponse,
    QuotesRequest,
    QuotesResponse,
)


logger = logging.getLogger(__name__)
router = APIRouter()


def _serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    document = dict(document)
    document["id"] = document.pop("_id")
    return document


@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """
    Check the health status of the API and its dependencies.
    """
    settings = get_settings()
    mongodb_connected = ping()
    llm_configured = settings.llm_configured

    return HealthResponse(
        status="healthy" if mongodb_connected and llm_configured else "degraded",
        version=__version__,
        mongodb_connected=mongodb_connected,
        llm_configured=llm_configured,
        timestamp=datetime.utcnow(),
    )


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    tags=["Chat"],
    summary="Run one advisor chat turn",
)
def chat(request: ChatRequest):
    """
    Send the conversation so far and get the advisor's reply.
    Quotes are attached when the advisor asks for them and the profile is ready.
    """
    if not request.messages:
        raise HTTPException(status_code=400, detail="Invalid messages format")
    if not request.session_id:
        raise HTTPException(status_code=400, detail="Session ID is required")

    try:
        pipeline = ChatPipeline()
        result = pipeline.process(
            request.messages, request.user_profile, request.session_id, user_id=request.user_id
        )
    except Exception as e:
        logger.exception(f"Chat API error: {e}")
        raise HTTPException(status_code=500, detail="Failed to process chat message")

    return ChatResponse(
        message=result.message,
        user_profile=result.user_profile.snapshot(),
        quotes=result.quotes,
        show_lead_form=result.show_lead_form,
        metadata=result.metadata,
    )


@router.post(
    "/api/profile/analyze",
    response_model=ProfileAnalyzeResponse,
    tags=["Profile"],
    summary="Extract a profile from free text",
)
def analyze_profile(request: ProfileAnalyzeRequest):
    """Run the profile engine without calling the LLM or touching the database."""
    profile = engine.extract_profile(request.text, request.user_profile)

    return ProfileAnalyzeResponse(
        user_profile=profile.snapshot(),
        coverage_amount=engine.estimate_coverage(profile),
        profile_completeness=engine.score_completeness(profile),
        ready_for_quotes=engine.is_ready_for_quotes(profile),
        missing_fields=QuoteReadinessStep().missing_fields(profile),
    )


@router.post(
    "/api/quotes",
    response_model=QuotesResponse,
    tags=["Quotes"],
    summary="Price a profile",
)
def get_quotes(request: QuotesRequest):
    """Generate mock carrier quotes for a profile that has age and income."""
    settings = get_settings()
    try:
        quote_request = engine.build_quote_request(
            request.user_profile, request.term or settings.quote_term_years
        )
    except ProfileNotReadyError as e:
        raise HTTPException(status_code=422, detail=str(e))

    quotes = QuoteGenerationStep(include_sbli=settings.sbli_enabled).execute(quote_request)

    return QuotesResponse(
        quote_request=quote_request,
        quotes=quotes,
        best_quote=quotes[0] if quotes else None,
    )


@router.post("/api/leads", tags=["Leads"], status_code=201)
def create_lead(lead: LeadCreate):
    """Store the contact details submitted from the lead form."""
    try:
        document = LeadStore().create(lead)
    except DuplicateLeadError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception(f"Error creating lead: {e}")
        raise HTTPException(status_code=500, detail="Failed to create lead")

    return {"success": True, "lead_id": document["_id"]}


@router.get("/api/leads", tags=["Leads"])
def list_leads(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status: Optional[str] = None,
    search: Optional[str] = None,
    assigned_to: Optional[str] = Query(default=None, alias="assignedTo"),
):
    """List leads, newest first."""
    try:
        result = LeadStore().list(
            page=page, limit=limit, status=status, search=search, assigned_to=assigned_to
        )
    except Exception as e:
        logger.exception(f"Error listing leads: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch leads")

    result["leads"] = [_serialize_document(lead) for lead in result["leads"]]
    return result


@router.get("/api/leads/{lead_id}", tags=["Leads"])
def get_lead(lead_id: str):
    """Get one lead with its activity log."""
    try:
        return _serialize_document(LeadStore().get(lead_id))
    except LeadNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/api/leads/{lead_id}", tags=["Leads"])
def update_lead(lead_id: str, changes: LeadUpdate):
    """Update status, notes, assignee or follow-up date."""
    try:
        lead = LeadStore().update(lead_id, changes)
    except LeadNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _serialize_document(lead)


@router.delete("/api/leads/{lead_id}", tags=["Leads"])
def delete_lead(lead_id: str):
    """Soft-delete a lead."""
    try:
        LeadStore().delete(lead_id)
    except LeadNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"success": True, "message": f"Lead {lead_id} deleted"}


@router.get("/api/conversations/{session_id}/messages", tags=["Chat"])
def get_conversation_messages(
    session_id: str,
    limit: int = Query(default=100, ge=1, le=500),
):
    """Get the stored messages of a chat session, oldest first."""
    try:
        messages = ConversationStore().get_messages(session_id, limit=limit)
    except Exception as e:
        logger.exception(f"Error fetching messages for session {session_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch messages")

    return {"session_id": session_id, "messages": messages, "count": len(messages)}


@router.post("/api/users", tags=["Users"], status_code=201)
def create_user(user: UserCreate):
    """Create a user account."""
    try:
        document = UserStore().create(user)
    except DuplicateUserError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception(f"Error creating user: {e}")
        raise HTTPException(status_code=500, detail="Failed to create user")

    return {"success": True, "user": _serialize_document(document)}


@router.get("/api/users/{user_id}", tags=["Users"])
def get_user(user_id: str):
    try:
        return {"user": _serialize_document(UserStore().get(user_id))}
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/api/users/{user_id}", tags=["Users"])
def update_user_profile(user_id: str, changes: UserProfileUpdate):
    """
    Update a user's profile and contact preferences. Setting a country
    without a currency also sets the matching currency.
    """
    try:
        user = UserStore().update_profile(user_id, changes)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception(f"Error updating profile for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")

    return {
        "success": True,
        "user": _serialize_document(user),
        "message": "Profile updated successfully",
    }
