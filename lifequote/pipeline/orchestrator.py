"""
Pipeline Orchestrator
Runs one chat turn: advisor reply, profile extraction, quotes and persistence.
"""

import logging
from typing import List, Optional

from lifequote.config import get_settings
from lifequote.core.conversation_store import ConversationStore
from lifequote.core.fireworks_client import get_fireworks_client, FireworksClient
from lifequote.prompts import ADVISOR_SYSTEM, FALLBACK_REPLY, QUOTE_TRIGGER
from lifequote.pipeline.models import (
    CarrierQuote,
    ChatMessage,
    ChatTurnMetadata,
    ChatTurnResult,
    Profile,
)
from lifequote.pipeline.steps import (
    ProfileExtractionStep,
    CoverageEstimationStep,
    CompletenessScoringStep,
    QuoteReadinessStep,
    QuoteGenerationStep,
    build_conversation_text,
)


logger = logging.getLogger(__name__)


class ChatPipeline:
    """
    Orchestrates a single chat turn.
    Persistence and quoting failures never fail the turn.
    """

    def __init__(
        self,
        llm_client: Optional[FireworksClient] = None,
        conversation_store: Optional[ConversationStore] = None,
    ):
        """
        Initialize the pipeline with required services.

        Args:
            llm_client: Fireworks client (uses default if not provided)
            conversation_store: Conversation persistence (uses default if not provided)
        """
        settings = get_settings()
        self.llm_client = llm_client or get_fireworks_client()
        self.conversation_store = conversation_store or ConversationStore()
        self.quote_term = settings.quote_term_years

        coverage = CoverageEstimationStep()
        self.steps = {
            "profile_extraction": ProfileExtractionStep(),
            "coverage_estimation": coverage,
            "completeness": CompletenessScoringStep(),
            "quote_readiness": QuoteReadinessStep(coverage),
            "quote_generation": QuoteGenerationStep(include_sbli=settings.sbli_enabled),
        }

    def process(
        self,
        messages: List[ChatMessage],
        user_profile: Optional[Profile],
        session_id: str,
        user_id: Optional[str] = None,
    ) -> ChatTurnResult:
        """
        Process one user turn.

        Args:
            messages: Full conversation so far, oldest first
            user_profile: Profile returned by the previous turn
            session_id: Client session identifier
            user_id: Signed-in user to link the conversation to, if any

        Returns:
            ChatTurnResult with the reply, updated profile and any quotes
        """
        user_profile = user_profile or Profile()
        conversation = self.conversation_store.get_or_create(session_id, user_profile, user_id=user_id)

        reply = self.llm_client.chat(
            [m.model_dump(include={"role", "content"}) for m in messages],
            system_prompt=ADVISOR_SYSTEM,
        )
        reply, quotes_requested = self.split_trigger(reply or "")
        reply = reply or FALLBACK_REPLY

        conversation_text = build_conversation_text(messages)
        profile = self.steps["profile_extraction"].execute(conversation_text, user_profile)
        logger.info(f"Profile for session {session_id}: {profile.snapshot()}")

        quotes: List[CarrierQuote] = []
        if quotes_requested and self.steps["quote_readiness"].is_ready(profile):
            quotes = self.generate_quotes(profile, conversation, session_id)

        self.conversation_store.save_turn(conversation, messages, reply, profile, session_id)

        return ChatTurnResult(
            message=reply,
            user_profile=profile,
            quotes=quotes,
            show_lead_form=bool(quotes),
            metadata=ChatTurnMetadata(
                quotes_generated=len(quotes),
                conversation_id=conversation["_id"] if conversation else None,
                database_connected=conversation is not None,
                profile_completeness=self.steps["completeness"].execute(profile),
                coverage_amount=self.steps["coverage_estimation"].execute(profile),
            ),
        )

    def generate_quotes(
        self,
        profile: Profile,
        conversation: Optional[dict] = None,
        session_id: Optional[str] = None,
    ) -> List[CarrierQuote]:
        """Price the profile and record the quotes against the conversation."""
        try:
            request = self.steps["quote_readiness"].execute(profile, term=self.quote_term)
            quotes = self.steps["quote_generation"].execute(request)
        except Exception as e:
            logger.exception(f"Quote generation error: {e}")
            return []

        logger.info(
            f"Generated {len(quotes)} quotes for ${request.coverage_amount:,} "
            f"over {request.term} years"
        )

        if conversation and quotes:
            self.conversation_store.save_quotes(quotes, session_id, conversation["_id"])

        return quotes

    @staticmethod
    def split_trigger(reply: str):
        """Remove the quote trigger marker; return (clean reply, was it present)."""
        if QUOTE_TRIGGER not in reply:
            return reply.strip(), False
        return reply.replace(QUOTE_TRIGGER, "").strip(), True
