"""
Conversation persistence for chat turns.

Every method here is best-effort: a database failure is logged and the
chat turn carries on without persistence.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from lifequote.core.mongodb_client import get_collection, Collections
from lifequote.pipeline.models import CarrierQuote, ChatMessage, Profile
from lifequote.pipeline.tables import currency_for_country


logger = logging.getLogger(__name__)


class ConversationStore:
    """Stores conversations, their messages and quotes, and syncs users."""

    def get_or_create(
        self,
        session_id: str,
        profile: Profile,
        user_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Fetch the conversation for a session, creating it if needed. A given
        user id links the conversation to that user.

        Returns:
            The conversation document, or None if the database is unavailable
        """
        now = datetime.utcnow()
        on_insert = {
            "_id": uuid.uuid4().hex,
            "session_id": session_id,
            "status": "active",
            "user_profile": profile.snapshot(),
            "created_at": now,
            "updated_at": now,
        }
        update: Dict[str, Any] = {"$setOnInsert": on_insert}
        if user_id:
            update["$set"] = {"user_id": user_id}
        else:
            on_insert["user_id"] = None

        try:
            conversations = get_collection(Collections.CONVERSATIONS)
            try:
                conversation = conversations.find_one_and_update(
                    {"session_id": session_id},
                    update,
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                # A concurrent request created it first
                conversation = conversations.find_one({"session_id": session_id})
                if conversation and user_id and conversation.get("user_id") != user_id:
                    conversations.update_one({"_id": conversation["_id"]}, {"$set": {"user_id": user_id}})
                    conversation["user_id"] = user_id

            if conversation and conversation["_id"] == on_insert["_id"]:
                logger.info(f"Created new conversation {conversation['_id']} for session {session_id}")
            return conversation
        except PyMongoError as e:
            logger.error(f"Database error loading conversation (non-critical): {e}")
            return None

    def save_turn(
        self,
        conversation: Optional[Dict[str, Any]],
        messages: List[ChatMessage],
        assistant_message: str,
        profile: Profile,
        session_id: str,
    ) -> None:
        """Save the latest user message, the reply and the updated profile."""
        if not conversation:
            return

        try:
            messages_collection = get_collection(Collections.MESSAGES)
            now = datetime.utcnow()

            last_message = messages[-1] if messages else None
            if last_message is not None and last_message.role == "user":
                messages_collection.insert_one({
                    "conversation_id": conversation["_id"],
                    "session_id": session_id,
                    "role": "user",
                    "content": last_message.content,
                    "created_at": now,
                })

            messages_collection.insert_one({
                "conversation_id": conversation["_id"],
                "session_id": session_id,
                "role": "assistant",
                "content": assistant_message,
                "created_at": now,
            })

            get_collection(Collections.CONVERSATIONS).update_one(
                {"_id": conversation["_id"]},
                {"$set": {"user_profile": profile.snapshot(), "updated_at": now}},
            )

            if conversation.get("user_id") and profile.snapshot():
                self.sync_profile_to_user(conversation["user_id"], profile)

            logger.info(f"Saved turn for conversation {conversation['_id']}")
        except PyMongoError as e:
            logger.error(f"Failed to save messages (non-critical): {e}")

    def save_quotes(
        self,
        quotes: List[CarrierQuote],
        session_id: str,
        conversation_id: str,
    ) -> None:
        """Record the quotes shown during a conversation."""
        if not quotes:
            return

        try:
            now = datetime.utcnow()
            get_collection(Collections.QUOTES).insert_many([
                {
                    "session_id": session_id,
                    "conversation_id": conversation_id,
                    "carrier": quote.carrier,
                    "monthly_premium": quote.monthly_premium,
                    "coverage_amount": quote.coverage_amount,
                    "term": quote.term,
                    "quote_data": quote.model_dump(),
                    "created_at": now,
                }
                for quote in quotes
            ])
            logger.info(f"Saved {len(quotes)} quotes for conversation {conversation_id}")
        except PyMongoError as e:
            logger.error(f"Failed to save quotes (non-critical): {e}")

    def sync_profile_to_user(self, user_id: str, profile: Profile) -> None:
        """Copy the known profile fields onto the user record."""
        update = profile.snapshot()
        if "country" in update:
            update["currency"] = currency_for_country(update["country"])
        update["updated_at"] = datetime.utcnow()

        try:
            get_collection(Collections.USERS).update_one(
                {"_id": user_id},
                {"$set": update},
            )
            logger.info(f"Synced profile to user {user_id}")
        except PyMongoError as e:
            logger.error(f"Failed to sync profile to user (non-critical): {e}")

    def get_messages(self, session_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        """Return a session's stored messages, oldest first."""
        cursor = (
            get_collection(Collections.MESSAGES)
            .find({"session_id": session_id}, {"_id": 0})
            .sort("created_at", 1)
            .limit(limit)
        )
        return list(cursor)
