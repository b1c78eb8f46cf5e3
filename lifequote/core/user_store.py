"""
User accounts and the profile fields the chat keeps in sync with them.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from lifequote.core.mongodb_client import get_collection, Collections
from lifequote.exceptions import DuplicateUserError, UserNotFoundError
from lifequote.pipeline.models import UserCreate, UserProfileUpdate
from lifequote.pipeline.tables import currency_for_country


logger = logging.getLogger(__name__)


class UserStore:
    """Create, fetch and update users."""

    def create(self, user: UserCreate) -> Dict[str, Any]:
        """
        Store a new user.

        Raises:
            DuplicateUserError: If a user already uses this email
        """
        now = datetime.utcnow()
        document = {
            "_id": uuid.uuid4().hex,
            "email": user.email,
            "phone": user.phone,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "created_at": now,
            "updated_at": now,
        }

        try:
            get_collection(Collections.USERS).insert_one(document)
        except DuplicateKeyError:
            raise DuplicateUserError(user.email)

        logger.info(f"New user created: {document['_id']}")
        return document

    def get(self, user_id: str) -> Dict[str, Any]:
        user = get_collection(Collections.USERS).find_one({"_id": user_id})
        if not user:
            raise UserNotFoundError(user_id)
        return user

    def update_profile(self, user_id: str, changes: UserProfileUpdate) -> Dict[str, Any]:
        """
        Apply profile changes to a user. A new country without an explicit
        currency also sets the currency.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        update = changes.model_dump(exclude_none=True)
        if update.get("country") and not update.get("currency"):
            update["currency"] = currency_for_country(update["country"])
        update["updated_at"] = datetime.utcnow()

        updated = get_collection(Collections.USERS).find_one_and_update(
            {"_id": user_id},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise UserNotFoundError(user_id)

        logger.info(f"Updated profile for user {user_id}")
        return updated
