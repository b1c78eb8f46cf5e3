"""
MongoDB client singleton for database operations.
Provides connection management and collection access.
"""

import logging
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from lifequote.config import get_settings


logger = logging.getLogger(__name__)

_client = None


def get_mongodb_client() -> MongoClient:
    """Get MongoDB client singleton."""
    global _client
    if _client is None:
        settings = get_settings()
        # Short timeout to fail fast when the database is down
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=2000)
    return _client


def get_database() -> Database:
    """Get the configured database."""
    settings = get_settings()
    return get_mongodb_client()[settings.mongodb_database]


def get_collection(collection_name: str) -> Collection:
    """Get a specific collection from the database."""
    return get_database()[collection_name]


def ping() -> bool:
    """Return True when the server answers a ping."""
    try:
        get_mongodb_client().admin.command("ping")
        return True
    except Exception as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def ensure_indexes() -> None:
    """Create the indexes the stores rely on."""
    get_collection(Collections.CONVERSATIONS).create_index("session_id", unique=True)
    get_collection(Collections.MESSAGES).create_index([("conversation_id", 1), ("created_at", 1)])
    get_collection(Collections.QUOTES).create_index("conversation_id")
    get_collection(Collections.LEADS).create_index("email", unique=True)
    get_collection(Collections.USERS).create_index("email", unique=True)
    get_collection(Collections.LEAD_ACTIVITIES).create_index("lead_id")


def close_mongodb_client() -> None:
    """Close the MongoDB client connection."""
    global _client
    if _client is not None:
        _client.close()
        _client = None


# Collection names as constants
class Collections:
    """MongoDB collection names."""
    CONVERSATIONS = "conversations"
    MESSAGES = "messages"
    QUOTES = "quotes"
    USERS = "users"
    LEADS = "leads"
    LEAD_ACTIVITIES = "lead_activities"
