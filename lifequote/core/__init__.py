"""
Core services for the chat back end.
"""

from .mongodb_client import get_mongodb_client, get_database, get_collection, Collections
from .fireworks_client import get_fireworks_client, FireworksClient
from .conversation_store import ConversationStore
from .lead_store import LeadStore
from .user_store import UserStore

__all__ = [
    "get_mongodb_client",
    "get_database",
    "get_collection",
    "Collections",
    "get_fireworks_client",
    "FireworksClient",
    "ConversationStore",
    "LeadStore",
    "UserStore",
]
