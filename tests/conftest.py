"""
Pytest configuration and fixtures.
"""

import pytest
from collections import defaultdict
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from lifequote.pipeline.models import ChatMessage, Profile


@pytest.fixture
def young_family_text():
    """Married 29 year old with two kids."""
    return "I'm 29 years old and I make 75k a year, I have 2 kids and a wife"


@pytest.fixture
def young_family_messages(young_family_text):
    """A short chat where the user shares their situation."""
    return [
        ChatMessage(role="assistant", content="Hi! What brings you here today?"),
        ChatMessage(role="user", content=young_family_text),
    ]


@pytest.fixture
def ready_profile():
    """Profile with everything the quote step needs."""
    return Profile(age=29, income=75000, dependents=2, marital_status="married")


@pytest.fixture
def mock_collections(mocker):
    """
    Patch get_collection in the stores with one MagicMock per collection.
    Index the returned dict by collection name to reach a mock.
    """
    collections = defaultdict(mocker.MagicMock)
    for collection in ("leads", "lead_activities", "conversations", "messages", "quotes", "users"):
        collections[collection].find_one.return_value = None

    def get_collection(name):
        return collections[name]

    mocker.patch("lifequote.core.lead_store.get_collection", side_effect=get_collection)
    mocker.patch("lifequote.core.conversation_store.get_collection", side_effect=get_collection)
    mocker.patch("lifequote.core.user_store.get_collection", side_effect=get_collection)

    return collections


@pytest.fixture
def mock_llm(mocker):
    """Mock Fireworks client for unit tests."""
    mock_client = mocker.MagicMock()
    mock_client.chat.return_value = "Tell me a bit about yourself."
    return mock_client


@pytest.fixture
def mock_conversation_store(mocker):
    """Conversation store whose database is reachable."""
    store = mocker.MagicMock()
    store.get_or_create.return_value = {"_id": "conv-1", "session_id": "session-1", "user_id": None}
    return store
