"""
Tests for the MongoDB-backed stores.
"""

import pytest
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from lifequote.core.conversation_store import ConversationStore
from lifequote.core.lead_store import LeadStore
from lifequote.core.user_store import UserStore
from lifequote.exceptions import (
    DuplicateLeadError,
    DuplicateUserError,
    LeadNotFoundError,
    UserNotFoundError,
)
from lifequote.pipeline.engine import build_quote_request
from lifequote.pipeline.models import (
    ChatMessage,
    LeadCreate,
    LeadProfile,
    LeadUpdate,
    Profile,
    UserCreate,
    UserProfileUpdate,
)
from lifequote.pipeline.steps import QuoteGenerationStep


@pytest.fixture
def lead():
    return LeadCreate(
        email="jane@example.com",
        first_name="Jane",
        last_name="Doe",
        phone="5551234567",
        session_id="session-1",
    )


@pytest.fixture
def quotes(ready_profile):
    return QuoteGenerationStep().execute(build_quote_request(ready_profile))


class TestLeadStore:
    """Tests for lead persistence."""

    def test_create(self, mock_collections, lead):
        document = LeadStore().create(lead)

        assert document["email"] == "jane@example.com"
        assert document["status"] == "NEW"
        assert document["deleted_at"] is None
        mock_collections["leads"].insert_one.assert_called_once_with(document)

        activity = mock_collections["lead_activities"].insert_one.call_args[0][0]
        assert activity["lead_id"] == document["_id"]
        assert activity["activity_type"] == "created"

    def test_create_with_quotes_logs_two_activities(self, mock_collections, lead, quotes):
        lead.quotes = quotes

        document = LeadStore().create(lead)

        assert len(document["quotes"]) == 6
        calls = mock_collections["lead_activities"].insert_one.call_args_list
        assert [c[0][0]["activity_type"] for c in calls] == ["created", "quotes_generated"]
        assert calls[1][0][0]["metadata"] == {"quote_count": 6}

    def test_create_flattens_profile(self, mock_collections, lead):
        lead.user_profile = LeadProfile(age=29, state="TX", coverage_amount=1225000)

        document = LeadStore().create(lead)

        assert document["age"] == 29
        assert document["state"] == "TX"
        assert document["coverage_amount"] == 1225000
        assert "income" not in document

    def test_duplicate_email(self, mock_collections, lead):
        mock_collections["leads"].find_one.return_value = {"_id": "lead-0"}

        with pytest.raises(DuplicateLeadError):
            LeadStore().create(lead)

        mock_collections["leads"].insert_one.assert_not_called()

    def test_duplicate_key_race(self, mock_collections, lead):
        mock_collections["leads"].insert_one.side_effect = DuplicateKeyError("E11000")

        with pytest.raises(DuplicateLeadError):
            LeadStore().create(lead)

    def test_get_includes_activities(self, mock_collections):
        mock_collections["leads"].find_one.return_value = {"_id": "lead-1"}
        activities = mock_collections["lead_activities"].find.return_value.sort.return_value
        activities.__iter__.return_value = iter([{"activity_type": "created"}])

        result = LeadStore().get("lead-1")

        assert result["activities"] == [{"activity_type": "created"}]

    def test_get_unknown(self, mock_collections):
        with pytest.raises(LeadNotFoundError):
            LeadStore().get("lead-x")

    def test_list_paginates(self, mock_collections):
        leads = mock_collections["leads"]
        leads.count_documents.return_value = 45
        leads.find.return_value.sort.return_value.skip.return_value.limit.return_value = [
            {"_id": "lead-1"}
        ]

        result = LeadStore().list(page=2, limit=20, status="NEW", search="jane")

        assert result["leads"] == [{"_id": "lead-1"}]
        assert result["pagination"] == {"page": 2, "limit": 20, "total": 45, "pages": 3}
        leads.find.return_value.sort.return_value.skip.assert_called_once_with(20)

        query = leads.count_documents.call_args[0][0]
        assert query["status"] == "NEW"
        assert query["deleted_at"] is None
        assert len(query["$or"]) == 4

    def test_list_all_statuses(self, mock_collections):
        mock_collections["leads"].count_documents.return_value = 0

        LeadStore().list(status="all")

        query = mock_collections["leads"].count_documents.call_args[0][0]
        assert "status" not in query

    def test_update_logs_status_change(self, mock_collections):
        leads = mock_collections["leads"]
        leads.find_one.return_value = {"_id": "lead-1", "status": "NEW"}
        leads.find_one_and_update.return_value = {"_id": "lead-1", "status": "CONTACTED"}

        result = LeadStore().update("lead-1", LeadUpdate(status="CONTACTED", notes="Called"))

        assert result["status"] == "CONTACTED"
        update = leads.find_one_and_update.call_args[0][1]["$set"]
        assert update["status"] == "CONTACTED"
        assert update["notes"] == "Called"
        assert "assigned_to" not in update

        activity = mock_collections["lead_activities"].insert_one.call_args[0][0]
        assert activity["activity_type"] == "status_changed"
        assert activity["performed_by"] == "admin"

    def test_update_same_status_no_activity(self, mock_collections):
        mock_collections["leads"].find_one.return_value = {"_id": "lead-1", "status": "NEW"}

        LeadStore().update("lead-1", LeadUpdate(notes="Left voicemail"))

        mock_collections["lead_activities"].insert_one.assert_not_called()

    def test_update_unknown(self, mock_collections):
        with pytest.raises(LeadNotFoundError):
            LeadStore().update("lead-x", LeadUpdate(status="LOST"))

    def test_delete_is_soft(self, mock_collections):
        mock_collections["leads"].update_one.return_value.matched_count = 1

        LeadStore().delete("lead-1")

        filter_, update = mock_collections["leads"].update_one.call_args[0]
        assert filter_ == {"_id": "lead-1", "deleted_at": None}
        assert "deleted_at" in update["$set"]
        mock_collections["leads"].delete_one.assert_not_called()

    def test_delete_unknown(self, mock_collections):
        mock_collections["leads"].update_one.return_value.matched_count = 0

        with pytest.raises(LeadNotFoundError):
            LeadStore().delete("lead-x")


class TestConversationStore:
    """Tests for best-effort conversation persistence."""

    def test_creates_conversation(self, mock_collections):
        conversations = mock_collections["conversations"]
        conversations.find_one_and_update.side_effect = (
            lambda filter_, update, **kwargs: update["$setOnInsert"]
        )

        conversation = ConversationStore().get_or_create("session-1", Profile(age=30))

        assert conversation["session_id"] == "session-1"
        assert conversation["status"] == "active"
        assert conversation["user_id"] is None
        assert conversation["user_profile"] == {"age": 30}
        filter_, update = conversations.find_one_and_update.call_args[0]
        assert filter_ == {"session_id": "session-1"}
        assert "$set" not in update
        assert conversations.find_one_and_update.call_args.kwargs["upsert"] is True
        conversations.insert_one.assert_not_called()

    def test_returns_existing_conversation(self, mock_collections):
        existing = {"_id": "conv-1", "session_id": "session-1", "user_id": None}
        mock_collections["conversations"].find_one_and_update.return_value = existing

        assert ConversationStore().get_or_create("session-1", Profile()) == existing

    def test_concurrent_create_reads_the_winner(self, mock_collections):
        """Two first turns for one session race on the unique session index."""
        existing = {"_id": "conv-1", "session_id": "session-1", "user_id": None}
        conversations = mock_collections["conversations"]
        conversations.find_one_and_update.side_effect = DuplicateKeyError("E11000 duplicate key")
        conversations.find_one.return_value = existing

        assert ConversationStore().get_or_create("session-1", Profile(age=30)) == existing
        conversations.find_one.assert_called_once_with({"session_id": "session-1"})

    def test_links_user(self, mock_collections):
        conversations = mock_collections["conversations"]
        conversations.find_one_and_update.return_value = {"_id": "conv-1", "user_id": "user-1"}

        conversation = ConversationStore().get_or_create("session-1", Profile(), user_id="user-1")

        assert conversation["user_id"] == "user-1"
        update = conversations.find_one_and_update.call_args[0][1]
        assert update["$set"] == {"user_id": "user-1"}
        assert "user_id" not in update["$setOnInsert"]

    def test_concurrent_create_still_links_user(self, mock_collections):
        conversations = mock_collections["conversations"]
        conversations.find_one_and_update.side_effect = DuplicateKeyError("E11000 duplicate key")
        conversations.find_one.return_value = {"_id": "conv-1", "session_id": "session-1", "user_id": None}

        conversation = ConversationStore().get_or_create("session-1", Profile(), user_id="user-1")

        assert conversation["user_id"] == "user-1"
        conversations.update_one.assert_called_once_with(
            {"_id": "conv-1"}, {"$set": {"user_id": "user-1"}}
        )

    def test_database_down_returns_none(self, mock_collections):
        mock_collections["conversations"].find_one_and_update.side_effect = (
            ServerSelectionTimeoutError("timeout")
        )

        assert ConversationStore().get_or_create("session-1", Profile()) is None

    def test_save_turn(self, mock_collections):
        conversation = {"_id": "conv-1", "user_id": None}
        messages = [ChatMessage(role="user", content="I'm 30")]

        ConversationStore().save_turn(conversation, messages, "Great!", Profile(age=30), "session-1")

        saved = [c[0][0] for c in mock_collections["messages"].insert_one.call_args_list]
        assert [(m["role"], m["content"]) for m in saved] == [("user", "I'm 30"), ("assistant", "Great!")]
        update = mock_collections["conversations"].update_one.call_args[0][1]["$set"]
        assert update["user_profile"] == {"age": 30}
        mock_collections["users"].update_one.assert_not_called()

    def test_save_turn_syncs_user(self, mock_collections):
        conversation = {"_id": "conv-1", "user_id": "user-1"}

        ConversationStore().save_turn(
            conversation, [], "Hello", Profile(age=30, country="GB"), "session-1"
        )

        filter_, update = mock_collections["users"].update_one.call_args[0]
        assert filter_ == {"_id": "user-1"}
        assert update["$set"]["currency"] == "GBP"

    def test_save_turn_without_conversation(self, mock_collections):
        ConversationStore().save_turn(None, [], "Hello", Profile(), "session-1")
        mock_collections["messages"].insert_one.assert_not_called()

    def test_save_turn_error_is_swallowed(self, mock_collections):
        mock_collections["messages"].insert_one.side_effect = ServerSelectionTimeoutError("timeout")

        ConversationStore().save_turn({"_id": "conv-1"}, [], "Hello", Profile(), "session-1")

    def test_save_quotes(self, mock_collections, quotes):
        ConversationStore().save_quotes(quotes, "session-1", "conv-1")

        documents = mock_collections["quotes"].insert_many.call_args[0][0]
        assert len(documents) == 6
        assert documents[0]["conversation_id"] == "conv-1"
        assert documents[0]["quote_data"]["carrier"] == documents[0]["carrier"]

    def test_get_messages(self, mock_collections):
        cursor = mock_collections["messages"].find.return_value.sort.return_value.limit.return_value
        cursor.__iter__.return_value = iter([{"role": "user", "content": "hi"}])

        messages = ConversationStore().get_messages("session-1", limit=10)

        assert messages == [{"role": "user", "content": "hi"}]
        mock_collections["messages"].find.return_value.sort.return_value.limit.assert_called_once_with(10)


class TestUserStore:
    """Tests for user accounts and profile updates."""

    @pytest.fixture
    def user(self):
        return UserCreate(email="jane@example.com", phone="5551234567", firstName="Jane", lastName="Doe")

    def test_create(self, mock_collections, user):
        document = UserStore().create(user)

        assert document["email"] == "jane@example.com"
        assert document["first_name"] == "Jane"
        mock_collections["users"].insert_one.assert_called_once_with(document)

    def test_create_duplicate(self, mock_collections, user):
        mock_collections["users"].insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(DuplicateUserError):
            UserStore().create(user)

    def test_get_unknown(self, mock_collections):
        with pytest.raises(UserNotFoundError):
            UserStore().get("user-x")

    def test_update_profile_sets_currency_from_country(self, mock_collections):
        users = mock_collections["users"]
        users.find_one_and_update.return_value = {"_id": "user-1", "country": "GB", "currency": "GBP"}

        UserStore().update_profile("user-1", UserProfileUpdate(country="GB", age=40))

        filter_, update = users.find_one_and_update.call_args[0]
        assert filter_ == {"_id": "user-1"}
        assert update["$set"]["currency"] == "GBP"
        assert update["$set"]["age"] == 40
        assert "income" not in update["$set"]

    def test_update_profile_keeps_explicit_currency(self, mock_collections):
        users = mock_collections["users"]
        users.find_one_and_update.return_value = {"_id": "user-1"}

        UserStore().update_profile("user-1", UserProfileUpdate(country="GB", currency="USD"))

        assert users.find_one_and_update.call_args[0][1]["$set"]["currency"] == "USD"

    def test_update_unknown(self, mock_collections):
        mock_collections["users"].find_one_and_update.return_value = None

        with pytest.raises(UserNotFoundError):
            UserStore().update_profile("user-x", UserProfileUpdate(age=30))


class TestEmailValidation:
    """Lead and user emails must be real addresses."""

    @pytest.mark.parametrize("email", ["a@.b.c", "a@b..c", "a@b.c.", "jane", "jane@", "@example.com"])
    def test_lead_rejects_malformed_email(self, email):
        with pytest.raises(ValidationError):
            LeadCreate(email=email, first_name="Jane", last_name="Doe", phone="5551234567", session_id="s")

    @pytest.mark.parametrize("email", ["a@.b.c", "a@b..c", "a@b.c."])
    def test_user_rejects_malformed_email(self, email):
        with pytest.raises(ValidationError):
            UserCreate(email=email, phone="5551234567", firstName="Jane", lastName="Doe")
