"""
Lead persistence for the lead form and the admin tables.
"""

import logging
import math
import re
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from lifequote.core.mongodb_client import get_collection, Collections
from lifequote.exceptions import DuplicateLeadError, LeadNotFoundError
from lifequote.pipeline.models import LeadCreate, LeadUpdate


logger = logging.getLogger(__name__)


class LeadStore:
    """CRUD over leads plus their activity log."""

    def create(self, lead: LeadCreate) -> Dict[str, Any]:
        """
        Store a new lead with its quotes and log the creation.

        Raises:
            DuplicateLeadError: If a lead already uses this email
        """
        leads = get_collection(Collections.LEADS)
        if leads.find_one({"email": lead.email}):
            raise DuplicateLeadError(lead.email)

        now = datetime.utcnow()
        profile = lead.user_profile.model_dump(exclude_none=True) if lead.user_profile else {}
        document = {
            "_id": uuid.uuid4().hex,
            "session_id": lead.session_id,
            "email": lead.email,
            "first_name": lead.first_name,
            "last_name": lead.last_name,
            "phone": lead.phone,
            **profile,
            "quotes": [quote.model_dump() for quote in lead.quotes],
            "source": "website",
            "status": "NEW",
            "notes": None,
            "assigned_to": None,
            "follow_up_date": None,
            "created_at": now,
            "updated_at": now,
            "deleted_at": None,
        }

        try:
            leads.insert_one(document)
        except DuplicateKeyError:
            raise DuplicateLeadError(lead.email)

        self._log_activity(document["_id"], "created", "Lead created from website chat")
        if lead.quotes:
            self._log_activity(
                document["_id"],
                "quotes_generated",
                f"Generated {len(lead.quotes)} insurance quotes",
                metadata={"quote_count": len(lead.quotes)},
            )

        logger.info(f"New lead created: {document['_id']} ({lead.email}, session {lead.session_id})")
        return document

    def get(self, lead_id: str) -> Dict[str, Any]:
        """Return one lead with its activity log."""
        lead = get_collection(Collections.LEADS).find_one({"_id": lead_id, "deleted_at": None})
        if not lead:
            raise LeadNotFoundError(lead_id)

        lead["activities"] = list(
            get_collection(Collections.LEAD_ACTIVITIES)
            .find({"lead_id": lead_id}, {"_id": 0})
            .sort("created_at", -1)
        )
        return lead

    def list(
        self,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        search: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        """List non-deleted leads, newest first, with pagination info."""
        query: Dict[str, Any] = {"deleted_at": None}

        if status and status != "all":
            query["status"] = status
        if assigned_to:
            query["assigned_to"] = assigned_to
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query["$or"] = [
                {"first_name": pattern},
                {"last_name": pattern},
                {"email": pattern},
                {"phone": {"$regex": re.escape(search)}},
            ]

        leads_collection = get_collection(Collections.LEADS)
        total = leads_collection.count_documents(query)
        leads = list(
            leads_collection.find(query)
            .sort("created_at", -1)
            .skip((page - 1) * limit)
            .limit(limit)
        )

        return {
            "leads": leads,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def update(self, lead_id: str, changes: LeadUpdate, performed_by: str = "admin") -> Dict[str, Any]:
        """
        Apply admin changes to a lead.

        Raises:
            LeadNotFoundError: If the lead does not exist
        """
        leads = get_collection(Collections.LEADS)
        current = leads.find_one({"_id": lead_id, "deleted_at": None})
        if not current:
            raise LeadNotFoundError(lead_id)

        update = changes.model_dump(exclude_none=True)
        update["updated_at"] = datetime.utcnow()

        updated = leads.find_one_and_update(
            {"_id": lead_id},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )

        if changes.status and changes.status != current.get("status"):
            self._log_activity(
                lead_id,
                "status_changed",
                f"Status changed from {current.get('status')} to {changes.status}",
                performed_by=performed_by,
            )

        return updated

    def delete(self, lead_id: str) -> None:
        """Soft-delete a lead."""
        result = get_collection(Collections.LEADS).update_one(
            {"_id": lead_id, "deleted_at": None},
            {"$set": {"deleted_at": datetime.utcnow()}},
        )
        if result.matched_count == 0:
            raise LeadNotFoundError(lead_id)
        logger.info(f"Lead {lead_id} deleted")

    def _log_activity(
        self,
        lead_id: str,
        activity_type: str,
        description: str,
        performed_by: str = "system",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        get_collection(Collections.LEAD_ACTIVITIES).insert_one({
            "lead_id": lead_id,
            "activity_type": activity_type,
            "description": description,
            "performed_by": performed_by,
            "metadata": metadata or {},
            "created_at": datetime.utcnow(),
        })
