"""
Domain exceptions raised by the engine and the stores.
Routes translate these into HTTP errors.
"""


class LifeQuoteError(Exception):
    """Base class for all application errors."""


class ProfileNotReadyError(LifeQuoteError):
    """Raised when quotes are requested for a profile missing age or income."""

    def __init__(self, missing: list):
        self.missing = missing
        super().__init__(f"Profile is missing required fields: {', '.join(missing)}")


class DuplicateLeadError(LifeQuoteError):
    """Raised when a lead with the same email already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Lead with email {email} already exists")


class LeadNotFoundError(LifeQuoteError):
    """Raised when a lead id does not match any stored lead."""

    def __init__(self, lead_id: str):
        self.lead_id = lead_id
        super().__init__(f"Lead {lead_id} not found")


class DuplicateUserError(LifeQuoteError):
    """Raised when a user with the same email already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User with email {email} already exists")


class UserNotFoundError(LifeQuoteError):
    """Raised when a user id does not match any stored user."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")
