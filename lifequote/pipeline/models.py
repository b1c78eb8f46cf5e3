"""
Pydantic models for the chat pipeline.
These models define the data structures passed between pipeline steps.
"""

from datetime import datetime
from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field


Gender = Literal["male", "female"]
HealthClass = Literal["preferred_plus", "preferred", "standard_plus", "standard"]
LeadStatus = Literal["NEW", "CONTACTED", "CONVERTED", "LOST"]
ContactMethod = Literal["email", "phone", "text"]


class Profile(BaseModel):
    """Facts inferred about one chat participant. Every field is optional."""
    model_config = ConfigDict(populate_by_name=True)

    age: Optional[int] = Field(default=None, description="Age in years")
    income: Optional[int] = Field(default=None, description="Annual income")
    gender: Optional[Gender] = Field(default=None)
    smoker: Optional[bool] = Field(default=None)
    state: Optional[str] = Field(default=None, description="Two-letter US state code")
    country: Optional[str] = Field(default=None, description="Two-letter country code")
    marital_status: Optional[str] = Field(default=None, alias="maritalStatus")
    dependents: Optional[int] = Field(default=None, ge=0)
    mortgage: Optional[int] = Field(default=None, description="Outstanding mortgage balance")
    student_loans: Optional[int] = Field(default=None, alias="studentLoans")

    def snapshot(self) -> Dict[str, Any]:
        """Return only the known fields, as stored with conversations."""
        return self.model_dump(exclude_none=True)


class ChatMessage(BaseModel):
    """One turn of the conversation."""
    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: Optional[datetime] = Field(default=None)


class QuoteRequest(BaseModel):
    """Structured request handed to the quote pricing step."""
    age: int
    gender: Gender = "male"
    smoker: bool = False
    coverage_amount: int = Field(description="Face value in dollars")
    term: int = Field(default=20, description="Term length in years")
    state: str = "NY"
    health_class: HealthClass = "preferred"


class CarrierQuote(BaseModel):
    """A single priced offer from one carrier."""
    carrier: str
    monthly_premium: int
    annual_premium: int
    coverage_amount: int
    term: int
    product_name: str
    quote_id: str
    expires_at: datetime
    details: Dict[str, Any] = Field(default_factory=dict)


class ChatTurnMetadata(BaseModel):
    """Bookkeeping returned alongside each assistant reply."""
    quotes_generated: int = 0
    conversation_id: Optional[str] = Field(default=None)
    database_connected: bool = False
    profile_completeness: int = 0
    coverage_amount: Optional[int] = Field(default=None)


class ChatTurnResult(BaseModel):
    """Complete result of one chat turn."""
    message: str
    user_profile: Profile
    quotes: List[CarrierQuote] = Field(default_factory=list)
    show_lead_form: bool = False
    metadata: ChatTurnMetadata = Field(default_factory=ChatTurnMetadata)


class LeadProfile(Profile):
    """Profile snapshot submitted with a lead form."""
    coverage_amount: Optional[int] = Field(default=None, alias="coverageAmount")
    concerns: List[str] = Field(default_factory=list)


class LeadCreate(BaseModel):
    """Contact details captured by the lead form."""
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    first_name: str = Field(min_length=1, alias="firstName")
    last_name: str = Field(min_length=1, alias="lastName")
    phone: str = Field(min_length=10)
    session_id: str = Field(alias="sessionId")
    user_profile: Optional[LeadProfile] = Field(default=None, alias="userProfile")
    quotes: List[CarrierQuote] = Field(default_factory=list)


class LeadUpdate(BaseModel):
    """Fields an admin may change on an existing lead."""
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[LeadStatus] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    assigned_to: Optional[str] = Field(default=None, alias="assignedTo")
    follow_up_date: Optional[datetime] = Field(default=None, alias="followUpDate")


class UserCreate(BaseModel):
    """Account details for a new user."""
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    phone: str = Field(min_length=10)
    first_name: str = Field(min_length=1, alias="firstName")
    last_name: str = Field(min_length=1, alias="lastName")


class UserProfileUpdate(Profile):
    """
    Profile and contact fields a user may change. Unset fields are left
    alone; a country without a currency also sets the currency.
    """
    age: Optional[int] = Field(default=None, ge=18, le=80)
    mortgage: Optional[int] = Field(default=None, ge=0)
    student_loans: Optional[int] = Field(default=None, ge=0, alias="studentLoans")

    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone: Optional[str] = Field(default=None)
    preferred_contact: Optional[ContactMethod] = Field(default=None, alias="preferredContact")
    timezone: Optional[str] = Field(default=None)
    currency: Optional[str] = Field(default=None)
