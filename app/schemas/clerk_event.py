from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClerkEventType(str, Enum):
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_DELETED = "user.deleted"


class ClerkEmailAddress(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    email_address: str


class ClerkUserData(BaseModel):
    """`data` object of a Clerk user event.

    Every field is optional: the dispatcher decides what each event type
    requires. Unknown keys are kept.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Clerk user ID")
    email_addresses: Optional[List[ClerkEmailAddress]] = Field(None, description="User's e-mail addresses")
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = Field(None, description="Profile image URL")

    @property
    def primary_email(self) -> Optional[str]:
        """First e-mail address on the user, if any."""
        if self.email_addresses:
            return self.email_addresses[0].email_address
        return None


class ClerkWebhookEvent(BaseModel):
    """Verified Clerk webhook envelope.

    `data` stays untyped here; user events parse it into `ClerkUserData`
    when they are dispatched, other event types never look at it.
    """

    model_config = ConfigDict(extra="ignore")

    type: str = Field(..., description="Event type, e.g. user.created")
    data: Optional[Any] = Field(default_factory=dict)
    object: Optional[str] = Field(None, description="Always 'event' for Clerk deliveries")
    timestamp: Optional[int] = Field(None, description="Event timestamp in milliseconds")

    def user_data(self) -> ClerkUserData:
        """Parse `data` as a Clerk user object. Raises `ValidationError` on a mismatch."""
        return ClerkUserData.model_validate(self.data if self.data is not None else {})

    @property
    def data_id(self) -> Optional[Any]:
        if isinstance(self.data, dict):
            return self.data.get("id")
        return None
