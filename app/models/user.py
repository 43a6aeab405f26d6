from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserSyncRecord(BaseModel):
    """Fields needed to create a user record from a Clerk `user.created` event."""

    clerk_id: str = Field(..., description="Stable user ID assigned by Clerk")
    email: str = Field(..., description="Primary e-mail address")
    username: str
    first_name: str = ""
    last_name: str = ""
    photo: Optional[str] = Field(None, description="Profile image URL")


class UserUpdate(BaseModel):
    """Profile fields applied on `user.updated`. E-mail is never updated here.

    All four fields are always sent; `photo=None` leaves the stored photo as is.
    """

    first_name: str = ""
    last_name: str = ""
    username: str = ""
    photo: Optional[str] = None

    def to_update_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        if data.get("photo") is None:
            data.pop("photo", None)
        return data


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Internal identifier assigned by the user store")
    clerk_id: str = Field(..., description="Join key to the Clerk user")
    email: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    photo: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<User id={self.id}, clerk_id={self.clerk_id}>"
