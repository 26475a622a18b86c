"""Pydantic models for user profile endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

# Sub-fields of the profile document an update may touch
PROFILE_FIELDS = ("bio", "phone", "location")


class ProfileFields(BaseModel):
    """Optional profile sub-fields; empty strings are allowed."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    bio: str | None = None
    phone: str | None = None
    location: str | None = None

    def supplied(self) -> dict[str, str]:
        """Sub-fields present in the request, in declaration order."""
        return {
            key: getattr(self, key)
            for key in PROFILE_FIELDS
            if getattr(self, key) is not None
        }


class ProfileUpdateRequest(BaseModel):
    """Body of PUT /api/profile. Unknown keys are ignored."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str | None = None
    profile: ProfileFields | None = None

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, value: str | None) -> str | None:
        if value is not None and not value:
            raise PydanticCustomError("empty_name", "Name cannot be empty")
        return value

    def is_empty(self) -> bool:
        return self.name is None and (self.profile is None or not self.profile.supplied())


class UserProfileResponse(BaseModel):
    """Sanitized user record."""
    id: str
    name: str
    email: str | None = None
    profile: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserProfileResponse
