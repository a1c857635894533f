"""
Pydantic schemas for user-related responses.
"""
from datetime import datetime
from pydantic import BaseModel, EmailStr


class UserGroupSummary(BaseModel):
    """Group membership as shown on a profile."""
    id: int
    title: str

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    """Schema for user responses."""
    id: int
    email: EmailStr
    first_name: str | None = None
    surname: str | None = None
    is_active: bool
    last_visited: datetime | None = None
    created_at: datetime
    updated_at: datetime
    groups: list[UserGroupSummary] = []

    model_config = {"from_attributes": True}
