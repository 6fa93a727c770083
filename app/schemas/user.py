"""
app/schemas/user.py

Pydantic models for the user API request/response bodies.
Field-level rules live in utils/validation_utils.py so the page routes
(form posts) and the JSON API share one validator.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from app.models.user import User


class UserPayload(BaseModel):
    """Raw create/update body. Every field may be missing or blank."""

    name: Optional[str] = Field(default=None, description="User's name")
    email: Optional[str] = Field(default=None, description="User's email address")
    image: Optional[str] = Field(default=None, description="Optional avatar URL")


class UserListResponse(BaseModel):
    """Snapshot of every stored user."""

    success: bool = Field(default=True)
    count: int = Field(..., description="Number of users returned")
    data: List[User] = Field(default_factory=list)
