"""
app/models/user.py

Purpose: User record model

- Stored fields: id, name, email, image
- Normalized field set accepted by the stores
- Conversion from MongoDB documents
"""

from pydantic import BaseModel, Field
from typing import Any, Dict


class UserFields(BaseModel):
    """
    Normalized, validated user fields ready for storage.
    Produced only by the validator; stores trust its contents.
    """

    name: str = Field(..., description="Display name, trimmed")
    email: str = Field(..., description="Email address, trimmed and lowercased")
    image: str = Field(default="", description="Avatar URL or empty string")

    def to_document(self) -> Dict[str, str]:
        """The three stored fields, without any id."""
        return {"name": self.name, "email": self.email, "image": self.image}


class User(UserFields):
    """A stored user. The id is assigned by the store and never changes."""

    id: str = Field(..., description="Store-assigned identifier")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        """Build a User from a MongoDB document (ObjectId `_id`)."""
        return cls(
            id=str(document["_id"]),
            name=document["name"],
            email=document["email"],
            image=document.get("image") or "",
        )

    def with_fields(self, fields: UserFields) -> "User":
        return User(id=self.id, **fields.to_document())
