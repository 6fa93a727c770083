"""
app/services/user_store.py

Purpose: User persistence contract

- One interface, two backends (MongoDB, in-memory list)
- Route handlers depend only on UserStore
- Every method either fully succeeds or leaves the store unchanged
"""

from abc import ABC, abstractmethod
from typing import List

from app.models.user import User, UserFields


class UserStore(ABC):
    """
    Owns the set of all users.

    Methods raise NotFoundError, DuplicateEmailError, SchemaValidationError
    or StoreConnectionError from app.core.exceptions.
    """

    backend_name: str = "abstract"

    @abstractmethod
    async def find_all(self) -> List[User]:
        """Returns every live user in a stable order."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> User:
        """Returns the user with this id or raises NotFoundError."""

    @abstractmethod
    async def find_by_email(self, email: str) -> User:
        """Returns the user holding this email (case-insensitive) or raises NotFoundError."""

    @abstractmethod
    async def create(self, fields: UserFields) -> User:
        """Stores a new user under a fresh id."""

    @abstractmethod
    async def update(self, user_id: str, fields: UserFields) -> User:
        """Replaces name, email and image of an existing user."""

    @abstractmethod
    async def delete_by_id(self, user_id: str) -> User:
        """Removes a user and returns the removed record."""

    @abstractmethod
    async def count(self) -> int:
        """Number of live users."""

    def is_valid_id(self, user_id: str) -> bool:
        """Whether this backend could ever hold a user with this id."""
        return bool(user_id)

    async def ping(self) -> bool:
        """Health check for the backing storage."""
        return True
