"""
app/services/memory_user_store.py

Purpose: In-process user store

- Ordered list of users plus a monotonic id counter
- Linear scans for id/email lookups
- Not durable: everything is lost on restart
"""

from typing import Iterable, List, Optional

from app.core.exceptions import NotFoundError, DuplicateEmailError
from app.core.logging import get_logger, LogContext
from app.models.user import User, UserFields
from app.services.user_store import UserStore
from utils.validation_utils import normalize_email

logger = get_logger(__name__)

SAMPLE_USERS = [
    UserFields(
        name="John Doe",
        email="john@example.com",
        image="https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=400&h=400&fit=crop&crop=face",
    ),
    UserFields(
        name="Jane Smith",
        email="jane@example.com",
        image="https://images.unsplash.com/photo-1494790108755-2616b612b786?w=400&h=400&fit=crop&crop=face",
    ),
]


class MemoryUserStore(UserStore):
    """
    User store backed by a Python list.

    None of the coroutines await, so under the event loop each call runs
    to completion before another request is served. The duplicate-email
    check is check-then-act and relies on that; it is not safe if the
    store is shared across threads.
    """

    backend_name = "memory"

    def __init__(self, seed: Optional[Iterable[UserFields]] = None):
        self._users: List[User] = []
        self._next_id = 1
        for fields in seed or ():
            self._insert(fields)

    def _insert(self, fields: UserFields) -> User:
        user = User(id=str(self._next_id), **fields.to_document())
        self._users.append(user)
        self._next_id += 1
        return user

    def _index_of(self, user_id: str) -> int:
        for index, user in enumerate(self._users):
            if user.id == user_id:
                return index
        raise NotFoundError(details={"id": user_id})

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        email = normalize_email(email)
        return any(
            user.email == email and user.id != exclude_id
            for user in self._users
        )

    async def find_all(self) -> List[User]:
        return [user.model_copy() for user in self._users]

    async def find_by_id(self, user_id: str) -> User:
        return self._users[self._index_of(user_id)].model_copy()

    async def find_by_email(self, email: str) -> User:
        email = normalize_email(email)
        for user in self._users:
            if user.email == email:
                return user.model_copy()
        raise NotFoundError(details={"email": email})

    async def create(self, fields: UserFields) -> User:
        if self._email_taken(fields.email):
            logger.warning("Rejected duplicate email on create", extra={"email": fields.email})
            raise DuplicateEmailError(fields.email)

        user = self._insert(fields)
        logger.info(f"User created: {user.name} ({user.id})", extra={"user_id": user.id})
        return user.model_copy()

    async def update(self, user_id: str, fields: UserFields) -> User:
        with LogContext(user_id=user_id, backend=self.backend_name):
            index = self._index_of(user_id)

            if self._email_taken(fields.email, exclude_id=user_id):
                logger.warning("Rejected duplicate email on update")
                raise DuplicateEmailError(fields.email)

            user = self._users[index].with_fields(fields)
            self._users[index] = user
            logger.info(f"User updated: {user.name} ({user.id})")
            return user.model_copy()

    async def delete_by_id(self, user_id: str) -> User:
        index = self._index_of(user_id)
        user = self._users.pop(index)
        logger.info(f"User deleted: {user.name} ({user.id})", extra={"user_id": user.id})
        return user

    async def count(self) -> int:
        return len(self._users)
