"""
app/services/mongo_user_store.py

Purpose: MongoDB-backed user store

- Wraps a Motor collection holding one document per user
- Email uniqueness enforced by the `email_unique` index
- Translates driver errors into UserDesk errors
"""

from contextlib import contextmanager
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import (
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    OperationFailure,
)

from app.core.exceptions import (
    NotFoundError,
    DuplicateEmailError,
    SchemaValidationError,
    StoreConnectionError,
)
from app.core.logging import get_logger
from app.models.user import User, UserFields
from app.services.user_store import UserStore
from utils.validation_utils import normalize_email

logger = get_logger(__name__)

# Server error code for $jsonSchema rejections
DOCUMENT_VALIDATION_FAILURE = 121


@contextmanager
def translate_driver_errors(email: Optional[str] = None):
    """
    Maps pymongo exceptions onto the store's error kinds.

    Args:
        email: Email being written, reported on duplicate-key failures
    """
    try:
        yield
    except DuplicateKeyError as e:
        logger.warning(f"Duplicate key rejected by index: {e.details}")
        raise DuplicateEmailError(email or "") from e
    except (ConnectionFailure, ExecutionTimeout) as e:
        logger.error(f"MongoDB operation failed: {e}")
        raise StoreConnectionError(str(e)) from e
    except OperationFailure as e:
        # insert_one raises WriteError, findAndModify a plain OperationFailure
        if e.code == DOCUMENT_VALIDATION_FAILURE:
            logger.warning("Document rejected by collection validator")
            raise SchemaValidationError(details=e.details) from e
        raise


class MongoUserStore(UserStore):
    """
    User store backed by a MongoDB collection.

    Ids are ObjectId hex strings. find_all orders by _id, which follows
    creation order.
    """

    backend_name = "mongo"

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    def is_valid_id(self, user_id: str) -> bool:
        return ObjectId.is_valid(user_id)

    def _object_id(self, user_id: str) -> ObjectId:
        if not self.is_valid_id(user_id):
            raise NotFoundError(details={"id": user_id})
        return ObjectId(user_id)

    async def find_all(self) -> List[User]:
        with translate_driver_errors():
            cursor = self._collection.find({}).sort("_id", ASCENDING)
            documents = await cursor.to_list(length=None)
        return [User.from_document(document) for document in documents]

    async def find_by_id(self, user_id: str) -> User:
        oid = self._object_id(user_id)
        with translate_driver_errors():
            document = await self._collection.find_one({"_id": oid})
        if document is None:
            raise NotFoundError(details={"id": user_id})
        return User.from_document(document)

    async def find_by_email(self, email: str) -> User:
        email = normalize_email(email)
        with translate_driver_errors():
            document = await self._collection.find_one({"email": email})
        if document is None:
            raise NotFoundError(details={"email": email})
        return User.from_document(document)

    async def _email_holder(self, email: str) -> Optional[User]:
        try:
            return await self.find_by_email(email)
        except NotFoundError:
            return None

    async def create(self, fields: UserFields) -> User:
        if await self._email_holder(fields.email) is not None:
            logger.warning("Rejected duplicate email on create", extra={"email": fields.email})
            raise DuplicateEmailError(fields.email)

        document = fields.to_document()
        with translate_driver_errors(fields.email):
            result = await self._collection.insert_one(document)

        user = User(id=str(result.inserted_id), **fields.to_document())
        logger.info(f"User created: {user.name} ({user.id})", extra={"user_id": user.id})
        return user

    async def update(self, user_id: str, fields: UserFields) -> User:
        oid = self._object_id(user_id)

        holder = await self._email_holder(fields.email)
        if holder is not None and holder.id != user_id:
            # Missing id wins over a taken email
            await self.find_by_id(user_id)
            logger.warning("Rejected duplicate email on update", extra={"user_id": user_id})
            raise DuplicateEmailError(fields.email)

        with translate_driver_errors(fields.email):
            document = await self._collection.find_one_and_update(
                {"_id": oid},
                {"$set": fields.to_document()},
                return_document=ReturnDocument.AFTER,
            )

        if document is None:
            raise NotFoundError(details={"id": user_id})

        user = User.from_document(document)
        logger.info(f"User updated: {user.name} ({user.id})", extra={"user_id": user.id})
        return user

    async def delete_by_id(self, user_id: str) -> User:
        oid = self._object_id(user_id)
        with translate_driver_errors():
            document = await self._collection.find_one_and_delete({"_id": oid})
        if document is None:
            raise NotFoundError(details={"id": user_id})

        user = User.from_document(document)
        logger.info(f"User deleted: {user.name} ({user.id})", extra={"user_id": user.id})
        return user

    async def count(self) -> int:
        with translate_driver_errors():
            return await self._collection.count_documents({})

    async def ping(self) -> bool:
        try:
            await self._collection.database.command("ping")
            return True
        except ConnectionFailure as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False
