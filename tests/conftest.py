"""
Shared fixtures: stores for both backends and a TestClient bound to a
fresh store per test.

FakeUsersCollection mimics the slice of Motor's AsyncIOMotorCollection
that MongoUserStore uses, including the unique email index.
"""

import copy

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from app.main import app
from app.services.memory_user_store import MemoryUserStore
from app.services.mongo_user_store import MongoUserStore


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    def sort(self, key, direction=1):
        self._documents.sort(key=lambda d: d[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return self._documents if length is None else self._documents[:length]


class FakeDatabase:
    def __init__(self):
        self.reachable = True

    async def command(self, name, *args, **kwargs):
        if not self.reachable:
            from pymongo.errors import ServerSelectionTimeoutError
            raise ServerSelectionTimeoutError("no servers available")
        return {"ok": 1.0}


class FakeUsersCollection:
    """In-memory stand-in for a Motor collection with a unique email index."""

    def __init__(self):
        self.documents = []
        self.database = FakeDatabase()
        self.fail_with = None

    def _check_failure(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _matches(self, document, query):
        for key, value in query.items():
            if isinstance(value, dict) and "$ne" in value:
                if document.get(key) == value["$ne"]:
                    return False
            elif document.get(key) != value:
                return False
        return True

    def _email_conflict(self, email, exclude_id=None):
        return any(
            d["email"] == email and d["_id"] != exclude_id
            for d in self.documents
        )

    def find(self, query):
        self._check_failure()
        return FakeCursor([
            copy.deepcopy(d) for d in self.documents if self._matches(d, query)
        ])

    async def find_one(self, query):
        self._check_failure()
        for document in self.documents:
            if self._matches(document, query):
                return copy.deepcopy(document)
        return None

    async def insert_one(self, document):
        self._check_failure()
        if self._email_conflict(document["email"]):
            raise DuplicateKeyError("E11000 duplicate key error", code=11000, details={"keyValue": {"email": document["email"]}})
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return FakeInsertResult(document["_id"])

    async def find_one_and_update(self, query, update, return_document=None):
        self._check_failure()
        for document in self.documents:
            if self._matches(document, query):
                changes = update["$set"]
                if "email" in changes and self._email_conflict(changes["email"], document["_id"]):
                    raise DuplicateKeyError("E11000 duplicate key error", code=11000)
                document.update(changes)
                return copy.deepcopy(document)
        return None

    async def find_one_and_delete(self, query):
        self._check_failure()
        for index, document in enumerate(self.documents):
            if self._matches(document, query):
                return self.documents.pop(index)
        return None

    async def count_documents(self, query):
        self._check_failure()
        return len([d for d in self.documents if self._matches(d, query)])


@pytest.fixture
def memory_store():
    return MemoryUserStore()


@pytest.fixture
def users_collection():
    return FakeUsersCollection()


@pytest.fixture
def mongo_store(users_collection):
    return MongoUserStore(users_collection)


@pytest.fixture(params=["memory", "mongo"])
def store(request):
    """Runs a test once per backend."""
    if request.param == "memory":
        return MemoryUserStore()
    return MongoUserStore(FakeUsersCollection())


@pytest.fixture
def client(memory_store):
    with TestClient(app) as test_client:
        app.state.user_store = memory_store
        yield test_client


@pytest.fixture
def mongo_client(mongo_store):
    with TestClient(app) as test_client:
        app.state.user_store = mongo_store
        yield test_client
