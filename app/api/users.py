"""
app/api/users.py

Purpose: JSON user API

- Snapshot of all users (GET /api/users)
- REST create/read/update/delete on /api/users/{id}
- Validation through utils.validation_utils before every write
- Store errors propagate to the handlers in app.core.errors
"""

from fastapi import APIRouter, Depends, Request
from typing import Any, Mapping

from app.core.exceptions import InvalidUserIdError
from app.core.logging import get_logger
from app.models.user import User, UserFields
from app.schemas.user import UserPayload, UserListResponse
from app.services.user_store import UserStore
from utils.validation_utils import normalize_and_validate

logger = get_logger(__name__)
router = APIRouter(prefix="/api/users", tags=["Users API"])


def get_user_store(request: Request) -> UserStore:
    """Returns the store created during application startup."""
    return request.app.state.user_store


def checked_id(store: UserStore, user_id: str) -> str:
    """
    Rejects identifiers the active backend can never hold.

    Raises:
        InvalidUserIdError: For malformed ids
    """
    if not store.is_valid_id(user_id):
        logger.info(f"Rejected malformed user id: {user_id!r}")
        raise InvalidUserIdError(user_id)
    return user_id


def validated_fields(payload: Mapping[str, Any], is_update: bool = False) -> UserFields:
    """
    Runs the validator and raises its error for the exception handlers.
    """
    result = normalize_and_validate(payload, is_update=is_update)
    if not result.ok:
        logger.info(f"Validation failed: {result.error.code}")
        raise result.error
    return result.fields


@router.get("", response_model=UserListResponse)
async def list_users(store: UserStore = Depends(get_user_store)) -> UserListResponse:
    """Machine-readable snapshot of every user."""
    users = await store.find_all()
    return UserListResponse(count=len(users), data=users)


@router.post("", response_model=User, status_code=201)
async def create_user(payload: UserPayload, store: UserStore = Depends(get_user_store)) -> User:
    fields = validated_fields(payload.model_dump())
    return await store.create(fields)


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, store: UserStore = Depends(get_user_store)) -> User:
    return await store.find_by_id(checked_id(store, user_id))


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    payload: UserPayload,
    store: UserStore = Depends(get_user_store),
) -> User:
    checked_id(store, user_id)
    fields = validated_fields(payload.model_dump(), is_update=True)
    return await store.update(user_id, fields)


@router.delete("/{user_id}", response_model=User)
async def delete_user(user_id: str, store: UserStore = Depends(get_user_store)) -> User:
    """Deletes a user and returns the removed record."""
    return await store.delete_by_id(checked_id(store, user_id))
