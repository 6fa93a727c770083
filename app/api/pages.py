"""
app/api/pages.py

Purpose: Page-style routes of the user manager

- Same paths as the browser front end (/read, /create, /edit, /update, /delete)
- Accept form-encoded or JSON bodies
- Successful writes redirect to /read
- Bodies are JSON; rendering is left to the front end
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from typing import Any, Dict

from app.api.users import get_user_store, checked_id, validated_fields
from app.core.logging import get_logger
from app.services.user_store import UserStore

logger = get_logger(__name__)
router = APIRouter(tags=["Pages"])

FORM_FIELDS = ["name", "email", "image"]


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Reads a create/update body sent either as a form or as JSON.

    Returns:
        Dict with whatever of name/email/image was submitted. Uploaded
        files in a form count as absent.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(body, dict):
            return {}
        return {field: body.get(field) for field in FORM_FIELDS}

    form = await request.form()
    payload = {}
    for field in FORM_FIELDS:
        value = form.get(field)
        # UploadFile parts are not text
        payload[field] = value if isinstance(value, str) else None
    return payload


def redirect_to_list() -> RedirectResponse:
    return RedirectResponse(url="/read", status_code=303)


@router.get("/read")
async def read_users(store: UserStore = Depends(get_user_store)):
    """List page: every user in store order."""
    users = await store.find_all()
    return {"users": [user.model_dump() for user in users]}


@router.get("/create")
async def create_form():
    """Create page: describes the form fields."""
    return {"fields": FORM_FIELDS, "action": "/create", "method": "POST"}


@router.post("/create")
async def create_user(request: Request, store: UserStore = Depends(get_user_store)):
    fields = validated_fields(await read_payload(request))
    await store.create(fields)
    return redirect_to_list()


@router.get("/edit/{user_id}")
async def edit_form(user_id: str, store: UserStore = Depends(get_user_store)):
    """Edit page: the user to pre-fill the form with."""
    user = await store.find_by_id(checked_id(store, user_id))
    return {"user": user.model_dump(), "action": f"/update/{user.id}", "method": "POST"}


@router.post("/update/{user_id}")
async def update_user(user_id: str, request: Request, store: UserStore = Depends(get_user_store)):
    checked_id(store, user_id)
    fields = validated_fields(await read_payload(request), is_update=True)
    await store.update(user_id, fields)
    return redirect_to_list()


@router.get("/delete/{user_id}")
async def delete_user(user_id: str, store: UserStore = Depends(get_user_store)):
    await store.delete_by_id(checked_id(store, user_id))
    return redirect_to_list()
