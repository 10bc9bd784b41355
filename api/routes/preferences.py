"""
Preferences API Routes
Dismissal flags for upsell prompts
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.entitlements import load_entitlements
from shared.errors import ClientInputError
from shared.preferences import KNOWN_KEYS, preference_store

router = APIRouter()


class DismissRequest(BaseModel):
    user_id: str
    key: str


def _check_key(key: str) -> None:
    if key not in KNOWN_KEYS:
        raise ClientInputError(f"Unknown preference key: {key}")


@router.get("/{user_id}")
async def get_preferences(user_id: str):
    return {"user_id": user_id, "dismissed": await preference_store.all_for(user_id)}


@router.post("/dismiss")
async def dismiss(request: DismissRequest):
    _check_key(request.key)
    await preference_store.dismiss(request.user_id, request.key)
    return {"user_id": request.user_id, "key": request.key, "dismissed": True}


@router.get("/{user_id}/upsell/{key}")
async def should_show_upsell(user_id: str, key: str):
    """Whether an upsell prompt should be shown to this account"""
    _check_key(key)
    entitlements = await load_entitlements(user_id)
    show = await preference_store.should_show_upsell(entitlements.plan, user_id, key)
    return {"user_id": user_id, "key": key, "show": show}


@router.delete("/{user_id}/{key}")
async def reset(user_id: str, key: str):
    """Clear a dismissal so the prompt shows again"""
    _check_key(key)
    await preference_store.reset(user_id, key)
    return {"user_id": user_id, "key": key, "dismissed": False}
