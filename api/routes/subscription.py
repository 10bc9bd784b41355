"""
Subscription API Routes
Plan catalog, entitlement snapshot and usage for an account
"""

from fastapi import APIRouter, HTTPException
import logging

from shared.entitlements import load_entitlements
from shared.plans import catalog, get_plan
from shared.usage import usage_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/plans")
async def list_plans():
    """Every tier with its limits and feature flags"""
    return {
        "plans": [plan.model_dump(mode="json") for plan in catalog.plans.values()]
    }


@router.get("/plans/{tier}")
async def get_plan_details(tier: str):
    plan = get_plan(tier)
    if not plan:
        raise HTTPException(status_code=404, detail=f"Unknown plan: {tier}")
    return plan.model_dump(mode="json")


@router.get("/entitlements")
async def get_entitlements(user_id: str = ""):
    """What the account may do right now. Anonymous callers get the free plan."""
    entitlements = await load_entitlements(user_id or None)
    return entitlements.summary()


@router.get("/usage")
async def get_usage(user_id: str):
    usage = await usage_store.get(user_id)
    return {"user_id": user_id, "usage": usage.model_dump(mode="json")}
