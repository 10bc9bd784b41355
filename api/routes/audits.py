"""
Audit API Routes
AI visibility scoring for sites and competitors
"""

from fastapi import APIRouter, Body
from typing import Any, Dict

from agents.site_audit import site_audit_agent
from agents.competitor import competitor_agent

router = APIRouter()


@router.post("/site")
async def analyze_site(payload: Dict[str, Any] = Body(...)):
    """Five-dimension AI visibility audit of a live page"""
    return await site_audit_agent.run(payload)


@router.post("/competitor")
async def analyze_competitor(payload: Dict[str, Any] = Body(...)):
    """Same scoring for a competitor's page"""
    return await competitor_agent.run(payload)
