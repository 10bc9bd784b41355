"""
Citation API Routes
"""

from fastapi import APIRouter, Body
from typing import Any, Dict

from agents.citations import citation_agent

router = APIRouter()


@router.post("/track")
async def track_citations(payload: Dict[str, Any] = Body(...)):
    """Assistant narrative plus simulated search mentions for a site"""
    return await citation_agent.run(payload)
