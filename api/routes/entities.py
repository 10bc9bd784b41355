"""
Entity API Routes
"""

from fastapi import APIRouter, Body
from typing import Any, Dict

from agents.entity_coverage import entity_coverage_agent

router = APIRouter()


@router.post("/analyze")
async def analyze_entities(payload: Dict[str, Any] = Body(...)):
    """Key entities on a site and their coverage gaps"""
    return await entity_coverage_agent.run(payload)
