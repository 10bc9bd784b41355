"""
Summary API Routes
"""

from fastapi import APIRouter, Body
from typing import Any, Dict

from agents.summaries import summary_agent

router = APIRouter()


@router.post("/generate")
async def generate_summary(payload: Dict[str, Any] = Body(...)):
    return await summary_agent.run(payload)
