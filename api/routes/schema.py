"""
Schema API Routes
"""

from fastapi import APIRouter, Body
from typing import Any, Dict

from agents.schema_markup import schema_agent

router = APIRouter()


@router.post("/generate")
async def generate_schema(payload: Dict[str, Any] = Body(...)):
    """JSON-LD markup for a page"""
    return await schema_agent.run(payload)
