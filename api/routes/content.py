"""
Content API Routes
Content analysis, prompt suggestions and content generation
"""

from fastapi import APIRouter, Body
from typing import Any, Dict

from agents.content_analysis import content_analysis_agent
from agents.content_generation import content_generation_agent
from agents.prompts import prompt_agent

router = APIRouter()


@router.post("/analyze")
async def analyze_content(payload: Dict[str, Any] = Body(...)):
    """Score pasted content (at least 50 characters) for AI visibility"""
    return await content_analysis_agent.run(payload)


@router.post("/prompts")
async def generate_prompts(payload: Dict[str, Any] = Body(...)):
    return await prompt_agent.run(payload)


@router.post("/generate")
async def generate_content(payload: Dict[str, Any] = Body(...)):
    return await content_generation_agent.run(payload)
