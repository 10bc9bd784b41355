"""
Chatbot API Routes
Genie for signed-in users and for landing page visitors
"""

from fastapi import APIRouter, Body
from typing import Any, Dict

from agents.chatbot import landing_chatbot, product_chatbot

router = APIRouter()


@router.post("")
async def chat(payload: Dict[str, Any] = Body(...)):
    """Plan-gated chatbot. Free tier gets a 403 with upgrade text."""
    return await product_chatbot.run(payload)


@router.post("/landing")
async def landing_chat(payload: Dict[str, Any] = Body(...)):
    return await landing_chatbot.run(payload)
