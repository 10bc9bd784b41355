"""
Text-generation oracle
Thin async wrapper around the Anthropic Messages API with a hard
timeout and a single attempt per call.
"""

import logging
from typing import Optional

from anthropic import APIError, AsyncAnthropic

from .config import settings
from .errors import OracleError

logger = logging.getLogger(__name__)


class TextOracle:
    """Sends one instruction, returns the generated text"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.client = (
            AsyncAnthropic(
                api_key=api_key,
                timeout=settings.ORACLE_TIMEOUT_SECONDS,
                max_retries=0,
            )
            if api_key
            else None
        )
        self.model = model or settings.ORACLE_MODEL

    async def complete(
        self,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        system: Optional[str] = None,
    ) -> str:
        if not self.client:
            raise OracleError("ANTHROPIC_API_KEY is not configured")

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = await self.client.messages.create(**kwargs)
        except APIError as e:
            logger.error(f"❌ Oracle call failed: {e}")
            raise OracleError(f"Text generation failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ).strip()
        if not text:
            raise OracleError("No content generated")
        return text


oracle = TextOracle()
