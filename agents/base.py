"""
Analysis Agent base
Shared request flow for every AI analysis endpoint:
validate -> fetch page -> build prompt -> ask oracle -> parse or fall back.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from shared.errors import ClientInputError
from shared.oracle import TextOracle, oracle as default_oracle
from shared.page_fetch import DEFAULT_PLACEHOLDER, FetchedPage, PageFetcher, page_fetcher
from shared.structured_output import parse_or_fallback

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\S+")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def word_count(text: str) -> int:
    return len(_WORD_RE.findall(text or ""))


def hostname(url: str) -> str:
    """Host part of a URL; raises ClientInputError when there is none"""
    host = urlparse(url).hostname
    if not host:
        raise ClientInputError(f"Invalid URL: {url}")
    return host


def clamp_score(value: Any, low: int = 0, high: int = 100) -> Optional[int]:
    """Integer score within [low, high]; None when the value isn't numeric"""
    if isinstance(value, bool):
        return None
    try:
        number = round(float(value))
    except (TypeError, ValueError):
        return None
    return max(low, min(high, number))


class AnalysisAgent:
    """
    Base class for the analysis agents.

    Subclasses set `name` (used for logging and fallback counts), `purpose`
    (crawler user-agent suffix) and the oracle sampling settings, then
    implement `run(payload)`.
    """

    name = "analysis"
    purpose = "AI Visibility Analyzer"
    temperature = 0.2
    max_tokens = 2048

    def __init__(self, oracle: Optional[TextOracle] = None, fetcher: Optional[PageFetcher] = None):
        self.oracle = oracle or default_oracle
        self.fetcher = fetcher or page_fetcher

    # ── Validation ───────────────────────────────────────────────────────────

    def require(self, payload: Dict[str, Any], *fields: str) -> Tuple[Any, ...]:
        """Values for the required fields; missing or empty ones raise ClientInputError"""
        missing = [f for f in fields if _is_blank(payload.get(f))]
        if missing:
            raise ClientInputError(f"Missing required parameters: {', '.join(missing)}")
        return tuple(payload[f] for f in fields)

    def require_text(self, payload: Dict[str, Any], field: str, min_length: int, strip: bool = False) -> str:
        value = payload.get(field)
        if not isinstance(value, str):
            raise ClientInputError(f"{field} is required and must be a string")
        measured = value.strip() if strip else value
        if len(measured) < min_length:
            raise ClientInputError(f"{field} must be at least {min_length} characters long")
        return value

    # ── Pipeline stages ──────────────────────────────────────────────────────

    async def fetch_page(
        self,
        url: str,
        budget: int,
        placeholder: str = DEFAULT_PLACEHOLDER,
        with_metadata: bool = False,
    ) -> FetchedPage:
        return await self.fetcher.fetch(
            url, budget, self.purpose, placeholder=placeholder, with_metadata=with_metadata
        )

    async def ask(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        logger.info(f"🤖 [{self.name}] calling oracle ({len(prompt)} chars)")
        return await self.oracle.complete(
            prompt,
            temperature=self.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.max_tokens,
            system=system,
        )

    def parse(self, text: str, fallback: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        return parse_or_fallback(text, fallback, self.name)

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
