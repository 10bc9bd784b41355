"""
Structured output parsing
Turns free oracle text into a JSON object, or hands back a fallback.
"""

import json
import logging
import re
from typing import Any, Dict, Tuple

from .monitoring import record_fallback

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json|JSON)?\s*|\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence around the payload"""
    return _FENCE_RE.sub("", text.strip()).strip()


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of oracle text.

    Tries a strict parse of the fence-stripped text first, then the outermost
    {...} span. Raises ValueError when no object can be recovered.
    """
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("no JSON object found in response")
        try:
            parsed = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON in response: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def parse_or_fallback(text: str, fallback: Dict[str, Any], endpoint: str) -> Tuple[Dict[str, Any], bool]:
    """(payload, used_fallback)"""
    try:
        return parse_json_object(text), False
    except ValueError as e:
        record_fallback(endpoint, f"unparseable oracle output: {e}")
        return fallback, True
