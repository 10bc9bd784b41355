"""
Content Analysis Agent
Scores pasted content for AI visibility. Word count, readability and
entity density are computed locally; the oracle adds the qualitative part.
"""

import logging
import re
from typing import Any, Dict

from shared.errors import OracleError
from shared.monitoring import record_fallback
from .base import AnalysisAgent, clamp_score, word_count

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 50
SCORE_KEYS = ("score", "ai_optimization_score", "semantic_clarity_score")

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_SYLLABLE_RE = re.compile(r"[aeiouy]+")

ENTITY_PATTERNS = [
    # Business
    re.compile(r"\b(company|business|organization|corporation|enterprise|firm|agency)\b", re.IGNORECASE),
    # Service
    re.compile(r"\b(service|solution|product|offering|platform|system|tool)\b", re.IGNORECASE),
    # Technology
    re.compile(r"\b(technology|software|application|website|digital|online|cloud)\b", re.IGNORECASE),
    # Action
    re.compile(r"\b(help|support|provide|deliver|create|develop|manage|optimize)\b", re.IGNORECASE),
]

ANALYSIS_PROMPT = """
Analyze the following content for AI visibility and optimization. Provide a detailed analysis in JSON format with the following structure:

{{
  "score": <overall_score_0_to_100>,
  "ai_optimization_score": <ai_optimization_score_0_to_100>,
  "semantic_clarity_score": <semantic_clarity_score_0_to_100>,
  "recommendations": [
    "specific actionable recommendation 1",
    "specific actionable recommendation 2",
    "specific actionable recommendation 3"
  ],
  "strengths": [
    "strength 1",
    "strength 2"
  ],
  "weaknesses": [
    "weakness 1",
    "weakness 2"
  ],
  "analysis_summary": "Brief summary of the content's AI visibility potential"
}}

Content to analyze:
{content}

Focus on:
1. How well the content would be understood by AI systems
2. Clarity and structure for AI processing
3. Entity coverage and semantic completeness
4. Potential for being cited by AI systems
5. Overall optimization for AI visibility

Provide specific, actionable recommendations for improvement."""


def readability_score(text: str) -> int:
    """Simplified Flesch Reading Ease, clamped to 0-100"""
    sentences = len([s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()])
    words = word_count(text)
    if sentences == 0 or words == 0:
        return 50
    syllables = len(_SYLLABLE_RE.findall(text.lower()))
    score = 206.835 - 1.015 * (words / sentences) - 84.6 * (syllables / words)
    return max(0, min(100, round(score)))


def entity_coverage_score(text: str) -> int:
    """Score by entity density; 2-8% of words is the sweet spot"""
    words = word_count(text)
    if words == 0:
        return 30
    mentions = sum(len(pattern.findall(text)) for pattern in ENTITY_PATTERNS)
    density = mentions / words * 100

    if 2 <= density <= 8:
        return 90
    if 1 <= density <= 10:
        return 70
    if 0.5 <= density <= 12:
        return 50
    return 30


def fallback_analysis(content: str, readability: int, entity_score: int, words: int) -> Dict[str, Any]:
    """Qualitative analysis derived from the content's structure alone"""
    has_headings = bool(re.search(r"#{1,6}\s", content) or re.search(r"<h[1-6]", content))
    has_lists = bool(re.search(r"^\s*[-*+]\s", content, re.MULTILINE) or re.search(r"<[uo]l", content))
    has_questions = "?" in content
    has_structure = has_headings or has_lists

    base = min(85, max(30,
        readability * 0.3
        + entity_score * 0.3
        + (25 if has_structure else 10)
        + (15 if has_questions else 5)
    ))

    if base > 70:
        potential = "good"
    elif base > 50:
        potential = "moderate"
    else:
        potential = "basic"

    return {
        "score": round(base),
        "ai_optimization_score": round(base * 0.9),
        "semantic_clarity_score": round(readability * 0.8 + 20),
        "recommendations": [
            "Consider adding more descriptive headings" if has_headings
            else "Add clear headings and subheadings to improve structure",
            "Expand your lists with more detailed explanations" if has_lists
            else "Use bullet points and numbered lists to organize information",
            "Expand your Q&A sections" if has_questions
            else "Add FAQ sections to address common questions",
        ],
        "strengths": [
            "Good content length for comprehensive coverage" if words > 200 else "Concise and focused content",
            "Clear and readable writing style" if readability > 60 else "Direct communication style",
        ],
        "weaknesses": [
            "Could benefit from more detailed sections" if has_structure
            else "Lacks clear structural organization",
            "Limited entity coverage" if entity_score < 50 else "Could expand on key concepts",
        ],
        "analysis_summary": (
            f"Content shows {potential} potential for AI visibility with "
            f"{'decent' if has_structure else 'limited'} structural organization."
        ),
    }


class ContentAnalysisAgent(AnalysisAgent):
    name = "content_analysis"
    purpose = "Content Analyzer"
    temperature = 0.1
    max_tokens = 2048

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        content = self.require_text(payload, "content", MIN_CONTENT_LENGTH)
        logger.info(f"📝 Analyzing content with {len(content)} characters")

        words = word_count(content)
        readability = readability_score(content)
        entity_score = entity_coverage_score(content)
        fallback = fallback_analysis(content, readability, entity_score, words)

        try:
            text = await self.ask(ANALYSIS_PROMPT.format(content=content))
            analysis, _ = self.parse(text, fallback)
        except OracleError as e:
            record_fallback(self.name, f"oracle unavailable: {e}")
            analysis = fallback

        result = {
            **analysis,
            "word_count": words,
            "readability_score": readability,
            "entity_coverage_score": entity_score,
            "recommendations": analysis.get("recommendations") or [],
            "strengths": analysis.get("strengths") or [],
            "weaknesses": analysis.get("weaknesses") or [],
            "analysis_summary": analysis.get("analysis_summary") or "Content analysis completed",
        }
        for key in SCORE_KEYS:
            value = clamp_score(result.get(key))
            result[key] = fallback[key] if value is None else value

        logger.info(f"✅ Content analysis complete (score {result['score']})")
        return result


content_analysis_agent = ContentAnalysisAgent()
