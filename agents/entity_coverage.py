"""
Entity Coverage Agent
Finds the key named concepts on a site and flags the under-covered ones.
"""

import logging
import re
from typing import Any, Dict, List

from shared.errors import OracleError
from shared.page_fetch import ENTITY_BUDGET
from shared.structured_output import parse_json_object
from shared.monitoring import record_fallback
from .base import AnalysisAgent, clamp_score, hostname, now_iso

logger = logging.getLogger(__name__)

DEFAULT_COVERAGE_SCORE = 75

# Mentions needed before an entity counts as covered
EXPECTED_MENTIONS = {"high": 3, "medium": 2, "low": 1}

# (name, type, importance, keywords); the site's own name is prepended per request
BUSINESS_ENTITIES = [
    ("Professional Services", "Service Category", "high", ["service", "professional", "solution"]),
    ("Business Solutions", "Service Category", "medium", ["business", "solution", "enterprise"]),
    ("Customer Support", "Service Feature", "medium", ["support", "customer", "help"]),
    ("Quality Assurance", "Process", "medium", ["quality", "assurance", "testing"]),
    ("Project Management", "Service Feature", "medium", ["project", "management", "planning"]),
    ("Consultation", "Service Type", "high", ["consult", "advice", "expert"]),
    ("Implementation", "Process", "medium", ["implement", "deploy", "setup"]),
]

ENTITY_PROMPT = """Analyze entities for: {url}
Title: {title}
Description: {description}
Keywords: {keywords}
Content: {content}

Return JSON only:
{{"entities":[{{"entity_name":"Company","entity_type":"Organization","mention_count":5,"gap":false}}],"analysis_summary":"Brief analysis","total_entities":5,"coverage_score":80}}

Max 5 entities. Keep brief."""


def site_name(url: str) -> str:
    return hostname(url).replace("www.", "").split(".")[0]


def rule_based_analysis(url: str, content: str, site_id: str) -> Dict[str, Any]:
    """Keyword-count entity analysis over a fixed business entity table"""
    name = site_name(url)
    display_name = name[:1].upper() + name[1:]
    table = [(display_name, "Organization", "high", [name.lower()])] + BUSINESS_ENTITIES

    created_at = now_iso()
    entities = []
    for entity_name, entity_type, importance, keywords in table:
        mentions = sum(
            len(re.findall(re.escape(keyword), content, re.IGNORECASE)) for keyword in keywords
        )
        entities.append({
            "site_id": site_id,
            "entity_name": entity_name,
            "entity_type": entity_type,
            "mention_count": mentions,
            "gap": mentions < EXPECTED_MENTIONS[importance],
            "created_at": created_at,
        })

    covered = [e for e in entities if not e["gap"]]
    gaps = len(entities) - len(covered)
    return {
        "entities": entities,
        "analysis_summary": (
            f"Entity coverage analysis completed for {display_name}. Found {len(covered)} "
            f"well-covered entities and {gaps} entities with coverage gaps. Focus on improving "
            f"coverage for high-importance entities to enhance AI understanding."
        ),
        "total_entities": len(entities),
        "coverage_score": round(len(covered) / len(entities) * 100),
    }


def normalize_entities(raw: Any, site_id: str) -> List[Dict[str, Any]]:
    if not isinstance(raw, list):
        raise ValueError("No entities array found in response")
    created_at = now_iso()
    entities = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            mentions = max(0, int(item.get("mention_count") or 0))
        except (TypeError, ValueError):
            mentions = 0
        entities.append({
            "site_id": site_id,
            "entity_name": str(item.get("entity_name") or "Unknown Entity"),
            "entity_type": str(item.get("entity_type") or "Unknown"),
            "mention_count": mentions,
            "gap": bool(item.get("gap", False)),
            "created_at": created_at,
        })
    return entities


class EntityCoverageAgent(AnalysisAgent):
    name = "entity_coverage"
    purpose = "Entity Analyzer"
    temperature = 0.1
    max_tokens = 512

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        site_id, url = self.require(payload, "siteId", "url")
        domain = hostname(url)

        page = await self.fetch_page(
            url,
            ENTITY_BUDGET,
            placeholder=f"Website: {url}\nDomain: {domain}\nNote: Content could not be fetched directly.",
            with_metadata=True,
        )

        try:
            text = await self.ask(ENTITY_PROMPT.format(
                url=url,
                title=page.metadata.get("title", ""),
                description=page.metadata.get("description", ""),
                keywords=page.metadata.get("keywords", ""),
                content=page.content[:800],
            ))
            parsed = parse_json_object(text)
            entities = normalize_entities(parsed.get("entities"), site_id)
            coverage = clamp_score(parsed.get("coverage_score"))
            result = {
                "entities": entities,
                "analysis_summary": parsed.get("analysis_summary") or "Entity analysis completed successfully",
                "total_entities": len(entities),
                "coverage_score": DEFAULT_COVERAGE_SCORE if coverage is None else coverage,
            }
            analysis_method = "AI-powered"
        except (OracleError, ValueError) as e:
            record_fallback(self.name, str(e)[:100])
            result = rule_based_analysis(url, page.content, site_id)
            analysis_method = "Rule-based"

        logger.info(f"🧩 {result['total_entities']} entities for {url} ({analysis_method})")
        return {**result, "analysis_method": analysis_method, "success": True}


entity_coverage_agent = EntityCoverageAgent()
