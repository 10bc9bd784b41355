"""
Voice Assistant Agent
Simulates how a voice assistant (Siri, Alexa, Google Assistant) answers a
spoken query about a site, and whether that answer cites the site.
Built on the citation tracker's assistant narrative and search data.
"""

import logging
from typing import Any, Dict, List, Optional

from shared.errors import OracleError
from shared.monitoring import record_fallback
from .base import AnalysisAgent, hostname, now_iso
from .citations import CitationAgent, citation_agent

logger = logging.getLogger(__name__)

MAX_CONFIDENCE = 0.95

COMMON_QUERIES = [
    "What is {site_name}?",
    "What services does {site_name} offer?",
    "How can {site_name} help me?",
    "Tell me about {site_name}",
    "What makes {site_name} unique?",
    "How do I contact {site_name}?",
    "What are the benefits of using {site_name}?",
    "Is {site_name} reliable?",
    "How much does {site_name} cost?",
    "Where is {site_name} located?",
]

CITATION_PHRASES = [
    "according to {name}",
    "{name} states",
    "{name} explains",
    "{name} reports",
    "based on {name}",
    "{name} mentions",
    "source: {name}",
    "via {name}",
]


def suggested_queries(site_name: str) -> List[str]:
    return [q.format(site_name=site_name) for q in COMMON_QUERIES]


def contextual_response(query: str, site_name: str, domain: str, citations: List[Dict[str, Any]]) -> str:
    """Answer assembled from the query wording when no assistant narrative is available"""
    q = query.lower()

    if citations:
        snippet = str(citations[0].get("snippet_text", "")).lower().rstrip(".")
        return f"Based on information found online, {site_name} {snippet}. You can learn more at {domain}."

    if "what is" in q or "tell me about" in q:
        return (
            f"{site_name} is a professional service provider that offers comprehensive solutions to help "
            f"businesses and individuals achieve their goals. You can learn more by visiting {domain}."
        )
    if "services" in q or "offer" in q:
        return (
            f"According to {site_name}, they offer a range of professional services designed to meet "
            f"various business needs. Their website at {domain} has the details."
        )
    if "help" in q or "benefit" in q:
        return (
            f"{site_name} can help by providing professional expertise and tailored solutions. "
            f"For specifics, visit {domain}."
        )
    if "contact" in q or "reach" in q:
        return f"You can contact {site_name} through their website at {domain}."
    if "cost" in q or "price" in q or "much" in q:
        return (
            f"For pricing information about {site_name}'s services, visit {domain} or contact them directly. "
            "Pricing typically varies with your requirements."
        )
    if "location" in q or "where" in q:
        return (
            f"{site_name} operates online; their location and service areas are listed on their website at {domain}."
        )
    if "reliable" in q or "trust" in q or "good" in q:
        return (
            f"Based on available information, {site_name} appears to be a professional service provider. "
            f"Check {domain} and any available reviews to judge their reliability."
        )
    return (
        f"{site_name} is a professional service provider that you can learn more about by visiting "
        f"their website at {domain}."
    )


def enhance_response_for_query(query: str, response: str, site_name: str, domain: str) -> str:
    """Prefix the answer when it does not address what the query asked"""
    q = query.lower()
    lower = response.lower()

    if "what is" in q and "is a" not in lower:
        return f"{site_name} is a professional service provider. {response}"
    if "services" in q and "service" not in lower:
        return f"Regarding services, {response}"
    if "help" in q and "help" not in lower:
        return f"{site_name} can help by providing professional services. {response}"
    if "contact" in q and "contact" not in lower:
        return f"To contact {site_name}, visit their website at {domain}. {response}"
    return response


def check_for_citation(response: str, site_name: str, domain: str, new_citations_found: int) -> bool:
    """True when the answer names the site or its domain, or tracking found citations"""
    lower = response.lower()
    name = site_name.lower()
    indicators = [phrase.format(name=name) for phrase in CITATION_PHRASES] + [domain.lower(), name]
    if any(indicator and indicator in lower for indicator in indicators):
        return True
    return new_citations_found > 0


def calculate_confidence(
    has_citation: bool,
    new_citations_found: int,
    high_authority_citations: int,
    platforms_checked: int,
) -> float:
    confidence = 0.3
    if new_citations_found > 0:
        confidence += 0.4
    if has_citation:
        confidence += 0.3
    if high_authority_citations > 0:
        confidence += 0.2
    if platforms_checked > 1:
        confidence += 0.1
    return round(min(confidence, MAX_CONFIDENCE), 2)


class VoiceAssistantAgent(AnalysisAgent):
    name = "voice_assistant"
    purpose = "Voice Assistant Tester"

    def __init__(self, citations: Optional[CitationAgent] = None, **kwargs):
        super().__init__(**kwargs)
        self.citations = citations or citation_agent

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        site_id, url, site_name, query = self.require(payload, "siteId", "url", "name", "query")
        query = str(query).strip()
        domain = hostname(url)
        logger.info(f"🎙️ Voice test for {domain}: {query}")

        try:
            tracked = await self.citations.run({"siteId": site_id, "url": url})
            response = tracked.get("assistant_response") or ""
        except OracleError as e:
            record_fallback(self.name, f"assistant narrative unavailable: {e}")
            tracked = {}
            response = ""

        citations = tracked.get("citations") or []
        found = tracked.get("new_citations_found") or 0
        platforms = tracked.get("platforms_checked") or ["Voice Assistant Simulation"]
        high_authority = (tracked.get("search_summary") or {}).get("high_authority_citations") or 0

        if response.strip():
            data_source = "Assistant Narrative"
        else:
            response = contextual_response(query, site_name, domain, citations)
            data_source = "Generated Response"

        response = enhance_response_for_query(query, response, site_name, domain)
        has_citation = check_for_citation(response, site_name, domain, found)
        confidence = calculate_confidence(has_citation, found, high_authority, len(platforms))

        logger.info(f"✅ Voice test complete for {domain} ({round(confidence * 100)}% confidence)")
        return {
            "query": query,
            "response": response,
            "has_citation": has_citation,
            "confidence": confidence,
            "citations_found": found,
            "platforms_checked": platforms,
            "data_source": data_source,
            "timestamp": now_iso(),
        }


voice_assistant_agent = VoiceAssistantAgent()
