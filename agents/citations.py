"""
Citation Agent
Asks the oracle how an AI assistant would describe a domain and simulates
the search-side counts and citations around it.
"""

import logging
import random
from typing import Any, Dict, List

from .base import AnalysisAgent, hostname, now_iso

logger = logging.getLogger(__name__)

SOURCE_TYPES = ["Google Search", "News Article", "Reddit Discussion", "Industry Report"]
PLATFORMS_CHECKED = ["Google", "News", "Reddit"]

NARRATIVE_PROMPT = """
You are an AI assistant responding to a query about "{domain}".

Generate a helpful, informative response about this website/company as if you were ChatGPT, Perplexity, or another AI assistant. The response should:

1. Be natural and conversational
2. Provide useful information about the site/company
3. Be factual but general (since you don't have real-time access)
4. Be 2-3 sentences long
5. Sound like a typical AI assistant response

Respond as if someone asked: "Tell me about {domain}" or "What services does {domain} offer?"
"""


def simulated_search_summary(rng: random.Random = None) -> Dict[str, int]:
    rng = rng or random
    return {
        "google_results": rng.randint(10, 59),
        "news_results": rng.randint(5, 24),
        "reddit_results": rng.randint(2, 16),
        "high_authority_citations": rng.randint(1, 5),
    }


def simulated_citations(site_id: str, domain: str, rng: random.Random = None) -> List[Dict[str, Any]]:
    rng = rng or random
    detected_at = now_iso()
    citations = []
    for i in range(rng.randint(1, 3)):
        source_type = rng.choice(SOURCE_TYPES)
        citations.append({
            "site_id": site_id,
            "source_type": source_type,
            "snippet_text": (
                f"Information about {domain} found in {source_type.lower()}. "
                "This appears to be a professional service provider with relevant offerings."
            ),
            "url": f"https://example-source-{i + 1}.com/citation",
            "detected_at": detected_at,
        })
    return citations


class CitationAgent(AnalysisAgent):
    name = "citation_tracking"
    purpose = "Citation Tracker"
    temperature = 0.5
    max_tokens = 1024

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        site_id, url = self.require(payload, "siteId", "url")
        domain = hostname(url)

        assistant_response = await self.ask(NARRATIVE_PROMPT.format(domain=domain))
        search_summary = simulated_search_summary()
        citations = simulated_citations(site_id, domain)

        logger.info(f"🔗 {len(citations)} citations found for {domain}")
        return {
            "assistant_response": assistant_response,
            "search_summary": search_summary,
            "citations": citations,
            "new_citations_found": len(citations),
            "platforms_checked": list(PLATFORMS_CHECKED),
            "total_results": (
                search_summary["google_results"]
                + search_summary["news_results"]
                + search_summary["reddit_results"]
            ),
        }


citation_agent = CitationAgent()
