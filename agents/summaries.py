"""
Summary Agent
Writes AI-optimized prose summaries of a site.
"""

import logging
from typing import Any, Dict

from shared.page_fetch import SUMMARY_BUDGET
from .base import AnalysisAgent, now_iso, word_count

logger = logging.getLogger(__name__)

DATA_SOURCE = "AI Generated"
DEFAULT_SUMMARY_TYPE = "SiteOverview"

SUMMARY_INSTRUCTIONS = {
    "SiteOverview": "Create a comprehensive overview of this website and business, including purpose, services, and key information.",
    "CompanyProfile": "Generate a professional company profile highlighting background, mission, and core competencies.",
    "ServiceOfferings": "Provide a detailed breakdown of all services and offerings provided by this organization.",
    "ProductCatalog": "Create a structured summary of products and services offered.",
    "AIReadiness": "Assess and summarize the website's optimization for AI systems and voice assistants.",
    "PageSummary": "Generate a detailed summary of the main page content and purpose.",
    "TechnicalSpecs": "Summarize technical features, capabilities, and specifications.",
}

SUMMARY_PROMPT = """
{instruction}

Website URL: {url}
Website Content: {content}

Create a comprehensive, AI-optimized summary that:
1. Is well-structured with clear headings
2. Includes factual, authoritative information
3. Is optimized for AI understanding and citations
4. Uses natural language that answers common questions
5. Is between 300-800 words
6. Includes relevant entities and key concepts
7. Is formatted for easy reading by both humans and AI systems

Generate a professional summary that would be perfect for AI systems to understand and cite.
"""


class SummaryAgent(AnalysisAgent):
    name = "summary_generation"
    purpose = "Summary Generator"
    temperature = 0.4
    max_tokens = 2048

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        site_id, url, summary_type = self.require(payload, "siteId", "url", "summaryType")
        instruction = SUMMARY_INSTRUCTIONS.get(summary_type, SUMMARY_INSTRUCTIONS[DEFAULT_SUMMARY_TYPE])

        page = await self.fetch_page(url, SUMMARY_BUDGET)
        content = await self.ask(SUMMARY_PROMPT.format(instruction=instruction, url=url, content=page.content))

        words = word_count(content)
        logger.info(f"📄 {summary_type} summary for {url}: {words} words")
        return {
            "summary": {
                "site_id": site_id,
                "summary_type": summary_type,
                "content": content,
                "created_at": now_iso(),
            },
            "dataSource": DATA_SOURCE,
            "wordCount": words,
        }


summary_agent = SummaryAgent()
