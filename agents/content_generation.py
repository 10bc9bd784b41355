"""
Content Generation Agent
Drafts AI-optimized copy (FAQs, snippets, articles) for a topic.
"""

import logging
from typing import Any, Dict

from .base import AnalysisAgent, word_count

logger = logging.getLogger(__name__)

DATA_SOURCE = "AI Generated"

OPTIONAL_FIELDS = (
    ("industry", "Industry"),
    ("targetAudience", "Target Audience"),
    ("tone", "Tone"),
    ("length", "Length"),
    ("siteUrl", "Website"),
)

GENERATION_PROMPT = """
Create AI-optimized content based on these specifications:

{context}

Requirements:
- Optimize for AI systems like ChatGPT, Perplexity, and voice assistants
- Use clear, structured formatting with headings
- Include factual, authoritative information
- Make it citation-worthy and easily understood by AI
- Use natural language that answers common questions
- Structure content for featured snippets and voice search

Generate high-quality content that follows these specifications exactly.
"""


class ContentGenerationAgent(AnalysisAgent):
    name = "content_generation"
    purpose = "Content Generator"
    temperature = 0.7
    max_tokens = 2048

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        topic, content_type = self.require(payload, "topic", "contentType")

        lines = [f"Topic: {topic}", f"Content Type: {content_type}"]
        lines += [f"{label}: {payload[field]}" for field, label in OPTIONAL_FIELDS if payload.get(field)]

        content = await self.ask(GENERATION_PROMPT.format(context="\n".join(lines)))
        words = word_count(content)
        logger.info(f"✍️ Generated {content_type} on '{topic}' ({words} words)")
        return {
            "content": content,
            "wordCount": words,
            "dataSource": DATA_SOURCE,
            "contentType": content_type,
            "topic": topic,
        }


content_generation_agent = ContentGenerationAgent()
