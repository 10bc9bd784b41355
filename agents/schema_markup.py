"""
Schema Markup Agent
Generates Schema.org JSON-LD for a page, with a typed template when the
oracle's markup can't be used.
"""

import json
import logging
from typing import Any, Dict, List

from shared.monitoring import record_fallback
from shared.page_fetch import SCHEMA_BUDGET
from shared.structured_output import parse_json_object
from .base import AnalysisAgent

logger = logging.getLogger(__name__)

SCHEMA_CONTEXT = "https://schema.org"

SCHEMA_PROMPT = """
Generate valid Schema.org JSON-LD markup for this website:

URL: {url}
Schema Type: {schema_type}
Website Content: {content}

Create proper {schema_type} schema markup that:
1. Follows Schema.org standards exactly
2. Is valid JSON-LD format
3. Includes relevant properties for the schema type
4. Uses information from the website content when available
5. Includes proper @context and @type declarations

Respond with ONLY the JSON-LD schema markup, no additional text or explanation.
"""


def fallback_schema(schema_type: str, url: str) -> Dict[str, Any]:
    """Minimal valid markup for a schema type; unknown types get Organization"""
    templates = {
        "Organization": {
            "@context": SCHEMA_CONTEXT,
            "@type": "Organization",
            "name": "Organization Name",
            "url": url,
            "description": "Professional organization providing quality services",
        },
        "LocalBusiness": {
            "@context": SCHEMA_CONTEXT,
            "@type": "LocalBusiness",
            "name": "Local Business",
            "url": url,
            "description": "Local business serving the community",
        },
        "Article": {
            "@context": SCHEMA_CONTEXT,
            "@type": "Article",
            "headline": "Article Title",
            "url": url,
            "description": "Informative article content",
        },
        "FAQ": {
            "@context": SCHEMA_CONTEXT,
            "@type": "FAQPage",
            "mainEntity": [
                {
                    "@type": "Question",
                    "name": "Frequently Asked Question",
                    "acceptedAnswer": {
                        "@type": "Answer",
                        "text": "Answer to the frequently asked question",
                    },
                }
            ],
        },
        "Product": {
            "@context": SCHEMA_CONTEXT,
            "@type": "Product",
            "name": "Product Name",
            "description": "Product description",
            "url": url,
        },
        "HowTo": {
            "@context": SCHEMA_CONTEXT,
            "@type": "HowTo",
            "name": "How To Guide",
            "description": "Step by step instructions",
            "step": [
                {
                    "@type": "HowToStep",
                    "text": "Step 1: Follow the instructions",
                }
            ],
        },
        "Event": {
            "@context": SCHEMA_CONTEXT,
            "@type": "Event",
            "name": "Event Name",
            "description": "Event description",
            "url": url,
        },
    }
    return templates.get(schema_type, templates["Organization"])


def validate_schema(schema: Any) -> Dict[str, Any]:
    """
    Validate schema markup
    Returns validation results
    """
    if not isinstance(schema, dict):
        return {"valid": False, "errors": ["Schema must be a JSON object"]}

    errors = []
    if "@context" not in schema:
        errors.append("Missing @context")
    if "@type" not in schema:
        errors.append("Missing @type")
    return {"valid": not errors, "errors": errors}


def to_script_tag(schemas: List[Dict[str, Any]]) -> str:
    """
    Wrap one or more schemas in a JSON-LD script tag
    """
    if len(schemas) == 1:
        return f'<script type="application/ld+json">\n{json.dumps(schemas[0], indent=2)}\n</script>'

    # Multiple schemas - use @graph
    combined = {
        "@context": SCHEMA_CONTEXT,
        "@graph": schemas,
    }
    return f'<script type="application/ld+json">\n{json.dumps(combined, indent=2)}\n</script>'


class SchemaAgent(AnalysisAgent):
    name = "schema_generation"
    purpose = "Schema Generator"
    temperature = 0.2
    max_tokens = 2048

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        url, schema_type = self.require(payload, "url", "schemaType")

        page = await self.fetch_page(url, SCHEMA_BUDGET)
        text = await self.ask(SCHEMA_PROMPT.format(url=url, schema_type=schema_type, content=page.content))

        try:
            schema = parse_json_object(text)
        except ValueError as e:
            record_fallback(self.name, f"unparseable markup: {e}")
            schema = fallback_schema(schema_type, url)
        else:
            validation = validate_schema(schema)
            if not validation["valid"]:
                record_fallback(self.name, "; ".join(validation["errors"]))
                schema = fallback_schema(schema_type, url)

        logger.info(f"🏷️ Generated {schema.get('@type')} schema for {url}")
        return {
            "schema": json.dumps(schema, indent=2),
            "script_tag": to_script_tag([schema]),
        }


schema_agent = SchemaAgent()
