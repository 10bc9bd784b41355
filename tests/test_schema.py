"""
Tests for schema markup generation
"""

import json

import pytest

from agents.schema_markup import SchemaAgent, fallback_schema, to_script_tag, validate_schema
from shared.errors import ClientInputError
from tests.fakes import FakeFetcher, FakeOracle

URL = "https://acme.example"


@pytest.mark.parametrize("schema_type,expected_type", [
    ("Organization", "Organization"),
    ("LocalBusiness", "LocalBusiness"),
    ("Article", "Article"),
    ("FAQ", "FAQPage"),
    ("Product", "Product"),
    ("HowTo", "HowTo"),
    ("Event", "Event"),
    ("Recipe", "Organization"),
])
def test_fallback_templates(schema_type, expected_type):
    schema = fallback_schema(schema_type, URL)
    assert schema["@context"] == "https://schema.org"
    assert schema["@type"] == expected_type
    assert validate_schema(schema)["valid"] is True


def test_validate_schema_reports_missing_keys():
    assert validate_schema({"name": "x"}) == {"valid": False, "errors": ["Missing @context", "Missing @type"]}
    assert validate_schema(["not", "an", "object"])["valid"] is False


def test_script_tag_single_and_graph():
    single = to_script_tag([{"@type": "Organization"}])
    assert single.startswith('<script type="application/ld+json">')
    assert "@graph" not in single

    combined = to_script_tag([{"@type": "Organization"}, {"@type": "Article"}])
    body = combined.split("\n", 1)[1].rsplit("\n", 1)[0]
    assert json.loads(body)["@graph"][1]["@type"] == "Article"


@pytest.mark.asyncio
async def test_generated_markup_round_trips():
    markup = {
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": "Acme Consulting",
        "url": URL,
    }
    oracle = FakeOracle(["```json\n" + json.dumps(markup) + "\n```"])
    fetcher = FakeFetcher()
    result = await SchemaAgent(oracle=oracle, fetcher=fetcher).run({"url": URL, "schemaType": "Organization"})

    assert json.loads(result["schema"]) == markup
    assert result["script_tag"].startswith('<script type="application/ld+json">')
    assert fetcher.calls[0]["budget"] == 3000


@pytest.mark.asyncio
async def test_unparseable_markup_uses_template():
    agent = SchemaAgent(oracle=FakeOracle(["Sorry, here is some prose."]), fetcher=FakeFetcher())
    result = await agent.run({"url": URL, "schemaType": "FAQ"})

    schema = json.loads(result["schema"])
    assert schema["@type"] == "FAQPage"
    assert schema["@context"] == "https://schema.org"


@pytest.mark.asyncio
async def test_markup_without_context_uses_template():
    agent = SchemaAgent(oracle=FakeOracle(['{"@type": "Product", "name": "Widget"}']), fetcher=FakeFetcher())
    result = await agent.run({"url": URL, "schemaType": "Product"})

    schema = json.loads(result["schema"])
    assert schema["name"] == "Product Name"
    assert schema["url"] == URL


@pytest.mark.asyncio
async def test_missing_schema_type():
    with pytest.raises(ClientInputError):
        await SchemaAgent(oracle=FakeOracle(), fetcher=FakeFetcher()).run({"url": URL})
