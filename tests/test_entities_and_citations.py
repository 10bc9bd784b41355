"""
Tests for entity coverage, citation tracking and site summaries
"""

import json
import random

import pytest

from agents.citations import PLATFORMS_CHECKED, CitationAgent, simulated_citations, simulated_search_summary
from agents.entity_coverage import DEFAULT_COVERAGE_SCORE, EntityCoverageAgent, rule_based_analysis, site_name
from agents.models import Citation, Entity
from agents.summaries import SummaryAgent
from shared.errors import ClientInputError, OracleError
from tests.fakes import FakeFetcher, FakeOracle


class TestEntityCoverage:

    def test_site_name(self):
        assert site_name("https://www.acme.example/about") == "acme"

    def test_rule_based_analysis(self):
        content = "Acme provides professional service and support. Acme customers get expert help from Acme."
        result = rule_based_analysis("https://acme.example", content, "site-1")

        by_name = {e["entity_name"]: e for e in result["entities"]}
        assert by_name["Acme"]["mention_count"] == 3
        assert by_name["Acme"]["gap"] is False
        assert by_name["Quality Assurance"]["gap"] is True
        assert result["total_entities"] == 8
        assert 0 <= result["coverage_score"] <= 100
        for entity in result["entities"]:
            Entity(**entity)

    @pytest.mark.asyncio
    async def test_ai_powered_analysis(self):
        reply = {
            "entities": [
                {"entity_name": "Acme", "entity_type": "Organization", "mention_count": 4, "gap": False},
                {"entity_name": "Pricing", "entity_type": "Concept", "mention_count": "n/a", "gap": True},
            ],
            "analysis_summary": "Pricing is under-covered",
            "coverage_score": 64,
        }
        oracle = FakeOracle([json.dumps(reply)])
        fetcher = FakeFetcher(metadata={"title": "Acme Home", "description": "Consulting", "keywords": "acme"})
        result = await EntityCoverageAgent(oracle=oracle, fetcher=fetcher).run(
            {"siteId": "site-1", "url": "https://acme.example"}
        )

        assert result["analysis_method"] == "AI-powered"
        assert result["success"] is True
        assert result["coverage_score"] == 64
        assert result["total_entities"] == 2
        assert result["entities"][1]["mention_count"] == 0
        assert result["entities"][0]["site_id"] == "site-1"
        assert "Title: Acme Home" in oracle.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_zero_coverage_is_kept(self):
        reply = {
            "entities": [{"entity_name": "Acme", "entity_type": "Organization", "mention_count": 0, "gap": True}],
            "coverage_score": 0,
        }
        agent = EntityCoverageAgent(oracle=FakeOracle([json.dumps(reply)]), fetcher=FakeFetcher())
        result = await agent.run({"siteId": "site-1", "url": "https://acme.example"})

        assert result["analysis_method"] == "AI-powered"
        assert result["coverage_score"] == 0

    @pytest.mark.asyncio
    async def test_missing_coverage_defaults(self):
        reply = {"entities": [{"entity_name": "Acme", "entity_type": "Organization", "mention_count": 2}]}
        agent = EntityCoverageAgent(oracle=FakeOracle([json.dumps(reply)]), fetcher=FakeFetcher())
        result = await agent.run({"siteId": "site-1", "url": "https://acme.example"})
        assert result["coverage_score"] == DEFAULT_COVERAGE_SCORE

    @pytest.mark.asyncio
    async def test_oracle_failure_uses_rule_based(self):
        agent = EntityCoverageAgent(oracle=FakeOracle(error=OracleError("down")), fetcher=FakeFetcher())
        result = await agent.run({"siteId": "site-1", "url": "https://acme.example"})

        assert result["analysis_method"] == "Rule-based"
        assert result["total_entities"] == 8

    @pytest.mark.asyncio
    async def test_reply_without_entities_uses_rule_based(self):
        agent = EntityCoverageAgent(oracle=FakeOracle(['{"analysis_summary": "none"}']), fetcher=FakeFetcher())
        result = await agent.run({"siteId": "site-1", "url": "https://acme.example"})
        assert result["analysis_method"] == "Rule-based"


class TestCitations:

    def test_simulated_ranges(self):
        rng = random.Random(11)
        for _ in range(30):
            summary = simulated_search_summary(rng)
            assert 10 <= summary["google_results"] <= 59
            assert 5 <= summary["news_results"] <= 24
            assert 2 <= summary["reddit_results"] <= 16
            assert 1 <= summary["high_authority_citations"] <= 5

            citations = simulated_citations("site-1", "acme.example", rng)
            assert 1 <= len(citations) <= 3
            for citation in citations:
                Citation(**citation)

    @pytest.mark.asyncio
    async def test_track(self):
        oracle = FakeOracle(default="Acme is a consulting firm.")
        result = await CitationAgent(oracle=oracle).run({"siteId": "site-1", "url": "https://acme.example"})

        assert result["assistant_response"] == "Acme is a consulting firm."
        assert result["new_citations_found"] == len(result["citations"])
        assert result["platforms_checked"] == PLATFORMS_CHECKED
        summary = result["search_summary"]
        assert result["total_results"] == (
            summary["google_results"] + summary["news_results"] + summary["reddit_results"]
        )
        assert "acme.example" in oracle.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        with pytest.raises(ClientInputError):
            await CitationAgent(oracle=FakeOracle()).run({"siteId": "site-1", "url": "not a url"})


class TestSummaries:

    @pytest.mark.asyncio
    async def test_summary(self):
        oracle = FakeOracle(default="Acme Consulting helps small businesses grow.")
        fetcher = FakeFetcher()
        result = await SummaryAgent(oracle=oracle, fetcher=fetcher).run({
            "siteId": "site-1",
            "url": "https://acme.example",
            "summaryType": "CompanyProfile",
        })

        assert result["summary"]["summary_type"] == "CompanyProfile"
        assert result["summary"]["site_id"] == "site-1"
        assert result["wordCount"] == 6
        assert result["dataSource"] == "AI Generated"
        assert "professional company profile" in oracle.calls[0]["prompt"]
        assert fetcher.calls[0]["budget"] == 8000

    @pytest.mark.asyncio
    async def test_unknown_type_uses_overview_instruction(self):
        oracle = FakeOracle()
        await SummaryAgent(oracle=oracle, fetcher=FakeFetcher()).run({
            "siteId": "site-1",
            "url": "https://acme.example",
            "summaryType": "Haiku",
        })
        assert "comprehensive overview" in oracle.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_missing_summary_type(self):
        with pytest.raises(ClientInputError):
            await SummaryAgent(oracle=FakeOracle(), fetcher=FakeFetcher()).run(
                {"siteId": "site-1", "url": "https://acme.example"}
            )
