"""
Tests for the site audit and competitor agents
"""

import json
import random

import pytest

from agents.competitor import CompetitorAgent, heuristic_scores
from agents.models import SCORE_FIELDS, Audit
from agents.site_audit import FALLBACK_SCORE_RANGES, SiteAuditAgent, fallback_scores, normalize_scores
from shared.errors import ClientInputError, OracleError
from tests.fakes import FakeFetcher, FakeOracle

SCORES = {
    "ai_visibility_score": 75,
    "schema_score": 60,
    "semantic_score": 80,
    "citation_score": 65,
    "technical_seo_score": 70,
}


def assert_valid_scores(scores):
    assert set(SCORE_FIELDS) <= set(scores)
    for name in SCORE_FIELDS:
        assert isinstance(scores[name], int)
        assert 0 <= scores[name] <= 100


class TestSiteAudit:

    @pytest.mark.asyncio
    async def test_scores_from_oracle(self):
        agent = SiteAuditAgent(oracle=FakeOracle([json.dumps(SCORES)]), fetcher=FakeFetcher())
        result = await agent.run({"siteId": "site-1", "url": "https://acme.example"})

        audit = result["audit"]
        assert audit["site_id"] == "site-1"
        assert {name: audit[name] for name in SCORE_FIELDS} == SCORES
        assert audit["created_at"]
        assert Audit(**audit).overall_score == 70

    @pytest.mark.asyncio
    async def test_prompt_carries_page_content(self):
        oracle = FakeOracle([json.dumps(SCORES)])
        fetcher = FakeFetcher(content="Unique marker text")
        await SiteAuditAgent(oracle=oracle, fetcher=fetcher).run({"siteId": "s", "url": "https://acme.example"})

        assert "Unique marker text" in oracle.calls[0]["prompt"]
        assert fetcher.calls[0]["budget"] == 5000
        assert oracle.calls[0]["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_unreachable_page_still_scores(self):
        oracle = FakeOracle([json.dumps(SCORES)])
        agent = SiteAuditAgent(oracle=oracle, fetcher=FakeFetcher(fetched=False))
        result = await agent.run({"siteId": "site-1", "url": "https://down.example"})

        assert "Unable to fetch website content" in oracle.calls[0]["prompt"]
        assert_valid_scores(result["audit"])

    @pytest.mark.asyncio
    async def test_unparseable_output_uses_fallback_ranges(self):
        agent = SiteAuditAgent(oracle=FakeOracle(["I'm sorry, I can't score this."]), fetcher=FakeFetcher())
        result = await agent.run({"siteId": "site-1", "url": "https://acme.example"})

        for name, (low, high) in FALLBACK_SCORE_RANGES.items():
            assert low <= result["audit"][name] <= high

    @pytest.mark.asyncio
    async def test_out_of_range_scores_are_clamped(self):
        raw = dict(SCORES, ai_visibility_score=140, schema_score=-20, semantic_score="85")
        agent = SiteAuditAgent(oracle=FakeOracle([json.dumps(raw)]), fetcher=FakeFetcher())
        audit = (await agent.run({"siteId": "s", "url": "https://acme.example"}))["audit"]

        assert audit["ai_visibility_score"] == 100
        assert audit["schema_score"] == 0
        assert audit["semantic_score"] == 85

    @pytest.mark.asyncio
    async def test_missing_parameters(self):
        oracle = FakeOracle()
        agent = SiteAuditAgent(oracle=oracle, fetcher=FakeFetcher())
        with pytest.raises(ClientInputError) as exc:
            await agent.run({"siteId": "s"})
        assert "url" in str(exc.value)
        assert oracle.calls == []

    @pytest.mark.asyncio
    async def test_oracle_failure_propagates(self):
        agent = SiteAuditAgent(oracle=FakeOracle(error=OracleError("timeout")), fetcher=FakeFetcher())
        with pytest.raises(OracleError):
            await agent.run({"siteId": "s", "url": "https://acme.example"})


def test_fallback_scores_stay_in_range():
    rng = random.Random(7)
    for _ in range(50):
        scores = fallback_scores(rng)
        for name, (low, high) in FALLBACK_SCORE_RANGES.items():
            assert low <= scores[name] <= high


def test_normalize_fills_missing_scores():
    fallback = {name: 50 for name in SCORE_FIELDS}
    scores = normalize_scores({"schema_score": 90, "citation_score": True}, fallback, "unit_test")
    assert scores["schema_score"] == 90
    assert scores["citation_score"] == 50
    assert scores["ai_visibility_score"] == 50


class TestCompetitor:

    PAYLOAD = {"competitorSiteId": "comp-1", "url": "https://rival.com", "user_id": "user-1"}

    def test_heuristic_scores_bounds(self):
        rng = random.Random(3)
        for content in ("", "about services contact company " * 200):
            scores = heuristic_scores(content, "https://rival.com", rng)
            for name in SCORE_FIELDS:
                assert 30 <= scores[name] <= 95

    @pytest.mark.asyncio
    async def test_content_based_analysis(self):
        agent = CompetitorAgent(oracle=FakeOracle([json.dumps(SCORES)]), fetcher=FakeFetcher())
        result = await agent.run(self.PAYLOAD)

        assert result["analysis_method"] == "content-based"
        assert result["audit"]["competitor_site_id"] == "comp-1"
        assert result["content_length"] > 0
        assert result["message"] == "Competitor analysis completed for https://rival.com"
        assert {name: result["audit"][name] for name in SCORE_FIELDS} == SCORES

    @pytest.mark.asyncio
    async def test_unreachable_site_and_oracle_use_heuristic(self):
        agent = CompetitorAgent(oracle=FakeOracle(error=OracleError("down")), fetcher=FakeFetcher(fetched=False))
        result = await agent.run(self.PAYLOAD)

        assert result["analysis_method"] == "fallback"
        for name in SCORE_FIELDS:
            assert 30 <= result["audit"][name] <= 95

    @pytest.mark.asyncio
    async def test_missing_user(self):
        agent = CompetitorAgent(oracle=FakeOracle(), fetcher=FakeFetcher())
        with pytest.raises(ClientInputError):
            await agent.run({"competitorSiteId": "comp-1", "url": "https://rival.com"})
