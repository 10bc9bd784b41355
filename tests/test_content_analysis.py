"""
Tests for content analysis, prompt suggestions and content generation
"""

import json

import pytest

from agents.content_analysis import (
    ContentAnalysisAgent,
    entity_coverage_score,
    fallback_analysis,
    readability_score,
)
from agents.content_generation import ContentGenerationAgent
from agents.prompts import CATEGORIES, PromptAgent
from shared.errors import ClientInputError, OracleError
from tests.fakes import FakeOracle

ARTICLE = (
    "Our agency helps small businesses get found online. We provide clear guides, "
    "practical tools and friendly support. How do we do it? We measure, then improve."
)


class TestLocalMetrics:

    def test_readability_bounds(self):
        assert readability_score("") == 50
        assert 0 <= readability_score(ARTICLE) <= 100
        assert readability_score("Supercalifragilisticexpialidocious antidisestablishmentarianism.") == 0

    @pytest.mark.parametrize("filler_words,expected", [
        (49, 90),
        (99, 70),
        (149, 50),
    ])
    def test_entity_density_bands(self, filler_words, expected):
        text = "company " + "word " * filler_words
        assert entity_coverage_score(text) == expected

    def test_entity_score_without_mentions(self):
        assert entity_coverage_score("lorem ipsum dolor") == 30
        assert entity_coverage_score("") == 30

    def test_fallback_analysis_shape(self):
        analysis = fallback_analysis(ARTICLE, 60, 70, 26)
        assert 30 <= analysis["score"] <= 85
        assert len(analysis["recommendations"]) == 3
        assert analysis["recommendations"][2] == "Expand your Q&A sections"
        assert analysis["analysis_summary"].startswith("Content shows")


class TestContentAnalysisAgent:

    @pytest.mark.asyncio
    async def test_content_below_minimum_rejected(self):
        oracle = FakeOracle()
        with pytest.raises(ClientInputError):
            await ContentAnalysisAgent(oracle=oracle).run({"content": "x" * 49})
        assert oracle.calls == []

    @pytest.mark.asyncio
    async def test_content_at_minimum_accepted(self):
        reply = {
            "score": 72,
            "ai_optimization_score": 68,
            "semantic_clarity_score": 75,
            "recommendations": ["Add an FAQ"],
            "strengths": ["Clear"],
            "weaknesses": ["Short"],
            "analysis_summary": "Solid start",
        }
        agent = ContentAnalysisAgent(oracle=FakeOracle([json.dumps(reply)]))
        result = await agent.run({"content": "x" * 50})

        assert result["score"] == 72
        assert result["word_count"] == 1
        assert "readability_score" in result
        assert "entity_coverage_score" in result

    @pytest.mark.asyncio
    async def test_oracle_failure_uses_structural_fallback(self):
        agent = ContentAnalysisAgent(oracle=FakeOracle(error=OracleError("timeout")))
        result = await agent.run({"content": ARTICLE})

        assert 30 <= result["score"] <= 85
        assert len(result["recommendations"]) == 3
        assert result["word_count"] == 26

    @pytest.mark.asyncio
    async def test_partial_reply_is_completed(self):
        agent = ContentAnalysisAgent(oracle=FakeOracle(['{"analysis_summary": "Partial"}']))
        result = await agent.run({"content": ARTICLE})

        assert result["analysis_summary"] == "Partial"
        assert isinstance(result["score"], int)
        assert result["recommendations"] == []

    @pytest.mark.asyncio
    async def test_reply_scores_are_clamped_and_filled(self):
        reply = {"score": 250, "ai_optimization_score": None, "semantic_clarity_score": "high"}
        result = await ContentAnalysisAgent(oracle=FakeOracle([json.dumps(reply)])).run({"content": ARTICLE})
        fallback = fallback_analysis(
            ARTICLE, result["readability_score"], result["entity_coverage_score"], result["word_count"]
        )

        assert result["score"] == 100
        assert result["ai_optimization_score"] == fallback["ai_optimization_score"]
        assert result["semantic_clarity_score"] == fallback["semantic_clarity_score"]


class TestPromptAgent:

    @pytest.mark.asyncio
    async def test_short_content_rejected(self):
        with pytest.raises(ClientInputError):
            await PromptAgent(oracle=FakeOracle()).run({"content": "   short   "})

    @pytest.mark.asyncio
    async def test_unparseable_reply_returns_canned_set(self):
        agent = PromptAgent(oracle=FakeOracle(["Here are some ideas..."]))
        result = await agent.run({"content": ARTICLE})

        assert set(result["suggestions"]) == set(CATEGORIES)
        assert result["total_suggestions"] == 35
        assert result["dataSource"] == "AI Analysis"

    @pytest.mark.asyncio
    async def test_reply_is_normalized(self):
        reply = {
            "suggestions": {
                "voice_search": ["What does Acme do?", ""],
                "headlines": ["Acme: A Guide"],
                "how_to": "not a list",
            },
            "analysis_summary": "Good potential",
        }
        oracle = FakeOracle([json.dumps(reply)])
        result = await PromptAgent(oracle=oracle).run({
            "content": ARTICLE,
            "industry": "Consulting",
            "siteUrl": "https://acme.example",
        })

        assert result["suggestions"]["voice_search"] == ["What does Acme do?"]
        assert result["suggestions"]["how_to"] == []
        assert result["suggestions"]["comparisons"] == []
        assert result["total_suggestions"] == 2
        assert "Industry: Consulting" in oracle.calls[0]["prompt"]
        assert oracle.calls[0]["temperature"] == 0.7


class TestContentGeneration:

    @pytest.mark.asyncio
    async def test_generates_content(self):
        oracle = FakeOracle(default="## FAQ\n\nWhat is Acme? Acme is a consultancy.")
        result = await ContentGenerationAgent(oracle=oracle).run({
            "topic": "AI visibility",
            "contentType": "faq",
            "tone": "friendly",
        })

        assert result["wordCount"] == 9
        assert result["contentType"] == "faq"
        assert result["dataSource"] == "AI Generated"
        assert "Tone: friendly" in oracle.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_missing_topic(self):
        with pytest.raises(ClientInputError) as exc:
            await ContentGenerationAgent(oracle=FakeOracle()).run({"contentType": "faq"})
        assert "topic" in str(exc.value)
