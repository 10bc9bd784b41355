"""
Tests for the Genie chatbots and the basic-tier keyword gate
"""

import pytest

from agents.chatbot import (
    BASIC_TIER_SUGGESTIONS,
    CHATBOT_DENIED,
    LANDING_FALLBACK,
    LandingChatbot,
    ProductChatbot,
    intercept_basic_tier_message,
)
from agents.models import Site
from shared.errors import ClientInputError, EntitlementDenied, OracleError
from shared.plans import ChatbotAccess
from shared.repository import repository
from tests.fakes import FakeOracle


class TestKeywordGate:

    @pytest.mark.parametrize("message", [
        "Can you optimize my homepage?",
        "Please analyze my site",
        "What do you recommend?",
        "How can I improve my score?",
        "Show me my audit",
    ])
    def test_analytical_questions_intercepted_on_basic(self, message):
        reply = intercept_basic_tier_message(message, ChatbotAccess.BASIC)
        assert reply is not None
        for question in BASIC_TIER_SUGGESTIONS:
            assert question in reply
        assert "Upgrade to Pro" in reply

    def test_tool_questions_pass_through(self):
        assert intercept_basic_tier_message("How do I use the schema generator?", ChatbotAccess.BASIC) is None

    def test_full_access_never_intercepted(self):
        assert intercept_basic_tier_message("Please optimize everything", ChatbotAccess.FULL) is None
        assert intercept_basic_tier_message("Please optimize everything", "full") is None


class TestProductChatbot:

    @pytest.mark.asyncio
    async def test_free_tier_denied_without_oracle_call(self):
        oracle = FakeOracle()
        with pytest.raises(EntitlementDenied) as exc:
            await ProductChatbot(oracle=oracle).run({
                "message": "Hello",
                "user_id": "user-1",
                "subscription_level": "free",
            })

        assert exc.value.message == CHATBOT_DENIED
        assert "Upgrade" in exc.value.friendly_message
        assert oracle.calls == []

    @pytest.mark.asyncio
    async def test_unknown_tier_denied(self):
        with pytest.raises(EntitlementDenied):
            await ProductChatbot(oracle=FakeOracle()).run({
                "message": "Hello",
                "user_id": "user-1",
                "subscription_level": "platinum",
            })

    @pytest.mark.asyncio
    async def test_basic_framing_for_core(self, fake_db):
        oracle = FakeOracle(default="Open the Schema Generator from the sidebar.")
        result = await ProductChatbot(oracle=oracle).run({
            "message": "Where is the schema generator?",
            "user_id": "user-1",
            "subscription_level": "core",
            "context": {"current_page": "dashboard"},
        })

        system = oracle.calls[0]["system"]
        assert "cannot access user data" in system
        assert "Current page: dashboard" in system
        assert result["capabilities"] == "basic"
        assert result["response"] == "Open the Schema Generator from the sidebar."

    @pytest.mark.asyncio
    async def test_full_framing_includes_user_data(self, fake_db):
        site = await repository.create_site(Site(user_id="user-1", url="https://acme.example", name="Acme"))
        fake_db.table("audits").insert({
            "site_id": site["id"],
            "ai_visibility_score": 71,
            "schema_score": 40,
            "semantic_score": 80,
            "citation_score": 55,
            "technical_seo_score": 66,
            "created_at": "2026-01-05T00:00:00+00:00",
        }).execute()

        oracle = FakeOracle()
        result = await ProductChatbot(oracle=oracle).run({
            "message": "How is my site doing?",
            "user_id": "user-1",
            "subscription_level": "pro",
        })

        system = oracle.calls[0]["system"]
        assert "Site: Acme (https://acme.example)" in system
        assert "AI visibility 71" in system
        assert result["context_used"]["sites"] == 1
        assert result["context_used"]["audits"] == 1
        assert result["capabilities"] == "full"

    @pytest.mark.asyncio
    async def test_stored_plan_used_without_level(self, subscribe):
        subscribe("user-2", "agency")
        oracle = FakeOracle()
        result = await ProductChatbot(oracle=oracle).run({"message": "Hi", "user_id": "user-2"})
        assert result["subscription_level"] == "agency"
        assert result["capabilities"] == "full"
        assert "Subscription: agency" in oracle.calls[0]["system"]
        assert len(oracle.calls) == 1

    @pytest.mark.asyncio
    async def test_missing_message(self):
        with pytest.raises(ClientInputError):
            await ProductChatbot(oracle=FakeOracle()).run({"user_id": "user-1", "subscription_level": "pro"})


class TestLandingChatbot:

    @pytest.mark.asyncio
    async def test_answers_visitors(self):
        oracle = FakeOracle(default="SEOgenix helps you get cited by AI.")
        result = await LandingChatbot(oracle=oracle).run({"message": "What is SEOgenix?"})

        assert result["response"] == "SEOgenix helps you get cited by AI."
        assert result["context"] == "landing_page"
        assert result["timestamp"]
        assert "USER QUESTION: What is SEOgenix?" in oracle.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_oracle_failure_serves_canned_answer(self):
        result = await LandingChatbot(oracle=FakeOracle(error=OracleError("down"))).run({"message": "Pricing?"})
        assert result["response"] == LANDING_FALLBACK
        assert result["context"] == "landing_page_fallback"

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self):
        with pytest.raises(ClientInputError):
            await LandingChatbot(oracle=FakeOracle()).run({"message": "   "})
