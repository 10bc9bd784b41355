"""
Shared fixtures: in-memory Supabase, scripted oracle and page fetcher
"""

import pytest

from agents.chatbot import landing_chatbot, product_chatbot
from agents.citations import citation_agent
from agents.competitor import competitor_agent
from agents.content_analysis import content_analysis_agent
from agents.content_generation import content_generation_agent
from agents.entity_coverage import entity_coverage_agent
from agents.prompts import prompt_agent
from agents.schema_markup import schema_agent
from agents.site_audit import site_audit_agent
from agents.summaries import summary_agent
from agents.voice_assistant import voice_assistant_agent
from shared.preferences import preference_store
from shared.repository import repository
from shared.usage import subscription_store, usage_store
from tests.fakes import FakeFetcher, FakeOracle, FakeSupabase

ALL_AGENTS = [
    site_audit_agent,
    competitor_agent,
    content_analysis_agent,
    prompt_agent,
    content_generation_agent,
    entity_coverage_agent,
    schema_agent,
    summary_agent,
    citation_agent,
    product_chatbot,
    landing_chatbot,
    voice_assistant_agent,
]


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeSupabase()
    for store in (usage_store, subscription_store, repository, preference_store):
        monkeypatch.setattr(store, "sb", db)
    return db


def _subscribe(db: FakeSupabase, user_id: str, plan_id: str, **usage) -> None:
    db.table("subscriptions").insert({"user_id": user_id, "plan_id": plan_id}).execute()
    if usage:
        db.table("subscription_usage").insert({"user_id": user_id, **usage}).execute()


@pytest.fixture
def subscribe(fake_db):
    """subscribe(user_id, plan_id, **usage) seeds a subscription and usage row"""
    def _seed(user_id: str, plan_id: str, **usage):
        _subscribe(fake_db, user_id, plan_id, **usage)
    return _seed


@pytest.fixture
def fake_oracle():
    return FakeOracle()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def patched_agents(monkeypatch, fake_oracle, fake_fetcher):
    """Point every agent singleton at the fake oracle and fetcher"""
    for agent in ALL_AGENTS:
        monkeypatch.setattr(agent, "oracle", fake_oracle)
        monkeypatch.setattr(agent, "fetcher", fake_fetcher)
    return fake_oracle, fake_fetcher
