"""
Sites API Routes
Account-scoped workflow: entitlement check -> agent -> persist -> usage increment.
"""

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel
from typing import Any, Callable, Dict, Optional
import logging

from agents.base import hostname
from agents.citations import citation_agent
from agents.competitor import competitor_agent
from agents.content_analysis import content_analysis_agent
from agents.content_generation import content_generation_agent
from agents.entity_coverage import entity_coverage_agent
from agents.models import (
    Audit,
    Citation,
    CompetitorAudit,
    CompetitorSite,
    Entity,
    SchemaRecord,
    Site,
    Summary,
)
from agents.prompts import prompt_agent
from agents.schema_markup import schema_agent
from agents.site_audit import site_audit_agent
from agents.summaries import summary_agent
from agents.voice_assistant import suggested_queries, voice_assistant_agent
from shared.entitlements import Entitlements, load_entitlements
from shared.errors import ClientInputError, EntitlementDenied
from shared.plans import Feature, SchemaGenerationLevel
from shared.repository import repository
from shared.usage import MeteredAction, usage_store

router = APIRouter()
logger = logging.getLogger(__name__)

# Schema types available on the basic schema generation level
BASIC_SCHEMA_TYPES = {"Organization", "LocalBusiness", "Article"}


class SiteCreate(BaseModel):
    user_id: str
    url: str
    name: str


class CompetitorCreate(BaseModel):
    user_id: str
    url: str
    name: str


async def _entitled(
    user_id: Optional[str],
    check: Callable[[Entitlements], bool],
    denied: str,
) -> Entitlements:
    if not user_id:
        raise ClientInputError("Missing required parameters: user_id")
    entitlements = await load_entitlements(user_id)
    if not check(entitlements):
        logger.info(f"🔒 {user_id} denied: {denied}")
        raise EntitlementDenied(denied)
    return entitlements


async def _owned_site(site_id: str, user_id: str) -> Dict[str, Any]:
    site = await repository.get_site(site_id)
    if not site or site.get("user_id") != user_id:
        raise HTTPException(status_code=404, detail="Site not found")
    return site


# ── Sites ──────────────────────────────────────────────────────────────────────

@router.get("")
async def list_sites(user_id: str):
    return {"sites": await repository.list_sites(user_id)}


@router.post("")
async def create_site(request: SiteCreate):
    """Add a site, within the plan's site limit"""
    count = await repository.count_sites(request.user_id)
    await _entitled(
        request.user_id,
        lambda e: e.can_add_site(count),
        "Site limit reached for your plan. Upgrade to add more.",
    )
    site = await repository.create_site(Site(**request.model_dump()))
    return {"site": site}


@router.delete("/{site_id}")
async def delete_site(site_id: str, user_id: str):
    await _owned_site(site_id, user_id)
    await repository.delete_site(site_id, user_id)
    return {"deleted": site_id}


# ── Audits ─────────────────────────────────────────────────────────────────────

@router.get("/{site_id}/audits")
async def list_audits(site_id: str, user_id: str, limit: int = 10):
    """Audits for a site, most recent first"""
    await _owned_site(site_id, user_id)
    return {"audits": await repository.list_audits(site_id, limit=limit)}


@router.post("/{site_id}/audits")
async def run_audit(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(user_id, Entitlements.can_run_audit, "Monthly audit limit reached")
    site = await _owned_site(site_id, user_id)

    result = await site_audit_agent.run({"siteId": site_id, "url": site["url"]})
    audit = Audit(**result["audit"])
    stored = await repository.save_audit(audit)
    await usage_store.increment(user_id, MeteredAction.RUN_AUDIT)
    return {"audit": stored, "overall_score": audit.overall_score}


# ── Citations ──────────────────────────────────────────────────────────────────

@router.post("/{site_id}/citations")
async def track_citations(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(
        user_id,
        lambda e: e.can_track_citations() and e.can_track_more_citations(),
        "Citation tracking limit reached",
    )
    site = await _owned_site(site_id, user_id)

    result = await citation_agent.run({"siteId": site_id, "url": site["url"]})
    await repository.add_citations([Citation(**c) for c in result["citations"]])
    await usage_store.increment(user_id, MeteredAction.TRACK_CITATION, result["new_citations_found"])
    return result


@router.get("/{site_id}/citations")
async def list_citations(site_id: str, user_id: str, limit: int = 50):
    await _owned_site(site_id, user_id)
    return {"citations": await repository.list_citations(site_id, limit=limit)}


# ── Entities ───────────────────────────────────────────────────────────────────

@router.post("/{site_id}/entities")
async def analyze_entities(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(
        user_id,
        lambda e: e.is_feature_enabled(Feature.ENTITY_ANALYSIS),
        "Entity analysis requires the Core plan or higher",
    )
    site = await _owned_site(site_id, user_id)

    result = await entity_coverage_agent.run({"siteId": site_id, "url": site["url"]})
    await repository.replace_entities(site_id, [Entity(**e) for e in result["entities"]])
    return result


@router.get("/{site_id}/entities")
async def list_entities(site_id: str, user_id: str):
    await _owned_site(site_id, user_id)
    return {"entities": await repository.list_entities(site_id)}


# ── Summaries and schema ───────────────────────────────────────────────────────

@router.post("/{site_id}/summaries")
async def generate_summary(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(
        user_id,
        lambda e: e.is_feature_enabled(Feature.LLM_SUMMARIES),
        "LLM site summaries require the Pro plan or higher",
    )
    site = await _owned_site(site_id, user_id)

    result = await summary_agent.run({
        "siteId": site_id,
        "url": site["url"],
        "summaryType": payload.get("summaryType"),
    })
    await repository.save_summary(Summary(**result["summary"]))
    return result


@router.get("/{site_id}/summaries")
async def list_summaries(site_id: str, user_id: str, limit: int = 20):
    """Stored summaries for a site, most recent first"""
    await _owned_site(site_id, user_id)
    return {"summaries": await repository.list_summaries(site_id, limit=limit)}


@router.post("/{site_id}/schema")
async def generate_schema(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    schema_type = payload.get("schemaType")
    if not schema_type:
        raise ClientInputError("Missing required parameters: schemaType")
    entitlements = await _entitled(
        user_id,
        lambda e: e.is_feature_enabled(Feature.SCHEMA_GENERATION),
        "Schema generation is not available on your plan",
    )
    if (
        entitlements.feature_value(Feature.SCHEMA_GENERATION) == SchemaGenerationLevel.BASIC
        and schema_type not in BASIC_SCHEMA_TYPES
    ):
        raise EntitlementDenied(f"{schema_type} schema requires the Core plan or higher")
    site = await _owned_site(site_id, user_id)

    result = await schema_agent.run({"url": site["url"], "schemaType": schema_type})
    await repository.save_schema(SchemaRecord(
        audit_id=payload.get("audit_id"),
        schema_type=schema_type,
        markup=result["schema"],
    ))
    return result


# ── Voice assistant ────────────────────────────────────────────────────────────

@router.get("/{site_id}/voice-test/queries")
async def voice_test_queries(site_id: str, user_id: str):
    site = await _owned_site(site_id, user_id)
    return {"queries": suggested_queries(site.get("name") or hostname(site["url"]))}


@router.post("/{site_id}/voice-test")
async def voice_test(site_id: str, payload: Dict[str, Any] = Body(...)):
    """Simulate a voice assistant answering a query about the site"""
    user_id = payload.get("user_id")
    await _entitled(
        user_id,
        lambda e: e.is_feature_enabled(Feature.VOICE_ASSISTANT),
        "Voice assistant testing requires the Pro plan or higher",
    )
    site = await _owned_site(site_id, user_id)

    return await voice_assistant_agent.run({
        "siteId": site_id,
        "url": site["url"],
        "name": site.get("name") or hostname(site["url"]),
        "query": payload.get("query"),
    })


# ── Content ────────────────────────────────────────────────────────────────────

@router.post("/{site_id}/content/generate")
async def generate_content(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(user_id, Entitlements.can_generate_content, "AI content generation limit reached")
    site = await _owned_site(site_id, user_id)

    result = await content_generation_agent.run({**payload, "siteUrl": site["url"]})
    await usage_store.increment(user_id, MeteredAction.GENERATE_CONTENT)
    return result


@router.post("/{site_id}/content/optimize")
async def optimize_content(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(
        user_id,
        lambda e: e.is_feature_enabled(Feature.CONTENT_OPTIMIZER) and e.can_optimize_content(),
        "AI content optimization limit reached",
    )
    await _owned_site(site_id, user_id)

    result = await content_analysis_agent.run(payload)
    await usage_store.increment(user_id, MeteredAction.OPTIMIZE_CONTENT)
    return result


@router.post("/{site_id}/content/prompts")
async def generate_prompts(site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(user_id, Entitlements.can_generate_prompts, "Prompt suggestion limit reached")
    site = await _owned_site(site_id, user_id)

    result = await prompt_agent.run({**payload, "siteUrl": site["url"]})
    await usage_store.increment(user_id, MeteredAction.GENERATE_PROMPTS)
    return result


# ── Competitors ────────────────────────────────────────────────────────────────

@router.get("/{site_id}/competitors")
async def list_competitors(site_id: str, user_id: str):
    await _owned_site(site_id, user_id)
    return {"competitors": await repository.list_competitors(user_id, site_id=site_id)}


@router.post("/{site_id}/competitors")
async def add_competitor(site_id: str, request: CompetitorCreate):
    """Track a competitor, within the plan's competitor limit"""
    count = await repository.count_competitors(request.user_id)
    await _entitled(
        request.user_id,
        lambda e: e.is_feature_enabled(Feature.COMPETITIVE_ANALYSIS) and e.can_add_competitor(count),
        "Competitor limit reached for your plan",
    )
    await _owned_site(site_id, request.user_id)
    competitor = await repository.create_competitor(CompetitorSite(site_id=site_id, **request.model_dump()))
    return {"competitor": competitor}


@router.post("/competitors/{competitor_site_id}/audits")
async def audit_competitor(competitor_site_id: str, payload: Dict[str, Any] = Body(...)):
    user_id = payload.get("user_id")
    await _entitled(
        user_id,
        lambda e: e.is_feature_enabled(Feature.COMPETITIVE_ANALYSIS),
        "Competitive analysis requires the Pro plan or higher",
    )
    competitor = await repository.get_competitor(competitor_site_id)
    if not competitor or competitor.get("user_id") != user_id:
        raise HTTPException(status_code=404, detail="Competitor not found")

    result = await competitor_agent.run({
        "competitorSiteId": competitor_site_id,
        "url": competitor["url"],
        "user_id": user_id,
    })
    stored = await repository.save_competitor_audit(CompetitorAudit(**result["audit"]))
    return {**result, "audit": stored}


@router.get("/competitors/{competitor_site_id}/audits")
async def list_competitor_audits(competitor_site_id: str, user_id: str, limit: int = 10):
    competitor = await repository.get_competitor(competitor_site_id)
    if not competitor or competitor.get("user_id") != user_id:
        raise HTTPException(status_code=404, detail="Competitor not found")
    return {"audits": await repository.list_competitor_audits(competitor_site_id, limit=limit)}
