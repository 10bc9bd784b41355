"""
Repository
Read/write helpers for the SEOgenix tables.

Audits are read most-recent-first, citations are append-only and a site's
entities are replaced wholesale by each analysis run.
"""

import logging
from typing import Any, Dict, List, Optional

from agents.models import (
    AUDITS_TABLE,
    CITATIONS_TABLE,
    COMPETITOR_AUDITS_TABLE,
    COMPETITOR_SITES_TABLE,
    ENTITIES_TABLE,
    SCHEMAS_TABLE,
    SITES_TABLE,
    SUMMARIES_TABLE,
    Audit,
    Citation,
    CompetitorAudit,
    CompetitorSite,
    Entity,
    SchemaRecord,
    Site,
    Summary,
)
from .database import get_supabase

logger = logging.getLogger(__name__)


def _row(model) -> Dict[str, Any]:
    return model.model_dump(exclude={"overall_score"}, exclude_none=True)


class Repository:
    """Supabase-backed storage for sites and their analysis artifacts"""

    def __init__(self):
        self.sb = None

    def _get_sb(self):
        if not self.sb:
            self.sb = get_supabase()
        return self.sb

    def _select(self, table: str, filters: Dict[str, Any], order_by: Optional[str] = None, limit: int = 100):
        query = self._get_sb().table(table).select("*")
        for key, value in filters.items():
            query = query.eq(key, value)
        if order_by:
            query = query.order(order_by, desc=True)
        return query.limit(limit).execute().data or []

    def _insert(self, table: str, rows: Any) -> List[Dict[str, Any]]:
        return self._get_sb().table(table).insert(rows).execute().data or []

    # ── Sites ────────────────────────────────────────────────────────────────

    async def list_sites(self, user_id: str) -> List[Dict[str, Any]]:
        return self._select(SITES_TABLE, {"user_id": user_id}, order_by="created_at")

    async def get_site(self, site_id: str) -> Optional[Dict[str, Any]]:
        rows = self._select(SITES_TABLE, {"id": site_id}, limit=1)
        return rows[0] if rows else None

    async def count_sites(self, user_id: str) -> int:
        return len(await self.list_sites(user_id))

    async def create_site(self, site: Site) -> Dict[str, Any]:
        rows = self._insert(SITES_TABLE, _row(site))
        logger.info(f"🌐 Site added for {site.user_id}: {site.url}")
        return rows[0] if rows else _row(site)

    async def delete_site(self, site_id: str, user_id: str) -> None:
        self._get_sb().table(SITES_TABLE).delete().eq("id", site_id).eq("user_id", user_id).execute()
        logger.info(f"🗑️ Site {site_id} deleted")

    # ── Audits ───────────────────────────────────────────────────────────────

    async def save_audit(self, audit: Audit) -> Dict[str, Any]:
        rows = self._insert(AUDITS_TABLE, _row(audit))
        return rows[0] if rows else _row(audit)

    async def list_audits(self, site_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent first"""
        return self._select(AUDITS_TABLE, {"site_id": site_id}, order_by="created_at", limit=limit)

    # ── Competitors ──────────────────────────────────────────────────────────

    async def list_competitors(self, user_id: str, site_id: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {"user_id": user_id}
        if site_id:
            filters["site_id"] = site_id
        return self._select(COMPETITOR_SITES_TABLE, filters, order_by="created_at")

    async def get_competitor(self, competitor_site_id: str) -> Optional[Dict[str, Any]]:
        rows = self._select(COMPETITOR_SITES_TABLE, {"id": competitor_site_id}, limit=1)
        return rows[0] if rows else None

    async def count_competitors(self, user_id: str) -> int:
        return len(await self.list_competitors(user_id))

    async def create_competitor(self, competitor: CompetitorSite) -> Dict[str, Any]:
        rows = self._insert(COMPETITOR_SITES_TABLE, _row(competitor))
        logger.info(f"🏁 Competitor added for {competitor.user_id}: {competitor.url}")
        return rows[0] if rows else _row(competitor)

    async def save_competitor_audit(self, audit: CompetitorAudit) -> Dict[str, Any]:
        rows = self._insert(COMPETITOR_AUDITS_TABLE, _row(audit))
        return rows[0] if rows else _row(audit)

    async def list_competitor_audits(self, competitor_site_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        return self._select(
            COMPETITOR_AUDITS_TABLE,
            {"competitor_site_id": competitor_site_id},
            order_by="created_at",
            limit=limit,
        )

    # ── Citations ────────────────────────────────────────────────────────────

    async def add_citations(self, citations: List[Citation]) -> List[Dict[str, Any]]:
        if not citations:
            return []
        return self._insert(CITATIONS_TABLE, [_row(c) for c in citations])

    async def list_citations(self, site_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        return self._select(CITATIONS_TABLE, {"site_id": site_id}, order_by="detected_at", limit=limit)

    # ── Entities ─────────────────────────────────────────────────────────────

    async def replace_entities(self, site_id: str, entities: List[Entity]) -> List[Dict[str, Any]]:
        """Drop the site's previous entity set and store the new one"""
        self._get_sb().table(ENTITIES_TABLE).delete().eq("site_id", site_id).execute()
        if not entities:
            return []
        return self._insert(ENTITIES_TABLE, [_row(e) for e in entities])

    async def list_entities(self, site_id: str) -> List[Dict[str, Any]]:
        return self._select(ENTITIES_TABLE, {"site_id": site_id})

    # ── Generated artifacts ──────────────────────────────────────────────────

    async def save_summary(self, summary: Summary) -> Dict[str, Any]:
        rows = self._insert(SUMMARIES_TABLE, _row(summary))
        return rows[0] if rows else _row(summary)

    async def list_summaries(self, site_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        return self._select(SUMMARIES_TABLE, {"site_id": site_id}, order_by="created_at", limit=limit)

    async def save_schema(self, schema: SchemaRecord) -> Dict[str, Any]:
        rows = self._insert(SCHEMAS_TABLE, _row(schema))
        return rows[0] if rows else _row(schema)


repository = Repository()
