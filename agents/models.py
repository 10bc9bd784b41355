"""
Database models for SEOgenix
Pydantic models for Supabase REST API
"""

from pydantic import BaseModel, Field, computed_field
from typing import Optional


# Table name constants
SITES_TABLE = "sites"
AUDITS_TABLE = "audits"
COMPETITOR_SITES_TABLE = "competitor_sites"
COMPETITOR_AUDITS_TABLE = "competitor_audits"
CITATIONS_TABLE = "citations"
ENTITIES_TABLE = "entities"
SUMMARIES_TABLE = "summaries"
SCHEMAS_TABLE = "schemas"
PREFERENCES_TABLE = "user_preferences"

SCORE_FIELDS = (
    "ai_visibility_score",
    "schema_score",
    "semantic_score",
    "citation_score",
    "technical_seo_score",
)


class Site(BaseModel):
    """User-owned audit target"""
    id: Optional[str] = None
    user_id: str
    url: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Scores(BaseModel):
    """Five 0-100 sub-scores"""
    ai_visibility_score: int = Field(ge=0, le=100)
    schema_score: int = Field(ge=0, le=100)
    semantic_score: int = Field(ge=0, le=100)
    citation_score: int = Field(ge=0, le=100)
    technical_seo_score: int = Field(ge=0, le=100)

    @computed_field
    @property
    def overall_score(self) -> int:
        """Unweighted mean of the five sub-scores, rounded"""
        return round(sum(getattr(self, name) for name in SCORE_FIELDS) / len(SCORE_FIELDS))


class Audit(Scores):
    """Immutable score snapshot for a site"""
    id: Optional[str] = None
    site_id: str
    created_at: Optional[str] = None


class CompetitorSite(BaseModel):
    """Tracked competitor under a site"""
    id: Optional[str] = None
    user_id: str
    site_id: Optional[str] = None
    url: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CompetitorAudit(Scores):
    """Score snapshot for a competitor"""
    id: Optional[str] = None
    competitor_site_id: str
    created_at: Optional[str] = None


class Citation(BaseModel):
    """One detected external mention. Append only."""
    id: Optional[str] = None
    site_id: str
    source_type: str
    snippet_text: str
    url: str
    detected_at: Optional[str] = None


class Entity(BaseModel):
    """Named concept detected in a site's content"""
    id: Optional[str] = None
    site_id: str
    entity_name: str
    entity_type: str = "Concept"
    mention_count: int = 0
    gap: bool = False
    created_at: Optional[str] = None


class Summary(BaseModel):
    """Generated site summary"""
    id: Optional[str] = None
    site_id: str
    summary_type: str
    content: str
    created_at: Optional[str] = None


class SchemaRecord(BaseModel):
    """Generated JSON-LD markup"""
    id: Optional[str] = None
    audit_id: Optional[str] = None
    schema_type: str
    markup: str
    created_at: Optional[str] = None
