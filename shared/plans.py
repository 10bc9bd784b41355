"""
Subscription plan catalog
Static tier table validated once at process start.

Every limit is either a non-negative integer or UNLIMITED. Every feature
flag is required; a plan file that omits one is rejected.
"""

import json
import logging
import math
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, StrictBool, model_validator

from .config import settings

logger = logging.getLogger(__name__)


class Unlimited:
    """Sentinel for "no limit". Greater than every number, equal only to itself."""

    _instance: Optional["Unlimited"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNLIMITED"

    def __str__(self) -> str:
        return "unlimited"

    def __eq__(self, other: Any) -> bool:
        return other is self

    def __hash__(self) -> int:
        return hash("unlimited")

    def __gt__(self, other: Any) -> bool:
        return other is not self

    def __ge__(self, other: Any) -> bool:
        return True

    def __lt__(self, other: Any) -> bool:
        return False

    def __le__(self, other: Any) -> bool:
        return other is self


UNLIMITED = Unlimited()


def _coerce_limit(value: Any) -> Any:
    if value is UNLIMITED:
        return value
    if isinstance(value, str) and value.strip().lower() == "unlimited":
        return UNLIMITED
    if isinstance(value, bool):
        raise ValueError("limit must be a non-negative integer or 'unlimited'")
    if isinstance(value, float):
        if math.isinf(value) and value > 0:
            return UNLIMITED
        if value.is_integer():
            value = int(value)
    if isinstance(value, int) and value >= 0:
        return value
    raise ValueError("limit must be a non-negative integer or 'unlimited'")


def _serialize_limit(value: Any) -> Any:
    return str(value) if value is UNLIMITED else value


Limit = Annotated[Any, BeforeValidator(_coerce_limit), PlainSerializer(_serialize_limit)]


class PlanTier(str, Enum):
    FREE = "free"
    CORE = "core"
    PRO = "pro"
    AGENCY = "agency"


class AuditFrequency(str, Enum):
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DAILY = "daily"


class CitationTrackingMode(str, Enum):
    DELAYED = "delayed"
    REALTIME = "realtime"
    FULL = "full"


class SchemaGenerationLevel(str, Enum):
    NONE = "none"  # unresolved plan only
    BASIC = "basic"
    FULL = "full"
    UNLIMITED = "unlimited"


class ChatbotAccess(str, Enum):
    NONE = "none"
    BASIC = "basic"
    FULL = "full"


class Feature(str, Enum):
    """One member per plan feature flag"""

    SCHEMA_GENERATION = "schema_generation"
    ENTITY_ANALYSIS = "entity_analysis"
    VOICE_ASSISTANT = "voice_assistant"
    LLM_SUMMARIES = "llm_summaries"
    COMPETITIVE_ANALYSIS = "competitive_analysis"
    CONTENT_OPTIMIZER = "content_optimizer"
    EXPORT_REPORTS = "export_reports"
    TEAM_COLLABORATION = "team_collaboration"
    PRIORITY_SUPPORT = "priority_support"
    DEDICATED_SUPPORT = "dedicated_support"
    EARLY_ACCESS = "early_access"
    CHATBOT_ACCESS = "chatbot_access"


class PlanFeatures(BaseModel):
    """Feature flags for a plan"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    schema_generation: SchemaGenerationLevel
    entity_analysis: StrictBool
    voice_assistant: StrictBool
    llm_summaries: StrictBool
    competitive_analysis: StrictBool
    content_optimizer: StrictBool
    export_reports: StrictBool
    team_collaboration: StrictBool
    priority_support: StrictBool
    dedicated_support: StrictBool
    early_access: StrictBool
    chatbot_access: ChatbotAccess


class PlanLimits(BaseModel):
    """Numeric and enum limits for a plan"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    sites: Limit
    competitors: Limit
    audit_frequency: AuditFrequency
    audits_per_month: Limit
    ai_content_generations: Limit
    ai_content_optimizations: Limit
    prompt_suggestions: Limit
    citation_tracking: CitationTrackingMode
    citations_per_month: Limit


class Plan(BaseModel):
    """A subscription tier"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: PlanTier
    price: float
    yearly_price: float
    limits: PlanLimits
    features: PlanFeatures


class PlanCatalog(BaseModel):
    """The full tier table. Exactly one entry per PlanTier."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    plans: Dict[PlanTier, Plan]

    @model_validator(mode="after")
    def _check_tiers(self) -> "PlanCatalog":
        missing = [tier.value for tier in PlanTier if tier not in self.plans]
        if missing:
            raise ValueError(f"plan catalog is missing tiers: {', '.join(missing)}")
        for tier, plan in self.plans.items():
            if plan.name != tier:
                raise ValueError(f"plan '{tier.value}' is declared with name '{plan.name.value}'")
        return self


# Yearly prices carry a 25% discount over twelve monthly payments
PLAN_TABLE: Dict[str, Dict[str, Any]] = {
    "free": {
        "name": "free",
        "price": 0,
        "yearly_price": 0,
        "limits": {
            "sites": 1,
            "competitors": 0,
            "audit_frequency": "monthly",
            "audits_per_month": 1,
            "ai_content_generations": 3,
            "ai_content_optimizations": 0,
            "prompt_suggestions": 5,
            "citation_tracking": "delayed",
            "citations_per_month": 10,
        },
        "features": {
            "schema_generation": "basic",
            "entity_analysis": False,
            "voice_assistant": False,
            "llm_summaries": False,
            "competitive_analysis": False,
            "content_optimizer": False,
            "export_reports": False,
            "team_collaboration": False,
            "priority_support": False,
            "dedicated_support": False,
            "early_access": False,
            "chatbot_access": "none",
        },
    },
    "core": {
        "name": "core",
        "price": 29,
        "yearly_price": 261,
        "limits": {
            "sites": 2,
            "competitors": 0,
            "audit_frequency": "monthly",
            "audits_per_month": 2,
            "ai_content_generations": 20,
            "ai_content_optimizations": 10,
            "prompt_suggestions": 20,
            "citation_tracking": "realtime",
            "citations_per_month": 50,
        },
        "features": {
            "schema_generation": "full",
            "entity_analysis": True,
            "voice_assistant": False,
            "llm_summaries": False,
            "competitive_analysis": False,
            "content_optimizer": True,
            "export_reports": False,
            "team_collaboration": False,
            "priority_support": False,
            "dedicated_support": False,
            "early_access": False,
            "chatbot_access": "basic",
        },
    },
    "pro": {
        "name": "pro",
        "price": 59,
        "yearly_price": 531,
        "limits": {
            "sites": 5,
            "competitors": 3,
            "audit_frequency": "weekly",
            "audits_per_month": 8,
            "ai_content_generations": 60,
            "ai_content_optimizations": 30,
            "prompt_suggestions": 60,
            "citation_tracking": "full",
            "citations_per_month": 200,
        },
        "features": {
            "schema_generation": "full",
            "entity_analysis": True,
            "voice_assistant": True,
            "llm_summaries": True,
            "competitive_analysis": True,
            "content_optimizer": True,
            "export_reports": False,
            "team_collaboration": False,
            "priority_support": True,
            "dedicated_support": False,
            "early_access": False,
            "chatbot_access": "full",
        },
    },
    "agency": {
        "name": "agency",
        "price": 99,
        "yearly_price": 891,
        "limits": {
            "sites": 10,
            "competitors": 10,
            "audit_frequency": "daily",
            "audits_per_month": "unlimited",
            "ai_content_generations": "unlimited",
            "ai_content_optimizations": "unlimited",
            "prompt_suggestions": "unlimited",
            "citation_tracking": "full",
            "citations_per_month": "unlimited",
        },
        "features": {
            "schema_generation": "unlimited",
            "entity_analysis": True,
            "voice_assistant": True,
            "llm_summaries": True,
            "competitive_analysis": True,
            "content_optimizer": True,
            "export_reports": True,
            "team_collaboration": True,
            "priority_support": True,
            "dedicated_support": True,
            "early_access": True,
            "chatbot_access": "full",
        },
    },
}


def load_plan_catalog(path: Optional[str] = None) -> PlanCatalog:
    """
    Load and validate the plan table.

    Args:
        path: JSON file with the same shape as PLAN_TABLE. Defaults to
              settings.PLANS_FILE, then to the built-in table.
    """
    path = path or settings.PLANS_FILE
    if path:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        logger.info(f"📋 Loading plan catalog from {path}")
    else:
        raw = PLAN_TABLE
    return PlanCatalog.model_validate({"plans": raw})


catalog = load_plan_catalog()


def get_plan(tier: Any) -> Optional[Plan]:
    """Look up a plan by tier name; None when the tier is unknown"""
    try:
        return catalog.plans[PlanTier(tier)]
    except ValueError:
        return None


def resolve_plan(plan_id: Optional[str]) -> Plan:
    """Plan for a stored subscription row. No row or an unknown id means Free."""
    plan = get_plan(plan_id) if plan_id else None
    return plan or catalog.plans[PlanTier.FREE]


FREE_PLAN = catalog.plans[PlanTier.FREE]
