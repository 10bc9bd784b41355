"""
Entitlement engine
Answers "is this action permitted" for a plan and a usage snapshot.

All queries are pure: no I/O, no mutation, no exceptions. An unresolved
plan (None) gets the most conservative answer so that a datastore outage
can never unlock paid behaviour.
"""

import logging
from typing import Any, Dict, Optional, Union

from .plans import (
    FREE_PLAN,
    UNLIMITED,
    AuditFrequency,
    ChatbotAccess,
    CitationTrackingMode,
    Feature,
    Plan,
    SchemaGenerationLevel,
    resolve_plan,
)
from .usage import MeteredAction, Usage, subscription_store, usage_store

logger = logging.getLogger(__name__)

FeatureValue = Union[bool, SchemaGenerationLevel, ChatbotAccess]

# Plan limit field that caps each metered action
ACTION_LIMITS: Dict[MeteredAction, str] = {
    MeteredAction.RUN_AUDIT: "audits_per_month",
    MeteredAction.GENERATE_CONTENT: "ai_content_generations",
    MeteredAction.OPTIMIZE_CONTENT: "ai_content_optimizations",
    MeteredAction.GENERATE_PROMPTS: "prompt_suggestions",
    MeteredAction.TRACK_CITATION: "citations_per_month",
}

_DISABLED: Dict[Feature, FeatureValue] = {feature: False for feature in Feature}
_DISABLED[Feature.SCHEMA_GENERATION] = SchemaGenerationLevel.NONE
_DISABLED[Feature.CHATBOT_ACCESS] = ChatbotAccess.NONE


class Entitlements:
    """Permission view over (Plan, Usage)"""

    def __init__(self, plan: Optional[Plan], usage: Optional[Usage] = None):
        self.plan = plan
        self.usage = usage or Usage()

    # ── Features ──────────────────────────────────────────────────────────────

    def feature_value(self, feature: Union[Feature, str]) -> FeatureValue:
        """Raw flag value: a bool, or a level enum for schema generation and chatbot access"""
        try:
            feature = Feature(feature)
        except ValueError:
            logger.warning(f"Unknown feature flag requested: {feature}")
            return False
        if self.plan is None:
            return _DISABLED[feature]
        return getattr(self.plan.features, feature.value)

    def is_feature_enabled(self, feature: Union[Feature, str]) -> bool:
        value = self.feature_value(feature)
        if isinstance(value, bool):
            return value
        return value not in (SchemaGenerationLevel.NONE, ChatbotAccess.NONE)

    def get_chatbot_access(self) -> ChatbotAccess:
        return self.feature_value(Feature.CHATBOT_ACCESS)

    # ── Limits ────────────────────────────────────────────────────────────────

    def _limits(self):
        return (self.plan or FREE_PLAN).limits

    def get_site_limit(self) -> Any:
        return self._limits().sites

    def get_competitor_limit(self) -> Any:
        return self._limits().competitors

    def get_audit_frequency(self) -> AuditFrequency:
        return self._limits().audit_frequency

    def can_add_site(self, current_count: int) -> bool:
        if self.plan is None:
            return False
        return current_count < self.plan.limits.sites

    def can_add_competitor(self, current_count: int) -> bool:
        if self.plan is None:
            return False
        limit = self.plan.limits.competitors
        if limit == 0:
            return False
        return current_count < limit

    # ── Metered actions ───────────────────────────────────────────────────────

    def can_perform(self, action: Union[MeteredAction, str]) -> bool:
        """used < limit; UNLIMITED always passes, a zero limit never does"""
        if self.plan is None:
            return False
        try:
            action = MeteredAction(action)
        except ValueError:
            logger.warning(f"Unknown metered action requested: {action}")
            return False

        limit = getattr(self.plan.limits, ACTION_LIMITS[action])
        if limit is UNLIMITED:
            return True
        if limit == 0:
            return False
        return self.usage.used(action) < limit

    def can_run_audit(self) -> bool:
        return self.can_perform(MeteredAction.RUN_AUDIT)

    def can_generate_content(self) -> bool:
        return self.can_perform(MeteredAction.GENERATE_CONTENT)

    def can_optimize_content(self) -> bool:
        return self.can_perform(MeteredAction.OPTIMIZE_CONTENT)

    def can_generate_prompts(self) -> bool:
        return self.can_perform(MeteredAction.GENERATE_PROMPTS)

    def can_track_more_citations(self) -> bool:
        return self.can_perform(MeteredAction.TRACK_CITATION)

    def can_track_citations(self) -> bool:
        """
        Delayed-mode plans get one look per period: allowed only while no
        citations have been consumed. Other modes are not usage-dependent.
        """
        if self.plan is None:
            return False
        if self.plan.limits.citation_tracking != CitationTrackingMode.DELAYED:
            return True
        return self.usage.citations_used == 0

    # ── Snapshot ──────────────────────────────────────────────────────────────

    def summary(self) -> Dict[str, Any]:
        """JSON-ready view for the dashboard"""
        checks = {action.value: self.can_perform(action) for action in MeteredAction}
        checks["trackCitations"] = self.can_track_citations()
        return {
            "plan": self.plan.model_dump(mode="json") if self.plan else None,
            "usage": self.usage.model_dump(mode="json"),
            "features": {
                feature.value: _json_value(self.feature_value(feature)) for feature in Feature
            },
            "limits": {
                "sites": _json_value(self.get_site_limit()),
                "competitors": _json_value(self.get_competitor_limit()),
                "audit_frequency": self.get_audit_frequency().value,
            },
            "can": checks,
        }


def _json_value(value: Any) -> Any:
    if value is UNLIMITED:
        return str(value)
    if isinstance(value, (SchemaGenerationLevel, ChatbotAccess)):
        return value.value
    return value


async def load_entitlements(user_id: Optional[str]) -> Entitlements:
    """
    Entitlements for an account. Anonymous callers and datastore failures
    fall back to the Free plan with zero usage (offline mode).
    """
    if not user_id:
        return Entitlements(resolve_plan(None), Usage())

    try:
        plan_id = await subscription_store.get_plan_id(user_id)
        usage = await usage_store.get(user_id)
    except Exception as e:
        logger.warning(f"⚠️ Could not load subscription for {user_id}, using free plan: {e}")
        return Entitlements(resolve_plan(None), Usage())

    return Entitlements(resolve_plan(plan_id), usage)
