"""
Usage metering
Per-account counters read by the entitlement engine and bumped by
action handlers after a successful gated action.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from .config import settings
from .database import get_supabase

logger = logging.getLogger(__name__)

SUBSCRIPTIONS_TABLE = "subscriptions"
SUBSCRIPTION_USAGE_TABLE = "subscription_usage"


class MeteredAction(str, Enum):
    RUN_AUDIT = "runAudit"
    GENERATE_CONTENT = "generateContent"
    OPTIMIZE_CONTENT = "optimizeContent"
    GENERATE_PROMPTS = "generatePrompts"
    TRACK_CITATION = "trackCitation"


# Usage field counted against each action's monthly limit
USAGE_COUNTERS: Dict[MeteredAction, str] = {
    MeteredAction.RUN_AUDIT: "audits_this_month",
    MeteredAction.GENERATE_CONTENT: "ai_content_used",
    MeteredAction.OPTIMIZE_CONTENT: "ai_content_optimizations",
    MeteredAction.GENERATE_PROMPTS: "prompt_suggestions",
    MeteredAction.TRACK_CITATION: "citations_used",
}


class Usage(BaseModel):
    """Usage snapshot for one account. Counters never go below zero."""
    model_config = ConfigDict(frozen=True)

    citations_used: int = 0
    ai_content_used: int = 0
    ai_content_optimizations: int = 0
    prompt_suggestions: int = 0
    audits_this_month: int = 0
    last_audit_date: Optional[datetime] = None
    period_start: Optional[datetime] = None

    def used(self, action: MeteredAction) -> int:
        return getattr(self, USAGE_COUNTERS[MeteredAction(action)])

    def incremented(self, action: MeteredAction, amount: int = 1, at: Optional[datetime] = None) -> "Usage":
        """Copy with one counter bumped"""
        action = MeteredAction(action)
        field = USAGE_COUNTERS[action]
        update: Dict[str, Any] = {field: getattr(self, field) + max(amount, 0)}
        if action == MeteredAction.RUN_AUDIT:
            update["last_audit_date"] = at or _now()
        return self.model_copy(update=update)

    def rolled_over(self, now: Optional[datetime] = None) -> "Usage":
        """Zeroed counters for a new monthly period"""
        now = now or _now()
        return Usage(
            last_audit_date=self.last_audit_date,
            period_start=now.replace(day=1, hour=0, minute=0, second=0, microsecond=0),
        )

    def is_current_period(self, now: Optional[datetime] = None) -> bool:
        if self.period_start is None:
            return True
        now = now or _now()
        start = self.period_start
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        return (start.year, start.month) >= (now.year, now.month)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def usage_from_row(row: Optional[Dict[str, Any]]) -> Usage:
    """Build Usage from a subscription_usage row; missing values count as zero"""
    if not row:
        return Usage()
    return Usage(
        citations_used=row.get("citations_used") or 0,
        ai_content_used=row.get("ai_content_used") or 0,
        ai_content_optimizations=row.get("ai_content_optimizations") or 0,
        prompt_suggestions=row.get("prompt_suggestions") or 0,
        audits_this_month=row.get("audits_this_month") or 0,
        last_audit_date=row.get("last_audit_date"),
        period_start=row.get("period_start"),
    )


def usage_to_row(user_id: str, usage: Usage) -> Dict[str, Any]:
    row = usage.model_dump(mode="json")
    row["user_id"] = user_id
    return row


class UsageStore:
    """Reads and writes subscription_usage rows in Supabase"""

    def __init__(self, reset_policy: Optional[str] = None):
        self.reset_policy = reset_policy or settings.USAGE_RESET_POLICY
        self.sb = None

    def _get_sb(self):
        if not self.sb:
            self.sb = get_supabase()
        return self.sb

    async def get(self, user_id: str) -> Usage:
        """Current usage, creating a zeroed row on first access"""
        sb = self._get_sb()
        result = (
            sb.table(SUBSCRIPTION_USAGE_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        if not rows:
            usage = Usage(period_start=_now())
            sb.table(SUBSCRIPTION_USAGE_TABLE).insert(usage_to_row(user_id, usage)).execute()
            logger.info(f"📊 Created usage record for {user_id}")
            return usage

        usage = usage_from_row(rows[0])
        if self.reset_policy == "monthly" and not usage.is_current_period():
            usage = usage.rolled_over()
            await self._save(user_id, usage)
            logger.info(f"🔄 Usage period rolled over for {user_id}")
        return usage

    async def increment(self, user_id: str, action: MeteredAction, amount: int = 1) -> Usage:
        """Bump the counter for a completed action and persist it"""
        usage = (await self.get(user_id)).incremented(action, amount)
        await self._save(user_id, usage)
        logger.info(f"📈 {user_id}: {MeteredAction(action).value} +{amount}")
        return usage

    async def _save(self, user_id: str, usage: Usage) -> None:
        row = usage_to_row(user_id, usage)
        self._get_sb().table(SUBSCRIPTION_USAGE_TABLE).update(row).eq("user_id", user_id).execute()


class SubscriptionStore:
    """Reads the active plan id for an account"""

    def __init__(self):
        self.sb = None

    def _get_sb(self):
        if not self.sb:
            self.sb = get_supabase()
        return self.sb

    async def get_plan_id(self, user_id: str) -> Optional[str]:
        result = (
            self._get_sb()
            .table(SUBSCRIPTIONS_TABLE)
            .select("plan_id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return rows[0].get("plan_id") if rows else None


usage_store = UsageStore()
subscription_store = SubscriptionStore()
