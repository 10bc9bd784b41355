"""
User preferences
Per-account dismissal flags for upsell prompts and banners.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from .database import get_supabase
from .plans import Plan, PlanTier

logger = logging.getLogger(__name__)

PREFERENCES_TABLE = "user_preferences"

# Upsell surfaces that can be dismissed
AI_GUIDANCE_UPSELL = "ai-guidance-upsell"
CHATBOT_BANNER = "chatbot-banner"
CONTEXTUAL_UPSELL_TRIGGERS = ("report-view", "help-section", "audit-complete")


def contextual_upsell_key(trigger: str) -> str:
    if trigger not in CONTEXTUAL_UPSELL_TRIGGERS:
        raise ValueError(f"Unknown upsell trigger: {trigger}")
    return f"contextual-upsell-{trigger}"


KNOWN_KEYS = frozenset(
    [AI_GUIDANCE_UPSELL, CHATBOT_BANNER] + [contextual_upsell_key(t) for t in CONTEXTUAL_UPSELL_TRIGGERS]
)


class PreferenceStore:
    """Reads and writes user_preferences rows"""

    def __init__(self):
        self.sb = None

    def _get_sb(self):
        if not self.sb:
            self.sb = get_supabase()
        return self.sb

    async def dismiss(self, user_id: str, key: str) -> None:
        self._get_sb().table(PREFERENCES_TABLE).upsert({
            "user_id": user_id,
            "key": key,
            "value": True,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }).execute()
        logger.info(f"🙈 {user_id} dismissed {key}")

    async def reset(self, user_id: str, key: str) -> None:
        self._get_sb().table(PREFERENCES_TABLE).delete().eq("user_id", user_id).eq("key", key).execute()

    async def is_dismissed(self, user_id: str, key: str) -> bool:
        result = (
            self._get_sb()
            .table(PREFERENCES_TABLE)
            .select("value")
            .eq("user_id", user_id)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return bool(rows and rows[0].get("value"))

    async def all_for(self, user_id: str) -> Dict[str, bool]:
        result = self._get_sb().table(PREFERENCES_TABLE).select("*").eq("user_id", user_id).execute()
        return {row["key"]: bool(row.get("value")) for row in (result.data or [])}

    async def should_show_upsell(self, plan: Optional[Plan], user_id: str, key: str) -> bool:
        """Upsells are shown to free-plan accounts that haven't dismissed them"""
        if plan is None or plan.name != PlanTier.FREE:
            return False
        return not await self.is_dismissed(user_id, key)


preference_store = PreferenceStore()
