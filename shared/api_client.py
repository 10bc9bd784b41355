"""
SEOgenix API client
Async httpx client for the SEOgenix service, used by scripts and other
services. Applies the basic-tier chatbot keyword gate before sending.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from agents.chatbot import intercept_basic_tier_message
from .config import settings
from .errors import ClientInputError, EntitlementDenied, SEOgenixError
from .plans import ChatbotAccess, get_plan

logger = logging.getLogger(__name__)

_ERRORS_BY_STATUS = {
    400: ClientInputError,
    403: EntitlementDenied,
}


def _error_from_response(response: httpx.Response) -> SEOgenixError:
    """Typed error for a failed response; non-JSON bodies (proxy pages) keep the reason phrase"""
    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        data = {}
    error_cls = _ERRORS_BY_STATUS.get(response.status_code, SEOgenixError)
    error = error_cls(data.get("error") or response.reason_phrase, data.get("message"))
    error.status_code = response.status_code
    logger.warning(f"⚠️ {response.request.url.path} returned {response.status_code}: {error.message}")
    return error


class SEOgenixClient:
    """Thin wrapper over the SEOgenix HTTP API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.http_client = httpx.AsyncClient(
            base_url=base_url or settings.PUBLIC_API_URL,
            transport=transport,
            timeout=timeout,
        )

    async def close(self):
        await self.http_client.aclose()

    async def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.http_client.post(path, json=payload)
        if response.status_code >= 400:
            raise _error_from_response(response)
        return response.json()

    async def send_chat_message(
        self,
        message: str,
        user_id: str,
        subscription_level: str,
        site_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a chatbot message, or answer locally when the basic-tier gate applies"""
        plan = get_plan(subscription_level)
        access = plan.features.chatbot_access if plan else ChatbotAccess.NONE

        canned = intercept_basic_tier_message(message, access)
        if canned:
            logger.info(f"🔒 Chat message intercepted for {user_id} on {subscription_level}")
            return {
                "response": canned,
                "subscription_level": subscription_level,
                "intercepted": True,
            }

        return await self.post("/api/chatbot", {
            "message": message,
            "user_id": user_id,
            "subscription_level": subscription_level,
            "site_id": site_id,
            "context": context or {},
        })

    async def run_audit(self, site_id: str, url: str) -> Dict[str, Any]:
        return await self.post("/api/audits/site", {"siteId": site_id, "url": url})

    async def analyze_content(self, content: str) -> Dict[str, Any]:
        return await self.post("/api/content/analyze", {"content": content})

    async def generate_schema(self, url: str, schema_type: str) -> Dict[str, Any]:
        return await self.post("/api/schema/generate", {"url": url, "schemaType": schema_type})

    async def get_entitlements(self, user_id: str) -> Dict[str, Any]:
        response = await self.http_client.get("/api/subscription/entitlements", params={"user_id": user_id})
        if response.status_code >= 400:
            raise _error_from_response(response)
        return response.json()
