"""
Page fetching and text extraction
One GET per request with the crawler user agent; failures degrade to a
placeholder string instead of failing the analysis.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx
from bs4 import BeautifulSoup

from .config import settings
from .errors import UpstreamFetchError

logger = logging.getLogger(__name__)

# Character budgets per endpoint
AUDIT_BUDGET = 5000
COMPETITOR_BUDGET = 5000
SCHEMA_BUDGET = 3000
SUMMARY_BUDGET = 8000
ENTITY_BUDGET = 3000

DEFAULT_PLACEHOLDER = "Unable to fetch website content"

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


@dataclass
class FetchedPage:
    url: str
    content: str
    fetched: bool
    metadata: Dict[str, str] = field(default_factory=dict)


def extract_text(html: str, limit: Optional[int] = None) -> str:
    """Strip script/style blocks and tags, collapse whitespace, truncate"""
    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = _SPACE_RE.sub(" ", text).strip()
    if limit is not None:
        text = text[:limit]
    return text


def extract_metadata(html: str) -> Dict[str, str]:
    """Title, meta description and meta keywords"""
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else ""

    def meta(name: str) -> str:
        tag = soup.find("meta", attrs={"name": re.compile(f"^{name}$", re.IGNORECASE)})
        return (tag.get("content") or "").strip() if tag else ""

    return {
        "title": title,
        "description": meta("description"),
        "keywords": meta("keywords"),
    }


class PageFetcher:
    """Fetches a target page and reduces it to a bounded text block"""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: Optional[float] = None):
        self.transport = transport
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS

    def user_agent(self, purpose: str) -> str:
        return f"{settings.CRAWLER_NAME} ({purpose})"

    async def get_html(self, url: str, purpose: str) -> str:
        """Raw HTML; raises UpstreamFetchError on network errors, timeouts and non-2xx"""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent(purpose)},
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(f"HTTP {e.response.status_code}: {e.response.reason_phrase}") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Fetch failed: {e}") from e

    async def fetch(
        self,
        url: str,
        budget: int,
        purpose: str,
        placeholder: str = DEFAULT_PLACEHOLDER,
        with_metadata: bool = False,
    ) -> FetchedPage:
        """Sanitized page text, or the placeholder when the page can't be fetched"""
        try:
            html = await self.get_html(url, purpose)
        except UpstreamFetchError as e:
            logger.warning(f"⚠️ Could not fetch {url}: {e}")
            return FetchedPage(url=url, content=placeholder, fetched=False)

        content = extract_text(html, budget)
        metadata = extract_metadata(html) if with_metadata else {}
        logger.info(f"🌐 Fetched {url} ({len(content)} chars)")
        return FetchedPage(url=url, content=content, fetched=True, metadata=metadata)


page_fetcher = PageFetcher()
