"""
Genie chatbots
ProductChatbot answers signed-in users with framing set by their plan's
chatbot access; LandingChatbot answers visitors on the marketing site.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from shared.entitlements import load_entitlements
from shared.errors import EntitlementDenied, OracleError
from shared.monitoring import record_fallback
from shared.plans import ChatbotAccess, get_plan
from shared.repository import Repository, repository
from .base import AnalysisAgent, now_iso

logger = logging.getLogger(__name__)

CHATBOT_DENIED = "Chatbot access requires Core plan or higher"

CHATBOT_UPSELL = (
    "Genie, your AI assistant, is available on the Core plan and above. "
    "Upgrade to Core for tool guidance, or to Pro for personalized analysis of your audits, "
    "citations and competitors."
)

FULL_FRAMING = """You are Genie, an AI assistant for SEOgenix, a platform that helps optimize content for AI visibility. You have full access to user data and can provide detailed, personalized insights and recommendations.

Your capabilities include:
- Analyzing AI Visibility Scores and providing specific improvement recommendations
- Interpreting audit results and competitive data
- Suggesting optimization strategies tailored to the user's content
- Providing proactive alerts when metrics need attention
- Offering detailed insights about performance trends

User context:
- Subscription: {level}
- Site ID: {site_id}
- Current page: {page}

{data}

Be helpful, insightful, and provide actionable recommendations. You can analyze data and provide specific suggestions for improvement."""

BASIC_FRAMING = """You are Genie, an AI assistant for SEOgenix. On the Core plan, you provide tool guidance and explanations but cannot access user data for personalized analysis.

Your capabilities include:
- Explaining how to use SEOgenix tools and features
- Providing general guidance on AI visibility optimization
- Helping users navigate the platform
- Answering questions about what different metrics mean

You CANNOT:
- Analyze specific user data or scores
- Provide personalized recommendations based on user metrics
- Access audit results or performance data

User context:
- Subscription: {level}
- Current page: {page}

Be helpful with tool guidance while encouraging users to upgrade to Pro for personalized insights."""

CHAT_PROMPT = """User message: {message}

Respond helpfully and conversationally. Keep responses concise but informative."""

# Messages on the basic tier that ask for analysis of the user's own data
ANALYTICAL_KEYWORDS = re.compile(
    r"\b(optimi[sz]\w*|analy[sz]\w*|recommend\w*|improve\w*|my (?:score|scores|audit|audits|data|site|citations)"
    r"|performance|metrics?|competitors?|insights?)\b",
    re.IGNORECASE,
)

BASIC_TIER_SUGGESTIONS = [
    "How do I run an AI visibility audit?",
    "What does the schema score measure?",
    "How do I use the Citation Tracker?",
    "Where can I generate FAQ content for my site?",
]


def basic_tier_upgrade_message() -> str:
    questions = "\n".join(f"• {q}" for q in BASIC_TIER_SUGGESTIONS)
    return (
        "Personalized analysis and recommendations are part of the Pro plan. "
        "On Core, I can walk you through the tools. Try asking:\n\n"
        f"{questions}\n\n"
        "Upgrade to Pro to get insights based on your own audit data."
    )


def intercept_basic_tier_message(message: str, access: Any) -> Optional[str]:
    """
    Canned upgrade reply for analytical questions on the basic tier, or None
    when the message should be sent. A UX nudge only; the server-side
    framing is what actually limits the answer.
    """
    if ChatbotAccess(access) != ChatbotAccess.BASIC:
        return None
    if ANALYTICAL_KEYWORDS.search(message or ""):
        return basic_tier_upgrade_message()
    return None


def _data_block(context: Dict[str, List[Dict[str, Any]]]) -> str:
    lines = ["User data:"]
    for site in context["sites"][:10]:
        lines.append(f"- Site: {site.get('name')} ({site.get('url')})")
    for audit in context["audits"][:5]:
        lines.append(
            "- Audit {created}: AI visibility {ai}, schema {schema}, semantic {semantic}, "
            "citation {citation}, technical SEO {technical}".format(
                created=audit.get("created_at", ""),
                ai=audit.get("ai_visibility_score"),
                schema=audit.get("schema_score"),
                semantic=audit.get("semantic_score"),
                citation=audit.get("citation_score"),
                technical=audit.get("technical_seo_score"),
            )
        )
    for citation in context["citations"][:5]:
        lines.append(f"- Citation ({citation.get('source_type')}): {citation.get('snippet_text')}")
    gaps = [e.get("entity_name") for e in context["entities"] if e.get("gap")]
    if context["entities"]:
        lines.append(f"- Entities tracked: {len(context['entities'])}, gaps: {', '.join(gaps) or 'none'}")
    for competitor in context["competitors"][:10]:
        lines.append(f"- Competitor: {competitor.get('name')} ({competitor.get('url')})")
    if len(lines) == 1:
        lines.append("- No stored data yet")
    return "\n".join(lines)


class ProductChatbot(AnalysisAgent):
    name = "chatbot"
    purpose = "Genie"
    temperature = 0.7
    max_tokens = 1024

    def __init__(self, oracle=None, repo: Optional[Repository] = None):
        super().__init__(oracle=oracle)
        self.repo = repo or repository

    async def resolve_access(self, user_id: str, subscription_level: Optional[str]) -> Tuple[ChatbotAccess, str]:
        """(chatbot access, plan tier) for the stated tier, or the stored plan when none is given"""
        if subscription_level:
            plan = get_plan(subscription_level)
            return (plan.features.chatbot_access if plan else ChatbotAccess.NONE), subscription_level
        entitlements = await load_entitlements(user_id)
        tier = entitlements.plan.name.value if entitlements.plan else "free"
        return entitlements.get_chatbot_access(), tier

    async def load_context(self, user_id: str, site_id: Optional[str]) -> Dict[str, List[Dict[str, Any]]]:
        context = {"sites": [], "audits": [], "citations": [], "entities": [], "competitors": []}
        try:
            context["sites"] = await self.repo.list_sites(user_id)
            context["competitors"] = await self.repo.list_competitors(user_id)
            site_ids = [site_id] if site_id else [s["id"] for s in context["sites"] if s.get("id")]
            for sid in site_ids[:3]:
                context["audits"] += await self.repo.list_audits(sid, limit=5)
                context["citations"] += await self.repo.list_citations(sid, limit=10)
                context["entities"] += await self.repo.list_entities(sid)
        except Exception as e:
            logger.warning(f"⚠️ Chat context unavailable for {user_id}: {e}")
        return context

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        message, user_id = self.require(payload, "message", "user_id")
        subscription_level = payload.get("subscription_level")
        site_id = payload.get("site_id")
        page = (payload.get("context") or {}).get("current_page") or "Unknown"

        access, level = await self.resolve_access(user_id, subscription_level)
        if access == ChatbotAccess.NONE:
            logger.info(f"🔒 Chatbot denied for {user_id} ({subscription_level or 'stored plan'})")
            raise EntitlementDenied(CHATBOT_DENIED, friendly_message=CHATBOT_UPSELL)

        context = await self.load_context(user_id, site_id)
        if access == ChatbotAccess.FULL:
            system = FULL_FRAMING.format(
                level=level, site_id=site_id or "Not specified", page=page, data=_data_block(context)
            )
        else:
            system = BASIC_FRAMING.format(level=level, page=page)

        response = await self.ask(CHAT_PROMPT.format(message=message), system=system)
        return {
            "response": response,
            "subscription_level": level,
            "capabilities": access.value,
            "context_used": {key: len(rows) for key, rows in context.items()},
        }


LANDING_PROMPT = """You are Genie, a helpful and knowledgeable AI assistant for SEOgenix, a cutting-edge platform that helps businesses optimize their content for AI visibility. You're on the landing page helping potential customers understand the platform.

ABOUT SEOGENIX:
SEOgenix is the first comprehensive platform designed specifically for the AI era of search. While traditional SEO focuses on Google rankings, SEOgenix helps businesses get found and cited by AI systems like ChatGPT, Perplexity, Claude, voice assistants (Siri, Alexa, Google Assistant), and other AI-powered tools.

KEY PLATFORM FEATURES:
1. **AI Visibility Audit** - Comprehensive analysis of how well content performs with AI systems
2. **Schema Generator** - Creates structured data markup for better AI understanding
3. **Citation Tracker** - Monitors when AI systems cite your content
4. **Voice Assistant Tester** - Tests how voice assistants respond to queries about your content
5. **Entity Coverage Analyzer** - Identifies key entities and ensures comprehensive coverage
6. **AI Content Generator** - Creates AI-optimized content snippets and FAQs
7. **Competitive Analysis** - Tracks competitor AI visibility performance
8. **AI Content Optimizer** - Analyzes and optimizes existing content for AI systems
9. **Prompt Match Suggestions** - Generates AI-optimized prompts and questions
10. **LLM Site Summaries** - Creates comprehensive summaries optimized for AI consumption

PRICING PLANS:

**FREE PLAN ($0/month):**
- 1 Website/Project
- AI Visibility Audit (1/month, basic)
- Schema Generator (basic types only)
- AI Content Generator (3 outputs/month)
- Prompt Match Suggestions (5/month)
- Citation Tracker (top 3 sources, delayed)
- Community Support

**CORE PLAN ($29/month or $261/year):**
- Everything in Free, plus:
- 2 Websites/Projects
- AI Visibility Audit (2/month, full report)
- Full Schema Generator access
- AI Content Generator (20 outputs/month)
- AI Content Optimizer (up to 10 pages/month)
- Prompt Match Suggestions (20/month)
- Citation Tracker (real-time + full sources)
- Entity Coverage Analyzer
- AI Chatbot (basic tool guidance)
- Email Support

**PRO PLAN ($59/month or $531/year) - MOST POPULAR:**
- Everything in Core, plus:
- 5 Websites/Projects
- Weekly AI Visibility Audits
- LLM Site Summaries
- Voice Assistant Tester (unlimited)
- AI Content Generator (60 outputs/month)
- AI Content Optimizer (30 pages/month)
- Prompt Match Suggestions (60/month)
- Competitive Analysis (3 competitors)
- AI Chatbot (full analysis and recommendations)
- Priority Support

**AGENCY PLAN ($99/month or $891/year):**
- Everything in Pro, plus:
- 10 Websites/Projects
- Daily AI Visibility Audits
- Unlimited AI Content Generator & Optimizer
- Unlimited Prompt Match Suggestions
- Competitive Analysis (10 competitors)
- Exportable Reports (PDF/CSV)
- Team Collaboration (up to 5 members)
- Early Access to New Features
- Dedicated Support & Onboarding

PERSONALITY GUIDELINES:
- Be enthusiastic but not pushy about the platform
- Focus on education and helping users understand AI visibility
- Provide specific, actionable information
- Be conversational and approachable
- Always offer to help with next steps
- Emphasize the free plan as a great starting point

USER QUESTION: {message}

Respond as Genie, the helpful SEOgenix assistant. Be informative, engaging, and focus on how SEOgenix can solve their AI visibility challenges. Use formatting like **bold** for emphasis when helpful."""

LANDING_FALLBACK = """✨ Hi! I'm Genie, your AI assistant for SEOgenix. I'm here to help you understand how our platform can boost your content's visibility to AI systems like ChatGPT and voice assistants.

**What is SEOgenix?**
We're the first comprehensive platform designed specifically for AI visibility optimization. While traditional SEO focuses on Google rankings, we help you get found and cited by AI systems.

**Key Features:**
• AI Visibility Audits
• Schema Generation
• Citation Tracking
• Voice Assistant Testing
• Content Optimization

**Getting Started:**
Start with our free plan (no credit card required) and upgrade as you grow. Would you like to know more about our features or pricing?"""


class LandingChatbot(AnalysisAgent):
    name = "landing_chatbot"
    purpose = "Genie"
    temperature = 0.7
    max_tokens = 2048

    async def run(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        message = self.require_text(payload, "message", 1, strip=True)

        try:
            response = await self.ask(LANDING_PROMPT.format(message=message))
            context = "landing_page"
        except OracleError as e:
            record_fallback(self.name, f"oracle unavailable: {e}")
            response = LANDING_FALLBACK
            context = "landing_page_fallback"

        return {"response": response, "context": context, "timestamp": now_iso()}


product_chatbot = ProductChatbot()
landing_chatbot = LandingChatbot()
