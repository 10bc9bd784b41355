"""
Database connection and initialization
Uses Supabase REST API for cloud-hosted PostgreSQL
"""

import logging
from typing import Optional
from supabase import create_client, Client

from .config import settings

logger = logging.getLogger(__name__)

# Supabase client (initialized lazily)
_supabase_client: Optional[Client] = None


def get_supabase() -> Client:
    """Get or create Supabase client"""
    global _supabase_client
    if _supabase_client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set in .env.local")
        _supabase_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        logger.info("✅ Supabase client initialized")
    return _supabase_client


TABLES_SQL = [
    """
    CREATE TABLE IF NOT EXISTS subscriptions (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id UUID NOT NULL UNIQUE,
        plan_id VARCHAR(20) NOT NULL DEFAULT 'free',
        created_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS subscription_usage (
        user_id UUID PRIMARY KEY,
        citations_used INTEGER DEFAULT 0,
        ai_content_used INTEGER DEFAULT 0,
        ai_content_optimizations INTEGER DEFAULT 0,
        prompt_suggestions INTEGER DEFAULT 0,
        audits_this_month INTEGER DEFAULT 0,
        last_audit_date TIMESTAMPTZ,
        period_start TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sites (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id UUID NOT NULL,
        url VARCHAR(500) NOT NULL,
        name VARCHAR(255) NOT NULL,
        created_at TIMESTAMPTZ DEFAULT NOW(),
        updated_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS audits (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        site_id UUID NOT NULL,
        ai_visibility_score INTEGER NOT NULL,
        schema_score INTEGER NOT NULL,
        semantic_score INTEGER NOT NULL,
        citation_score INTEGER NOT NULL,
        technical_seo_score INTEGER NOT NULL,
        created_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS competitor_sites (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id UUID NOT NULL,
        site_id UUID,
        url VARCHAR(500) NOT NULL,
        name VARCHAR(255) NOT NULL,
        created_at TIMESTAMPTZ DEFAULT NOW(),
        updated_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS competitor_audits (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        competitor_site_id UUID NOT NULL,
        ai_visibility_score INTEGER NOT NULL,
        schema_score INTEGER NOT NULL,
        semantic_score INTEGER NOT NULL,
        citation_score INTEGER NOT NULL,
        technical_seo_score INTEGER NOT NULL,
        created_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS citations (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        site_id UUID NOT NULL,
        source_type VARCHAR(100),
        snippet_text TEXT,
        url VARCHAR(1000),
        detected_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS entities (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        site_id UUID NOT NULL,
        entity_name VARCHAR(255) NOT NULL,
        entity_type VARCHAR(100),
        mention_count INTEGER DEFAULT 0,
        gap BOOLEAN DEFAULT FALSE,
        created_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS summaries (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        site_id UUID NOT NULL,
        summary_type VARCHAR(50) NOT NULL,
        content TEXT,
        created_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS schemas (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        audit_id UUID,
        schema_type VARCHAR(50) NOT NULL,
        markup TEXT NOT NULL,
        created_at TIMESTAMPTZ DEFAULT NOW()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_preferences (
        user_id UUID NOT NULL,
        key VARCHAR(100) NOT NULL,
        value BOOLEAN DEFAULT TRUE,
        updated_at TIMESTAMPTZ DEFAULT NOW(),
        PRIMARY KEY (user_id, key)
    )
    """,
]


async def init_db():
    """Initialize database tables via Supabase"""
    sb = get_supabase()

    for sql in TABLES_SQL:
        try:
            sb.rpc("exec_sql", {"query": sql.strip()}).execute()
        except Exception as e:
            # If RPC doesn't exist, tables must be created in the dashboard
            logger.warning(f"RPC exec_sql not available, tables must be created via Supabase SQL Editor: {e}")
            break

    logger.info("✅ Database initialized via Supabase")
