"""
SEOgenix Configuration
Centralized settings management using Pydantic
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings"""

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Anthropic (text-generation oracle)
    ANTHROPIC_API_KEY: str = ""
    ORACLE_MODEL: str = "claude-sonnet-4-5-20250929"
    ORACLE_TIMEOUT_SECONDS: float = 60.0

    # Page fetching
    FETCH_TIMEOUT_SECONDS: float = 10.0
    CRAWLER_NAME: str = "SEOgenix-Bot/1.0"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # Subscription plans
    PLANS_FILE: str = ""
    USAGE_RESET_POLICY: str = "none"  # none | monthly

    # Monitoring
    SENTRY_DSN: str = ""

    # Application
    PUBLIC_API_URL: str = "http://localhost:8000"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env.local"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
