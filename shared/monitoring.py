"""
Monitoring and observability setup
Sentry for error tracking, structured logging
"""

import logging
from collections import Counter
from typing import Dict

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from .config import settings

logger = logging.getLogger(__name__)

# Fallback results served per endpoint since process start
fallback_counts: Counter = Counter()


def setup_monitoring():
    """Initialize monitoring services"""

    # Sentry error tracking
    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            traces_sample_rate=1.0 if settings.ENVIRONMENT == "development" else 0.1,
            integrations=[
                FastApiIntegration(),
            ],
        )
        logging.info("✅ Sentry monitoring initialized")

    logging.info("✅ Monitoring configured")


def record_fallback(endpoint: str, reason: str) -> None:
    """
    Mark a response as synthesized rather than produced by the oracle.
    Logged, added as a Sentry breadcrumb and counted for /health.
    """
    fallback_counts[endpoint] += 1
    logger.warning(f"⚠️ [{endpoint}] serving fallback result: {reason}")
    sentry_sdk.add_breadcrumb(
        category="fallback",
        message=f"{endpoint}: {reason}",
        level="warning",
        data={"endpoint": endpoint},
    )


def fallback_snapshot() -> Dict[str, int]:
    return dict(fallback_counts)
