import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

HEALTH_CHECK_KEY = "health_check"


def check_cache_connection():
    """Round-trip a key through the configured cache (Redis in production)."""
    if not settings.CACHES:
        logger.error("CACHES setting is not configured !!")
        return False

    try:
        cache.set(HEALTH_CHECK_KEY, "ok", 10)
        if cache.get(HEALTH_CHECK_KEY) == "ok":
            return True
        logger.error("Cache connection failed !!")
        return False
    except Exception as e:
        logger.error(f"Cache connection error: {e}")
        return False
