import logging

from django.conf import settings
from django.db import connection

logger = logging.getLogger(__name__)


def check_database_connection():
    """Return True when the default database answers."""
    if not settings.DATABASES:
        logger.error("DATABASES setting is not configured !!")
        return False

    try:
        connection.ensure_connection()
        return True
    except Exception as e:
        logger.error(f"Database connection error: {e}")
        return False
