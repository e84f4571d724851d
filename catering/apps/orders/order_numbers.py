"""
Canonical order numbers.

Catering orders: ``CAT-DD-MM-YYYY-NNN``; event bookings: ``EVT-YYYY-NNNN``.
The trailing counter comes from ``OrderNumberSequence``, one row per
prefix and year, incremented under a row lock so concurrent requests never
share a value.
"""
import logging
import re
import time

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from .models import OrderNumberSequence

logger = logging.getLogger(__name__)

CATERING = "catering"
BOOKING = "booking"

PREFIXES = {
    CATERING: "CAT",
    BOOKING: "EVT",
}

CANONICAL_PATTERNS = {
    CATERING: re.compile(r"^CAT-\d{2}-\d{2}-\d{4}-\d{3,}$"),
    BOOKING: re.compile(r"^EVT-\d{4}-\d{4,}$"),
}


def next_sequence_value(prefix: str, year: int) -> int:
    """Atomically increment and return the counter for ``prefix`` + ``year``."""
    with transaction.atomic():
        sequence, _ = OrderNumberSequence.objects.select_for_update().get_or_create(
            prefix=prefix, year=year
        )
        OrderNumberSequence.objects.filter(pk=sequence.pk).update(
            last_value=F("last_value") + 1
        )
        sequence.refresh_from_db(fields=["last_value"])
    return sequence.last_value


def fallback_sequence_value(kind: str) -> int:
    # Millisecond clock tail; may collide under load
    modulus = 10000 if kind == BOOKING else 1000
    return int(time.time() * 1000) % modulus


def format_order_number(kind: str, value: int, when) -> str:
    prefix = PREFIXES[kind]
    if kind == BOOKING:
        return f"{prefix}-{when.year}-{value:04d}"
    return f"{prefix}-{when:%d-%m-%Y}-{value:03d}"


def generate_order_number(kind: str, when=None) -> str:
    """Build the next canonical order number for ``kind``.

    If the sequence cannot be read, a timestamp-derived number is used
    instead unless ``ORDER_NUMBER_STRICT`` is enabled.
    """
    if kind not in PREFIXES:
        raise ValueError(f"Unknown order kind: {kind}")

    when = when or timezone.localdate()
    prefix = PREFIXES[kind]
    try:
        value = next_sequence_value(prefix, when.year)
    except DatabaseError as e:
        logger.error(f"Order number sequence failed for {prefix}-{when.year}: {e}")
        if getattr(settings, "ORDER_NUMBER_STRICT", False):
            raise
        value = fallback_sequence_value(kind)
        logger.warning(f"Using fallback order number counter {value} for {prefix}")

    return format_order_number(kind, value, when)


def is_canonical(order_number: str, kind: str) -> bool:
    if not order_number:
        return False
    return bool(CANONICAL_PATTERNS[kind].match(order_number))
