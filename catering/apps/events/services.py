import logging

from django.db import transaction
from infrastructure.kafka_client import kafka_client

from .constants import KAFKA_TOPICS
from .models import ActivityLog

logger = logging.getLogger(__name__)


class ActivityService:
    """Best-effort activity logging.

    Entries are written to ``activity_logs`` and mirrored to Kafka without
    waiting for broker acknowledgement. Nothing here raises: losing an entry
    on a crash or a database hiccup is accepted.
    """

    @staticmethod
    def record(order, action, actor_email=None, metadata=None, old_value=None, new_value=None):
        entry = None
        try:
            with transaction.atomic():
                entry = ActivityLog.objects.create(
                    entity_type=order.ENTITY_TYPE,
                    entity_id=order.id,
                    action=action,
                    actor_email=actor_email,
                    metadata=metadata or {},
                    old_value=old_value,
                    new_value=new_value,
                )
        except Exception as e:
            logger.warning(f"Activity log insert failed for {order.order_number} ({action}): {e}")

        EventService.emit(
            KAFKA_TOPICS["ACTIVITY_LOGGED"],
            {
                "activity_id": str(entry.id) if entry else None,
                "entity_type": order.ENTITY_TYPE,
                "entity_id": str(order.id),
                "order_number": order.order_number,
                "action": action,
                "actor_email": actor_email,
                "metadata": metadata or {},
            },
            key=str(order.id),
        )
        return entry

    @staticmethod
    def get_order_activity(order):
        return ActivityLog.objects.filter(
            entity_type=order.ENTITY_TYPE, entity_id=order.id
        ).order_by("-created_at")


class EventService:
    @staticmethod
    def emit(topic, event_data, key=None):
        """Queue a domain event on Kafka; failures end up in the DLQ."""
        try:
            return kafka_client.publish(topic=topic, event_data=event_data, key=key, wait=False)
        except Exception as e:
            logger.warning(f"Event emission to {topic} failed: {e}")
            return False


activity_service = ActivityService()
event_service = EventService()
