import json
import logging
from datetime import timedelta

from confluent_kafka import KafkaException, Producer
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.utils import timezone

logger = logging.getLogger(__name__)


class KafkaClient:
    def __init__(self):
        self._producer = None

    @property
    def enabled(self):
        return bool(getattr(settings, "KAFKA_ENABLED", False)) and bool(
            settings.KAFKA_BOOTSTRAP_SERVERS
        )

    @property
    def producer(self):
        if self._producer is None:
            self._producer = Producer(
                {
                    "bootstrap.servers": settings.KAFKA_BOOTSTRAP_SERVERS,
                    "client.id": settings.KAFKA_CLIENT_ID,
                }
            )
        return self._producer

    def publish(self, topic: str, event_data: dict, key=None, wait=True, dead_letter=True):
        """Publish event to Kafka topic, with automatic DLQ on failure.

        With ``wait=False`` the message is only queued; delivery errors are
        still routed to the DLQ from the delivery callback. ``dead_letter=False``
        is used when replaying DLQ entries so a failure does not enqueue a copy.
        """
        if not self.enabled:
            logger.debug(f"Kafka disabled, not publishing to {topic}")
            return False

        payload = json.loads(json.dumps(event_data, cls=DjangoJSONEncoder))
        delivery_failed = {"failed": False}

        def delivery_callback(err, msg):
            if err is not None:
                delivery_failed["failed"] = True
                logger.error(f"Message delivery to {topic} failed: {err}")
                if dead_letter:
                    self._send_to_dlq(topic, payload, str(err))

        try:
            produce_kwargs = {
                "value": json.dumps(payload).encode("utf-8"),
                "callback": delivery_callback,
            }
            if key:
                produce_kwargs["key"] = key.encode("utf-8") if isinstance(key, str) else key

            self.producer.produce(topic, **produce_kwargs)
            self.producer.poll(0)
            if wait:
                self.producer.flush(timeout=5)

            return not delivery_failed["failed"]
        except (KafkaException, BufferError) as e:
            logger.error(f"Kafka error publishing to {topic}: {e}")
            if dead_letter:
                self._send_to_dlq(topic, payload, str(e))
            return False

    def _send_to_dlq(self, topic: str, event_data: dict, error_message: str):
        """Send failed event to Dead Letter Queue"""
        try:
            from apps.events.models import DeadLetterQueue

            retry_count = 0
            backoff_minutes = min(2 ** retry_count, 60)
            DeadLetterQueue.objects.create(
                topic=topic,
                event_data=event_data,
                error_message=error_message,
                retry_count=retry_count,
                status="pending",
                next_retry_at=timezone.now() + timedelta(minutes=backoff_minutes),
            )
            logger.warning(f"Event sent to DLQ: {topic}")
        except Exception as e:
            logger.error(f"Error creating DLQ entry for {topic}: {e}")

    def close(self):
        if self._producer is not None:
            self._producer.flush()


kafka_client = KafkaClient()
