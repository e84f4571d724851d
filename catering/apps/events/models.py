from apps.core.models import TimeStampedUUIDModel
from django.db import models


class ActivityLog(TimeStampedUUIDModel):
    entity_type = models.CharField(max_length=50)
    entity_id = models.UUIDField()
    action = models.CharField(max_length=100)
    actor_email = models.EmailField(max_length=254, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    old_value = models.JSONField(null=True, blank=True)
    new_value = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "activity_logs"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="activity_entity_idx"),
            models.Index(fields=["action"], name="activity_action_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"


class DeadLetterQueue(TimeStampedUUIDModel):
    """Kafka events whose publication failed, kept for ``process_dlq``."""

    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("retrying", "Retrying"),
        ("processed", "Processed"),
        ("failed", "Failed"),
    ]

    topic = models.CharField(max_length=255, help_text="Kafka topic name")
    event_data = models.JSONField(help_text="Original event data")
    error_message = models.TextField(
        null=True, blank=True, help_text="Error that caused the failure"
    )
    retry_count = models.IntegerField(default=0, help_text="Number of retry attempts")
    status = models.CharField(max_length=50, choices=STATUS_CHOICES, default="pending")
    next_retry_at = models.DateTimeField(
        null=True, blank=True, help_text="When to retry next"
    )
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "dead_letter_queue"
        indexes = [
            models.Index(fields=["status"], name="dead_letter_status_idx"),
            models.Index(fields=["next_retry_at"], name="dead_letter_next_retry_idx"),
            models.Index(fields=["topic"], name="dead_letter_topic_idx"),
        ]
        ordering = ["-created_at"]
