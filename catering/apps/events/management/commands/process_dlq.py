"""
Management command to process Dead Letter Queue entries.
This should be run periodically to retry failed Kafka events.
"""
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.events.models import DeadLetterQueue
from infrastructure.kafka_client import kafka_client


class Command(BaseCommand):
    help = "Process Dead Letter Queue entries and retry failed Kafka events"

    def add_arguments(self, parser):
        parser.add_argument(
            "--max-retries",
            type=int,
            default=5,
            help="Maximum number of retry attempts per event (default: 5)",
        )
        parser.add_argument(
            "--batch-size",
            type=int,
            default=100,
            help="Number of DLQ entries to process in one run (default: 100)",
        )

    def handle(self, *args, **options):
        max_retries = options["max_retries"]
        batch_size = options["batch_size"]

        if not kafka_client.enabled:
            self.stdout.write(self.style.WARNING("Kafka is disabled, nothing to replay"))
            return

        self.stdout.write("Processing Dead Letter Queue entries...")

        pending_entries = DeadLetterQueue.objects.filter(
            status="pending",
            next_retry_at__lte=timezone.now(),
            retry_count__lt=max_retries,
        ).order_by("next_retry_at")[:batch_size]

        processed = 0
        succeeded = 0
        failed = 0

        for entry in pending_entries:
            try:
                entry.status = "retrying"
                entry.save(update_fields=["status", "updated_at"])

                published = kafka_client.publish(
                    topic=entry.topic, event_data=entry.event_data, dead_letter=False
                )
            except Exception as e:
                self.stdout.write(
                    self.style.ERROR(f"Error processing DLQ entry {entry.id}: {e}")
                )
                entry.error_message = str(e)
                published = False

            if published:
                entry.status = "processed"
                entry.processed_at = timezone.now()
                succeeded += 1
            else:
                entry.retry_count += 1
                backoff_minutes = min(2 ** entry.retry_count, 60)  # Cap at 60 minutes
                entry.next_retry_at = timezone.now() + timedelta(minutes=backoff_minutes)
                entry.status = "failed" if entry.retry_count >= max_retries else "pending"
                failed += 1

            entry.save()
            processed += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"DLQ processing completed. Processed: {processed}, Succeeded: {succeeded}, Failed: {failed}"
            )
        )
