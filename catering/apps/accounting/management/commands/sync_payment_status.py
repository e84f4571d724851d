"""
Management command to mirror Lexoffice payment status onto local orders.
This should be run periodically (e.g., every 15 minutes) via cron.
"""
import uuid

from django.core.management.base import BaseCommand, CommandError

from apps.accounting.services import payment_sync_service


class Command(BaseCommand):
    help = "Mark orders as paid whose Lexoffice quotation or invoice is paid"

    def add_arguments(self, parser):
        parser.add_argument(
            "--order-id",
            type=str,
            default=None,
            help="Only sync the order with this id",
        )

    def handle(self, *args, **options):
        order_id = options["order_id"]
        if order_id:
            try:
                order_id = str(uuid.UUID(order_id))
            except ValueError:
                raise CommandError(f"Invalid order id: {order_id}")

        self.stdout.write("Starting payment status sync...")

        result = payment_sync_service.sync(order_id=order_id, actor_email="system@cron")

        if "error" in result:
            raise CommandError(result["error"])

        for error in result["errors"]:
            self.stdout.write(self.style.WARNING(error))

        self.stdout.write(
            self.style.SUCCESS(
                f'Payment sync completed. Processed: {result["processed"]}, Updated: {result["updated"]}, Errors: {len(result["errors"])}'
            )
        )
