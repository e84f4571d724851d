import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from apps.accounting.services import credit_note_service
from apps.core.exceptions import ConfigurationError, UpstreamError, ValidationError
from apps.core.utils import round_currency, to_decimal
from apps.events.constants import KAFKA_TOPICS, ActivityActions
from apps.events.services import activity_service, event_service

from . import order_numbers
from .models import CateringOrder
from .realtime import broadcast_order_update

logger = logging.getLogger(__name__)

TRACKED_FIELDS = ("status", "payment_status", "notes", "internal_notes")


def items_total(items):
    return sum(
        (to_decimal(item["price"]) * int(item["quantity"]) for item in items),
        Decimal("0"),
    )


class OrderService:
    @staticmethod
    def create_catering_order(order_data, actor_email=None):
        """Persist a catering order with its canonical order number."""
        items = [
            {
                "name": item["name"],
                "quantity": item["quantity"],
                "price": float(round_currency(item["price"])),
            }
            for item in order_data.pop("items", [])
        ]
        if order_data.get("total_amount") is None:
            order_data["total_amount"] = round_currency(
                items_total(items)
                + to_decimal(order_data.get("minimum_order_surcharge") or 0)
                + to_decimal(order_data.get("delivery_cost") or 0)
            )

        with transaction.atomic():
            order = CateringOrder.objects.create(
                order_number=order_numbers.generate_order_number(order_numbers.CATERING),
                items=items,
                **order_data,
            )

        logger.info(f"Catering order {order.order_number} created")
        activity_service.record(
            order,
            ActivityActions.ORDER_CREATED,
            actor_email=actor_email,
            metadata={
                "total_amount": str(order.total_amount),
                "payment_status": order.payment_status,
            },
        )
        broadcast_order_update(order)
        return order

    @staticmethod
    def update_order(order, changes, actor_email=None):
        if "status" in changes:
            # Cancellation is terminal and only reachable through cancel_order
            if order.status == "cancelled":
                raise ValidationError("Cancelled orders cannot change status")
            if changes["status"] == "cancelled":
                raise ValidationError("Use the cancel action to cancel an order")

        old_value = {field: getattr(order, field) for field in changes if field in TRACKED_FIELDS}
        for field, value in changes.items():
            setattr(order, field, value)
        order.save()

        new_value = {field: getattr(order, field) for field in old_value}
        if old_value != new_value:
            activity_service.record(
                order,
                ActivityActions.ORDER_UPDATED,
                actor_email=actor_email,
                old_value=old_value,
                new_value=new_value,
            )
            broadcast_order_update(order)
        return order

    @staticmethod
    def cancel_order(order, reason=None, actor_email=None):
        """
        Cancel an order; a linked invoice is offset with a credit note.
        Credit note failures are logged and do not block the cancellation.
        """
        if order.status == "cancelled":
            raise ValidationError("Order is already cancelled")

        credit_note_id = None
        try:
            credit_note_id = credit_note_service.create_for(order, reason)
        except (UpstreamError, ConfigurationError) as e:
            logger.warning(f"Credit note for {order.order_number} failed: {e.detail}")

        old_status = order.status
        order.status = "cancelled"
        order.cancellation_reason = reason or None
        order.cancelled_at = timezone.now()
        update_fields = ["status", "cancellation_reason", "cancelled_at", "updated_at"]
        if credit_note_id:
            order.lexoffice_credit_note_id = credit_note_id
            update_fields.append("lexoffice_credit_note_id")
        order.save(update_fields=update_fields)

        activity_service.record(
            order,
            ActivityActions.ORDER_CANCELLED,
            actor_email=actor_email,
            metadata={"reason": reason or None, "credit_note_id": credit_note_id},
            old_value={"status": old_status},
            new_value={"status": "cancelled"},
        )
        event_service.emit(
            KAFKA_TOPICS["ORDER_CANCELLED"],
            {
                "entity_type": order.ENTITY_TYPE,
                "order_id": str(order.id),
                "order_number": order.order_number,
                "reason": reason or None,
                "credit_note_id": credit_note_id,
            },
            key=str(order.id),
        )
        broadcast_order_update(order)
        return order


order_service = OrderService()
