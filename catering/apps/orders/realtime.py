import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

ORDERS_GROUP = "orders_admin"


def order_summary(order):
    return {
        "id": str(order.id),
        "entity_type": order.ENTITY_TYPE,
        "order_number": order.order_number,
        "status": order.status,
        "payment_status": order.payment_status,
        "lexoffice_invoice_id": order.lexoffice_invoice_id,
        "lexoffice_document_type": order.lexoffice_document_type,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }


def broadcast_order_update(order):
    """Push an order summary to connected admin dashboards."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(
            ORDERS_GROUP,
            {"type": "order_update", "data": order_summary(order)},
        )
    except Exception as e:
        logger.warning(f"Order update broadcast failed for {order.order_number}: {e}")
