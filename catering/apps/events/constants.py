# Activity log actions
class ActivityActions:
    ORDER_CREATED = "order_created"
    ORDER_UPDATED = "order_updated"
    ORDER_CANCELLED = "order_cancelled"
    ORDER_NUMBER_ASSIGNED = "order_number_assigned"
    DOCUMENT_CREATED = "lexoffice_document_created"
    DOCUMENT_FAILED = "lexoffice_document_failed"
    PAYMENT_STATUS_SYNCED = "payment_status_synced"


KAFKA_TOPICS = {
    "ACTIVITY_LOGGED": "catering.activity.logged",
    "DOCUMENT_CREATED": "catering.document.created",
    "PAYMENT_SYNCED": "catering.payment.synced",
    "ORDER_CANCELLED": "catering.order.cancelled",
}
