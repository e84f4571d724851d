import base64
import logging

from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    OwnershipMismatch,
    UpstreamError,
    ValidationError,
)
from apps.events.constants import KAFKA_TOPICS, ActivityActions
from apps.events.services import activity_service, event_service
from apps.orders import order_numbers
from apps.orders.models import CateringOrder, EventBooking
from apps.orders.realtime import broadcast_order_update

from . import documents
from .client import lexoffice_client
from .constants import ALL_VOUCHER_TYPES, DOCUMENT_LABELS

logger = logging.getLogger(__name__)

ORDER_MODELS = {
    order_numbers.CATERING: CateringOrder,
    order_numbers.BOOKING: EventBooking,
}


def log_step(tag, step, details=None):
    suffix = f" - {details}" if details else ""
    logger.info(f"[{tag}] {step}{suffix}")


def get_order(order_id, kind=order_numbers.CATERING):
    model = ORDER_MODELS.get(kind)
    if model is None:
        raise NotFoundError("Order not found")
    try:
        return model.objects.get(id=order_id)
    except model.DoesNotExist:
        raise NotFoundError("Order not found")


def created_id(response):
    """Id of a newly created Lexoffice resource; a response without one is a failure."""
    document_id = response.get("id") if isinstance(response, dict) else None
    if not document_id:
        raise UpstreamError("Lexoffice response contained no id", details=str(response))
    return document_id


class DocumentReconciliationService:
    """Links an order to a quotation or invoice in Lexoffice."""

    TAG = "LEXOFFICE"

    def __init__(self, client=None):
        self.client = client or lexoffice_client

    @staticmethod
    def verify_ownership(order, customer_email):
        stored = (order.customer_email or "").strip().lower()
        given = (customer_email or "").strip().lower()
        if not given or stored != given:
            logger.warning(f"[LEXOFFICE] Ownership check failed for order {order.id}")
            raise OwnershipMismatch()

    @staticmethod
    def document_type_for(order):
        return "invoice" if order.is_paid else "quotation"

    def ensure_order_number(self, order):
        """Replace a legacy order number with a canonical one."""
        if order_numbers.is_canonical(order.order_number, order.ORDER_KIND):
            return order.order_number

        old_number = order.order_number
        order.order_number = order_numbers.generate_order_number(order.ORDER_KIND)
        order.save(update_fields=["order_number", "updated_at"])
        log_step(self.TAG, "Order number normalized", {"from": old_number, "to": order.order_number})
        activity_service.record(
            order,
            ActivityActions.ORDER_NUMBER_ASSIGNED,
            old_value={"order_number": old_number},
            new_value={"order_number": order.order_number},
        )
        return order.order_number

    def create_contact(self, order):
        """Contact id in Lexoffice, or None when creation failed."""
        try:
            contact = self.client.create_contact(documents.build_contact_payload(order))
        except UpstreamError as e:
            log_step(self.TAG, "Contact creation failed (continuing without)", {"error": str(e.detail)})
            return None

        contact_id = contact.get("id") if isinstance(contact, dict) else None
        if not contact_id:
            log_step(self.TAG, "Contact response without id (continuing without)")
            return None
        log_step(self.TAG, "Contact created", {"contactId": contact_id})
        return contact_id

    def create_document(self, order_id, customer_email, kind=order_numbers.CATERING, actor_email=None):
        order = get_order(order_id, kind)
        self.verify_ownership(order, customer_email)

        if order.is_linked:
            log_step(self.TAG, "Order already linked", {"orderNumber": order.order_number})
            return {
                "success": True,
                "alreadyLinked": True,
                "documentId": order.lexoffice_invoice_id,
                "documentType": order.lexoffice_document_type,
                "contactId": order.lexoffice_contact_id,
                "orderNumber": order.order_number,
            }

        if not self.client.configured:
            logger.warning("LEXOFFICE_API_KEY not configured - skipping document creation")
            return {
                "success": False,
                "skipped": True,
                "reason": "API key not configured",
                "orderNumber": order.order_number,
            }

        document_type = self.document_type_for(order)
        self.ensure_order_number(order)
        log_step(
            self.TAG,
            "Creating Lexoffice document",
            {"orderNumber": order.order_number, "documentType": document_type},
        )

        contact_id = self.create_contact(order)
        payload = documents.build_document_payload(
            order, document_type, contact_id, timezone.localdate()
        )

        try:
            document = self.client.create_document(document_type, payload, finalize=True)
            document_id = created_id(document)
        except UpstreamError as e:
            log_step(self.TAG, "Document creation failed", {"error": str(e.detail)})
            activity_service.record(
                order,
                ActivityActions.DOCUMENT_FAILED,
                actor_email=actor_email,
                metadata={"document_type": document_type, "error": str(e.detail)},
            )
            return {
                "success": False,
                "error": str(e.detail),
                "details": e.details,
                "orderNumber": order.order_number,
            }

        log_step(self.TAG, "Document created", {"documentId": document_id, "documentType": document_type})
        self.link_document(order, document_id, document_type, contact_id)
        activity_service.record(
            order,
            ActivityActions.DOCUMENT_CREATED,
            actor_email=actor_email,
            metadata={"document_type": document_type, "document_id": document_id},
        )
        event_service.emit(
            KAFKA_TOPICS["DOCUMENT_CREATED"],
            {
                "entity_type": order.ENTITY_TYPE,
                "order_id": str(order.id),
                "order_number": order.order_number,
                "document_id": document_id,
                "document_type": document_type,
                "customer_email": order.customer_email,
            },
            key=str(order.id),
        )
        broadcast_order_update(order)

        return {
            "success": True,
            "documentId": document_id,
            "documentType": document_type,
            "contactId": contact_id,
            "orderNumber": order.order_number,
        }

    def create_manual_document(self, data, actor_email=None):
        """
        Create a free-form quotation or invoice from staff-entered lines.

        When ``eventBookingId`` is given the document is linked to that
        booking. Upstream failures are reported in the result, not raised.
        """
        if not self.client.configured:
            raise ConfigurationError("LexOffice API key not configured")

        booking = None
        if data.get("eventBookingId"):
            booking = get_order(data["eventBookingId"], order_numbers.BOOKING)
            if booking.is_linked:
                raise ValidationError("Event booking already has a Lexoffice document")

        document_type = data["documentType"]
        tag = "MANUAL-INVOICE"
        log_step(
            tag,
            "Creating manual document",
            {
                "contactName": data["contactName"],
                "documentType": document_type,
                "itemCount": len(data["items"]),
            },
        )

        try:
            contact_id = created_id(
                self.client.create_contact(documents.build_manual_contact_payload(data))
            )
            log_step(tag, "Contact created", {"contactId": contact_id})
        except UpstreamError as e:
            log_step(tag, "Contact creation failed (continuing without)", {"error": str(e.detail)})
            contact_id = None

        payload = documents.build_manual_document_payload(data, contact_id, timezone.localdate())
        try:
            document_id = created_id(
                self.client.create_document(document_type, payload, finalize=True)
            )
        except UpstreamError as e:
            log_step(tag, "Document creation failed", {"error": str(e.detail)})
            if booking is not None:
                activity_service.record(
                    booking,
                    ActivityActions.DOCUMENT_FAILED,
                    actor_email=actor_email,
                    metadata={"document_type": document_type, "error": str(e.detail), "source": "manual"},
                )
            return {"success": False, "error": str(e.detail), "details": e.details}

        log_step(tag, "Document created", {"documentId": document_id, "documentType": document_type})
        if booking is not None:
            self.link_document(booking, document_id, document_type, contact_id)
            activity_service.record(
                booking,
                ActivityActions.DOCUMENT_CREATED,
                actor_email=actor_email,
                metadata={"document_type": document_type, "document_id": document_id, "source": "manual"},
            )
            event_service.emit(
                KAFKA_TOPICS["DOCUMENT_CREATED"],
                {
                    "entity_type": booking.ENTITY_TYPE,
                    "order_id": str(booking.id),
                    "order_number": booking.order_number,
                    "document_id": document_id,
                    "document_type": document_type,
                    "customer_email": booking.customer_email,
                },
                key=str(booking.id),
            )
            broadcast_order_update(booking)

        return {
            "success": True,
            "documentId": document_id,
            "documentType": document_type,
            "contactId": contact_id,
            "eventBookingId": str(booking.id) if booking is not None else None,
            "message": f"LexOffice {DOCUMENT_LABELS[document_type]} erstellt",
        }

    def link_document(self, order, document_id, document_type, contact_id):
        order.lexoffice_invoice_id = document_id
        order.lexoffice_contact_id = contact_id
        order.lexoffice_document_type = document_type
        order.save(
            update_fields=[
                "lexoffice_invoice_id",
                "lexoffice_contact_id",
                "lexoffice_document_type",
                "updated_at",
            ]
        )
        log_step(self.TAG, "Order updated with Lexoffice IDs", {"orderNumber": order.order_number})


class PaymentSyncService:
    """Mirrors Lexoffice's voucher status into the local payment status."""

    TAG = "LEXOFFICE-SYNC"

    def __init__(self, client=None):
        self.client = client or lexoffice_client

    @staticmethod
    def pending_orders(order_id=None):
        for model in (CateringOrder, EventBooking):
            queryset = (
                model.objects.exclude(lexoffice_invoice_id__isnull=True)
                .exclude(lexoffice_invoice_id="")
                .exclude(payment_status="paid")
                .order_by("created_at")
            )
            if order_id:
                queryset = queryset.filter(id=order_id)
            yield from queryset

    def sync(self, order_id=None, actor_email=None):
        if not self.client.configured:
            logger.warning("LEXOFFICE_API_KEY not configured")
            return {
                "error": "LexOffice API key not configured",
                "processed": 0,
                "updated": 0,
                "errors": ["API key not configured"],
            }

        log_step(self.TAG, "Starting payment status sync", {"orderId": order_id or "all"})
        result = {"processed": 0, "updated": 0, "errors": []}

        for order in self.pending_orders(order_id):
            result["processed"] += 1
            try:
                if self.sync_order(order, actor_email):
                    result["updated"] += 1
            except UpstreamError as e:
                log_step(self.TAG, f"LexOffice API error for {order.order_number}", {"error": str(e.detail)})
                result["errors"].append(f"{order.order_number}: {e.detail}")
            except Exception as e:
                log_step(self.TAG, f"Error processing {order.order_number}", {"error": str(e)})
                result["errors"].append(f"{order.order_number}: {e}")

        log_step(self.TAG, "Sync completed", result)
        return result

    def sync_order(self, order, actor_email=None):
        """Return True when the order was switched to paid."""
        document_type = "quotation" if order.lexoffice_document_type == "quotation" else "invoice"
        document = self.client.get_document(document_type, order.lexoffice_invoice_id)
        remote_status = document.get("voucherStatus")
        log_step(self.TAG, f"Order {order.order_number}: LexOffice status = {remote_status}")

        if remote_status != "paid" or order.payment_status == "paid":
            return False

        previous_status = order.payment_status
        with transaction.atomic():
            type(order).objects.filter(pk=order.pk).update(
                payment_status="paid", updated_at=timezone.now()
            )
        order.payment_status = "paid"
        log_step(self.TAG, f"Updated {order.order_number} to paid")

        activity_service.record(
            order,
            ActivityActions.PAYMENT_STATUS_SYNCED,
            actor_email=actor_email,
            metadata={
                "from_status": previous_status,
                "to_status": "paid",
                "source": "lexoffice_sync",
            },
        )
        event_service.emit(
            KAFKA_TOPICS["PAYMENT_SYNCED"],
            {
                "entity_type": order.ENTITY_TYPE,
                "order_id": str(order.id),
                "order_number": order.order_number,
                "from_status": previous_status,
                "to_status": "paid",
            },
            key=str(order.id),
        )
        broadcast_order_update(order)
        return True


class DocumentAccessService:
    """Read-only access to Lexoffice documents for the admin UI."""

    def __init__(self, client=None):
        self.client = client or lexoffice_client

    def fetch_pdf(self, voucher_id, voucher_type):
        """PDF rendition of a document, base64 encoded for the JSON response."""
        try:
            content = self.client.get_document_pdf(voucher_type, voucher_id)
        except UpstreamError as e:
            logger.warning(f"PDF download for {voucher_type} {voucher_id} failed: {e.detail}")
            raise NotFoundError("Document not available from LexOffice")

        label = DOCUMENT_LABELS.get(voucher_type, "Beleg")
        return {
            "pdf": base64.b64encode(content).decode("ascii"),
            "filename": f"STORIA_{label}_{voucher_id[:8]}.pdf",
            "documentType": voucher_type,
        }

    def list_vouchers(self, voucher_type="all", voucher_status=None, page=0, size=50,
                      created_date_from=None, created_date_to=None):
        params = {
            "voucherType": voucher_type if voucher_type and voucher_type != "all"
            else ALL_VOUCHER_TYPES,
            "page": page,
            "size": size,
        }
        if voucher_status:
            params["voucherStatus"] = voucher_status
        if created_date_from:
            params["createdDateFrom"] = created_date_from.isoformat()
        if created_date_to:
            params["createdDateTo"] = created_date_to.isoformat()

        data = self.client.list_vouchers(params)
        local_links = self.local_document_links()

        vouchers = []
        for item in data.get("content") or []:
            local = local_links.get(item.get("id"), {})
            vouchers.append(
                {
                    "id": item.get("id"),
                    "voucherNumber": item.get("voucherNumber") or "-",
                    "voucherDate": item.get("voucherDate"),
                    "voucherType": item.get("voucherType"),
                    "voucherStatus": item.get("voucherStatus"),
                    "totalAmount": item.get("totalAmount") or 0,
                    "currency": item.get("currency") or "EUR",
                    "contactName": item.get("contactName") or "Unbekannt",
                    "contactId": item.get("contactId"),
                    "localOrderId": local.get("id"),
                    "localOrderNumber": local.get("order_number"),
                }
            )

        return {
            "content": vouchers,
            "totalPages": data.get("totalPages", 0),
            "totalElements": data.get("totalElements", 0),
            "currentPage": data.get("number", page),
        }

    @staticmethod
    def local_document_links():
        links = {}
        for model in (CateringOrder, EventBooking):
            rows = model.objects.exclude(lexoffice_invoice_id__isnull=True).values(
                "id", "order_number", "lexoffice_invoice_id", "lexoffice_credit_note_id"
            )
            for row in rows:
                local = {"id": str(row["id"]), "order_number": row["order_number"]}
                links[row["lexoffice_invoice_id"]] = local
                if row["lexoffice_credit_note_id"]:
                    links[row["lexoffice_credit_note_id"]] = local
        return links


class CreditNoteService:
    """Issues a credit note against the invoice linked to a cancelled order."""

    TAG = "LEXOFFICE-CREDIT"

    def __init__(self, client=None):
        self.client = client or lexoffice_client

    def create_for(self, order, reason=None):
        """Return the credit note id, or None when there is nothing to credit."""
        if order.lexoffice_document_type != "invoice" or not order.lexoffice_invoice_id:
            return None
        if order.lexoffice_credit_note_id:
            return order.lexoffice_credit_note_id

        invoice = self.client.get_document("invoice", order.lexoffice_invoice_id)
        payload = documents.build_credit_note_payload(
            order, invoice, reason, timezone.localdate()
        )
        credit_note = self.client.create_document("creditnote", payload, finalize=True)
        credit_note_id = created_id(credit_note)
        log_step(self.TAG, "Credit note created", {"orderNumber": order.order_number, "creditNoteId": credit_note_id})
        return credit_note_id


document_service = DocumentReconciliationService()
payment_sync_service = PaymentSyncService()
document_access_service = DocumentAccessService()
credit_note_service = CreditNoteService()
