from unittest.mock import Mock, patch

import pytest
import requests

from apps.accounting.client import LexofficeClient
from apps.accounting.services import DocumentReconciliationService
from apps.core.exceptions import NotFoundError, OwnershipMismatch, UpstreamError
from apps.events.models import ActivityLog
from apps.orders import order_numbers

DOCUMENTS_URL = "/api/v1/accounting/documents/"


@pytest.fixture
def service(lexoffice):
    return DocumentReconciliationService(client=lexoffice)


@pytest.mark.django_db
class TestOwnershipGate:
    def test_email_mismatch_makes_no_api_calls(self, service, lexoffice, catering_order):
        with pytest.raises(OwnershipMismatch) as exc:
            service.create_document(catering_order.id, "someone.else@example.com")

        assert str(exc.value.detail) == "Invalid request"
        assert lexoffice.mock_calls == []

    def test_email_comparison_ignores_case(self, service, catering_order):
        result = service.create_document(catering_order.id, "  MARIA@Example.com ")
        assert result["success"] is True

    def test_unknown_order_is_not_found(self, service, lexoffice, db):
        with pytest.raises(NotFoundError):
            service.create_document("00000000-0000-0000-0000-000000000000", "a@b.de")
        assert lexoffice.mock_calls == []


@pytest.mark.django_db
class TestCreateDocument:
    def test_unpaid_order_gets_quotation(self, service, lexoffice, catering_order):
        result = service.create_document(catering_order.id, "maria@example.com")

        assert result == {
            "success": True,
            "documentId": "doc-456",
            "documentType": "quotation",
            "contactId": "contact-123",
            "orderNumber": catering_order.order_number,
        }
        document_type, payload = lexoffice.create_document.call_args.args
        assert document_type == "quotation"
        assert payload["address"] == {"contactId": "contact-123"}
        assert lexoffice.create_document.call_args.kwargs == {"finalize": True}

        catering_order.refresh_from_db()
        assert catering_order.lexoffice_invoice_id == "doc-456"
        assert catering_order.lexoffice_contact_id == "contact-123"
        assert catering_order.lexoffice_document_type == "quotation"
        assert catering_order.payment_status == "pending"

    def test_paid_order_gets_invoice(self, service, lexoffice, make_catering_order):
        order = make_catering_order(payment_method="stripe", payment_status="paid")

        result = service.create_document(order.id, order.customer_email)

        assert result["documentType"] == "invoice"
        assert lexoffice.create_document.call_args.args[0] == "invoice"
        order.refresh_from_db()
        assert order.lexoffice_document_type == "invoice"
        assert order.payment_status == "paid"

    def test_event_booking(self, service, lexoffice, event_booking):
        result = service.create_document(
            event_booking.id, "jonas@example.com", kind=order_numbers.BOOKING
        )

        assert result["success"] is True
        payload = lexoffice.create_document.call_args.args[1]
        assert payload["title"] == "Event-Angebot"
        assert payload["lineItems"][0]["quantity"] == 20

    def test_records_activity(self, service, catering_order):
        service.create_document(catering_order.id, "maria@example.com", actor_email="maria@example.com")

        entry = ActivityLog.objects.get(entity_id=catering_order.id, action="lexoffice_document_created")
        assert entry.entity_type == "catering_order"
        assert entry.metadata == {"document_type": "quotation", "document_id": "doc-456"}

    def test_contact_failure_falls_back_to_inline_address(self, service, lexoffice, catering_order):
        lexoffice.create_contact.side_effect = UpstreamError("Lexoffice API error: 400")

        result = service.create_document(catering_order.id, "maria@example.com")

        assert result["success"] is True
        assert result["contactId"] is None
        payload = lexoffice.create_document.call_args.args[1]
        assert payload["address"]["name"] == "Maria Rossi"
        assert payload["address"]["city"] == "München"

    def test_document_failure_is_reported_not_raised(self, service, lexoffice, catering_order):
        lexoffice.create_document.side_effect = UpstreamError(
            "Lexoffice API error: 406", details='{"message": "Missing entity"}'
        )

        result = service.create_document(catering_order.id, "maria@example.com")

        assert result["success"] is False
        assert result["error"] == "Lexoffice API error: 406"
        assert result["details"] == '{"message": "Missing entity"}'
        catering_order.refresh_from_db()
        assert catering_order.lexoffice_invoice_id is None

    def test_linked_order_is_not_linked_again(self, service, lexoffice, make_catering_order):
        order = make_catering_order(
            lexoffice_invoice_id="existing-doc",
            lexoffice_document_type="quotation",
            lexoffice_contact_id="existing-contact",
        )

        result = service.create_document(order.id, order.customer_email)

        assert result["alreadyLinked"] is True
        assert result["documentId"] == "existing-doc"
        lexoffice.create_document.assert_not_called()
        lexoffice.create_contact.assert_not_called()

    def test_missing_api_key_skips(self, service, lexoffice, catering_order):
        lexoffice.configured = False

        result = service.create_document(catering_order.id, "maria@example.com")

        assert result["success"] is False
        assert result["skipped"] is True
        lexoffice.create_document.assert_not_called()

    def test_legacy_order_number_is_replaced(self, service, make_catering_order):
        order = make_catering_order(order_number="STO-250315-AB12")

        result = service.create_document(order.id, order.customer_email)

        order.refresh_from_db()
        assert order_numbers.is_canonical(order.order_number, order_numbers.CATERING)
        assert result["orderNumber"] == order.order_number
        entry = ActivityLog.objects.get(entity_id=order.id, action="order_number_assigned")
        assert entry.old_value == {"order_number": "STO-250315-AB12"}


@pytest.mark.django_db
class TestCreateDocumentView:
    def test_success(self, client_for, customer, lexoffice, catering_order):
        with patch("apps.accounting.views.document_service.client", lexoffice):
            response = client_for(customer).post(
                DOCUMENTS_URL,
                {
                    "orderId": str(catering_order.id),
                    "customerEmail": "maria@example.com",
                    "items": [{"name": "ignored", "quantity": 99, "price": 1}],
                },
                format="json",
            )

        assert response.status_code == 200
        assert response.json()["documentId"] == "doc-456"

    def test_mismatch_is_400_and_calls_nothing(self, client_for, customer, lexoffice, catering_order):
        with patch("apps.accounting.views.document_service.client", lexoffice):
            response = client_for(customer).post(
                DOCUMENTS_URL,
                {"orderId": str(catering_order.id), "customerEmail": "eve@example.com"},
                format="json",
            )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}
        assert lexoffice.mock_calls == []

    def test_upstream_failure_is_200(self, client_for, customer, lexoffice, catering_order):
        lexoffice.create_document.side_effect = UpstreamError("Lexoffice API error: 500", details="boom")
        with patch("apps.accounting.views.document_service.client", lexoffice):
            response = client_for(customer).post(
                DOCUMENTS_URL,
                {"orderId": str(catering_order.id), "customerEmail": "maria@example.com"},
                format="json",
            )

        assert response.status_code == 200
        assert response.json()["success"] is False

    def test_unknown_order_is_404(self, client_for, customer, lexoffice):
        with patch("apps.accounting.views.document_service.client", lexoffice):
            response = client_for(customer).post(
                DOCUMENTS_URL,
                {"orderId": "00000000-0000-0000-0000-000000000000", "customerEmail": "a@b.de"},
                format="json",
            )

        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}

    def test_requires_token(self, api_client, catering_order):
        response = api_client.post(
            DOCUMENTS_URL,
            {"orderId": str(catering_order.id), "customerEmail": "maria@example.com"},
            format="json",
        )
        assert response.status_code == 401


@pytest.mark.django_db
class TestUnusableLexofficeResponses:
    def test_contact_without_id_uses_inline_address(self, service, lexoffice, catering_order):
        lexoffice.create_contact.return_value = {}

        result = service.create_document(catering_order.id, "maria@example.com")

        assert result["success"] is True
        assert result["contactId"] is None
        payload = lexoffice.create_document.call_args.args[1]
        assert payload["address"]["name"] == "Maria Rossi"

    def test_document_without_id_is_a_failure(self, service, lexoffice, catering_order):
        lexoffice.create_document.return_value = {"resourceUri": None}

        result = service.create_document(catering_order.id, "maria@example.com")

        assert result["success"] is False
        assert result["error"] == "Lexoffice response contained no id"
        catering_order.refresh_from_db()
        assert catering_order.lexoffice_invoice_id is None

    def test_non_json_bodies_do_not_escape(self, catering_order):
        def respond(method, url, **kwargs):
            response = Mock(ok=True, status_code=200)
            response.text = "<html>gateway</html>" if url.endswith("/contacts") else "not json"
            response.json.side_effect = requests.JSONDecodeError("Expecting value", response.text, 0)
            return response

        client = LexofficeClient(api_key="secret", base_url="https://lexoffice.test/v1")
        with patch("apps.accounting.client.requests.request", side_effect=respond) as request:
            result = DocumentReconciliationService(client=client).create_document(
                catering_order.id, "maria@example.com"
            )

        assert request.call_count == 2
        assert result["success"] is False
        assert result["error"] == "Lexoffice returned an invalid response"
        assert result["details"] == "not json"
        document_payload = request.call_args.kwargs["json"]
        assert "contactId" not in document_payload["address"]
