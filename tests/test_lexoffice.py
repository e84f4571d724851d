import base64
from unittest.mock import Mock, patch

import pytest
import requests

from apps.accounting.client import LexofficeClient
from apps.accounting.services import DocumentAccessService
from apps.core.exceptions import ConfigurationError, UpstreamError

PDF_URL = "/api/v1/accounting/documents/pdf/"
VOUCHERS_URL = "/api/v1/accounting/vouchers/"


def fake_response(json_data=None, ok=True, status_code=200, text="", content=b""):
    response = Mock()
    response.ok = ok
    response.status_code = status_code
    response.text = text
    response.content = content
    response.json.return_value = json_data or {}
    return response


class TestLexofficeClient:
    def client(self):
        return LexofficeClient(api_key="secret", base_url="https://lexoffice.test/v1/", timeout=3)

    def test_create_document_finalizes(self):
        with patch("apps.accounting.client.requests.request") as request:
            request.return_value = fake_response({"id": "doc-1"})
            result = self.client().create_document("quotation", {"title": "x"})

        assert result == {"id": "doc-1"}
        method, url = request.call_args.args
        assert method == "POST"
        assert url == "https://lexoffice.test/v1/quotations"
        kwargs = request.call_args.kwargs
        assert kwargs["params"] == {"finalize": "true"}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 3

    def test_credit_notes_endpoint(self):
        with patch("apps.accounting.client.requests.request") as request:
            request.return_value = fake_response({"id": "cn-1"})
            self.client().create_document("creditnote", {})

        assert request.call_args.args[1] == "https://lexoffice.test/v1/credit-notes"

    def test_error_response_carries_body(self):
        with patch("apps.accounting.client.requests.request") as request:
            request.return_value = fake_response(ok=False, status_code=406, text='{"message": "bad"}')
            with pytest.raises(UpstreamError) as exc:
                self.client().create_contact({})

        assert str(exc.value.detail) == "Lexoffice API error: 406"
        assert exc.value.details == '{"message": "bad"}'

    def test_non_json_success_body_is_upstream_error(self):
        with patch("apps.accounting.client.requests.request") as request:
            response = fake_response(text="<html>gateway</html>")
            response.json.side_effect = requests.JSONDecodeError("Expecting value", response.text, 0)
            request.return_value = response
            with pytest.raises(UpstreamError) as exc:
                self.client().create_document("invoice", {})

        assert str(exc.value.detail) == "Lexoffice returned an invalid response"
        assert exc.value.details == "<html>gateway</html>"

    def test_network_error(self):
        with patch("apps.accounting.client.requests.request") as request:
            request.side_effect = requests.Timeout("slow")
            with pytest.raises(UpstreamError):
                self.client().get_document("invoice", "doc-1")

    def test_unconfigured_client_refuses(self, settings):
        settings.LEXOFFICE_API_KEY = None
        client = LexofficeClient()

        assert client.configured is False
        with pytest.raises(ConfigurationError):
            client.list_vouchers({})

    def test_unknown_document_type(self):
        with pytest.raises(UpstreamError):
            self.client().get_document("receipt", "doc-1")


@pytest.mark.django_db
class TestDocumentAccess:
    def test_pdf_is_base64_with_filename(self, lexoffice):
        lexoffice.get_document_pdf.return_value = b"%PDF-1.7 test"

        result = DocumentAccessService(client=lexoffice).fetch_pdf("a1b2c3d4e5f6", "invoice")

        assert base64.b64decode(result["pdf"]) == b"%PDF-1.7 test"
        assert result["filename"] == "STORIA_Rechnung_a1b2c3d4.pdf"
        assert result["documentType"] == "invoice"
        lexoffice.get_document_pdf.assert_called_once_with("invoice", "a1b2c3d4e5f6")

    def test_vouchers_are_linked_to_local_orders(self, lexoffice, make_catering_order):
        order = make_catering_order(lexoffice_invoice_id="doc-1", lexoffice_document_type="invoice")
        lexoffice.list_vouchers.return_value = {
            "content": [
                {"id": "doc-1", "voucherNumber": "RE0001", "voucherType": "invoice", "totalAmount": 119.0},
                {"id": "doc-2", "voucherType": "quotation"},
            ],
            "totalPages": 1,
            "totalElements": 2,
            "number": 0,
        }

        result = DocumentAccessService(client=lexoffice).list_vouchers(voucher_status="open")

        first, second = result["content"]
        assert first["localOrderId"] == str(order.id)
        assert first["localOrderNumber"] == order.order_number
        assert second["localOrderId"] is None
        assert second["voucherNumber"] == "-"
        assert second["contactName"] == "Unbekannt"
        params = lexoffice.list_vouchers.call_args.args[0]
        assert params["voucherStatus"] == "open"
        assert "invoice" in params["voucherType"]
        assert result["totalElements"] == 2

    def test_pdf_endpoint_is_staff_only(self, client_for, customer):
        response = client_for(customer).post(
            PDF_URL, {"voucherId": "doc-1", "voucherType": "invoice"}, format="json"
        )
        assert response.status_code == 403

    def test_pdf_endpoint_404_when_unavailable(self, client_for, staff_user, lexoffice):
        lexoffice.get_document_pdf.side_effect = UpstreamError("Lexoffice API error: 404")
        with patch("apps.accounting.views.document_access_service.client", lexoffice):
            response = client_for(staff_user).post(
                PDF_URL, {"voucherId": "doc-1", "voucherType": "invoice"}, format="json"
            )

        assert response.status_code == 404
        assert response.json() == {"error": "Document not available from LexOffice"}

    def test_voucher_endpoint(self, client_for, staff_user, lexoffice):
        lexoffice.list_vouchers.return_value = {"content": [], "totalPages": 0, "totalElements": 0}
        with patch("apps.accounting.views.document_access_service.client", lexoffice):
            response = client_for(staff_user).post(
                VOUCHERS_URL, {"voucherType": "invoice", "page": 1, "size": 25}, format="json"
            )

        assert response.status_code == 200
        assert response.json()["currentPage"] == 1
        params = lexoffice.list_vouchers.call_args.args[0]
        assert params == {"voucherType": "invoice", "page": 1, "size": 25}
