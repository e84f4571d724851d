"""
HTTP client for the Lexoffice public API (contacts, quotations, invoices,
credit notes, voucher list).
"""
import logging
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from apps.core.exceptions import ConfigurationError, UpstreamError

from .constants import DOCUMENT_ENDPOINTS

logger = logging.getLogger(__name__)


class LexofficeClient:
    DEFAULT_BASE_URL = "https://api.lexoffice.io/v1"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout=None):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout

    @property
    def api_key(self):
        return self._api_key or getattr(settings, "LEXOFFICE_API_KEY", None)

    @property
    def base_url(self):
        return (
            self._base_url
            or getattr(settings, "LEXOFFICE_BASE_URL", None)
            or self.DEFAULT_BASE_URL
        ).rstrip("/")

    @property
    def timeout(self):
        return self._timeout or getattr(settings, "EXTERNAL_HTTP_TIMEOUT", 15)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _request(self, method, path, *, params=None, json=None, accept="application/json"):
        if not self.configured:
            raise ConfigurationError("LexOffice API key not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": accept,
        }
        if json is not None:
            headers["Content-Type"] = "application/json"

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = requests.request(
                method, url, params=params, json=json, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"LexOffice request {method} {path} failed: {e}")
            raise UpstreamError(f"LexOffice request failed: {e}")

        if not response.ok:
            body = response.text
            logger.warning(
                f"LexOffice API error {response.status_code} on {method} {path}: {body[:200]}"
            )
            raise UpstreamError(
                f"Lexoffice API error: {response.status_code}",
                details=body,
            )
        return response

    def _request_json(self, method, path, **kwargs) -> Dict[str, Any]:
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError:
            logger.warning(
                f"LexOffice returned a non-JSON body on {method} {path}: {response.text[:200]}"
            )
            raise UpstreamError("Lexoffice returned an invalid response", details=response.text)

    @staticmethod
    def endpoint_for(document_type: str) -> str:
        try:
            return DOCUMENT_ENDPOINTS[document_type]
        except KeyError:
            raise UpstreamError(f"Unknown document type: {document_type}", status_code=400)

    def create_contact(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request_json("POST", "contacts", json=payload)

    def create_document(self, document_type: str, payload: Dict[str, Any], finalize=True) -> Dict[str, Any]:
        """Create a quotation, invoice or credit note.

        ``finalize=True`` also makes Lexoffice e-mail the document to the
        customer.
        """
        params = {"finalize": "true"} if finalize else None
        return self._request_json(
            "POST", self.endpoint_for(document_type), params=params, json=payload
        )

    def get_document(self, document_type: str, document_id: str) -> Dict[str, Any]:
        return self._request_json("GET", f"{self.endpoint_for(document_type)}/{document_id}")

    def get_document_pdf(self, document_type: str, document_id: str) -> bytes:
        return self._request(
            "GET",
            f"{self.endpoint_for(document_type)}/{document_id}/document",
            accept="application/pdf",
        ).content

    def list_vouchers(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return self._request_json("GET", "voucherlist", params=params)


lexoffice_client = LexofficeClient()
