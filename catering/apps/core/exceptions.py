"""
Error taxonomy shared by every API endpoint.

All errors are rendered as ``{"error": "<message>"}`` by ``api_exception_handler``.
"""
import logging

from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ValidationError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"
    default_code = "invalid"


class AuthError(exceptions.APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Nicht autorisiert"
    default_code = "not_authenticated"

    def __init__(self, detail=None, status_code=None):
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(exceptions.APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class UpstreamError(exceptions.APIException):
    """An external service (geocoding, routing, accounting) did not deliver."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Upstream service error"
    default_code = "upstream_error"

    def __init__(self, detail=None, status_code=None, details=None):
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code
        # Raw upstream body, kept for logging and non-fatal responses
        self.details = details


class GeocodeError(UpstreamError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Address not found"
    default_code = "geocode_error"


class RouteError(UpstreamError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Could not calculate route"
    default_code = "route_error"


class ConfigurationError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Service not configured"
    default_code = "not_configured"


class OwnershipMismatch(ValidationError):
    # Same message as a generic validation failure so callers cannot tell
    # which check failed.
    default_detail = "Invalid request"
    default_code = "invalid"


def _flatten(detail):
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            message = _flatten(value)
            parts.append(message if field == "non_field_errors" else f"{field}: {message}")
        return "; ".join(parts)
    if isinstance(detail, list):
        return " ".join(_flatten(item) for item in detail)
    return str(detail)


def api_exception_handler(exc, context):
    """Render DRF errors as ``{"error": ...}``."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    message = _flatten(response.data.get("detail", response.data)) if isinstance(
        response.data, dict
    ) else _flatten(response.data)
    if response.status_code >= 500:
        logger.error(f"API error {response.status_code}: {message}")
    response.data = {"error": message}
    return response
