from apps.core.exceptions import ValidationError
from apps.core.permissions import IsStaffMember
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    CreateDocumentSerializer,
    DocumentPdfSerializer,
    ManualDocumentSerializer,
    SyncPaymentStatusSerializer,
    VoucherListSerializer,
)
from .services import document_access_service, document_service, payment_sync_service


def validated(serializer_class, request):
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        raise ValidationError(serializer.errors)
    return serializer.validated_data


class CreateDocumentView(APIView):
    """Create the quotation or invoice for an order in Lexoffice."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        data = validated(CreateDocumentSerializer, request)
        result = document_service.create_document(
            order_id=data["orderId"],
            customer_email=data["customerEmail"],
            kind=data["orderKind"],
            actor_email=request.user.email or None,
        )
        return Response(result, status=status.HTTP_200_OK)


class SyncPaymentStatusView(APIView):
    permission_classes = [IsStaffMember]

    def post(self, request):
        data = validated(SyncPaymentStatusSerializer, request)
        order_id = data.get("orderId")
        result = payment_sync_service.sync(
            order_id=str(order_id) if order_id else None,
            actor_email=request.user.email or None,
        )
        return Response(result, status=status.HTTP_200_OK)


class DocumentPdfView(APIView):
    permission_classes = [IsStaffMember]

    def post(self, request):
        data = validated(DocumentPdfSerializer, request)
        result = document_access_service.fetch_pdf(data["voucherId"], data["voucherType"])
        return Response(result, status=status.HTTP_200_OK)


class VoucherListView(APIView):
    permission_classes = [IsStaffMember]

    def post(self, request):
        data = validated(VoucherListSerializer, request)
        result = document_access_service.list_vouchers(
            voucher_type=data["voucherType"],
            voucher_status=data["voucherStatus"] or None,
            page=data["page"],
            size=data["size"],
            created_date_from=data.get("createdDateFrom"),
            created_date_to=data.get("createdDateTo"),
        )
        return Response(result, status=status.HTTP_200_OK)


class ManualDocumentView(APIView):
    """Free-form quotation or invoice, optionally linked to an event booking."""

    permission_classes = [IsStaffMember]

    def post(self, request):
        data = validated(ManualDocumentSerializer, request)
        result = document_service.create_manual_document(
            data, actor_email=request.user.email or None
        )
        return Response(result, status=status.HTTP_200_OK)
