from decimal import Decimal

from rest_framework import serializers

from .constants import DOCUMENT_ENDPOINTS, MANUAL_VAT_RATES


class CreateDocumentSerializer(serializers.Serializer):
    # Clients may send the full order; only these fields are read, the
    # stored order row is authoritative for everything else.
    orderId = serializers.UUIDField()
    customerEmail = serializers.EmailField()
    orderKind = serializers.ChoiceField(
        choices=["catering", "booking"], required=False, default="catering"
    )


class SyncPaymentStatusSerializer(serializers.Serializer):
    orderId = serializers.UUIDField(required=False, allow_null=True)


class DocumentPdfSerializer(serializers.Serializer):
    voucherId = serializers.CharField(max_length=64)
    voucherType = serializers.ChoiceField(choices=list(DOCUMENT_ENDPOINTS))


class VoucherListSerializer(serializers.Serializer):
    voucherType = serializers.CharField(required=False, default="all")
    voucherStatus = serializers.CharField(required=False, allow_blank=True, default="")
    page = serializers.IntegerField(required=False, default=0, min_value=0)
    size = serializers.IntegerField(required=False, default=50, min_value=1, max_value=250)
    createdDateFrom = serializers.DateField(required=False, allow_null=True)
    createdDateTo = serializers.DateField(required=False, allow_null=True)


class ManualAddressSerializer(serializers.Serializer):
    street = serializers.CharField(max_length=255, allow_blank=True, required=False, default="")
    zip = serializers.CharField(max_length=20, allow_blank=True, required=False, default="")
    city = serializers.CharField(max_length=100, allow_blank=True, required=False, default="")
    country = serializers.CharField(max_length=100, allow_blank=True, required=False, default="")


class ManualLineItemSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=1000, allow_blank=True, required=False)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.01"))
    # Gross price per unit
    unitPrice = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    taxRate = serializers.ChoiceField(choices=MANUAL_VAT_RATES)


class ManualDocumentSerializer(serializers.Serializer):
    contactName = serializers.CharField(max_length=200)
    companyName = serializers.CharField(max_length=200, allow_blank=True, required=False)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=50, allow_blank=True, required=False)
    address = ManualAddressSerializer(required=False)
    items = ManualLineItemSerializer(many=True, allow_empty=False)
    eventBookingId = serializers.UUIDField(required=False, allow_null=True)
    documentType = serializers.ChoiceField(choices=["invoice", "quotation"])
    introduction = serializers.CharField(allow_blank=True, required=False)
    remark = serializers.CharField(allow_blank=True, required=False)

    def validate_items(self, items):
        # Quantities go to Lexoffice as plain JSON numbers
        return [dict(item, quantity=float(item["quantity"])) for item in items]
