from rest_framework import serializers

from .models import CateringOrder, EventBooking

LINKAGE_FIELDS = [
    "order_number",
    "payment_status",
    "cancellation_reason",
    "cancelled_at",
    "lexoffice_invoice_id",
    "lexoffice_document_type",
    "lexoffice_contact_id",
    "lexoffice_credit_note_id",
    "created_at",
    "updated_at",
]


class OrderItemSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class CateringOrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = CateringOrder
        fields = "__all__"
        read_only_fields = ["id", "status"] + LINKAGE_FIELDS


class CateringOrderCreateSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True)
    total_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )

    class Meta:
        model = CateringOrder
        exclude = ["status", "internal_notes"] + LINKAGE_FIELDS

    def validate(self, attrs):
        if not attrs.get("is_pickup") and not (
            attrs.get("delivery_address") or attrs.get("delivery_street")
        ):
            raise serializers.ValidationError("Delivery address is required")
        return attrs


class StaffCateringOrderCreateSerializer(CateringOrderCreateSerializer):
    """Order entered by staff, possibly already settled through Stripe."""

    payment_status = serializers.ChoiceField(
        choices=["pending", "paid"], required=False, default="pending"
    )

    class Meta(CateringOrderCreateSerializer.Meta):
        exclude = ["status"] + [field for field in LINKAGE_FIELDS if field != "payment_status"]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs["payment_status"] == "paid" and attrs.get("payment_method", "invoice") == "invoice":
            raise serializers.ValidationError("Only gateway payments can be recorded as paid")
        return attrs


class CateringOrderUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = CateringOrder
        fields = ["status", "payment_status", "notes", "internal_notes"]


class EventBookingSerializer(serializers.ModelSerializer):
    class Meta:
        model = EventBooking
        fields = "__all__"
        read_only_fields = ["id"] + LINKAGE_FIELDS


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000, allow_blank=True, required=False, default="")
