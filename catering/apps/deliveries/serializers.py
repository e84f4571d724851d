from rest_framework import serializers


class DeliveryQuoteRequestSerializer(serializers.Serializer):
    address = serializers.CharField(trim_whitespace=True, allow_blank=True)
    isPizzaOnly = serializers.BooleanField(required=False, default=False)


class DeliveryQuoteSerializer(serializers.Serializer):
    distanceKm = serializers.DecimalField(max_digits=8, decimal_places=1, coerce_to_string=False)
    deliveryCostNet = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    deliveryCostGross = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    deliveryVat = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    deliveryVatRate = serializers.IntegerField()
    isFreeDelivery = serializers.BooleanField()
    minimumOrder = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    message = serializers.CharField()
    messageEn = serializers.CharField()
    isRoundTrip = serializers.BooleanField()
    oneWayDistanceKm = serializers.DecimalField(max_digits=8, decimal_places=1, coerce_to_string=False)
