from apps.core.exceptions import ValidationError
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import DeliveryQuoteRequestSerializer, DeliveryQuoteSerializer
from .services import delivery_quote_service


class DeliveryQuoteView(APIView):
    """Delivery cost for an address, priced from the restaurant."""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = DeliveryQuoteRequestSerializer(data=request.data)
        if not serializer.is_valid():
            if "address" in serializer.errors:
                raise ValidationError("Address is required")
            raise ValidationError(serializer.errors)

        quote = delivery_quote_service.quote(
            serializer.validated_data["address"],
            is_pizza_only=serializer.validated_data["isPizzaOnly"],
        )
        return Response(DeliveryQuoteSerializer(quote.as_dict()).data, status=status.HTTP_200_OK)
