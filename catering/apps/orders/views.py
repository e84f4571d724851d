from django.core.exceptions import ValidationError as DjangoValidationError

from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.permissions import IsAdminRole, IsStaffMember, get_user_role
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import CateringOrder, EventBooking
from .serializers import (
    CancelOrderSerializer,
    CateringOrderCreateSerializer,
    CateringOrderSerializer,
    CateringOrderUpdateSerializer,
    EventBookingSerializer,
    StaffCateringOrderCreateSerializer,
)
from .services import order_service


def get_or_404(model, pk):
    try:
        return model.objects.get(pk=pk)
    except (model.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFoundError("Order not found")


def actor(request):
    return getattr(request.user, "email", None) or None


class CateringOrderViewSet(viewsets.ViewSet):
    def get_permissions(self):
        if self.action == "create":
            permission_classes = [IsAuthenticated]
        elif self.action in ("destroy", "cancel"):
            permission_classes = [IsAdminRole]
        else:
            permission_classes = [IsStaffMember]
        return [permission() for permission in permission_classes]

    def list(self, request):
        orders = CateringOrder.objects.all()
        status_filter = request.query_params.get("status")
        if status_filter:
            orders = orders.filter(status=status_filter)
        serializer = CateringOrderSerializer(orders, many=True)
        return Response(serializer.data)

    def retrieve(self, request, pk=None):
        order = get_or_404(CateringOrder, pk)
        serializer = CateringOrderSerializer(order)
        return Response(serializer.data)

    def create(self, request):
        serializer_class = (
            StaffCateringOrderCreateSerializer
            if get_user_role(request.user)
            else CateringOrderCreateSerializer
        )
        serializer = serializer_class(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)
        order = order_service.create_catering_order(
            dict(serializer.validated_data), actor_email=actor(request)
        )
        return Response(CateringOrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        order = get_or_404(CateringOrder, pk)
        serializer = CateringOrderUpdateSerializer(order, data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)
        order = order_service.update_order(
            order, serializer.validated_data, actor_email=actor(request)
        )
        return Response(CateringOrderSerializer(order).data)

    def destroy(self, request, pk=None):
        order = get_or_404(CateringOrder, pk)
        order.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        order = get_or_404(CateringOrder, pk)
        serializer = CancelOrderSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)
        order = order_service.cancel_order(
            order, serializer.validated_data["reason"], actor_email=actor(request)
        )
        return Response(CateringOrderSerializer(order).data)


class EventBookingViewSet(viewsets.ViewSet):
    def get_permissions(self):
        if self.action == "cancel":
            permission_classes = [IsAdminRole]
        else:
            permission_classes = [IsStaffMember]
        return [permission() for permission in permission_classes]

    def list(self, request):
        bookings = EventBooking.objects.all()
        serializer = EventBookingSerializer(bookings, many=True)
        return Response(serializer.data)

    def retrieve(self, request, pk=None):
        booking = get_or_404(EventBooking, pk)
        serializer = EventBookingSerializer(booking)
        return Response(serializer.data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        booking = get_or_404(EventBooking, pk)
        serializer = CancelOrderSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)
        booking = order_service.cancel_order(
            booking, serializer.validated_data["reason"], actor_email=actor(request)
        )
        return Response(EventBookingSerializer(booking).data)
