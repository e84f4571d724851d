from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import CateringOrderViewSet, EventBookingViewSet

app_name = "orders"

# Router for viewsets
router = DefaultRouter()
router.register(r"catering", CateringOrderViewSet, basename="catering-order")
router.register(r"bookings", EventBookingViewSet, basename="event-booking")

urlpatterns = [
    path("", include(router.urls)),
]
