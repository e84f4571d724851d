import logging

from django.conf import settings

from apps.core.exceptions import ValidationError
from apps.core.utils import to_decimal

from .constants import DEFAULT_RESTAURANT_LAT, DEFAULT_RESTAURANT_LNG, MIN_ADDRESS_LENGTH
from .pricing import calculate_delivery_quote
from .routing_service import routing_service

logger = logging.getLogger(__name__)


class DeliveryQuoteService:
    def __init__(self, router=None):
        self.router = router or routing_service

    @staticmethod
    def origin():
        return (
            getattr(settings, "RESTAURANT_LAT", DEFAULT_RESTAURANT_LAT),
            getattr(settings, "RESTAURANT_LNG", DEFAULT_RESTAURANT_LNG),
        )

    def quote(self, address, is_pizza_only=False):
        address = (address or "").strip()
        if len(address) < MIN_ADDRESS_LENGTH:
            raise ValidationError("Address is required")

        logger.info(f"[DELIVERY] Geocoding address: {address}")
        destination = self.router.geocode(address)

        distance_m = self.router.route_distance_meters(self.origin(), destination)
        one_way_km = to_decimal(distance_m) / 1000
        logger.info(f"[DELIVERY] Distance: {one_way_km} km (pizza only: {is_pizza_only})")

        result = calculate_delivery_quote(one_way_km, is_pizza_only=is_pizza_only)
        logger.info(f"[DELIVERY] Quote: {result.cost_gross} EUR gross, round trip: {result.is_round_trip}")
        return result


delivery_quote_service = DeliveryQuoteService()
