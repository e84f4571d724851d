"""
Geocoding and driving distance via OpenRouteService.

Every call is a single attempt bounded by ``EXTERNAL_HTTP_TIMEOUT``; the
caller decides whether to retry.
"""
import logging
from typing import Optional, Tuple

import requests
from django.conf import settings

from apps.core.exceptions import ConfigurationError, GeocodeError, RouteError

logger = logging.getLogger(__name__)


class RoutingService:
    DEFAULT_BASE_URL = "https://api.openrouteservice.org"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self._api_key = api_key
        self._base_url = base_url

    @property
    def api_key(self):
        return self._api_key or getattr(settings, "OPENROUTE_API_KEY", None)

    @property
    def base_url(self):
        return (
            self._base_url
            or getattr(settings, "OPENROUTE_BASE_URL", None)
            or self.DEFAULT_BASE_URL
        ).rstrip("/")

    @property
    def timeout(self):
        return getattr(settings, "EXTERNAL_HTTP_TIMEOUT", 15)

    def _require_key(self):
        if not self.api_key:
            logger.error("OPENROUTE_API_KEY not configured")
            raise ConfigurationError("Service not configured")
        return self.api_key

    def geocode(self, address: str) -> Tuple[float, float]:
        """
        Resolve a free-text German address.
        Returns (lat, lng) of the best match.
        """
        api_key = self._require_key()
        try:
            response = requests.get(
                f"{self.base_url}/geocode/search",
                params={"api_key": api_key, "text": address, "boundary.country": "DE"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"[DELIVERY] Geocode request failed: {e}")
            raise GeocodeError("Could not find address")

        if not response.ok:
            logger.warning(f"[DELIVERY] Geocode error {response.status_code}: {response.text[:200]}")
            raise GeocodeError("Could not find address")

        features = response.json().get("features") or []
        if not features:
            raise GeocodeError("Address not found")

        # GeoJSON order is [lng, lat]
        lng, lat = features[0]["geometry"]["coordinates"][:2]
        return lat, lng

    def route_distance_meters(self, origin: Tuple[float, float], destination: Tuple[float, float]) -> float:
        """Driving distance between two (lat, lng) points."""
        api_key = self._require_key()
        body = {
            "coordinates": [
                [origin[1], origin[0]],
                [destination[1], destination[0]],
            ]
        }
        try:
            response = requests.post(
                f"{self.base_url}/v2/directions/driving-car",
                json=body,
                headers={"Authorization": api_key, "Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"[DELIVERY] Directions request failed: {e}")
            raise RouteError("Could not calculate route")

        if not response.ok:
            logger.warning(f"[DELIVERY] Directions error {response.status_code}: {response.text[:200]}")
            raise RouteError("Could not calculate route")

        routes = response.json().get("routes") or []
        distance = routes[0].get("summary", {}).get("distance") if routes else None
        if not distance:
            raise RouteError("Could not calculate distance")
        return distance


routing_service = RoutingService()
