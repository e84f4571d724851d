"""
Distance-tiered delivery pricing.

Pizza-only orders are delivered once (one way). Full-service catering is a
round trip because equipment is collected afterwards, so the billable
distance and the per-trip flat fee are doubled.
"""
from dataclasses import dataclass
from decimal import Decimal

from apps.core.utils import round_currency, to_decimal

from .constants import (
    DELIVERY_VAT_RATE,
    FLAT_RATE_MAX_KM,
    FLAT_RATE_PER_TRIP,
    FREE_DELIVERY_MAX_KM,
    MINIMUM_ORDER_FLAT,
    MINIMUM_ORDER_FREE,
    MINIMUM_ORDER_PER_KM,
    PER_KM_RATE,
)

TENTH = Decimal("0.1")


@dataclass(frozen=True)
class DeliveryQuote:
    one_way_distance_km: Decimal
    distance_km: Decimal
    cost_net: Decimal
    cost_gross: Decimal
    vat: Decimal
    vat_rate: int
    is_free_delivery: bool
    minimum_order: Decimal
    is_round_trip: bool
    message: str
    message_en: str

    def as_dict(self):
        return {
            "distanceKm": self.distance_km,
            "deliveryCostNet": self.cost_net,
            "deliveryCostGross": self.cost_gross,
            "deliveryVat": self.vat,
            "deliveryVatRate": self.vat_rate,
            "isFreeDelivery": self.is_free_delivery,
            "minimumOrder": self.minimum_order,
            "message": self.message,
            "messageEn": self.message_en,
            "isRoundTrip": self.is_round_trip,
            "oneWayDistanceKm": self.one_way_distance_km,
        }


def gross_and_vat(net: Decimal, vat_rate: int = DELIVERY_VAT_RATE):
    gross = round_currency(net * (Decimal(100 + vat_rate) / Decimal(100)))
    return gross, round_currency(gross - net)


def calculate_delivery_quote(one_way_km, is_pizza_only=False) -> DeliveryQuote:
    """Price a delivery over ``one_way_km`` kilometres of driving distance."""
    one_way = to_decimal(one_way_km)
    one_way_display = round_currency(one_way, TENTH)

    if one_way <= FREE_DELIVERY_MAX_KM:
        return DeliveryQuote(
            one_way_distance_km=one_way_display,
            distance_km=one_way_display,
            cost_net=Decimal("0.00"),
            cost_gross=Decimal("0.00"),
            vat=Decimal("0.00"),
            vat_rate=DELIVERY_VAT_RATE,
            is_free_delivery=True,
            minimum_order=MINIMUM_ORDER_FREE,
            is_round_trip=False,
            message="Kostenlose Lieferung (bis 1 km)",
            message_en="Free delivery (up to 1 km)",
        )

    trips = 1 if is_pizza_only else 2
    is_round_trip = trips == 2
    # Billed on the same 0.1 km figure the customer sees
    billable_km = round_currency(one_way * trips, TENTH)

    if one_way <= FLAT_RATE_MAX_KM:
        net = round_currency(FLAT_RATE_PER_TRIP * trips)
        minimum_order = MINIMUM_ORDER_FLAT
        if is_round_trip:
            message = "Lieferung im Münchner Raum (Hin- und Rückfahrt)"
            message_en = "Delivery in Munich area (round trip)"
        else:
            message = "Lieferung im Münchner Raum"
            message_en = "Delivery in Munich area"
    else:
        net = round_currency(billable_km * PER_KM_RATE)
        minimum_order = MINIMUM_ORDER_PER_KM
        if is_round_trip:
            message = f"Lieferung außerhalb München ({billable_km} km inkl. Rückfahrt à 1,20 €/km)"
            message_en = f"Delivery outside Munich ({billable_km} km incl. return trip at €1.20/km)"
        else:
            message = f"Lieferung außerhalb München ({billable_km} km à 1,20 €/km)"
            message_en = f"Delivery outside Munich ({billable_km} km at €1.20/km)"

    gross, vat = gross_and_vat(net)
    return DeliveryQuote(
        one_way_distance_km=one_way_display,
        distance_km=billable_km,
        cost_net=net,
        cost_gross=gross,
        vat=vat,
        vat_rate=DELIVERY_VAT_RATE,
        is_free_delivery=False,
        minimum_order=minimum_order,
        is_round_trip=is_round_trip,
        message=message,
        message_en=message_en,
    )
