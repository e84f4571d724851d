from decimal import Decimal

# Karlstr. 47a, 80333 München
DEFAULT_RESTAURANT_LAT = 48.1431
DEFAULT_RESTAURANT_LNG = 11.5606

DELIVERY_VAT_RATE = 19

FREE_DELIVERY_MAX_KM = Decimal("1")
FLAT_RATE_MAX_KM = Decimal("8")

FLAT_RATE_PER_TRIP = Decimal("50.00")
PER_KM_RATE = Decimal("1.20")

MINIMUM_ORDER_FREE = Decimal("50")
MINIMUM_ORDER_FLAT = Decimal("150")
MINIMUM_ORDER_PER_KM = Decimal("200")

MIN_ADDRESS_LENGTH = 5
