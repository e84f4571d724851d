from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 from turning into 0.1000000000000000055...
    return Decimal(str(value))


def round_currency(value, places: Decimal = CENT) -> Decimal:
    """Round half-up to cents, the way the accounting system rounds."""
    return to_decimal(value).quantize(places, rounding=ROUND_HALF_UP)
