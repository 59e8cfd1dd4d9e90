"""Display formatting for currency and percentage fields."""

from decimal import ROUND_HALF_UP, Decimal

NOT_AVAILABLE = "Not Available"
NOT_APPLICABLE = "N/A"


def round_dollars(value: Decimal) -> Decimal:
    """Round to the nearest whole dollar, halves away from zero."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def format_currency(value: Decimal) -> str:
    """Format as "$12,345" (whole dollars, thousands separators)."""
    return f"${int(round_dollars(value)):,}"


def format_percent(value: Decimal | None) -> str:
    """Format as "12.3%"; ``None`` renders as "N/A"."""
    if value is None:
        return NOT_APPLICABLE
    return f"{value.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}%"
