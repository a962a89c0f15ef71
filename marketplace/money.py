# marketplace/money.py
from datetime import datetime, timezone
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize to cents (half-up). SQLite hands back floats for SUM(), so go through str."""
    if value is None:
        return Decimal("0.00")
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def floor_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_DOWN)


def format_money(value) -> str:
    return f"{to_money(value):.2f}"


def utcnow() -> datetime:
    # stored as naive UTC so SQLite and Postgres compare the same way
    return datetime.now(timezone.utc).replace(tzinfo=None)
