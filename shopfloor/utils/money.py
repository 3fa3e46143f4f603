# shopfloor/utils/money.py

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from shopfloor.constants import MONEY_QUANTUM

Number = Union[Decimal, int, float, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def format_money(value: Optional[Number]) -> str:
    """Two-decimal rendering used by every table and form."""
    if value is None:
        return ""
    return f"{round_money(value):,.2f}"
