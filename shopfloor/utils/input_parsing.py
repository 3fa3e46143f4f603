# shopfloor/utils/input_parsing.py

import re
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from shopfloor.constants import DATE_FORMAT
from shopfloor.errors import InvalidInputError

logger = logging.getLogger(__name__)

NUMERIC_INPUT_PATTERN = re.compile(r"^[0-9.]*$")


def is_numeric_input(text: str) -> bool:
    """Keystroke filter for cost and price fields: digits and dots only."""
    return bool(NUMERIC_INPUT_PATTERN.match(text))


def display_number(value) -> str:
    """Zero is shown as an empty field so the operator can type straight away."""
    if value is None:
        return ""
    text = str(value)
    if text in ("0", "0.0", "0.00"):
        return ""
    return text


def parse_quantity(text: Optional[str]) -> int:
    try:
        return int((text or "").strip())
    except ValueError:
        return 0


def parse_money(text: Optional[str], field_name: str = "amount") -> Decimal:
    raw = (text or "").strip()
    if not raw:
        return Decimal("0")
    if not is_numeric_input(raw):
        raise InvalidInputError(f"{field_name} must be a number, got '{raw}'")
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise InvalidInputError(f"{field_name} must be a number, got '{raw}'")


def parse_optional_money(text: Optional[str], field_name: str = "amount") -> Optional[Decimal]:
    if not (text or "").strip():
        return None
    return parse_money(text, field_name)


def parse_percentage(text: Optional[str]) -> int:
    raw = (text or "").strip()
    try:
        value = int(raw)
    except ValueError:
        raise InvalidInputError(f"Percentage must be a whole number, got '{raw}'")
    if not 0 <= value <= 100:
        raise InvalidInputError(f"Percentage must be between 0 and 100, got {value}")
    return value


def parse_date(text: Optional[str]) -> date:
    raw = (text or "").strip()
    if not raw:
        return date.today()
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        raise InvalidInputError(f"Date must look like YYYY-MM-DD, got '{raw}'")


def format_date(value: Optional[date]) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def optional_text(text: Optional[str]) -> Optional[str]:
    stripped = (text or "").strip()
    return stripped or None
