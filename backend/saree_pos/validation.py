from __future__ import annotations

from typing import Any


TEXT_UNKNOWN_SHOP = "Unknown Shop"
TEXT_NOT_AVAILABLE = "N/A"


def to_amount(value: Any) -> int | float:
    """
    Lenient numeric coercion for prices.

    - None / "" / unparsable -> 0
    - "1,200" and "Rs 500" style inputs keep their digits
    - integral values come back as int so serialized records stay tidy
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "").replace("₹", "")
        if text.lower().startswith("rs"):
            text = text[2:].lstrip(". ")
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
    if number != number or number in (float("inf"), float("-inf")):
        return 0
    return int(number) if number.is_integer() else number


def to_text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text if text else default
