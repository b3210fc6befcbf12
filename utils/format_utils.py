"""
utils/format_utils.py

Purpose: Formatting and serialization helpers
"""

import json
from decimal import Decimal
from typing import Any, Union


def parse_stringify(value: Any) -> Any:
    """
    JSON round-trip: turns vendor payloads and documents into plain,
    JSON-safe data (datetimes and other objects become strings).
    """
    return json.loads(json.dumps(value, default=str))


def format_amount(amount: Union[int, float, Decimal, str]) -> str:
    """
    Formats an amount as US dollars, e.g. 1234.5 -> "$1,234.50".
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_transfer_value(amount: Union[int, float, Decimal, str]) -> str:
    """
    Amount as the payment network expects it: plain string, two decimals.
    """
    return f"{Decimal(str(amount)).quantize(Decimal('0.01'))}"
