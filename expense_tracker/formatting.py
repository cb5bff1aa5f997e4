"""Formatting utilities for currency and date display."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

_CENT = Decimal("0.01")


def format_currency(amount: Union[Decimal, float, int], include_sign: bool = True) -> str:
    """Format a currency amount with proper formatting.

    Rounding to cents happens here and nowhere earlier.

    Args:
        amount: The amount to format
        include_sign: Whether to include the dollar sign

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "1,234.56")

    Example:
        >>> format_currency(Decimal("1234.565"))
        '$1,234.57'
        >>> format_currency(-12, include_sign=False)
        '-12.00'
    """
    value = Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    formatted = f"{abs(value):,.2f}"
    if include_sign:
        formatted = f"${formatted}"
    return f"-{formatted}" if value < 0 else formatted


def escape_dollar_for_markdown(amount: Union[Decimal, float, int]) -> str:
    """Format an amount and escape the dollar sign for markdown rendering.

    Streamlit treats ``$`` as a LaTeX delimiter in markdown.
    """
    return format_currency(amount).replace("$", "\\$")


def format_transaction_date(moment: datetime) -> str:
    """Short, readable date such as ``Jan 15, 2024``."""
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"
