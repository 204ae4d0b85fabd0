from __future__ import annotations

import re

from .models import ProductRecord


_NON_PRICE_RE = re.compile(r"[^0-9.]")


def normalize_name(raw: str) -> str:
    return raw.strip().lower()


def normalize_price(raw: str) -> str:
    """Keep only digits and '.' ("$1,299.00 SEK" -> "1299.00")."""
    return _NON_PRICE_RE.sub("", raw.strip())


def normalize(raw_name: str, raw_price: str) -> ProductRecord:
    # Total: malformed input yields an empty/partial string, never an error.
    return ProductRecord(name=normalize_name(raw_name), price=normalize_price(raw_price))


def format_api_price(value: int | float) -> str:
    """Render an API number the way the storefront prints it.

    JSON decodes "23.0" to a float, but the page shows "$23", so whole
    floats lose their fractional part: 23.0 -> "23", 23.5 -> "23.5".
    """
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return normalize_price(str(value))
