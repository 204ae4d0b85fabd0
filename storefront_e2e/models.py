from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProductRecord:
    """Normalized unit of comparison between the UI table and the API."""

    name: str   # lower-case, trimmed
    price: str  # digits and "." only, e.g. "23" or "23.5"


@dataclass(frozen=True)
class RawListEntry:
    id: str
    name: str


@dataclass(frozen=True)
class RawPriceDetail:
    id: int | float
    price: int | float
    vat: int | float
    name: str


@dataclass(frozen=True)
class ScrapedRow:
    """Cell text of one product table row, before normalization."""

    name_cell_text: str
    price_cell_text: str


@dataclass(frozen=True)
class CartSelection:
    product_id: str
    amount: str


@dataclass(frozen=True)
class ReceiptSnapshot:
    items: str              # e.g. "1 x Banana - $23"
    total: str
    vat: str
    grand_total: str
    buyer_name: str         # rendered thank-you text
    shipping_address: str   # rendered shipping sentence


@dataclass(frozen=True)
class ExpectedReceipt:
    items: str
    total: str
    vat: str
    grand_total: str
    buyer_name: str
    shipping_address: str
