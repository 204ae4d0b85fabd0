from __future__ import annotations

from .models import ProductRecord, ScrapedRow
from .normalize import normalize
from .surface import StoreSurface


def records_from_rows(rows: list[ScrapedRow]) -> list[ProductRecord]:
    return [normalize(r.name_cell_text, r.price_cell_text) for r in rows]


def scrape_product_table(surface: StoreSurface) -> list[ProductRecord]:
    """Read the product listing table in rendered order.

    Row order is kept as-is since callers compare index by index.
    An empty table gives an empty list.
    """
    return records_from_rows(surface.product_rows())
