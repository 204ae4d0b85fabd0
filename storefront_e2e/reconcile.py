from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Protocol

from .errors import ContentMismatch, DataInconsistencyError, LengthMismatch, NoProductsListed
from .models import ProductRecord, RawListEntry, RawPriceDetail
from .normalize import format_api_price, normalize_name

log = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class ProductSource(Protocol):
    def list_products(self) -> list[RawListEntry]: ...

    def get_price(self, product_id: str) -> RawPriceDetail: ...


def fetch_price_details(
    api: ProductSource,
    entries: list[RawListEntry],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[RawPriceDetail]:
    """Fetch every entry's price detail concurrently, returned in *entries* order.

    All fetches must succeed. The first failure cancels whatever has not
    started yet and is re-raised; no partial list is ever returned.
    """
    if not entries:
        return []

    slots: list[RawPriceDetail | None] = [None] * len(entries)
    with ThreadPoolExecutor(max_workers=min(max_workers, len(entries))) as pool:
        futures = {pool.submit(api.get_price, e.id): i for i, e in enumerate(entries)}
        try:
            for fut in as_completed(futures):
                slots[futures[fut]] = fut.result()
        except BaseException:
            for fut in futures:
                fut.cancel()
            raise

    return [d for d in slots if d is not None]


def _id_text(value: int | float | str) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def join_records(entries: list[RawListEntry], details: list[RawPriceDetail]) -> list[ProductRecord]:
    """Pair list entries with their details by position, checking ids agree."""
    if len(entries) != len(details):
        raise DataInconsistencyError(
            f"Got {len(details)} price details for {len(entries)} listed products"
        )

    records: list[ProductRecord] = []
    for entry, detail in zip(entries, details):
        if _id_text(detail.id) != entry.id:
            raise DataInconsistencyError(
                f"Price detail id {detail.id!r} does not match listed product ID: {entry.id}"
            )
        records.append(ProductRecord(name=normalize_name(entry.name), price=format_api_price(detail.price)))
    return records


def fetch_expected_products(api: ProductSource, *, max_workers: int = DEFAULT_MAX_WORKERS) -> list[ProductRecord]:
    """Build the expected product table from the API, in API list order.

    Raises NoProductsListed when the list is empty; callers treat that as
    inconclusive rather than a pass.
    """
    entries = api.list_products()
    if not entries:
        log.warning("API returned an empty product list; nothing to reconcile")
        raise NoProductsListed()

    details = fetch_price_details(api, entries, max_workers=max_workers)
    log.info("fetched price details for %d products", len(details))
    return join_records(entries, details)


def assert_products_match(actual: list[ProductRecord], expected: list[ProductRecord]) -> None:
    """Ordered comparison: count first, then row by row."""
    if len(actual) != len(expected):
        raise LengthMismatch(len(actual), len(expected))
    for i, (a, e) in enumerate(zip(actual, expected)):
        if a != e:
            raise ContentMismatch(i, a, e)
