from __future__ import annotations

from .errors import FieldMismatch, ReceiptMismatch
from .models import ExpectedReceipt, ReceiptSnapshot


THANK_YOU_TEMPLATE = "Thank you for your purchase, {name}"
SHIPPING_TEMPLATE = "It will be shipped to: {address}"


def expected_receipt(
    *,
    items: str,
    total: str,
    vat: str,
    grand_total: str,
    name: str,
    address: str,
) -> ExpectedReceipt:
    """Build the expectation for a purchase, filling in the buyer phrases."""
    return ExpectedReceipt(
        items=items,
        total=total,
        vat=vat,
        grand_total=grand_total,
        buyer_name=THANK_YOU_TEMPLATE.format(name=name),
        shipping_address=SHIPPING_TEMPLATE.format(address=address),
    )


def assert_exact(field: str, expected: str, actual: str) -> None:
    # Display strings ("27.7"), so no numeric tolerance.
    if actual != expected:
        raise FieldMismatch(field, expected, actual)


def assert_contains(field: str, needle: str, actual: str) -> None:
    if needle not in actual:
        raise FieldMismatch(field, needle, actual, contains=True)


def collect_mismatches(checks: list[tuple]) -> list[FieldMismatch]:
    """Run (assert_fn, field, expected, actual) checks, keeping every failure."""
    found: list[FieldMismatch] = []
    for fn, field, expected, actual in checks:
        try:
            fn(field, expected, actual)
        except FieldMismatch as exc:
            found.append(exc)
    return found


def validate_receipt(snapshot: ReceiptSnapshot, expected: ExpectedReceipt) -> None:
    """Raise ReceiptMismatch listing every field that differs."""
    mismatches = collect_mismatches([
        (assert_exact, "items", expected.items, snapshot.items),
        (assert_exact, "total", expected.total, snapshot.total),
        (assert_exact, "vat", expected.vat, snapshot.vat),
        (assert_exact, "grand_total", expected.grand_total, snapshot.grand_total),
        (assert_contains, "buyer_name", expected.buyer_name, snapshot.buyer_name),
        (assert_contains, "shipping_address", expected.shipping_address, snapshot.shipping_address),
    ])
    if mismatches:
        raise ReceiptMismatch(mismatches)
