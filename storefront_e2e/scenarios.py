from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from .errors import Inconclusive, VerificationError
from .receipt import expected_receipt, validate_receipt
from .reconcile import ProductSource, assert_products_match, fetch_expected_products
from .report import FAILED, INCONCLUSIVE, PASSED, ScenarioResult
from .store_page import LoginPage, StorePage

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseCase:
    product_id: str = "2"  # Banana
    quantity: str = "1"
    name: str = "Malin"
    address: str = "Testgatan 1"
    items: str = "1 x Banana - $23"
    total: str = "23"
    vat: str = "4.7"
    grand_total: str = "27.7"


def verify_product_table(page: StorePage, api: ProductSource) -> str:
    listing = page.navigate()
    expected = fetch_expected_products(api)
    actual = listing.get_product_table_data()
    assert_products_match(actual, expected)
    return f"{len(actual)} products in the UI table match the API"


def verify_insufficient_funds(
    page: StorePage,
    *,
    product_id: str = "10",
    amount: str = "50",
    expected_message: str = "Insufficient funds!",
) -> str:
    page.navigate().attempt_add_product_and_expect_error(product_id, amount, expected_message)
    return f"adding {amount} x product {product_id} was refused with {expected_message!r}"


def verify_single_purchase(page: StorePage, case: PurchaseCase = PurchaseCase()) -> str:
    receipt = (
        page.navigate()
        .add_product_to_cart(case.product_id, case.quantity)
        .buy()
        .confirm_purchase(case.name, case.address)
    )
    validate_receipt(
        receipt.snapshot(),
        expected_receipt(
            items=case.items,
            total=case.total,
            vat=case.vat,
            grand_total=case.grand_total,
            name=case.name,
            address=case.address,
        ),
    )
    return f"receipt for {case.items!r} matches (grand total {case.grand_total})"


def verify_login(page: LoginPage, *, username: str, password: str, role: str) -> str:
    page.navigate()
    page.login(username, password, role)
    page.assert_landed_on_store()
    return f"{username} logged in as {role}"


def run_scenario(name: str, fn: Callable[..., str], *args, **kwargs) -> ScenarioResult:
    """Run one scenario and turn its outcome into a ScenarioResult.

    Anything that is not a VerificationError is a harness bug and propagates.
    """
    start = time.monotonic()
    try:
        detail = fn(*args, **kwargs)
    except Inconclusive as exc:
        log.warning("%s: inconclusive: %s", name, exc)
        return ScenarioResult(name, INCONCLUSIVE, str(exc), time.monotonic() - start)
    except VerificationError as exc:
        log.error("%s: failed: %s", name, exc)
        return ScenarioResult(name, FAILED, str(exc), time.monotonic() - start)

    log.info("%s: passed", name)
    return ScenarioResult(name, PASSED, detail, time.monotonic() - start)
