import pytest

from storefront_e2e.models import ScrapedRow
from storefront_e2e.report import FAILED, INCONCLUSIVE, PASSED, build_report
from storefront_e2e.scenarios import (
    PurchaseCase,
    run_scenario,
    verify_insufficient_funds,
    verify_login,
    verify_product_table,
    verify_single_purchase,
)
from storefront_e2e.store_page import LoginPage, StorePage
from storefront_e2e.surface import ReceiptField


def test_product_table_passes(make_surface, banana_api):
    page = StorePage(make_surface(rows=[ScrapedRow("Banana", "$23")]))
    result = run_scenario("product-table", verify_product_table, page, banana_api)
    assert result.status == PASSED


def test_product_table_count_mismatch(make_surface, fruit_api):
    page = StorePage(make_surface(rows=[ScrapedRow("Banana", "$23")]))
    result = run_scenario("product-table", verify_product_table, page, fruit_api)
    assert result.status == FAILED
    assert "count mismatch" in result.detail


def test_product_table_empty_api_is_inconclusive(make_surface, make_api):
    page = StorePage(make_surface(rows=[ScrapedRow("Banana", "$23")]))
    result = run_scenario("product-table", verify_product_table, page, make_api(products=[], prices={}))
    assert result.status == INCONCLUSIVE


def test_product_table_missing_price_fails(make_surface, make_api):
    api = make_api(products=[{"id": "2", "name": "Banana"}], prices={})
    result = run_scenario("product-table", verify_product_table, StorePage(make_surface()), api)
    assert result.status == FAILED
    assert "product ID: 2" in result.detail


def test_insufficient_funds(make_surface):
    surface = make_surface(buy_message="Insufficient funds!")
    result = run_scenario("insufficient-funds", verify_insufficient_funds, StorePage(surface))
    assert result.status == PASSED
    assert ("select_product", "10") in surface.calls
    assert ("set_amount", "50") in surface.calls
    assert not surface.receipt_visible()


def test_insufficient_funds_message_never_shows(make_surface):
    result = run_scenario("insufficient-funds", verify_insufficient_funds, StorePage(make_surface(), timeout_ms=10))
    assert result.status == FAILED
    assert "buy message" in result.detail


def test_single_purchase(make_surface):
    result = run_scenario("purchase", verify_single_purchase, StorePage(make_surface()))
    assert result.status == PASSED


def test_single_purchase_wrong_grand_total(make_surface):
    surface = make_surface()
    surface.receipt[ReceiptField.GRAND_TOTAL] = "28.7"
    result = run_scenario("purchase", verify_single_purchase, StorePage(surface), PurchaseCase())
    assert result.status == FAILED
    assert "grand_total" in result.detail


def test_login(make_surface):
    result = run_scenario(
        "login", verify_login, LoginPage(make_surface()),
        username="malin", password="pw", role="consumer",
    )
    assert result.status == PASSED


def test_unexpected_errors_propagate():
    def broken():
        raise KeyError("bug")

    with pytest.raises(KeyError):
        run_scenario("broken", broken)


def test_report_counts(make_surface, make_api):
    results = [
        run_scenario("purchase", verify_single_purchase, StorePage(make_surface())),
        run_scenario("product-table", verify_product_table, StorePage(make_surface()), make_api(products=[], prices={})),
        run_scenario("insufficient-funds", verify_insufficient_funds, StorePage(make_surface(), timeout_ms=10)),
    ]
    report = build_report(results)
    assert (report.passed, report.inconclusive, report.failed) == (1, 1, 1)
    assert report.exit_code() == 1
    assert "[INCONCLUSIVE] product-table" in report.summary_text()
