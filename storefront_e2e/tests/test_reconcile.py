import pytest

from storefront_e2e.errors import (
    ContentMismatch,
    DataInconsistencyError,
    LengthMismatch,
    NoProductsListed,
    PriceDetailMissing,
)
from storefront_e2e.models import ProductRecord, RawListEntry, RawPriceDetail
from storefront_e2e.reconcile import (
    assert_products_match,
    fetch_expected_products,
    fetch_price_details,
    join_records,
)
from storefront_e2e.scraper import records_from_rows


def test_banana_example(banana_api):
    assert fetch_expected_products(banana_api) == [ProductRecord("banana", "23")]


def test_expected_follows_list_order(fruit_api):
    records = fetch_expected_products(fruit_api)
    assert [r.name for r in records] == ["apple", "banana", "cherry box"]
    assert [r.price for r in records] == ["12.5", "23", "40"]
    assert sorted(fruit_api.price_calls) == ["1", "2", "3"]


def test_api_matches_scraped_table(fruit_api, fruit_rows):
    assert_products_match(records_from_rows(fruit_rows), fetch_expected_products(fruit_api))


def test_empty_list_is_inconclusive(make_api, caplog):
    api = make_api(products=[], prices={})
    with pytest.raises(NoProductsListed):
        fetch_expected_products(api)
    assert api.price_calls == []
    assert "empty product list" in caplog.text


def test_one_missing_detail_aborts_everything(make_api):
    api = make_api(
        products=[{"id": str(i), "name": f"P{i}"} for i in range(1, 6)],
        prices={str(i): {"id": i, "price": i, "vat": 0, "name": f"P{i}"} for i in range(1, 6)},
        missing={"4"},
    )
    with pytest.raises(PriceDetailMissing) as exc:
        fetch_expected_products(api)
    assert exc.value.product_id == "4"
    assert "4" in str(exc.value)


def test_price_details_come_back_in_entry_order(make_api):
    entries = [RawListEntry(str(i), f"P{i}") for i in range(20)]
    api = make_api(
        products=[],
        prices={str(i): {"id": i, "price": i, "vat": 0, "name": f"P{i}"} for i in range(20)},
    )
    details = fetch_price_details(api, entries, max_workers=4)
    assert [d.id for d in details] == list(range(20))


def test_join_rejects_mismatched_ids():
    with pytest.raises(DataInconsistencyError):
        join_records([RawListEntry("2", "Banana")], [RawPriceDetail(id=3, price=23, vat=4.7, name="Banana")])


def test_length_mismatch_reported_first():
    with pytest.raises(LengthMismatch) as exc:
        assert_products_match([ProductRecord("a", "1")], [ProductRecord("a", "1"), ProductRecord("b", "2")])
    assert exc.value.actual == 1
    assert exc.value.expected == 2


def test_order_matters():
    a, b = ProductRecord("apple", "1"), ProductRecord("banana", "2")
    with pytest.raises(ContentMismatch) as exc:
        assert_products_match([a, b], [b, a])
    assert exc.value.index == 0


def test_content_mismatch_is_an_assertion_error():
    with pytest.raises(AssertionError):
        assert_products_match([ProductRecord("tv", "100")], [ProductRecord("tv", "99")])
