import pytest

from storefront_e2e.errors import InteractionTimeout, PriceDetailMissing
from storefront_e2e.models import RawListEntry, RawPriceDetail, ScrapedRow
from storefront_e2e.surface import ReceiptField


BANANA_RECEIPT = {
    ReceiptField.ITEMS: "1 x Banana - $23",
    ReceiptField.TOTAL: "23",
    ReceiptField.VAT: "4.7",
    ReceiptField.GRAND_TOTAL: "27.7",
    ReceiptField.THANK_YOU: "Thank you for your purchase, Malin",
    ReceiptField.ADDRESS: "It will be shipped to: Testgatan 1",
}


class FakeSurface:
    """In-memory StoreSurface/LoginSurface recording every call."""

    def __init__(
        self, rows=None, receipt=None, buy_message=None, receipt_after_add=False,
        add_succeeds=False, landing_url="/store2",
    ):
        self.rows = rows or []
        self.receipt = dict(BANANA_RECEIPT if receipt is None else receipt)
        self.buy_message = buy_message
        self.receipt_after_add = receipt_after_add
        self.add_succeeds = add_succeeds
        self.cart_items = 0
        self.landing_url = landing_url
        self.receipt_shown = False
        self.url = ""
        self.calls = []

    def open_store(self):
        self.calls.append(("open_store",))

    def select_product(self, product_id):
        self.calls.append(("select_product", product_id))

    def set_amount(self, amount):
        self.calls.append(("set_amount", amount))

    def submit_add_to_cart(self):
        self.calls.append(("submit_add_to_cart",))
        if self.add_succeeds:
            self.cart_items += 1
        if self.receipt_after_add:
            self.receipt_shown = True

    def submit_buy(self):
        self.calls.append(("submit_buy",))

    def wait_for_buy_message(self, timeout_ms):
        if self.buy_message is None:
            raise InteractionTimeout("buy message to become visible", timeout_ms)
        return self.buy_message

    def fill_buyer(self, name, address):
        self.calls.append(("fill_buyer", name, address))

    def submit_confirm_purchase(self):
        self.calls.append(("submit_confirm_purchase",))
        self.receipt_shown = True

    def read_receipt_field(self, field, timeout_ms):
        if not self.receipt_shown or field not in self.receipt:
            raise InteractionTimeout(f"receipt field '{field.value}' to become visible", timeout_ms)
        self.calls.append(("read_receipt_field", field))
        return self.receipt[field]

    def receipt_visible(self):
        return self.receipt_shown

    def cart_item_count(self):
        return self.cart_items

    def product_rows(self):
        self.calls.append(("product_rows",))
        return list(self.rows)

    def open_login(self):
        self.calls.append(("open_login",))
        self.url = "/"

    def submit_login(self, username, password, role):
        self.calls.append(("submit_login", username, role))
        self.url = self.landing_url

    def current_url(self):
        return self.url


class FakeApi:
    def __init__(self, products, prices, missing=()):
        self.products = products
        self.prices = prices
        self.missing = set(missing)
        self.price_calls = []

    def list_products(self):
        return [RawListEntry(id=p["id"], name=p["name"]) for p in self.products]

    def get_price(self, product_id):
        self.price_calls.append(product_id)
        if product_id in self.missing or product_id not in self.prices:
            raise PriceDetailMissing(product_id, "HTTP 404")
        d = self.prices[product_id]
        return RawPriceDetail(id=d["id"], price=d["price"], vat=d["vat"], name=d["name"])


@pytest.fixture
def banana_api():
    return FakeApi(
        products=[{"id": "2", "name": "Banana"}],
        prices={"2": {"id": 2, "price": 23, "vat": 4.7, "name": "Banana"}},
    )


@pytest.fixture
def fruit_api():
    return FakeApi(
        products=[
            {"id": "1", "name": "Apple"},
            {"id": "2", "name": "Banana"},
            {"id": "3", "name": "Cherry Box"},
        ],
        prices={
            "1": {"id": 1, "price": 12.5, "vat": 2.5, "name": "Apple"},
            "2": {"id": 2, "price": 23, "vat": 4.7, "name": "Banana"},
            "3": {"id": 3.0, "price": 40.0, "vat": 8, "name": "Cherry Box"},
        },
    )


@pytest.fixture
def fruit_rows():
    return [
        ScrapedRow("Apple", "$12.5"),
        ScrapedRow(" Banana ", "$23"),
        ScrapedRow("Cherry Box", "$40"),
    ]


@pytest.fixture
def make_surface():
    return FakeSurface


@pytest.fixture
def make_api():
    return FakeApi
