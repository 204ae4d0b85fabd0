from __future__ import annotations

import logging
import re
from enum import Enum

from .errors import FieldMismatch, InteractionTimeout, ReceiptMismatch, UnexpectedTransitionError, WrongStateError
from .models import CartSelection, ProductRecord, ReceiptSnapshot
from .receipt import assert_exact, collect_mismatches
from .scraper import scrape_product_table
from .surface import LoginSurface, ReceiptField, StoreSurface

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5_000


class PageState(Enum):
    NEW = "new"
    LISTING = "listing"
    CART = "cart"
    CHECKOUT = "checkout"
    RECEIPT = "receipt"


class StorePage:
    """Store page model.

    Each transition returns a view for the state it lands in:

        listing = StorePage(surface).navigate()
        receipt = listing.add_product_to_cart("2", "1").buy().confirm_purchase("Malin", "Testgatan 1")

    Receipt accessors only exist on Receipt, and a view stops working once the
    page has moved on, so stale reads raise WrongStateError instead of racing.
    """

    def __init__(self, surface: StoreSurface, *, timeout_ms: float = DEFAULT_TIMEOUT_MS):
        self.surface = surface
        self.timeout_ms = timeout_ms
        self.state = PageState.NEW
        self._generation = 0

    def navigate(self) -> "Listing":
        self.surface.open_store()
        return self._enter(PageState.LISTING, Listing)

    def _enter(self, state: PageState, view_cls):
        log.debug("store page %s -> %s", self.state.value, state.value)
        self.state = state
        self._generation += 1
        return view_cls(self, self._generation)


class _View:
    state: PageState

    def __init__(self, page: StorePage, generation: int):
        self._page = page
        self._generation = generation

    @property
    def surface(self) -> StoreSurface:
        if self._generation != self._page._generation:
            raise WrongStateError(
                f"{type(self).__name__} view is stale: page is now in state {self._page.state.value}"
            )
        return self._page.surface

    def _add(self, selection: CartSelection) -> None:
        s = self.surface
        s.select_product(selection.product_id)
        s.set_amount(selection.amount)
        s.submit_add_to_cart()


class Listing(_View):
    state = PageState.LISTING

    def add_product_to_cart(self, product_id: str, amount: str) -> "Cart":
        self._add(CartSelection(product_id=product_id, amount=amount))
        return self._page._enter(PageState.CART, Cart)

    def attempt_add_product_and_expect_error(
        self, product_id: str, amount: str, expected_message: str
    ) -> "Listing":
        """Add to cart expecting the UI to refuse with *expected_message*.

        Raises InteractionTimeout if nothing happens, or
        UnexpectedTransitionError if the product landed in the cart (or a
        receipt appeared) instead.
        """
        s = self.surface
        items_before = s.cart_item_count()
        self._add(CartSelection(product_id=product_id, amount=amount))
        try:
            message = s.wait_for_buy_message(self._page.timeout_ms)
        except InteractionTimeout:
            moved = self._moved_on(items_before)
            if moved:
                raise UnexpectedTransitionError(
                    f"Expected error {expected_message!r} but {moved}"
                ) from None
            raise
        moved = self._moved_on(items_before)
        if moved:
            raise UnexpectedTransitionError(f"Error {message!r} was shown but {moved}")
        assert_exact("buy message", expected_message, message)
        return self

    def _moved_on(self, items_before: int) -> str | None:
        s = self.surface
        if s.receipt_visible():
            return "a receipt is visible"
        items_after = s.cart_item_count()
        if items_after > items_before:
            return f"the cart grew from {items_before} to {items_after} items"
        return None

    def get_product_table_data(self) -> list[ProductRecord]:
        return scrape_product_table(self.surface)


class Cart(_View):
    state = PageState.CART

    def add_product_to_cart(self, product_id: str, amount: str) -> "Cart":
        self._add(CartSelection(product_id=product_id, amount=amount))
        return self._page._enter(PageState.CART, Cart)

    def buy(self) -> "Checkout":
        self.surface.submit_buy()
        return self._page._enter(PageState.CHECKOUT, Checkout)


class Checkout(_View):
    state = PageState.CHECKOUT

    def confirm_purchase(self, name: str, address: str) -> "Receipt":
        s = self.surface
        s.fill_buyer(name, address)
        s.submit_confirm_purchase()
        return self._page._enter(PageState.RECEIPT, Receipt)


class Receipt(_View):
    state = PageState.RECEIPT

    def __init__(self, page: StorePage, generation: int):
        super().__init__(page, generation)
        self._snapshot: ReceiptSnapshot | None = None

    def _read(self, field: ReceiptField) -> str:
        # Waits for the field; InteractionTimeout if it never renders.
        return self.surface.read_receipt_field(field, self._page.timeout_ms)

    def thank_you_message(self) -> str:
        return self._read(ReceiptField.THANK_YOU)

    def shipping_address(self) -> str:
        return self._read(ReceiptField.ADDRESS)

    def line_items(self) -> str:
        return self._read(ReceiptField.ITEMS)

    def total(self) -> str:
        return self._read(ReceiptField.TOTAL)

    def vat(self) -> str:
        return self._read(ReceiptField.VAT)

    def grand_total(self) -> str:
        return self._read(ReceiptField.GRAND_TOTAL)

    def snapshot(self) -> ReceiptSnapshot:
        if self._snapshot is None:
            self._snapshot = ReceiptSnapshot(
                items=self.line_items(),
                total=self.total(),
                vat=self.vat(),
                grand_total=self.grand_total(),
                buyer_name=self.thank_you_message(),
                shipping_address=self.shipping_address(),
            )
        return self._snapshot

    def validate_receipt_totals(self, total: str, vat: str, grand_total: str) -> None:
        mismatches = collect_mismatches([
            (assert_exact, "total", total, self.total()),
            (assert_exact, "vat", vat, self.vat()),
            (assert_exact, "grand_total", grand_total, self.grand_total()),
        ])
        if mismatches:
            raise ReceiptMismatch(mismatches)


_STORE_URL_RE = re.compile(r"/store", re.IGNORECASE)


class LoginPage:
    def __init__(self, surface: LoginSurface):
        self.surface = surface

    def navigate(self) -> None:
        self.surface.open_login()

    def login(self, username: str, password: str, role: str) -> None:
        self.surface.submit_login(username, password, role)

    def assert_landed_on_store(self) -> None:
        url = self.surface.current_url()
        if not _STORE_URL_RE.search(url):
            raise FieldMismatch("page URL", "/store", url, contains=True)
