from __future__ import annotations

from enum import Enum
from typing import Protocol

from .models import ScrapedRow


class ReceiptField(str, Enum):
    ITEMS = "items"
    TOTAL = "total"
    VAT = "vat"
    GRAND_TOTAL = "grand_total"
    THANK_YOU = "thank_you"
    ADDRESS = "address"


class StoreSurface(Protocol):
    """What the store page model needs from a browser, by meaning not by locator.

    Every method returns only after the UI has settled. Waiting methods raise
    InteractionTimeout naming the condition they waited for; any other browser
    refusal is raised as InteractionFailed.
    """

    def open_store(self) -> None: ...

    def select_product(self, product_id: str) -> None: ...

    def set_amount(self, amount: str) -> None: ...

    def submit_add_to_cart(self) -> None: ...

    def submit_buy(self) -> None: ...

    def wait_for_buy_message(self, timeout_ms: float) -> str: ...

    def fill_buyer(self, name: str, address: str) -> None: ...

    def submit_confirm_purchase(self) -> None: ...

    def read_receipt_field(self, field: ReceiptField, timeout_ms: float) -> str: ...

    def receipt_visible(self) -> bool: ...

    def cart_item_count(self) -> int: ...

    def product_rows(self) -> list[ScrapedRow]: ...


class LoginSurface(Protocol):
    def open_login(self) -> None: ...

    def submit_login(self, username: str, password: str, role: str) -> None: ...

    def current_url(self) -> str: ...
