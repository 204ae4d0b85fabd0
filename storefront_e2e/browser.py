from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path

from playwright.sync_api import Browser, BrowserContext, Locator, Page, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .errors import InteractionFailed, InteractionTimeout
from .models import ScrapedRow
from .surface import ReceiptField

log = logging.getLogger(__name__)

DEFAULT_STORE_PATH = "/store2"
DEFAULT_LOGIN_PATH = "/"
NAVIGATION_TIMEOUT_MS = 30_000
ACTION_TIMEOUT_MS = 10_000
SETTLE_POLL_MS = 100


class StoreBrowserSession:
    """One browser context for one scenario run.

    Usage::

        with StoreBrowserSession("https://shop.example") as session:
            surface = PlaywrightStoreSurface(session.page)

    A fresh context is created on enter and closed on exit, so cookies and
    cart state never leak between scenarios. If *cdp_url* is given the
    session attaches to an already running browser instead of launching one.
    """

    def __init__(self, base_url: str, *, headless: bool = True, cdp_url: str | None = None):
        self.base_url = base_url.rstrip("/")
        self.headless = headless
        self.cdp_url = cdp_url
        self._pw = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self.page: Page | None = None

    def __enter__(self) -> "StoreBrowserSession":
        self._pw = sync_playwright().start()
        try:
            if self.cdp_url:
                self._browser = self._pw.chromium.connect_over_cdp(self.cdp_url)
            else:
                self._browser = self._pw.chromium.launch(headless=self.headless)
            self._context = self._browser.new_context(base_url=self.base_url, ignore_https_errors=True)
            self.page = self._context.new_page()
        except BaseException:
            # __exit__ is not called when __enter__ raises.
            self.__exit__(None, None, None)
            raise
        log.debug("browser session open for %s", self.base_url)
        return self

    def __exit__(self, *exc):
        try:
            if self._context:
                self._context.close()
            if self._browser:
                self._browser.close()
        finally:
            if self._pw:
                self._pw.stop()
        self._pw = None
        self._browser = None
        self._context = None
        self.page = None


class PlaywrightStoreSurface:
    """StoreSurface and LoginSurface bound to a Playwright page.

    This is the only place that knows the storefront's locators, and the only
    place Playwright exceptions are seen: every action runs under _interaction.
    """

    def __init__(
        self,
        page: Page,
        *,
        store_path: str = DEFAULT_STORE_PATH,
        login_path: str = DEFAULT_LOGIN_PATH,
        action_timeout_ms: float = ACTION_TIMEOUT_MS,
    ):
        self.page = page
        self.store_path = store_path
        self.login_path = login_path
        self.action_timeout_ms = action_timeout_ms

        self.select_control = page.get_by_test_id("select-product")
        self.amount_input = page.get_by_role("textbox", name="Amount")
        self.add_to_cart_button = page.get_by_test_id("add-to-cart-button")
        self.buy_button = page.get_by_role("button", name="Buy")
        self.buy_message = page.get_by_test_id("buy-message")
        self.cart_items = page.get_by_role("listitem")
        self.table_rows = page.locator("#productList tr")

        self.name_input = page.get_by_role("textbox", name="Name:")
        self.address_input = page.get_by_role("textbox", name="Address:")
        self.confirm_button = page.get_by_role("button", name="Confirm Purchase")

        self.receipt = {
            ReceiptField.ITEMS: page.locator("#receiptItems"),
            ReceiptField.TOTAL: page.locator("#receiptTotal"),
            ReceiptField.VAT: page.locator("#receiptVAT"),
            ReceiptField.GRAND_TOTAL: page.get_by_test_id("receiptGrandTotal"),
            ReceiptField.THANK_YOU: page.locator("#name"),
            ReceiptField.ADDRESS: page.locator("#address"),
        }

        self.username_input = page.get_by_label("Username")
        self.password_input = page.get_by_label("Password")
        self.role_select = page.get_by_label("Select Role")
        self.login_button = page.get_by_role("button", name="Login")

    # --- store ---

    def open_store(self) -> None:
        with _interaction("opening the store view", NAVIGATION_TIMEOUT_MS):
            self.page.goto(self.store_path, wait_until="load", timeout=NAVIGATION_TIMEOUT_MS)

    def select_product(self, product_id: str) -> None:
        t = self.action_timeout_ms
        with _interaction(f"selecting product {product_id!r}", t):
            self.select_control.select_option(product_id, timeout=t)

    def set_amount(self, amount: str) -> None:
        t = self.action_timeout_ms
        with _interaction("filling the amount", t):
            self.amount_input.fill(amount, timeout=t)

    def submit_add_to_cart(self) -> None:
        t = self.action_timeout_ms
        with _interaction("clicking add to cart", t):
            self.add_to_cart_button.click(timeout=t)

    def submit_buy(self) -> None:
        t = self.action_timeout_ms
        with _interaction("clicking buy", t):
            self.buy_button.click(timeout=t)

    def wait_for_buy_message(self, timeout_ms: float) -> str:
        return self._settled_text(self.buy_message, "buy message to become visible", timeout_ms)

    def fill_buyer(self, name: str, address: str) -> None:
        t = self.action_timeout_ms
        with _interaction("filling buyer name and address", t):
            self.name_input.fill(name, timeout=t)
            self.address_input.fill(address, timeout=t)

    def submit_confirm_purchase(self) -> None:
        t = self.action_timeout_ms
        with _interaction("clicking confirm purchase", t):
            self.confirm_button.click(timeout=t)

    def read_receipt_field(self, field: ReceiptField, timeout_ms: float) -> str:
        return self._settled_text(
            self.receipt[field], f"receipt field '{field.value}' to become visible", timeout_ms
        )

    def receipt_visible(self) -> bool:
        with _interaction("checking for a receipt", self.action_timeout_ms):
            return self.receipt[ReceiptField.GRAND_TOTAL].is_visible()

    def cart_item_count(self) -> int:
        with _interaction("counting cart items", self.action_timeout_ms):
            return int(self.cart_items.count())

    def product_rows(self) -> list[ScrapedRow]:
        t = self.action_timeout_ms
        rows: list[ScrapedRow] = []
        with _interaction("reading the product table", t):
            for i in range(self.table_rows.count()):
                cells = self.table_rows.nth(i).locator("td")
                rows.append(
                    ScrapedRow(
                        name_cell_text=cells.nth(0).inner_text(timeout=t),
                        price_cell_text=cells.nth(1).inner_text(timeout=t),
                    )
                )
        return rows

    def _settled_text(self, loc: Locator, condition: str, timeout_ms: float) -> str:
        """Wait for *loc* to show, then re-read until its text stops changing."""
        with _interaction(condition, timeout_ms):
            loc.wait_for(state="visible", timeout=timeout_ms)
            deadline = time.monotonic() + timeout_ms / 1000
            text = loc.inner_text(timeout=timeout_ms).strip()
            while time.monotonic() < deadline:
                self.page.wait_for_timeout(SETTLE_POLL_MS)
                latest = loc.inner_text(timeout=timeout_ms).strip()
                if latest == text:
                    break
                text = latest
        return text

    # --- login ---

    def open_login(self) -> None:
        with _interaction("opening the login page", NAVIGATION_TIMEOUT_MS):
            self.page.goto(self.login_path, wait_until="load", timeout=NAVIGATION_TIMEOUT_MS)

    def submit_login(self, username: str, password: str, role: str) -> None:
        t = self.action_timeout_ms
        # Credentials are never logged.
        with _interaction("submitting the login form", t):
            self.username_input.fill(username, timeout=t)
            self.password_input.fill(password, timeout=t)
            self.role_select.select_option(role, timeout=t)
            self.login_button.click(timeout=t)
        with _interaction("loading the page after login", NAVIGATION_TIMEOUT_MS):
            self.page.wait_for_load_state("load", timeout=NAVIGATION_TIMEOUT_MS)

    def current_url(self) -> str:
        return self.page.url


def smoke_test(
    base_url: str,
    *,
    out_path: str = "artifacts/store_smoke.png",
    store_path: str = DEFAULT_STORE_PATH,
    headless: bool = True,
    cdp_url: str | None = None,
) -> str:
    """Open the store view and write a full-page screenshot."""
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    with StoreBrowserSession(base_url, headless=headless, cdp_url=cdp_url) as session:
        PlaywrightStoreSurface(session.page, store_path=store_path).open_store()
        session.page.screenshot(path=str(out), full_page=True)

    return str(out)


@contextmanager
def _interaction(action: str, timeout_ms: float):
    """Translate Playwright failures inside the block into VerificationErrors."""
    try:
        yield
    except PlaywrightTimeoutError as exc:
        raise InteractionTimeout(action, timeout_ms) from exc
    except PlaywrightError as exc:
        raise InteractionFailed(action, str(exc)) from exc
