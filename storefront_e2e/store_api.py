from __future__ import annotations

from typing import Any

import requests

from .errors import ApiError, PriceDetailMissing
from .http import HttpClient
from .models import RawListEntry, RawPriceDetail

DEFAULT_API_PREFIX = "/store2/api/v1"


class StoreApiClient:
    """Client for the storefront's product and price endpoints."""

    def __init__(self, *, base_url: str, token: str = "", api_prefix: str = DEFAULT_API_PREFIX, timeout_s: float = 30.0):
        self.http = HttpClient(base_url=base_url, token=token, timeout_s=timeout_s)
        self.api_prefix = api_prefix.rstrip("/")

    def list_products(self) -> list[RawListEntry]:
        path = f"{self.api_prefix}/product/list"
        try:
            resp = self.http.get(path)
        except requests.RequestException as e:
            raise ApiError(path, None, str(e)) from e
        if not resp.ok:
            raise ApiError(path, resp.status_code, resp.text)
        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(path, resp.status_code, f"invalid JSON: {e}") from e

        # A missing or empty "products" array is a valid, if degenerate, answer.
        rows = data.get("products") if isinstance(data, dict) else None
        rows = rows or []
        if not isinstance(rows, list):
            raise ApiError(path, resp.status_code, f"'products' is not a list: {rows!r}")

        out: list[RawListEntry] = []
        for i, row in enumerate(rows):
            if not isinstance(row, dict) or row.get("id") is None or row.get("name") is None:
                raise ApiError(path, resp.status_code, f"malformed product entry at index {i}: {row!r}")
            out.append(RawListEntry(id=str(row["id"]), name=str(row["name"])))
        return out

    def get_price(self, product_id: str) -> RawPriceDetail:
        path = f"{self.api_prefix}/price/{product_id}"
        try:
            resp = self.http.get(path)
        except requests.RequestException as e:
            raise PriceDetailMissing(product_id, f"request failed: {e}") from e
        if not resp.ok:
            raise PriceDetailMissing(product_id, f"HTTP {resp.status_code}")
        try:
            data: dict[str, Any] = resp.json()
        except ValueError as e:
            raise PriceDetailMissing(product_id, f"invalid JSON: {e}") from e

        if not isinstance(data, dict) or data.get("price") is None:
            raise PriceDetailMissing(product_id, "no price in response")
        return RawPriceDetail(
            id=data.get("id", product_id),
            price=data["price"],
            vat=data.get("vat", 0),
            name=str(data.get("name", "")),
        )
