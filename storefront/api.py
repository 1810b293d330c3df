"""HTTP client for the storefront data service."""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from typing import Any, Callable, TypeVar
from urllib.parse import urljoin

import requests

from storefront.config import API_BASE_URL, API_URL_ENV
from storefront.errors import ApiError
from storefront.models import Category, Item, MenuItem, Order

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_api_base_url() -> str:
    """Return the service base URL, honouring the environment override."""
    base_url = os.environ.get(API_URL_ENV, "").strip() or API_BASE_URL
    if not base_url.endswith("/"):
        base_url += "/"
    return base_url


class StorefrontApi:
    """Blocking client for foods, categories, favorites and orders.

    Calls are made without a timeout; the request scopes decide when a result
    is no longer wanted.
    """

    def __init__(self, base_url: str | None = None, session: requests.Session | None = None) -> None:
        self.base_url = base_url or resolve_api_base_url()
        self._session = session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")

    def close(self) -> None:
        self._session.close()

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        data: Any = None,
    ) -> Any:
        url = urljoin(self.base_url, endpoint)
        try:
            response = self._session.request(method=method, url=url, params=params, json=data)
            response.raise_for_status()
        except requests.RequestException as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            logger.error("api_request_failed method=%s url=%s status=%s error=%s", method, url, status_code, exc)
            raise ApiError(f"{method} {endpoint} failed: {exc}", status_code=status_code) from exc

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json(parse_float=Decimal)
        except ValueError as exc:
            logger.error("api_bad_payload method=%s url=%s", method, url)
            raise ApiError(f"{method} {endpoint} returned invalid JSON", status_code=response.status_code) from exc

    def _convert(self, endpoint: str, convert: Callable[[], T]) -> T:
        try:
            return convert()
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("api_bad_payload method=GET endpoint=%s error=%r", endpoint, exc)
            raise ApiError(f"GET {endpoint} returned malformed data: {exc!r}") from exc

    def get_item(self, item_id: int) -> Item:
        endpoint = f"foods/{item_id}"
        data = self._request("GET", endpoint)
        if not isinstance(data, dict):
            raise ApiError(f"GET {endpoint} returned no item")
        return self._convert(endpoint, lambda: Item.from_api(data))

    def list_items(self, name_like: str = "", category: int | None = None) -> list[MenuItem]:
        params: dict[str, Any] = {}
        if name_like:
            params["name_like"] = name_like
        if category is not None:
            params["category_like"] = category
        data = self._request("GET", "foods", params=params) or []
        return self._convert("foods", lambda: [MenuItem.from_api(row) for row in data])

    def list_categories(self) -> list[Category]:
        data = self._request("GET", "categories") or []
        return self._convert("categories", lambda: [Category.from_api(row) for row in data])

    def list_favorites(self, item_id: int) -> list[dict[str, Any]]:
        """Favorites matching the item id; a non-empty list means it is a favorite."""
        return list(self._request("GET", "favorites", params={"id": item_id}) or [])

    def create_favorite(self, record: dict[str, Any]) -> None:
        self._request("POST", "favorites", data=record)

    def delete_favorite(self, item_id: int) -> None:
        self._request("DELETE", f"favorites/{item_id}")

    def create_order(self, order: Order) -> dict[str, Any]:
        return self._request("POST", "orders", data=order.to_payload()) or {}
