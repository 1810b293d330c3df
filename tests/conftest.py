"""Shared fakes for storefront tests."""

from __future__ import annotations

import asyncio
import threading
from decimal import Decimal

import pytest

from storefront.models import Category, ExtraDefinition, Item, MenuItem, Order


def make_item(item_id: int = 1, price: str = "10.00", extras: list[tuple[int, str, str]] | None = None) -> Item:
    if extras is None:
        extras = [(1, "Bacon", "2.00"), (2, "Cheese", "1.50")]
    return Item(
        item_id=item_id,
        name=f"Item {item_id}",
        description=f"Description {item_id}",
        price=Decimal(price),
        image_url=f"http://img/{item_id}.png",
        thumbnail_url=f"http://img/{item_id}-thumb.png",
        category=1,
        extras=tuple(ExtraDefinition(extra_id, name, Decimal(value)) for extra_id, name, value in extras),
    )


class FakeStorefrontApi:
    """In-memory stand-in for StorefrontApi.

    ``gate(key)`` makes the matching call block until ``release(key)``; keys are
    either a method name (``"get_item"``) or method plus argument (``"get_item:1"``).
    """

    base_url = "http://fake/"

    def __init__(self, items: list[Item] | None = None, favorites: set[int] | None = None) -> None:
        self.items = {item.item_id: item for item in (items or [make_item(1)])}
        self.favorites = set(favorites or ())
        self.categories = [Category(1, "Pasta"), Category(2, "Pizza")]
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self._gates: dict[str, threading.Event] = {}
        self._started: set[str] = set()
        self._lock = threading.Lock()
        self.closed = False

    def gate(self, key: str) -> None:
        self._gates[key] = threading.Event()

    def release(self, key: str) -> None:
        self._gates[key].set()

    def release_all(self) -> None:
        for event in self._gates.values():
            event.set()

    def was_started(self, key: str) -> bool:
        with self._lock:
            return key in self._started

    def calls_to(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def _enter(self, name: str, arg: object = None) -> None:
        keys = [name, f"{name}:{arg}"]
        with self._lock:
            self.calls.append((name, arg))
            self._started.update(keys)
        for key in keys:
            if key in self.failures:
                raise self.failures[key]
            gate = self._gates.get(key)
            if gate is not None:
                gate.wait(timeout=5)

    def get_item(self, item_id: int) -> Item:
        self._enter("get_item", item_id)
        return self.items[item_id]

    def list_items(self, name_like: str = "", category: int | None = None) -> list[MenuItem]:
        self._enter("list_items", (name_like, category))
        rows = [
            MenuItem(item.item_id, item.name, item.description, item.price, item.thumbnail_url, item.category)
            for item in self.items.values()
        ]
        if name_like:
            rows = [row for row in rows if name_like.lower() in row.name.lower()]
        if category is not None:
            rows = [row for row in rows if row.category == category]
        return rows

    def list_categories(self) -> list[Category]:
        self._enter("list_categories")
        return list(self.categories)

    def list_favorites(self, item_id: int) -> list[dict]:
        self._enter("list_favorites", item_id)
        return [{"id": item_id}] if item_id in self.favorites else []

    def create_favorite(self, record: dict) -> None:
        self._enter("create_favorite", record)
        self.favorites.add(record["id"])

    def delete_favorite(self, item_id: int) -> None:
        self._enter("delete_favorite", item_id)
        self.favorites.discard(item_id)

    def create_order(self, order: Order) -> dict:
        self._enter("create_order", order)
        return {"id": 99, **order.to_payload()}

    def close(self) -> None:
        self.closed = True


async def wait_started(api: FakeStorefrontApi, key: str, timeout: float = 5.0) -> None:
    """Yield to the loop until the fake has received the call ``key``."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not api.was_started(key):
        if loop.time() > deadline:
            raise AssertionError(f"call {key} never started")
        await asyncio.sleep(0.01)


@pytest.fixture
def fake_api():
    api = FakeStorefrontApi(items=[make_item(1), make_item(2, price="5.00", extras=[(3, "Sauce", "0.75")])])
    yield api
    api.release_all()
