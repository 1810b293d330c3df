"""State and remote operations behind the item detail screen."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from functools import partial
from typing import Callable, Protocol

from storefront.errors import InvalidIdentifierError, ItemNotLoadedError
from storefront.ledger import ExtrasLedger, QuantityCounter
from storefront.models import Item, Order
from storefront.money import format_money
from storefront.pricing import cart_total
from storefront.scope import OperationCancelled, RequestScope

logger = logging.getLogger(__name__)


class DetailApi(Protocol):
    def get_item(self, item_id: int) -> Item: ...

    def list_favorites(self, item_id: int) -> list: ...

    def create_favorite(self, record: dict) -> None: ...

    def delete_favorite(self, item_id: int) -> None: ...

    def create_order(self, order: Order) -> dict: ...


def parse_identifier(raw: object) -> int:
    """Accept a positive int or a string of digits; anything else is rejected."""
    if isinstance(raw, bool):
        raise InvalidIdentifierError(f"Invalid item identifier: {raw!r}")
    if isinstance(raw, int):
        identifier = raw
    elif isinstance(raw, str) and raw.strip().isdigit():
        identifier = int(raw.strip())
    else:
        raise InvalidIdentifierError(f"Invalid item identifier: {raw!r}")
    if identifier <= 0:
        raise InvalidIdentifierError(f"Invalid item identifier: {raw!r}")
    return identifier


class DetailSession:
    """One detail screen's item, extras, quantity, favorite flag and order state.

    All remote work goes through a single ``RequestScope``: opening another
    identifier or closing the session cancels whatever is still in flight, and
    results from an older generation are dropped instead of applied.
    """

    def __init__(
        self,
        api: DetailApi,
        on_change: Callable[[], None] | None = None,
        on_confirmed: Callable[[], None] | None = None,
    ) -> None:
        self.api = api
        self.on_change = on_change
        self.on_confirmed = on_confirmed
        self.scope = RequestScope("detail")
        self.identifier: int | None = None
        self.item: Item | None = None
        self.extras = ExtrasLedger()
        self.quantity = QuantityCounter()
        self.is_favorite = False
        self.order_confirmed = False

    @property
    def total(self) -> Decimal:
        return cart_total(self.item, self.extras, self.quantity.value)

    @property
    def formatted_total(self) -> str:
        return format_money(self.total)

    async def open(self, raw_identifier: object) -> None:
        """Switch to a new item: cancel earlier requests, reset state, then load."""
        identifier = parse_identifier(raw_identifier)
        self.scope.reset("identifier_changed")
        self.identifier = identifier
        self.item = None
        self.extras.clear()
        self.quantity.reset()
        self.is_favorite = False
        self.order_confirmed = False
        self._changed()
        logger.info("detail_open item_id=%d generation=%d", identifier, self.scope.generation)

        await asyncio.gather(self.load_item(), self.load_favorite_status())

    def close(self) -> None:
        self.scope.close()
        logger.info("detail_closed item_id=%s", self.identifier)

    async def load_item(self) -> None:
        identifier = self._require_identifier()
        try:
            item = await self.scope.dispatch("item", partial(self.api.get_item, identifier))
        except OperationCancelled as exc:
            logger.debug("item_load_dropped item_id=%d reason=%s", identifier, exc.reason)
            return

        self.item = item
        self.extras.load(item.extras)
        self.quantity.reset()
        logger.info("item_loaded item_id=%d extras=%d", item.item_id, len(self.extras))
        self._changed()

    async def load_favorite_status(self) -> None:
        identifier = self._require_identifier()
        try:
            favorites = await self.scope.dispatch("favorite_status", partial(self.api.list_favorites, identifier))
        except OperationCancelled as exc:
            logger.debug("favorite_status_dropped item_id=%d reason=%s", identifier, exc.reason)
            return

        if favorites:
            self.is_favorite = True
            self._changed()

    def increment_extra(self, extra_id: int) -> None:
        if self.extras.increment(extra_id):
            self._changed()

    def decrement_extra(self, extra_id: int) -> None:
        if self.extras.decrement(extra_id):
            self._changed()

    def increment_order_quantity(self) -> None:
        if self.quantity.increment():
            self._changed()

    def decrement_order_quantity(self) -> None:
        if self.quantity.decrement():
            self._changed()

    async def toggle_favorite(self) -> bool:
        """Flip the favorite flag once the remote create/delete succeeds; return the resulting flag."""
        identifier = self._require_identifier()
        next_state = not self.is_favorite
        if next_state:
            call = partial(self.api.create_favorite, self._require_item().favorite_record())
        else:
            call = partial(self.api.delete_favorite, identifier)

        try:
            await self.scope.dispatch("favorite_toggle", call)
        except OperationCancelled as exc:
            logger.debug("favorite_toggle_dropped item_id=%d reason=%s", identifier, exc.reason)
            return self.is_favorite

        self.is_favorite = next_state
        logger.info("favorite_toggled item_id=%d is_favorite=%s", identifier, next_state)
        self._changed()
        return next_state

    async def submit_order(self) -> bool:
        """Post the current item and extras as an order; return whether it was confirmed."""
        order = Order.compose(self._require_item(), self.extras.extras)
        # A pending POST still reaches the server even if its wait is cancelled.
        if "order" in self.scope.pending_kinds:
            logger.debug("order_submit_ignored item_id=%d reason=pending", order.product_id)
            return False
        try:
            await self.scope.dispatch("order", partial(self.api.create_order, order))
        except OperationCancelled as exc:
            logger.debug("order_submit_dropped item_id=%d reason=%s", order.product_id, exc.reason)
            return False

        logger.info("order_submitted item_id=%d extras=%d", order.product_id, len(order.extras))
        if not self.order_confirmed:
            self.order_confirmed = True
            self._changed()
            if self.on_confirmed is not None:
                self.on_confirmed()
        return True

    def _require_identifier(self) -> int:
        if self.identifier is None:
            raise InvalidIdentifierError("No item identifier has been opened")
        return self.identifier

    def _require_item(self) -> Item:
        if self.item is None:
            raise ItemNotLoadedError("Item has not been loaded yet")
        return self.item

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
