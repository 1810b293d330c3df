"""Item detail screen: extras, quantity, running total, favorite and order submit."""

from __future__ import annotations

import logging
from typing import Awaitable

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Header, Static

from storefront.config import ORDER_CONFIRMED_ICON, ORDER_CONFIRMED_ICON_COLOR, ORDER_CONFIRMED_MESSAGE
from storefront.errors import StorefrontError
from storefront.overlay import OverlayMessage
from storefront.rendering import format_extras, format_item_header, format_total_bar
from storefront.session import DetailApi, DetailSession

logger = logging.getLogger(__name__)

_HELP = "↑/↓ extra  +/- extra qty  [/] order qty  f favorite  Ctrl+S confirm  Esc back"


class ItemDetailScreen(Screen):
    """Detail screen bound to one item identifier for its whole lifetime."""

    CSS = """
    #detail-layout {
        height: 1fr;
        border: round $primary;
        padding: 1;
    }

    #item-header {
        margin-bottom: 1;
    }

    #extras-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #total-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 3;
    }

    #status {
        color: $text-muted;
    }

    .pane-title {
        text-style: bold;
        margin: 1 0;
    }
    """

    BINDINGS = [
        ("up", "move_cursor(-1)", "Previous extra"),
        ("down", "move_cursor(1)", "Next extra"),
        ("k", "move_cursor(-1)", "Previous extra"),
        ("j", "move_cursor(1)", "Next extra"),
        ("plus,equals_sign", "increment_extra", "Add extra"),
        ("minus", "decrement_extra", "Remove extra"),
        ("right_square_bracket", "increment_order_quantity", "More"),
        ("left_square_bracket", "decrement_order_quantity", "Less"),
        ("f", "toggle_favorite", "Favorite"),
        Binding("ctrl+s", "submit_order", "Confirm order", priority=True),
        ("escape", "back", "Back"),
    ]

    cursor_index = reactive(0)
    order_quantity = reactive(1)
    formatted_total = reactive("")
    is_favorite = reactive(False)
    order_confirmed = reactive(False)
    status = reactive("")

    def __init__(self, api: DetailApi, item_id: object) -> None:
        super().__init__()
        self.item_id = item_id
        self.session = DetailSession(api, on_change=self._sync_from_session)

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="detail-layout"):
            yield Static(id="item-header")
            yield Static("Extras", classes="pane-title")
            yield Static(id="extras-list")
            yield Static("Order total", classes="pane-title")
            yield Static(id="total-bar")
            yield Static(id="status")

    def on_mount(self) -> None:
        self._sync_from_session()
        self._run_guarded(self.session.open(self.item_id), "Load")

    def on_unmount(self) -> None:
        self.session.close()

    def action_move_cursor(self, delta: int) -> None:
        extras = self.session.extras.extras
        if not extras:
            return
        self.cursor_index = (self.cursor_index + delta) % len(extras)
        self._refresh_extras()

    def action_increment_extra(self) -> None:
        extra_id = self._extra_id_at_cursor()
        if extra_id is not None:
            self.session.increment_extra(extra_id)

    def action_decrement_extra(self) -> None:
        extra_id = self._extra_id_at_cursor()
        if extra_id is not None:
            self.session.decrement_extra(extra_id)

    def action_increment_order_quantity(self) -> None:
        self.session.increment_order_quantity()

    def action_decrement_order_quantity(self) -> None:
        self.session.decrement_order_quantity()

    def action_toggle_favorite(self) -> None:
        self._run_guarded(self.session.toggle_favorite(), "Favorite")

    def action_submit_order(self) -> None:
        if self.order_confirmed or "order" in self.session.scope.pending_kinds:
            return
        self._run_guarded(self.session.submit_order(), "Order")

    def action_back(self) -> None:
        self._navigate_back()

    def watch_order_confirmed(self, confirmed: bool) -> None:
        if not confirmed:
            return
        self.app.push_screen(
            OverlayMessage(
                ORDER_CONFIRMED_MESSAGE,
                icon=ORDER_CONFIRMED_ICON,
                icon_color=ORDER_CONFIRMED_ICON_COLOR,
                on_timeout=self._navigate_back,
                on_close=self._navigate_back,
            )
        )

    def watch_status(self, status: str) -> None:
        try:
            self.query_one("#status", Static).update(Text(status or _HELP))
        except NoMatches:
            return

    def _run_guarded(self, work: Awaitable[object], action: str) -> None:
        self.run_worker(self._guarded(work, action), group="detail")

    async def _guarded(self, work: Awaitable[object], action: str) -> None:
        try:
            await work
        except StorefrontError as exc:
            logger.warning("detail_action_failed action=%s item_id=%r error=%s", action, self.item_id, exc)
            self.status = f"{action} failed: {exc}"

    def _navigate_back(self) -> None:
        if self.app.screen is self:
            self.app.pop_screen()

    def _extra_id_at_cursor(self) -> int | None:
        extras = self.session.extras.extras
        if not (0 <= self.cursor_index < len(extras)):
            return None
        return extras[self.cursor_index].extra_id

    def _sync_from_session(self) -> None:
        session = self.session
        if self.cursor_index >= len(session.extras):
            self.cursor_index = 0
        self.order_quantity = session.quantity.value
        self.formatted_total = session.formatted_total
        self.is_favorite = session.is_favorite
        self.order_confirmed = session.order_confirmed
        self._refresh_all()

    def _refresh_all(self) -> None:
        try:
            self.query_one("#item-header", Static).update(format_item_header(self.session.item, self.is_favorite))
            self.query_one("#total-bar", Static).update(format_total_bar(self.formatted_total, self.order_quantity))
        except NoMatches:
            return
        self._refresh_extras()

    def _refresh_extras(self) -> None:
        try:
            extras_widget = self.query_one("#extras-list", Static)
        except NoMatches:
            return
        height = extras_widget.size.height
        visible_rows = height if height > 0 else 8
        extras_widget.update(format_extras(self.session.extras.extras, self.cursor_index, visible_rows))
