"""Menu screen: search and category filter over the remote item listing."""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import Screen
from textual.widgets import Header, Static

from storefront.api import StorefrontApi
from storefront.errors import StorefrontError
from storefront.models import Category, MenuItem
from storefront.rendering import format_category_filter, format_menu_row, window_bounds
from storefront.scope import OperationCancelled, RequestScope

logger = logging.getLogger(__name__)


class MenuScreen(Screen):
    """Lists items matching the typed query and the selected category."""

    CSS = """
    #menu-pane {
        height: 1fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #categories {
        margin-bottom: 1;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("tab", "cycle_category(1)", "Next category"),
        ("shift+tab", "cycle_category(-1)", "Previous category"),
        ("enter", "open_selected", "Open item"),
        ("backspace", "backspace_query", "Delete query char"),
        ("escape", "clear_query", "Clear search"),
    ]

    search_text = reactive("")
    selected_index = reactive(0)
    category_id: reactive[int | None] = reactive(None)

    def __init__(self, api: StorefrontApi, on_open: Callable[[int], None]) -> None:
        super().__init__()
        self.api = api
        self.on_open = on_open
        self.scope = RequestScope("menu")
        self.items: list[MenuItem] = []
        self.categories: list[Category] = []
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="menu-pane"):
            yield Static(id="search-bar")
            yield Static(id="categories")
            yield Static(id="results")

    def on_mount(self) -> None:
        self._refresh_all()
        self.run_worker(self._load_categories(), group="menu-categories")
        self._reload_items()

    def on_unmount(self) -> None:
        self.scope.close()

    def on_key(self, event: Key) -> None:
        if self.app.screen is not self:
            return
        if not event.is_printable or not event.character or len(event.character) != 1:
            return
        if not (event.character.isalnum() or event.character == " "):
            return

        self.search_text += event.character
        self._query_changed()
        event.stop()

    def action_backspace_query(self) -> None:
        if not self.search_text:
            return
        self.search_text = self.search_text[:-1]
        self._query_changed()

    def action_clear_query(self) -> None:
        if not self.search_text:
            return
        self.search_text = ""
        self._query_changed()

    def action_cycle_results(self, delta: int) -> None:
        if not self.items:
            self.selected_index = 0
            return
        self.selected_index = (self.selected_index + delta) % len(self.items)
        self._refresh_results()

    def action_cycle_category(self, delta: int) -> None:
        # Position 0 is "All"; categories follow in listing order.
        options: list[int | None] = [None] + [category.category_id for category in self.categories]
        current = options.index(self.category_id) if self.category_id in options else 0
        self.category_id = options[(current + delta) % len(options)]
        self.selected_index = 0
        self._refresh_categories()
        self._reload_items()

    def action_open_selected(self) -> None:
        if not self.items:
            return
        entry = self.items[self.selected_index]
        logger.info("menu_open item_id=%d", entry.item_id)
        self.on_open(entry.item_id)

    def _query_changed(self) -> None:
        self.selected_index = 0
        self._refresh_search_bar()
        self._reload_items()

    def _reload_items(self) -> None:
        self.run_worker(self._load_items(self.search_text, self.category_id), group="menu-items")

    async def _load_items(self, query: str, category_id: int | None) -> None:
        call = partial(self.api.list_items, name_like=query, category=category_id)
        try:
            items = await self.scope.dispatch("items", call)
        except OperationCancelled:
            return
        except StorefrontError as exc:
            logger.warning("menu_load_failed query=%r category=%s error=%s", query, category_id, exc)
            self.system_status = f"Could not load menu: {exc}"
            self._refresh_search_bar()
            return

        self.items = items
        self.system_status = ""
        if self.selected_index >= len(items):
            self.selected_index = 0
        self._refresh_all()

    async def _load_categories(self) -> None:
        try:
            categories = await self.scope.dispatch("categories", self.api.list_categories)
        except OperationCancelled:
            return
        except StorefrontError as exc:
            logger.warning("menu_categories_failed error=%s", exc)
            self.system_status = f"Could not load categories: {exc}"
            self._refresh_search_bar()
            return

        self.categories = categories
        self._refresh_categories()

    def _refresh_all(self) -> None:
        self._refresh_search_bar()
        self._refresh_categories()
        self._refresh_results()

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        text = Text()
        text.append("Search: ", style="bold")
        text.append(self.search_text or "")
        if self.system_status:
            text.append(f"\n{self.system_status}", style="#ffb3b3")
        bar.update(text)

    def _refresh_categories(self) -> None:
        try:
            widget = self.query_one("#categories", Static)
        except NoMatches:
            return
        widget.update(format_category_filter(self.categories, self.category_id))

    def _refresh_results(self) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if not self.items:
            results_widget.update(Text("No results"))
            return

        height = results_widget.size.height
        visible_rows = height if height > 0 else 8
        start, end = window_bounds(len(self.items), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append_text(format_menu_row(self.items[idx], idx == self.selected_index, self.categories))
        if end < len(self.items):
            lines.append("\n⋮", style="dim")

        results_widget.update(lines)
