"""Main Textual app class."""

from __future__ import annotations

import logging

from textual.app import App

from storefront.api import StorefrontApi
from storefront.detail_screen import ItemDetailScreen
from storefront.menu_screen import MenuScreen

logger = logging.getLogger(__name__)


class StorefrontApp(App):
    """Browse the menu, compose an order for one item and submit it."""

    TITLE = "Storefront"
    SUB_TITLE = "Menu"

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, api: StorefrontApi | None = None) -> None:
        super().__init__()
        self.api = api or StorefrontApi()

    def on_mount(self) -> None:
        logger.info("app_mounted base_url=%s", getattr(self.api, "base_url", None))
        self.push_screen(MenuScreen(self.api, on_open=self.open_item))

    def open_item(self, item_id: int) -> None:
        """Navigate to the detail screen for ``item_id``."""
        self.push_screen(ItemDetailScreen(self.api, item_id))
