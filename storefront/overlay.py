"""Confirmation overlay modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Click
from textual.screen import ModalScreen
from textual.timer import Timer
from textual.widgets import Static

from storefront.config import (
    ORDER_CONFIRMED_ICON,
    ORDER_CONFIRMED_ICON_COLOR,
    OVERLAY_TIMEOUT_SECONDS,
)
from storefront.rendering import icon_glyph


class OverlayMessage(ModalScreen[None]):
    """Centered message that closes itself after ``timeout`` seconds.

    Exactly one of ``on_timeout`` / ``on_close`` fires, whichever happens first.
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("enter", "close", "Close"),
        ("q", "close", "Close"),
    ]

    CSS = """
    OverlayMessage {
        align: center middle;
        background: $background 60%;
    }

    #overlay-dialog {
        width: 40;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #overlay-icon {
        content-align: center middle;
        width: 100%;
        margin-bottom: 1;
    }

    #overlay-message {
        content-align: center middle;
        width: 100%;
        text-style: bold;
        color: white;
    }
    """

    def __init__(
        self,
        message: str,
        icon: str = ORDER_CONFIRMED_ICON,
        icon_color: str = ORDER_CONFIRMED_ICON_COLOR,
        timeout: float = OVERLAY_TIMEOUT_SECONDS,
        on_timeout: Callable[[], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        super().__init__()
        self.message = message
        self.icon = icon
        self.icon_color = icon_color
        self.timeout = timeout
        self.on_timeout = on_timeout
        self.on_close = on_close
        self._finished = False
        self._timer: Timer | None = None

    def compose(self) -> ComposeResult:
        with Container(id="overlay-dialog"):
            if self.icon:
                yield Static(Text(icon_glyph(self.icon), style=f"bold {self.icon_color}"), id="overlay-icon")
            yield Static(Text(self.message), id="overlay-message")

    def on_mount(self) -> None:
        self._timer = self.set_timer(self.timeout, self._expire)

    def on_click(self, event: Click) -> None:
        # A click on the dimmed backdrop closes, like tapping outside the overlay.
        dialog = self.query_one("#overlay-dialog", Container)
        if not dialog.region.contains(event.screen_x, event.screen_y):
            self.action_close()

    def action_close(self) -> None:
        self._finish(self.on_close)

    def _expire(self) -> None:
        self._finish(self.on_timeout)

    def _finish(self, callback: Callable[[], None] | None) -> None:
        if self._finished:
            return
        self._finished = True
        if self._timer is not None:
            self._timer.stop()
        self.dismiss()
        if callback is not None:
            callback()
