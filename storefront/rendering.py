"""Rendering helpers for the storefront screens."""

from __future__ import annotations

from typing import Sequence

from rich.text import Text

from storefront.config import FAVORITE_ICON_COLOR
from storefront.models import Category, Extra, Item, MenuItem
from storefront.money import format_money

ICON_GLYPHS = {
    "favorite": "♥",
    "favorite-border": "♡",
    "thumbs-up": "👍",
    "check-square": "☑",
}


def icon_glyph(name: str) -> str:
    return ICON_GLYPHS.get(name, "•")


def favorite_icon_name(is_favorite: bool) -> str:
    return "favorite" if is_favorite else "favorite-border"


_BADGE_STYLES = (
    "bold #ffffff on #b23a48",
    "bold #ffffff on #2f6db5",
    "bold #0b1f0f on #5fbf72",
)


def category_badge_style(position: int | None) -> str:
    """Return a consistent badge style for a category at ``position`` in the listing."""
    if position is None:
        return "dim"
    return _BADGE_STYLES[position % len(_BADGE_STYLES)]


def category_positions(categories: Sequence[Category]) -> dict[int, int]:
    """Map each category id to its position in the fetched listing."""
    return {category.category_id: position for position, category in enumerate(categories)}


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """Slice of ``total`` rows to show in ``rows`` lines, keeping ``selected`` centred."""
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        start = selected - rows // 2
        start = max(0, start)
        start = min(start, total - rows)

    return (start, start + rows)


def format_item_header(item: Item | None, is_favorite: bool) -> Text:
    """Render name, favorite icon, description and unit price."""
    text = Text()
    if item is None:
        text.append("Loading…", style="dim")
        return text

    text.append(item.name, style="bold")
    text.append("  ")
    text.append(icon_glyph(favorite_icon_name(is_favorite)), style=f"bold {FAVORITE_ICON_COLOR}")
    if item.description:
        text.append(f"\n{item.description}")
    text.append(f"\n{format_money(item.price)}", style="bold #39B100")
    return text


def format_extras(extras: Sequence[Extra], cursor_index: int, visible_rows: int) -> Text:
    """Render the extras list with quantities and a cursor pointer."""
    if not extras:
        return Text("(no extras)", style="dim")

    start, end = window_bounds(len(extras), visible_rows, cursor_index)
    lines = Text()
    if start > 0:
        lines.append("⋮\n", style="dim")

    for idx in range(start, end):
        if idx > start:
            lines.append("\n")
        extra = extras[idx]
        pointer = "➤ " if idx == cursor_index else "  "
        style = "bold" if extra.quantity else ""
        lines.append(f"{pointer}{extra.name}", style=style)
        lines.append(f"  {format_money(extra.value)}", style="dim")
        lines.append(f"   - {extra.quantity} +")

    if end < len(extras):
        lines.append("\n⋮", style="dim")
    return lines


def format_total_bar(formatted_total: str, order_quantity: int) -> Text:
    text = Text()
    text.append(formatted_total, style="bold #39B100")
    text.append(f"    [ - {order_quantity} + ]")
    return text


def format_menu_row(entry: MenuItem, selected: bool, categories: Sequence[Category] = ()) -> Text:
    """Render one listing row with its category badge and price.

    The badge colour follows the category's position in ``categories``; a
    category missing from that listing is shown dimmed by id.
    """
    text = Text()
    text.append("➤ " if selected else "  ")
    if entry.category is not None:
        position = category_positions(categories).get(entry.category)
        label = categories[position].title if position is not None else str(entry.category)
        text.append(label, style=category_badge_style(position))
        text.append(" ")
    text.append(entry.name)
    text.append(f"  {format_money(entry.price)}", style="dim")
    return text


def format_category_filter(categories: Sequence[Category], selected: int | None) -> Text:
    """Render the category strip, highlighting the active filter."""
    text = Text()
    text.append("All", style="reverse" if selected is None else "dim")
    for position, category in enumerate(categories):
        text.append("  ")
        active = category.category_id == selected
        text.append(category.title, style=category_badge_style(position) if active else "dim")
    return text
