import asyncio

import pytest
from textual.app import App
from textual.widgets import Static

from storefront.detail_screen import ItemDetailScreen
from storefront.errors import ApiError
from storefront.menu_screen import MenuScreen
from storefront.overlay import OverlayMessage
from storefront.storefront_app import StorefrontApp

from conftest import wait_started


async def _settle(app, pilot) -> None:
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


@pytest.mark.asyncio
async def test_app_starts_on_menu_and_filters_by_typed_text(fake_api):
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        menu = app.screen
        assert isinstance(menu, MenuScreen)
        assert [item.item_id for item in menu.items] == [1, 2]
        assert [category.title for category in menu.categories] == ["Pasta", "Pizza"]

        await pilot.press("2")
        await _settle(app, pilot)

        assert menu.search_text == "2"
        assert [item.item_id for item in menu.items] == [2]
        assert ("list_items", ("2", None)) in fake_api.calls


@pytest.mark.asyncio
async def test_enter_opens_detail_for_selected_item(fake_api):
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        await pilot.press("down")
        await pilot.press("enter")
        await _settle(app, pilot)

        screen = app.screen
        assert isinstance(screen, ItemDetailScreen)
        assert screen.session.item.item_id == 2


@pytest.mark.asyncio
async def test_detail_screen_total_follows_extras_and_quantity(fake_api):
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.open_item(1)
        await _settle(app, pilot)

        screen = app.screen
        assert isinstance(screen, ItemDetailScreen)
        assert screen.formatted_total == "$10.00"

        screen.action_increment_extra()
        screen.action_increment_extra()
        assert screen.formatted_total == "$14.00"

        screen.action_increment_order_quantity()
        assert screen.order_quantity == 2
        assert screen.formatted_total == "$28.00"

        screen.action_decrement_order_quantity()
        screen.action_decrement_order_quantity()
        assert screen.order_quantity == 1


@pytest.mark.asyncio
async def test_favorite_toggle_from_detail_screen(fake_api):
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.open_item(1)
        await _settle(app, pilot)

        await pilot.press("f")
        await _settle(app, pilot)

        assert app.screen.is_favorite is True
        assert 1 in fake_api.favorites


@pytest.mark.asyncio
async def test_submit_shows_overlay_and_closing_it_goes_back(fake_api):
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.open_item(1)
        await _settle(app, pilot)

        app.screen.action_submit_order()
        await _settle(app, pilot)

        assert isinstance(app.screen, OverlayMessage)
        assert len(fake_api.calls_to("create_order")) == 1

        await pilot.press("escape")
        await pilot.pause()

        assert isinstance(app.screen, MenuScreen)


@pytest.mark.asyncio
async def test_remote_failure_is_shown_not_raised(fake_api):
    fake_api.failures["create_order"] = ApiError("rejected", status_code=422)
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.open_item(1)
        await _settle(app, pilot)

        app.screen.action_submit_order()
        await _settle(app, pilot)

        assert isinstance(app.screen, ItemDetailScreen)
        assert app.screen.status.startswith("Order failed")
        assert app.screen.order_confirmed is False


@pytest.mark.asyncio
async def test_invalid_identifier_is_reported_without_requests(fake_api):
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.push_screen(ItemDetailScreen(fake_api, "not-a-number"))
        await _settle(app, pilot)

        assert app.screen.status.startswith("Load failed")
        assert fake_api.calls_to("get_item") == []


@pytest.mark.asyncio
async def test_detail_status_line_shows_key_help(fake_api):
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.open_item(1)
        await _settle(app, pilot)

        screen = app.screen
        assert isinstance(screen, ItemDetailScreen)
        assert "[/] order qty" in str(screen.query_one("#status", Static).render())


@pytest.mark.asyncio
async def test_malformed_item_is_shown_not_raised(fake_api):
    fake_api.failures["get_item"] = ApiError("GET foods/1 returned malformed data: [name] missing")
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.open_item(1)
        await _settle(app, pilot)

        assert isinstance(app.screen, ItemDetailScreen)
        assert app.screen.status == "Load failed: GET foods/1 returned malformed data: [name] missing"
        assert app.return_code is None


@pytest.mark.asyncio
async def test_slow_listing_for_older_query_does_not_overwrite_results(fake_api):
    fake_api.gate("list_items:('', None)")
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await wait_started(fake_api, "list_items:('', None)")
        menu = app.screen
        assert isinstance(menu, MenuScreen)

        await pilot.press("2")
        await _settle(app, pilot)
        assert [item.item_id for item in menu.items] == [2]

        fake_api.release("list_items:('', None)")
        await asyncio.sleep(0.05)
        await _settle(app, pilot)

        assert menu.search_text == "2"
        assert [item.item_id for item in menu.items] == [2]


@pytest.mark.asyncio
async def test_repeated_confirm_while_order_pending_sends_one_order(fake_api):
    fake_api.gate("create_order")
    app = StorefrontApp(api=fake_api)
    async with app.run_test() as pilot:
        await _settle(app, pilot)
        app.open_item(1)
        await _settle(app, pilot)

        screen = app.screen
        screen.action_submit_order()
        await wait_started(fake_api, "create_order")
        screen.action_submit_order()
        fake_api.release("create_order")
        await _settle(app, pilot)

        assert len(fake_api.calls_to("create_order")) == 1
        assert isinstance(app.screen, OverlayMessage)


class _OverlayHost(App):
    def __init__(self, overlay: OverlayMessage) -> None:
        super().__init__()
        self.overlay = overlay

    def on_mount(self) -> None:
        self.push_screen(self.overlay)


@pytest.mark.asyncio
async def test_overlay_times_out_once():
    fired = []
    overlay = OverlayMessage(
        "Order confirmed!",
        timeout=0.05,
        on_timeout=lambda: fired.append("timeout"),
        on_close=lambda: fired.append("close"),
    )
    app = _OverlayHost(overlay)
    async with app.run_test() as pilot:
        await pilot.pause()
        await asyncio.sleep(0.2)
        await pilot.pause()

        assert fired == ["timeout"]
        assert app.screen is not overlay


@pytest.mark.asyncio
async def test_overlay_close_cancels_timeout():
    fired = []
    overlay = OverlayMessage(
        "Order confirmed!",
        timeout=0.2,
        on_timeout=lambda: fired.append("timeout"),
        on_close=lambda: fired.append("close"),
    )
    app = _OverlayHost(overlay)
    async with app.run_test() as pilot:
        await pilot.pause()
        await pilot.press("escape")
        await asyncio.sleep(0.3)
        await pilot.pause()

        assert fired == ["close"]
