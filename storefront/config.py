"""Runtime configuration defaults for the remote service, display and logging."""

from __future__ import annotations

API_BASE_URL = "http://localhost:3333/"
API_URL_ENV = "STOREFRONT_API_URL"

DEBUG_LOG_PATH = "/tmp/storefront-debug.log"
DEBUG_LOG_ENV = "STOREFRONT_DEBUG_LOG"

CURRENCY_SYMBOL = "$"

# Overlay shown after a confirmed order.
OVERLAY_TIMEOUT_SECONDS = 2.0
ORDER_CONFIRMED_MESSAGE = "Order confirmed!"
ORDER_CONFIRMED_ICON = "thumbs-up"
ORDER_CONFIRMED_ICON_COLOR = "#39B100"

FAVORITE_ICON_COLOR = "#FFB84D"
