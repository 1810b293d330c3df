"""Entry point for the storefront Textual app."""

from __future__ import annotations

from storefront.api import StorefrontApi
from storefront.logging_setup import setup_logging
from storefront.storefront_app import StorefrontApp


def main() -> None:
    """Run the Textual application."""
    setup_logging()
    api = StorefrontApi()
    try:
        StorefrontApp(api=api).run()
    finally:
        api.close()


if __name__ == "__main__":
    main()
