"""Domain models for storefront."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from storefront.money import to_decimal, to_wire


@dataclass(frozen=True)
class ExtraDefinition:
    """An add-on offered for an item, as listed by the remote service."""

    extra_id: int
    name: str
    value: Decimal

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ExtraDefinition:
        return cls(extra_id=int(data["id"]), name=str(data["name"]), value=to_decimal(data["value"]))


@dataclass(frozen=True)
class Extra:
    """An add-on with the quantity currently selected for it."""

    extra_id: int
    name: str
    value: Decimal
    quantity: int = 0

    @classmethod
    def from_definition(cls, definition: ExtraDefinition) -> Extra:
        return cls(extra_id=definition.extra_id, name=definition.name, value=definition.value)

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.extra_id, "name": self.name, "value": to_wire(self.value), "quantity": self.quantity}


@dataclass(frozen=True)
class Item:
    """A menu item as shown on the detail screen."""

    item_id: int
    name: str
    description: str
    price: Decimal
    image_url: str
    thumbnail_url: str
    category: int | None
    extras: tuple[ExtraDefinition, ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Item:
        category = data.get("category")
        return cls(
            item_id=int(data["id"]),
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            price=to_decimal(data["price"]),
            image_url=str(data.get("image_url") or ""),
            thumbnail_url=str(data.get("thumbnail_url") or ""),
            category=int(category) if category is not None else None,
            extras=tuple(ExtraDefinition.from_api(extra) for extra in data.get("extras") or []),
        )

    def favorite_record(self) -> dict[str, Any]:
        """Core fields posted when the item is marked as a favorite (no extras)."""
        return {
            "id": self.item_id,
            "name": self.name,
            "description": self.description,
            "price": to_wire(self.price),
            "image_url": self.image_url,
            "thumbnail_url": self.thumbnail_url,
            "category": self.category,
        }


@dataclass(frozen=True)
class MenuItem:
    """A row of the menu listing."""

    item_id: int
    name: str
    description: str
    price: Decimal
    thumbnail_url: str = ""
    category: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> MenuItem:
        category = data.get("category")
        return cls(
            item_id=int(data["id"]),
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            price=to_decimal(data["price"]),
            thumbnail_url=str(data.get("thumbnail_url") or ""),
            category=int(category) if category is not None else None,
        )


@dataclass(frozen=True)
class Category:
    """A menu category used to filter the listing."""

    category_id: int
    title: str
    image_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Category:
        return cls(
            category_id=int(data["id"]),
            title=str(data["title"]),
            image_url=str(data.get("image_url") or ""),
        )


@dataclass(frozen=True)
class Order:
    """Write-once snapshot of an item and its extras, built at submission time."""

    product_id: int
    name: str
    description: str
    price: Decimal
    category: int | None
    thumbnail_url: str
    extras: tuple[Extra, ...]

    @classmethod
    def compose(cls, item: Item, extras: Iterable[Extra]) -> Order:
        # Zero-quantity extras are kept: the order carries the full extras set.
        return cls(
            product_id=item.item_id,
            name=item.name,
            description=item.description,
            price=item.price,
            category=item.category,
            thumbnail_url=item.thumbnail_url,
            extras=tuple(extras),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "description": self.description,
            "price": to_wire(self.price),
            "category": self.category,
            "thumbnail_url": self.thumbnail_url,
            "extras": [extra.to_payload() for extra in self.extras],
        }
