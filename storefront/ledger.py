"""Selected extras and order quantity for the item on the detail screen."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Iterator

from storefront.models import Extra, ExtraDefinition


class ExtrasLedger:
    """Ordered extras of the current item, each with its own quantity (never below 0)."""

    def __init__(self) -> None:
        self._extras: tuple[Extra, ...] = ()

    @property
    def extras(self) -> tuple[Extra, ...]:
        return self._extras

    def __iter__(self) -> Iterator[Extra]:
        return iter(self._extras)

    def __len__(self) -> int:
        return len(self._extras)

    def load(self, definitions: Iterable[ExtraDefinition]) -> None:
        """Replace the ledger with these extras, all at quantity 0."""
        self._extras = tuple(Extra.from_definition(definition) for definition in definitions)

    def clear(self) -> None:
        self._extras = ()

    def quantity_of(self, extra_id: int) -> int:
        for extra in self._extras:
            if extra.extra_id == extra_id:
                return extra.quantity
        return 0

    def increment(self, extra_id: int) -> bool:
        return self._adjust(extra_id, 1)

    def decrement(self, extra_id: int) -> bool:
        return self._adjust(extra_id, -1)

    def _adjust(self, extra_id: int, delta: int) -> bool:
        changed = False
        updated: list[Extra] = []
        for extra in self._extras:
            if extra.extra_id == extra_id:
                quantity = max(0, extra.quantity + delta)
                if quantity != extra.quantity:
                    extra = replace(extra, quantity=quantity)
                    changed = True
            updated.append(extra)
        if changed:
            self._extras = tuple(updated)
        return changed


class QuantityCounter:
    """How many of the base item are ordered. Floor of 1, no ceiling."""

    MINIMUM = 1

    def __init__(self) -> None:
        self.value = self.MINIMUM

    def increment(self) -> bool:
        self.value += 1
        return True

    def decrement(self) -> bool:
        if self.value <= self.MINIMUM:
            return False
        self.value -= 1
        return True

    def reset(self) -> None:
        self.value = self.MINIMUM
