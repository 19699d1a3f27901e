"""Subscription registry — which effects depend on which (object, attribute).

Conceptually dict[object, dict[str, set[Effect]]], with the outer level held
weakly through an IdentityTable. There is no removal operation: an effect
that stops reading an attribute stays subscribed to it.
"""

from __future__ import annotations

from typing import Callable

from reactivity._identity import IdentityTable

Effect = Callable[[], None]


class SubscriptionRegistry:
    """Maps (object identity, attribute name) to the set of subscribed effects."""

    __slots__ = ("_table",)

    def __init__(self) -> None:
        self._table: IdentityTable[dict[str, set[Effect]]] = IdentityTable()

    def subscribers(self, target: object, key: str) -> set[Effect]:
        """Get-or-create the subscriber set for (target, key). Never fails."""
        keys = self._table.setdefault(target, dict)
        effects = keys.get(key)
        if effects is None:
            effects = keys[key] = set()
        return effects

    def keys_for(self, target: object) -> frozenset[str]:
        """Attribute names of target that have an entry. Useful for testing."""
        keys = self._table.get(target)
        return frozenset(keys) if keys is not None else frozenset()

    def __contains__(self, target: object) -> bool:
        return target in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"SubscriptionRegistry({len(self._table)} objects)"
