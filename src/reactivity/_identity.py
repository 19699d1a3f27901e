"""Identity side table — per-object state that does not keep objects alive.

Entries are keyed by id(obj), never by value, so unhashable objects
(e.g. eq=True dataclasses) are fine. A weakref callback drops the entry
when the object is collected.
"""

from __future__ import annotations

import weakref
from typing import Callable, Generic, TypeVar

V = TypeVar("V")


class IdentityTable(Generic[V]):
    """Mapping from object identity to a value, holding its keys weakly."""

    __slots__ = ("_values", "_refs", "__weakref__")

    def __init__(self) -> None:
        self._values: dict[int, V] = {}
        self._refs: dict[int, weakref.ref] = {}

    def get(self, obj: object) -> V | None:
        return self._values.get(id(obj))

    def setdefault(self, obj: object, factory: Callable[[], V]) -> V:
        """Return the value for obj, creating it with factory() if absent."""
        key = id(obj)
        value = self._values.get(key)
        if value is None:
            # Raises TypeError for objects that can't be weakly referenced.
            self._refs[key] = weakref.ref(obj, self._make_callback(key))
            value = self._values[key] = factory()
        return value

    def _make_callback(self, key: int) -> Callable[[weakref.ref], None]:
        table_ref = weakref.ref(self)

        def _discard(ref: weakref.ref) -> None:
            table = table_ref()
            # id() may already belong to a new object with its own ref.
            if table is not None and table._refs.get(key) is ref:
                del table._refs[key]
                table._values.pop(key, None)

        return _discard

    def __contains__(self, obj: object) -> bool:
        return id(obj) in self._values

    def __len__(self) -> int:
        return len(self._values)
