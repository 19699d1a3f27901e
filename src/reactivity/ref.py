"""Ref — single-value holder so plain values can take part in tracking."""

from __future__ import annotations

from typing import Generic, TypeVar

from reactivity.marker import ReactiveCapable

T = TypeVar("T")


class Ref(ReactiveCapable, Generic[T]):
    """Holds one value. Wrap it with ReactivityContext.ref() to observe .value.

    A ReactiveCapable value is wrapped along with the Ref, so writes to its
    own attributes are observed too.
    """

    value: T

    def __init__(self, value: T = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"
