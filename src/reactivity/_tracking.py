"""Active-effect slot and effect runner.

While an effect runs, it occupies its context's slot; any facade read during
that time subscribes the effect to the attribute that was read.

One effect at a time: an effect started from inside another effect takes the
slot for the duration of its run. When it finishes, the slot goes back to
whatever was active before, like a contextvars token reset, so the outer
effect keeps tracking its remaining reads. The slot is released on every
exit path, including when the effect raises.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

Effect = Callable[[], None]


class ActiveEffectSlot:
    """Holds the effect currently running in one context, or None."""

    __slots__ = ("_current",)

    def __init__(self) -> None:
        self._current: Effect | None = None

    @property
    def current(self) -> Effect | None:
        return self._current

    @contextmanager
    def running(self, effect: Effect) -> Iterator[Effect]:
        """Occupy the slot with effect for the duration of the block."""
        previous = self._current
        self._current = effect
        try:
            yield effect
        finally:
            self._current = previous

    def __repr__(self) -> str:
        if self._current is None:
            return "ActiveEffectSlot(empty)"
        name = getattr(self._current, "__name__", repr(self._current))
        return f"ActiveEffectSlot({name})"


def run_effect(slot: ActiveEffectSlot, effect: Effect) -> None:
    """Run effect once with it installed in slot, so its reads are tracked."""
    with slot.running(effect):
        effect()
