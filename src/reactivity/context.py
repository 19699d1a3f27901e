"""Reactivity context — owns the registry and the active-effect slot.

Typical use:

    ctx = ReactivityContext()
    user = ctx.reactive(User(name="Ada"))

    @ctx.watch_effect
    def show():
        print(user.name)   # prints "Ada", subscribes show to (user, "name")

    user.name = "Grace"    # re-runs show, prints "Grace"

Effects run synchronously. An effect that writes an attribute it reads
re-triggers itself until RecursionError; nothing here prevents that.

Thread safety: a context is single-threaded. Pass a scheduler (e.g. Textual's
app.call_from_thread) to marshal facade writes made on other threads back to
the thread that configured it.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable, TypeVar

from reactivity._identity import IdentityTable
from reactivity._registry import Effect, SubscriptionRegistry
from reactivity._tracking import ActiveEffectSlot, run_effect
from reactivity.proxy import wrap
from reactivity.ref import Ref

logger = logging.getLogger("reactivity.context")

T = TypeVar("T")
E = TypeVar("E", bound=Callable[[], None])


class ReactivityContext:
    """Tracks which effects read which attributes, and re-runs them on writes."""

    def __init__(self, scheduler: Callable[[Callable[[], None]], object] | None = None) -> None:
        self._registry = SubscriptionRegistry()
        self._slot = ActiveEffectSlot()
        self._object_ids: IdentityTable[str] = IdentityTable()
        self._scheduler = None
        self._scheduler_thread = None
        if scheduler is not None:
            self.set_scheduler(scheduler)

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def active_effect(self) -> Effect | None:
        """The effect currently running in this context, if any."""
        return self._slot.current

    def set_scheduler(self, scheduler: Callable[[Callable[[], None]], object] | None) -> None:
        """Marshal facade writes from other threads through scheduler.

        Call from the thread that owns this context. Writes on that thread
        stay synchronous. Pass None to go back to fully synchronous writes.
        """
        self._scheduler = scheduler
        self._scheduler_thread = threading.current_thread() if scheduler is not None else None

    def dispatch(self, write: Callable[[], None]) -> None:
        """Run a write (and its trigger) now, or hand it to the scheduler."""
        if self._scheduler is not None and threading.current_thread() != self._scheduler_thread:
            self._scheduler(write)
        else:
            write()

    def track(self, target: object, key: str) -> None:
        """Subscribe the active effect, if any, to (target, key)."""
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('Track "%s" "%s"', self._object_id(target), key)

        effect = self._slot.current
        if effect is not None:
            self._registry.subscribers(target, key).add(effect)

    def trigger(self, target: object, key: str) -> None:
        """Re-run every effect subscribed to (target, key). Order is unspecified."""
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('Trigger "%s" "%s"', self._object_id(target), key)

        # Snapshot: re-running effects may subscribe new ones to this key.
        for effect in list(self._registry.subscribers(target, key)):
            run_effect(self._slot, effect)

    def reactive(self, target: T | None, cls: type[T] | None = None) -> T:
        """Wrap target so reads are tracked and writes trigger effects.

        target must be a ReactiveCapable instance; anything else raises
        TypeError. Nested members declared with a ReactiveCapable type are
        wrapped too, once, right now. A None target is replaced by cls().
        """
        return wrap(target, self, cls)

    def watch_effect(self, effect: E) -> E:
        """Run effect now, subscribing it to everything it reads.

        Returns effect, so this also works as a decorator.
        """
        run_effect(self._slot, effect)
        return effect

    def ref(self, value: T = None) -> Ref[T]:
        """A reactive holder for a single value, read and written via .value."""
        return self.reactive(Ref(value))

    def _object_id(self, target: object) -> str:
        return self._object_ids.setdefault(target, lambda: str(uuid.uuid4()))

    def __repr__(self) -> str:
        return f"ReactivityContext({self._registry!r}, {self._slot!r})"
