"""Textual integration for reactivity. Opt-in — requires textual.

Effects that update widgets need three guards: don't run while the app is
not running or its widget tree is being rebuilt, tolerate NoMatches from
widget queries, and run on the app's thread.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

logger = logging.getLogger("reactivity.textual")

# Keyed by id(app) so multiple apps work in tests. id present <-> inside pause().
_paused_apps: set[int] = set()

# Registrations made during pause(), run when the pause ends.
_pending: dict[int, list] = {}


@contextmanager
def pause(app):
    """Suspend guarded effects during widget replacement.

    Effects registered inside the block make their first run when it exits.
    """
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)
    for register in _pending.pop(key, ()):
        register()


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def watch_effect(context, app, fn):
    """context.watch_effect() that safely bridges to Textual widgets.

    The first run always happens, so fn subscribes to what it reads even when
    it is wired up before the app starts; widget queries made then raise
    NoMatches, which is swallowed. Registering inside pause() defers that
    first run until the pause ends. Later runs are skipped while paused or
    not running, and runs from other threads go through call_from_thread.
    Returns the guarded effect.
    """
    _main = threading.get_ident()
    subscribed = False

    def _guarded():
        nonlocal subscribed
        if subscribed and not is_safe(app):
            return
        subscribed = True
        if threading.get_ident() != _main:
            app.call_from_thread(_safe)
        else:
            _safe()

    def _safe():
        try:
            fn()
        except NoMatches:
            logger.debug("Effect %s found no matching widget", getattr(fn, "__name__", fn))

    if id(app) in _paused_apps:
        _pending.setdefault(id(app), []).append(lambda: context.watch_effect(_guarded))
        return _guarded
    return context.watch_effect(_guarded)
