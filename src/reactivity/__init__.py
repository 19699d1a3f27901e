"""reactivity: fine-grained dependency tracking for plain Python objects."""

from importlib.metadata import version as _version

__version__ = _version("reactivity")

from reactivity.marker import ReactiveCapable
from reactivity.context import ReactivityContext
from reactivity.proxy import ReactiveProxy, is_reactive, to_raw
from reactivity.ref import Ref
from reactivity._registry import SubscriptionRegistry
# textual NOT auto-imported — opt-in only

__all__ = [
    "ReactiveCapable",
    "ReactivityContext",
    "ReactiveProxy",
    "Ref",
    "SubscriptionRegistry",
    "is_reactive",
    "to_raw",
]
