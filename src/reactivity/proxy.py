"""Reactive facades — transparent proxies that turn attribute access into events.

A ReactiveProxy forwards everything to its target. Attribute reads are first
reported to the context (track); attribute writes are forwarded and then
reported (trigger). Plain methods and special methods pass through untracked.

Python looks special methods up on the type, so each target class gets its
own ReactiveProxy subclass defining the protocol methods (len, iteration,
indexing, calls, with, ordering, arithmetic) that the target's class defines.

Wrapping is eager: nested reactive-capable members are wrapped once, when
the outer object is wrapped, and the facades are written back into the
target. Assigning a new object later does not wrap it.
"""

from __future__ import annotations

import inspect
import types
import weakref
from typing import TYPE_CHECKING, TypeVar

from reactivity.marker import ReactiveCapable, declared_members, reactive_class

if TYPE_CHECKING:
    from reactivity.context import ReactivityContext

T = TypeVar("T")

_METHOD_TYPES = (types.FunctionType, staticmethod, classmethod)

_OPERATORS = frozenset(
    f"__{prefix}{op}__"
    for op in (
        "add", "sub", "mul", "matmul", "truediv", "floordiv", "mod", "divmod",
        "pow", "lshift", "rshift", "and", "xor", "or",
    )
    for prefix in ("", "r", "i")
) | {"__lt__", "__le__", "__gt__", "__ge__", "__ne__"}

_FORWARDED = _OPERATORS | {
    "__len__", "__length_hint__", "__iter__", "__next__", "__reversed__",
    "__contains__", "__getitem__", "__setitem__", "__delitem__",
    "__call__", "__bool__", "__enter__", "__exit__", "__aenter__", "__aexit__",
    "__aiter__", "__anext__", "__await__",
    "__neg__", "__pos__", "__abs__", "__invert__",
    "__int__", "__float__", "__complex__", "__index__", "__round__",
    "__trunc__", "__floor__", "__ceil__", "__bytes__", "__format__",
}


class ReactiveProxy:
    """Facade over one target object, bound to one ReactivityContext."""

    __slots__ = ("_reactive_target", "_reactive_context", "__weakref__")

    def __init__(self, target: object, context: ReactivityContext) -> None:
        object.__setattr__(self, "_reactive_target", target)
        object.__setattr__(self, "_reactive_context", context)

    def _target_class(self):
        return type(object.__getattribute__(self, "_reactive_target"))

    # isinstance(proxy, TargetClass) holds, as for the target itself.
    __class__ = property(_target_class)
    del _target_class

    def __getattr__(self, name: str):
        target = object.__getattribute__(self, "_reactive_target")
        if not _passes_through(target, name):
            object.__getattribute__(self, "_reactive_context").track(target, name)
        return getattr(target, name)

    def __setattr__(self, name: str, value) -> None:
        target = object.__getattribute__(self, "_reactive_target")
        context = object.__getattribute__(self, "_reactive_context")

        def _write() -> None:
            setattr(target, name, value)
            context.trigger(target, name)

        context.dispatch(_write)

    def __delattr__(self, name: str) -> None:
        target = object.__getattribute__(self, "_reactive_target")
        context = object.__getattribute__(self, "_reactive_context")

        def _delete() -> None:
            delattr(target, name)
            context.trigger(target, name)

        context.dispatch(_delete)

    def __eq__(self, other: object) -> bool:
        """Compare raw targets, without tracking.

        The reflected form ``raw == facade`` runs the raw object's own
        ``__eq__``; if that reads attributes of the facade (as dataclass
        equality does), those reads are tracked.
        """
        return object.__getattribute__(self, "_reactive_target") == to_raw(other)

    def __hash__(self) -> int:
        return hash(object.__getattribute__(self, "_reactive_target"))

    def __repr__(self) -> str:
        return repr(object.__getattribute__(self, "_reactive_target"))

    def __str__(self) -> str:
        return str(object.__getattribute__(self, "_reactive_target"))

    def __dir__(self):
        return dir(object.__getattribute__(self, "_reactive_target"))


def _forwarder(name: str):
    unwrap_args = name in _OPERATORS

    def forward(self, *args, **kwargs):
        target = object.__getattribute__(self, "_reactive_target")
        if unwrap_args:
            args = tuple(to_raw(arg) for arg in args)
        result = getattr(type(target), name)(target, *args, **kwargs)
        # `with facade as x`, `facade += 1` and self-iterators keep the facade.
        return self if result is target else result

    forward.__name__ = forward.__qualname__ = name
    return forward


# Target class -> ReactiveProxy subclass. Values never reference their key.
_proxy_classes: weakref.WeakKeyDictionary[type, type[ReactiveProxy]] = weakref.WeakKeyDictionary()


def _proxy_class(cls: type) -> type[ReactiveProxy]:
    proxy_cls = _proxy_classes.get(cls)
    if proxy_cls is None:
        namespace = {
            name: _forwarder(name)
            for name in sorted(_FORWARDED)
            if getattr(cls, name, None) is not getattr(object, name, None)
        }
        if namespace:
            namespace["__slots__"] = ()
            proxy_cls = type(f"ReactiveProxy[{cls.__qualname__}]", (ReactiveProxy,), namespace)
        else:
            proxy_cls = ReactiveProxy
        _proxy_classes[cls] = proxy_cls
    return proxy_cls


def _passes_through(target: object, name: str) -> bool:
    """Dunder names and plain methods are forwarded without tracking."""
    if name.startswith("__") and name.endswith("__"):
        return True
    if name in getattr(target, "__dict__", ()):
        return False
    return isinstance(inspect.getattr_static(type(target), name, None), _METHOD_TYPES)


def is_reactive(obj: object) -> bool:
    """True if obj is a facade produced by wrap()."""
    return isinstance(obj, ReactiveProxy)


def to_raw(obj: T) -> T:
    """The target behind a facade, or obj itself if it isn't one."""
    if isinstance(obj, ReactiveProxy):
        return object.__getattribute__(obj, "_reactive_target")
    return obj


def wrap(target: T | None, context: ReactivityContext, cls: type[T] | None = None) -> T:
    """Wrap target in a facade, recursively wrapping reactive-capable members.

    Only ReactiveCapable instances can be wrapped; anything else raises
    TypeError. A None target is replaced by cls(), whose own members are left
    as they are; with no cls there is nothing to construct and TypeError is
    raised. Targets must support weak references. Passing a facade wraps its
    target again, so both facades share the same subscriptions.
    """
    return _wrap(target, context, cls, {})


def _wrap(target, context, cls, seen: dict[int, ReactiveProxy]):
    substituted = target is None
    if substituted:
        if cls is None:
            raise TypeError("cannot wrap None without a class to construct")
        if not (isinstance(cls, type) and issubclass(cls, ReactiveCapable)):
            raise TypeError(f"cannot wrap {cls!r}: not a ReactiveCapable class")
        target = cls()
    target = to_raw(target)
    if not isinstance(target, ReactiveCapable):
        raise TypeError(f"cannot wrap {type(target).__qualname__} object: not ReactiveCapable")
    # Subscriptions hold targets weakly; fail here rather than on first write.
    weakref.ref(target)

    # Reference cycles between members: one facade per object per wrap() call.
    proxy = seen.get(id(target))
    if proxy is not None:
        return proxy
    proxy = seen[id(target)] = _proxy_class(type(target))(target, context)

    # Substitutes aren't walked, so self-referencing types terminate.
    if substituted:
        return proxy

    for member in declared_members(type(target)):
        if not (member.readable and member.writable):
            continue
        nested_cls = reactive_class(member.declared_type)
        if nested_cls is None and not isinstance(member.declared_type, TypeVar):
            continue
        value = getattr(target, member.name, None)
        if is_reactive(value):
            continue
        if nested_cls is None:
            # Generic members (Ref.value) follow the class of the value they hold.
            if not isinstance(value, ReactiveCapable):
                continue
            nested_cls = type(value)
        setattr(target, member.name, _wrap(value, context, nested_cls, seen))
    return proxy
