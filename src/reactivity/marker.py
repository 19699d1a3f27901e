"""Reactive-capable marker and declared-surface introspection.

A class opts into recursive reactivity by inheriting from ReactiveCapable.
When an object is wrapped, its class's declared surface is inspected: every
annotated attribute or property whose declared type is reactive-capable is
wrapped too.
"""

from __future__ import annotations

import inspect
import logging
import types
import typing
from dataclasses import dataclass
from typing import ClassVar, Union, get_args, get_origin

logger = logging.getLogger("reactivity.marker")

_UNION_ORIGINS = (Union, types.UnionType)


class ReactiveCapable:
    """Marker base class: instances may be wrapped, and are wrapped when nested."""

    __slots__ = ()


@dataclass(frozen=True)
class Member:
    """One gettable/settable named member of a class's declared surface."""

    name: str
    declared_type: object
    readable: bool
    writable: bool


def reactive_class(annotation: object) -> type | None:
    """Return the reactive-capable class an annotation names, if any.

    Accepts a ReactiveCapable subclass, a parametrized generic of one
    (Ref[int]), or an Optional of exactly one of those.
    """
    origin = get_origin(annotation)
    if origin in _UNION_ORIGINS:
        candidates = [arg for arg in get_args(annotation) if arg is not type(None)]
        return reactive_class(candidates[0]) if len(candidates) == 1 else None
    if origin is not None:
        annotation = origin
    if isinstance(annotation, type) and issubclass(annotation, ReactiveCapable):
        return annotation
    return None


def declared_members(cls: type) -> list[Member]:
    """Annotated attributes and properties declared by cls and its bases."""
    params = getattr(cls, "__dataclass_params__", None)
    frozen = bool(params is not None and params.frozen)

    members: dict[str, Member] = {}
    for name, hint in _attribute_hints(cls).items():
        if hint is ClassVar or get_origin(hint) is ClassVar:
            continue
        members[name] = Member(name, hint, readable=True, writable=not frozen)

    seen: set[str] = set()
    for klass in cls.__mro__:
        for name, attr in vars(klass).items():
            if name in seen or not isinstance(attr, property):
                continue
            seen.add(name)
            members[name] = Member(
                name,
                _return_hint(attr.fget),
                readable=attr.fget is not None,
                writable=attr.fset is not None,
            )
    return list(members.values())


def _attribute_hints(cls: type) -> dict[str, object]:
    try:
        return typing.get_type_hints(cls)
    except NameError:
        # Forward references that can't be resolved (e.g. classes defined in
        # a function body). Keep whatever is already a real object.
        logger.debug("Unresolved annotations on %s; using raw annotations", cls.__qualname__)
        hints: dict[str, object] = {}
        for klass in reversed(cls.__mro__):
            for name, hint in inspect.get_annotations(klass).items():
                if not isinstance(hint, str):
                    hints[name] = hint
        return hints


def _return_hint(fget) -> object:
    if fget is None:
        return None
    try:
        return typing.get_type_hints(fget).get("return")
    except NameError:
        return None
