"""Public surface introspection, attribute binding and override checks.

The *public surface* of a context class is every name that does not
start with an underscore and is defined directly in the class body:
methods, properties, decorations, other descriptors and annotated
attribute fields.  Names inherited from Python base classes are not
part of a class's own surface, mirroring how the ownership map only
credits the class that actually declares a name.
"""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ctxchain.domain.declarations import Decoration
from ctxchain.domain.errors import MethodOverrideError, UnknownAttributeError

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext

logger = logging.getLogger(__name__)


def is_public(name: str) -> bool:
    return not name.startswith("_")


def _is_classvar(annotation: Any) -> bool:
    if isinstance(annotation, str):
        head = annotation.split("[", 1)[0].strip()
        return head.rsplit(".", 1)[-1] == "ClassVar"
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def declared_fields(cls: type) -> list[str]:
    """Public, non-``ClassVar`` annotated attributes declared on *cls* itself."""
    return [
        name
        for name, annotation in inspect.get_annotations(cls).items()
        if is_public(name) and not _is_classvar(annotation)
    ]


def public_surface(cls: type) -> list[str]:
    """Names *cls* declares directly, in definition order.

    Class methods, static methods, nested classes and ``ClassVar``
    constants belong to the class, not its instances, and are left out.
    """
    annotations = inspect.get_annotations(cls)
    names: list[str] = []
    for name, value in vars(cls).items():
        if not is_public(name):
            continue
        if isinstance(value, (classmethod, staticmethod, type)):
            continue
        if name in annotations and _is_classvar(annotations[name]):
            continue
        names.append(name)
    for name in declared_fields(cls):
        if name not in names:
            names.append(name)
    return names


def declared_decorations(cls: type) -> dict[str, Decoration]:
    """Decorations declared on *cls* itself (not inherited)."""
    return {name: value for name, value in vars(cls).items() if isinstance(value, Decoration)}


def is_bindable(cls: type, name: str) -> bool:
    """Whether instances of *cls* accept *name* as an initialization attribute.

    Bindable names are public annotated fields anywhere in the class
    hierarchy, or properties that define a setter.
    """
    if not is_public(name):
        return False
    for klass in cls.__mro__:
        member = vars(klass).get(name)
        if isinstance(member, property):
            return member.fset is not None
        if isinstance(member, Decoration):
            return False
        if name in declared_fields(klass):
            return True
    return False


def bind_attributes(context: BaseContext, attributes: Mapping[str, Any]) -> None:
    """Apply *attributes* to the nearest layer of the chain that can bind each name.

    The search starts at *context* and walks up through its ancestors, so
    ``wrap(parent, foo=1)`` sets ``foo`` on the parent when only the
    parent declares it.  The first unknown name aborts the whole call;
    names applied before it are not rolled back.

    Raises:
        UnknownAttributeError: If no layer in the chain can bind a name.
    """
    for name, value in attributes.items():
        target: BaseContext | None = context
        while target is not None and not is_bindable(type(target), name):
            target = target.parent_context
        if target is None:
            raise UnknownAttributeError(name)
        object.__setattr__(target, name, value)
        if target is not context:
            logger.debug(
                "Bound %s on ancestor %s of %s",
                name,
                type(target).__name__,
                type(context).__name__,
            )


def find_collisions(cls: type, parent: BaseContext) -> list[str]:
    """Names *cls* would redefine over *parent*'s chain without a decoration."""
    existing = parent.context_method_mapping
    decorated = declared_decorations(cls)
    return [
        name for name in public_surface(cls) if name in existing and name not in decorated
    ]


def check_overrides(cls: type, parent: BaseContext) -> None:
    """Reject attaching *cls* onto *parent* if it silently redefines inherited names.

    This is a class-shape check: no instance of *cls* is created.

    Raises:
        MethodOverrideError: Carrying the class name and every colliding name.
    """
    collisions = find_collisions(cls, parent)
    if collisions:
        raise MethodOverrideError(cls.__name__, collisions)
