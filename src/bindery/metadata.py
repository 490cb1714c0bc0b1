# bindery/metadata.py
"""Injectability metadata.

Classes opt in with :func:`injectable`. Their constructor parameters and
annotated class attributes declare what they need through type hints,
optionally wrapped in ``typing.Annotated`` with the markers defined here::

    @injectable
    class Ninja:
        shuriken: Annotated[Shuriken, Inject("Shuriken")]

        def __init__(self, katana: Annotated[Weapon, Named("strong")], tools: List[Tool]):
            ...

:class:`MetadataReader` turns those declarations into :class:`Target`
descriptors consumed by the planner.
"""

import inspect
import types
from dataclasses import dataclass
from typing import Annotated, Any, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from .constants import (
    INJECTABLE_FLAG,
    NAMED_TAG,
    TARGET_CLASS_PROPERTY,
    TARGET_CONSTRUCTOR_ARGUMENT,
    TARGET_VARIABLE,
)
from .exceptions import MissingInjectAnnotationError, UnresolvableTypeHintError


def injectable(cls=None):
    """Mark a class as constructible by the container.

    Usable bare (``@injectable``) or called (``@injectable()``). The flag is
    not inherited: every class the container constructs needs its own.
    """
    def dec(c):
        setattr(c, INJECTABLE_FLAG, True)
        return c
    return dec(cls) if cls else dec


class Inject:
    """Declare the service identifier of an injection point."""

    __slots__ = ("service_identifier",)

    def __init__(self, service_identifier: Any) -> None:
        self.service_identifier = service_identifier

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.service_identifier!r})"


class MultiInject(Inject):
    """Declare an injection point that receives every matching binding as a list."""

    __slots__ = ()


class Named:
    __slots__ = ("name",)

    def __init__(self, name: Any) -> None:
        self.name = name


class Tagged:
    __slots__ = ("key", "value")

    def __init__(self, key: Any, value: Any) -> None:
        self.key = key
        self.value = value


class _Flag:
    __slots__ = ("label",)

    def __init__(self, label: str) -> None:
        self.label = label

    def __repr__(self) -> str:
        return self.label


optional = _Flag("optional")
"""Marker: resolve to the parameter default (or ``None``) when nothing is bound."""

unmanaged = _Flag("unmanaged")
"""Marker: the container never supplies this parameter."""


def strict_equals(a: Any, b: Any) -> bool:
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


@dataclass(frozen=True)
class Target:
    """One injection point.

    Attributes:
        name: Parameter or attribute name (empty for top-level lookups).
        service_identifier: Identifier to resolve.
        target_type: ``ConstructorArgument``, ``ClassProperty`` or ``Variable``.
        tags: ``(key, value)`` pairs, including the reserved ``named`` tag.
        is_multi: Whether every matching binding is injected as a list.
        is_optional: Whether an unsatisfied dependency is tolerated.
        has_default: Whether the parameter declares a default value.
    """
    name: str
    service_identifier: Any
    target_type: str = TARGET_VARIABLE
    tags: Tuple[Tuple[Any, Any], ...] = ()
    is_multi: bool = False
    is_optional: bool = False
    has_default: bool = False

    def has_tag(self, key: Any) -> bool:
        return any(k == key for k, _ in self.tags)

    def get_tag(self, key: Any) -> Any:
        for k, v in self.tags:
            if k == key:
                return v
        return None

    def is_named(self) -> bool:
        return self.has_tag(NAMED_TAG)

    def is_tagged(self) -> bool:
        return bool(self.get_custom_tags())

    def get_named_tag(self) -> Any:
        return self.get_tag(NAMED_TAG)

    def get_custom_tags(self) -> Tuple[Tuple[Any, Any], ...]:
        return tuple((k, v) for k, v in self.tags if k != NAMED_TAG)

    def matches_named_tag(self, name: Any) -> bool:
        return self.matches_tag(NAMED_TAG, name)

    def matches_tag(self, key: Any, value: Any) -> bool:
        return any(k == key and strict_equals(v, value) for k, v in self.tags)


def _check_optional(ann: Any) -> Tuple[Any, bool]:
    origin = get_origin(ann)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(ann) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return ann, False


def _extract_annotated(ann: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if get_origin(ann) is Annotated:
        args = get_args(ann)
        return args[0], tuple(args[1:])
    return ann, ()


def _type_hints(obj: Any, owner: type) -> dict:
    try:
        return get_type_hints(obj, include_extras=True)
    except (NameError, TypeError) as e:
        raise UnresolvableTypeHintError(owner, e) from e


def _describe(name: str, ann: Any, target_type: str, has_default: bool) -> Optional[Target]:
    """Build a :class:`Target` from one annotation, or ``None`` when it declares nothing."""
    base, is_optional = _check_optional(ann)
    base, metas = _extract_annotated(base)
    if any(m is unmanaged for m in metas):
        return None

    is_multi = False
    if get_origin(base) in (list, List):
        is_multi = True
        elem = get_args(base)[0] if get_args(base) else Any
        base, elem_metas = _extract_annotated(elem)
        metas = metas + elem_metas

    service_identifier: Any = base
    tags: List[Tuple[Any, Any]] = []
    for m in metas:
        if isinstance(m, Inject):
            service_identifier = m.service_identifier
            is_multi = is_multi or isinstance(m, MultiInject)
        elif isinstance(m, Named):
            tags.append((NAMED_TAG, m.name))
        elif isinstance(m, Tagged):
            tags.append((m.key, m.value))
        elif m is optional:
            is_optional = True

    return Target(
        name=name,
        service_identifier=service_identifier,
        target_type=target_type,
        tags=tuple(tags),
        is_multi=is_multi,
        is_optional=is_optional or has_default,
        has_default=has_default,
    )


class MetadataReader:
    """Reads injectability metadata from classes.

    Subclass and install with ``Container.apply_custom_metadata_reader`` to
    source dependency descriptors from somewhere other than type hints.
    """

    def is_injectable(self, cls: type) -> bool:
        return bool(vars(cls).get(INJECTABLE_FLAG, False))

    def get_constructor_metadata(self, cls: type) -> Tuple[Target, ...]:
        init = cls.__init__
        if init is object.__init__:
            return ()
        try:
            sig = inspect.signature(init)
        except (ValueError, TypeError):
            return ()
        hints = _type_hints(init, cls)

        plan: List[Target] = []
        for name, param in sig.parameters.items():
            if name in ("self", "cls"):
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            has_default = param.default is not inspect.Parameter.empty
            ann = hints.get(name, param.annotation)
            if ann is inspect.Parameter.empty:
                if has_default:
                    continue
                raise MissingInjectAnnotationError(cls, name)
            target = _describe(name, ann, TARGET_CONSTRUCTOR_ARGUMENT, has_default)
            if target is not None:
                plan.append(target)
        return tuple(plan)

    def get_property_metadata(self, cls: type) -> Tuple[Target, ...]:
        plan: List[Target] = []
        for name, ann in _type_hints(cls, cls).items():
            _, metas = _extract_annotated(_check_optional(ann)[0])
            if not any(isinstance(m, Inject) for m in metas):
                continue
            target = _describe(name, ann, TARGET_CLASS_PROPERTY, False)
            if target is not None:
                plan.append(target)
        return tuple(plan)

    def constructor_arity(self, cls: type) -> int:
        """Count declared constructor parameters, managed or not; ``-1`` for variadic constructors."""
        init = cls.__init__
        if init is object.__init__:
            return 0
        try:
            sig = inspect.signature(init)
        except (ValueError, TypeError):
            return -1
        count = 0
        for name, param in sig.parameters.items():
            if name in ("self", "cls"):
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                return -1
            count += 1
        return count
