"""Binding constraints.

A constraint is a predicate over a :class:`~bindery.planning.Request`. The
planner keeps only the bindings whose constraint accepts the request, which
is the single mechanism for disambiguating several bindings registered for
the same service identifier.
"""

from typing import Any, Callable, Optional

from .constants import NAMED_TAG
from .identifiers import identifier_to_string

RequestPredicate = Callable[[Any], bool]


class Constraint:
    """A request predicate with a printable description.

    Args:
        predicate: Callable receiving the request under evaluation.
        description: Text shown when listing registered bindings in errors.
    """

    __slots__ = ("_predicate", "description")

    def __init__(self, predicate: RequestPredicate, description: Optional[str] = None) -> None:
        self._predicate = predicate
        self.description = description

    def __call__(self, request: Any) -> bool:
        return bool(self._predicate(request))

    def __repr__(self) -> str:
        return self.description or "Constraint(<custom>)"


def tagged(key: Any, value: Any) -> Constraint:
    def check(request: Any) -> bool:
        return request is not None and request.target is not None and request.target.matches_tag(key, value)

    label = f"named: {value}" if key == NAMED_TAG else f"tagged: {{ key:{key}, value: {value} }}"
    return Constraint(check, label)


def named(name: Any) -> Constraint:
    return tagged(NAMED_TAG, name)


def is_default(request: Any) -> bool:
    if request is None or request.target is None:
        return False
    return not request.target.is_named() and not request.target.is_tagged()


def type_constraint(kind: Any) -> RequestPredicate:
    """Match a request whose service identifier is *kind* (strings) or whose binding builds *kind* (classes)."""
    def check(request: Any) -> bool:
        if request is None:
            return False
        if not isinstance(kind, type):
            return request.service_identifier == kind
        if not request.bindings:
            return False
        return request.bindings[0].implementation_type is kind
    return check


def traverse_ancestors(request: Any, predicate: RequestPredicate) -> bool:
    parent = request.parent_request if request is not None else None
    while parent is not None:
        if predicate(parent):
            return True
        parent = parent.parent_request
    return False


def injected_into(parent: Any) -> Constraint:
    check = type_constraint(parent)
    return Constraint(
        lambda request: request is not None and request.parent_request is not None and check(request.parent_request),
        f"injected into: {identifier_to_string(parent)}",
    )


def parent_matches(inner: Constraint) -> Constraint:
    return Constraint(
        lambda request: request is not None and request.parent_request is not None and inner(request.parent_request),
        f"parent {inner.description}",
    )


def any_ancestor(predicate: RequestPredicate, label: str) -> Constraint:
    return Constraint(lambda request: traverse_ancestors(request, predicate), f"any ancestor {label}")


def no_ancestor(predicate: RequestPredicate, label: str) -> Constraint:
    return Constraint(lambda request: not traverse_ancestors(request, predicate), f"no ancestor {label}")
