"""Resolution planning.

:func:`plan` turns one top-level lookup into a tree of :class:`Request`
nodes: it selects the container that owns the identifier, filters bindings
through their constraints, validates how many bindings matched, and recurses
into the constructor and property dependencies of class bindings while
watching for cycles. The resulting :class:`Plan` hangs off a fresh
:class:`Context`, which the resolver then walks.
"""

import inspect
import logging
from typing import Any, List, Optional, Tuple

from ._state import next_id
from .constants import BINDING_INSTANCE, SCOPE_SINGLETON, TARGET_VARIABLE
from .exceptions import (
    AmbiguousMatchError,
    ArgumentsLengthMismatchError,
    CircularDependencyError,
    MissingInjectableAnnotationError,
    NotRegisteredError,
)
from .identifiers import identifier_to_string
from .lookup import Lookup
from .metadata import MetadataReader, Target
from .scope import RequestCache

_logger = logging.getLogger(__name__)


class Context:
    """State of one top-level resolution.

    Passed to dynamic values, factories, providers and activation handlers
    so they can inspect the plan and reach back into the container.

    Attributes:
        id: Unique integer identity.
        container: The container the lookup started from.
        plan: The plan built for this lookup.
        current_request: The request being resolved right now.
        request_cache: Values of request-scoped bindings for this lookup.
        auto_bound: Bindings created by auto-binding during this lookup.
    """

    def __init__(self, container: Any) -> None:
        self.id: int = next_id()
        self.container = container
        self.plan: Optional["Plan"] = None
        self.current_request: Optional["Request"] = None
        self.request_cache = RequestCache()
        self.auto_bound: List[Any] = []

    def add_plan(self, plan: "Plan") -> None:
        self.plan = plan

    def set_current_request(self, request: "Request") -> None:
        self.current_request = request


class Plan:
    def __init__(self, parent_context: Context, root_request: "Request") -> None:
        self.parent_context = parent_context
        self.root_request = root_request


class Request:
    """One node of a plan: a single service identifier to resolve.

    Attributes:
        service_identifier: Identifier being resolved.
        parent_context: The owning :class:`Context`.
        parent_request: The request that depends on this one, ``None`` at the root.
        bindings: Bindings that passed constraint evaluation.
        target: The injection point.
        child_requests: Dependencies, in declaration order.
        is_multi_inject: Whether this node fans out to one child per binding.
    """

    def __init__(
        self,
        service_identifier: Any,
        parent_context: Context,
        parent_request: Optional["Request"],
        bindings: List[Any],
        target: Optional[Target],
        is_multi_inject: bool = False,
    ) -> None:
        self.id: int = next_id()
        self.service_identifier = service_identifier
        self.parent_context = parent_context
        self.parent_request = parent_request
        self.bindings = bindings
        self.target = target
        self.child_requests: List["Request"] = []
        self.is_multi_inject = is_multi_inject

    def add_child_request(
        self,
        service_identifier: Any,
        bindings: List[Any],
        target: Optional[Target],
        is_multi_inject: bool = False,
    ) -> "Request":
        child = Request(service_identifier, self.parent_context, self, bindings, target, is_multi_inject)
        self.child_requests.append(child)
        return child

    def __repr__(self) -> str:
        return f"Request({identifier_to_string(self.service_identifier)}, bindings={len(self.bindings)})"


def get_binding_dictionary(container: Any) -> Lookup:
    return container._binding_dictionary


def find_bindings(container: Any, service_identifier: Any) -> List[Any]:
    """Return the bindings of the closest container in the chain that owns *service_identifier*.

    Containers never merge bindings across levels: a child binding for an
    identifier hides every ancestor binding for the same identifier.
    """
    current = container
    while current is not None:
        lookup = get_binding_dictionary(current)
        if lookup.has_key(service_identifier):
            return list(lookup.get(service_identifier))
        current = current.parent
    return []


def create_mock_request(container: Any, service_identifier: Any, key: Any, value: Any) -> Request:
    target = Target("", service_identifier, TARGET_VARIABLE, ((key, value),))
    return Request(service_identifier, Context(container), None, [], target)


def describe_registered_bindings(container: Any, service_identifier: Any, chain: Tuple[Any, ...] = ()) -> str:
    lines: List[str] = []
    if chain:
        path = " --> ".join(identifier_to_string(k) for k in chain + (service_identifier,))
        lines.append(f"Trying to resolve: {path}")
    bindings = find_bindings(container, service_identifier)
    if bindings:
        lines.append("Registered bindings:")
        for b in bindings:
            name = identifier_to_string(b.implementation_type) if b.implementation_type is not None else b.type
            desc = getattr(b.constraint, "description", None)
            lines.append(f" {name} - {desc}" if desc else f" {name}")
    return "\n".join(lines)


def _get_bindings(reader: MetadataReader, context: Context, target: Target) -> List[Any]:
    container = context.container
    service_identifier = target.service_identifier
    bindings = find_bindings(container, service_identifier)
    if bindings or not container.options.auto_bind_injectable or not isinstance(service_identifier, type):
        return bindings
    if not reader.is_injectable(service_identifier):
        if target.is_optional:
            return []
        raise MissingInjectableAnnotationError(service_identifier)
    _logger.debug("Auto-binding %s to itself", identifier_to_string(service_identifier))
    syntax = container.bind(service_identifier)
    context.auto_bound.append(syntax.binding)
    syntax.to_self()
    return find_bindings(container, service_identifier)


def discard_auto_bindings(context: Context) -> None:
    """Remove the bindings auto-bound while planning *context*, leaving the container as it was."""
    if not context.auto_bound:
        return
    added = {b.id for b in context.auto_bound}
    get_binding_dictionary(context.container).remove_by_condition(lambda b: b.id in added)
    _logger.debug("Discarded %d auto-binding(s) after a failed lookup", len(added))
    context.auto_bound = []


def _validate_active_binding_count(
    container: Any, target: Target, bindings: List[Any], chain: Tuple[Any, ...]
) -> List[Any]:
    if not bindings:
        if target.is_optional:
            return bindings
        raise NotRegisteredError(
            target.service_identifier, describe_registered_bindings(container, target.service_identifier, chain)
        )
    if len(bindings) > 1 and not target.is_multi:
        raise AmbiguousMatchError(
            target.service_identifier, describe_registered_bindings(container, target.service_identifier, chain)
        )
    return bindings


def _get_active_bindings(
    reader: MetadataReader,
    avoid_constraints: bool,
    context: Context,
    parent_request: Optional[Request],
    target: Target,
    chain: Tuple[Any, ...],
) -> List[Any]:
    bindings = _get_bindings(reader, context, target)
    if not avoid_constraints:
        candidate = Request(target.service_identifier, context, parent_request, bindings, target)
        bindings = [b for b in bindings if b.constraint(candidate)]
    return _validate_active_binding_count(context.container, target, bindings, chain)


def _check_base_class(reader: MetadataReader, cls: type) -> None:
    base = cls.__mro__[1] if len(cls.__mro__) > 1 else object
    if not inspect.isfunction(base.__init__) or getattr(base, "_is_protocol", False):
        return
    if "__init__" in vars(base) and not reader.is_injectable(base):
        raise MissingInjectableAnnotationError(base)
    derived_count = reader.constructor_arity(cls)
    base_count = reader.constructor_arity(base)
    if derived_count >= 0 and base_count >= 0 and derived_count < base_count:
        raise ArgumentsLengthMismatchError(cls)


def _plan_dependencies(
    reader: MetadataReader, context: Context, request: Request, cls: type, chain: Tuple[Any, ...]
) -> None:
    if not reader.is_injectable(cls):
        raise MissingInjectableAnnotationError(cls)
    if not context.container.options.skip_base_class_checks:
        _check_base_class(reader, cls)
    for dependency in reader.get_constructor_metadata(cls) + reader.get_property_metadata(cls):
        _create_sub_requests(reader, False, context, request, dependency, chain)


def _create_sub_requests(
    reader: MetadataReader,
    avoid_constraints: bool,
    context: Context,
    parent_request: Optional[Request],
    target: Target,
    chain: Tuple[Any, ...],
) -> None:
    service_identifier = target.service_identifier
    if service_identifier in chain:
        raise CircularDependencyError(chain + (service_identifier,))

    active = _get_active_bindings(reader, avoid_constraints, context, parent_request, target, chain)

    if parent_request is None:
        request = Request(service_identifier, context, None, active, target, target.is_multi)
        context.add_plan(Plan(context, request))
    else:
        request = parent_request.add_child_request(service_identifier, active, target, target.is_multi)

    child_chain = chain + (service_identifier,)
    for binding in active:
        sub_request = request.add_child_request(service_identifier, [binding], target) if target.is_multi else request
        if binding.scope == SCOPE_SINGLETON and binding.activated:
            continue
        if binding.type == BINDING_INSTANCE and binding.implementation_type is not None:
            _plan_dependencies(reader, context, sub_request, binding.implementation_type, child_chain)


def plan(
    metadata_reader: MetadataReader,
    container: Any,
    is_multi_inject: bool,
    target_type: str,
    service_identifier: Any,
    key: Any = None,
    value: Any = None,
    avoid_constraints: bool = False,
) -> Context:
    """Build the plan for one top-level lookup.

    Args:
        metadata_reader: Source of constructor and property dependencies.
        container: The container the lookup starts from.
        is_multi_inject: Whether every matching binding is wanted.
        target_type: Kind of the top-level target (normally ``Variable``).
        service_identifier: Identifier to resolve.
        key: Optional tag key the target carries (``named`` for named lookups).
        value: Tag value paired with *key*.
        avoid_constraints: Skip constraint evaluation at the root (``get_all``).

    Returns:
        A :class:`Context` whose ``plan`` is ready to resolve.

    Raises:
        NotRegisteredError: No eligible binding for a required target.
        AmbiguousMatchError: Several eligible bindings for a single-result target.
        CircularDependencyError: An identifier depends on itself.
        MissingInjectableAnnotationError: A class to construct is not ``@injectable``.
    """
    context = Context(container)
    tags = ((key, value),) if key is not None else ()
    target = Target("", service_identifier, target_type, tags, is_multi=is_multi_inject)
    _logger.debug("Planning %s (multi=%s, tags=%s)", identifier_to_string(service_identifier), is_multi_inject, tags)
    try:
        _create_sub_requests(metadata_reader, avoid_constraints, context, None, target, ())
    except Exception:
        discard_auto_bindings(context)
        raise
    return context
