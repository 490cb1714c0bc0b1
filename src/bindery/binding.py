"""The binding record.

This module defines :class:`Binding`, the descriptor of one registered
producer for a service identifier. A binding is configured through the
fluent syntax in :mod:`bindery.syntax` and treated as read-only during
resolution, apart from populating its singleton cache.
"""

from typing import Any, Callable, Optional

from ._state import next_id
from .constants import BINDING_CONSTANT_VALUE, BINDING_FUNCTION, BINDING_INVALID, SCOPE_SINGLETON

_STORED_VALUES = (BINDING_CONSTANT_VALUE, BINDING_FUNCTION)


def _always(request: Any) -> bool:
    return True


class Binding:
    """Describes how to produce a value for one service identifier.

    Attributes:
        id: Unique integer identity assigned at creation.
        service_identifier: The key this binding satisfies.
        type: The production strategy (one of the ``BINDING_*`` constants).
        scope: Lifecycle scope name.
        implementation_type: Class to construct (``Instance`` / ``Constructor``).
        cache: Produced singleton value, or the constant of a constant binding.
        activated: Whether ``cache`` holds a value.
        dynamic_value: ``fn(context)`` for dynamic-value bindings.
        factory: ``fn(context)`` returning a producer for factory bindings.
        provider: ``fn(context)`` returning an async producer.
        constraint: Predicate over a request deciding eligibility.
        on_activation: ``handler(context, value)`` returning the final value.
        on_deactivation: ``handler(value)`` run when a cached singleton is unbound.
        module_id: Id of the module that registered this binding, or ``None``.
    """

    def __init__(self, service_identifier: Any, scope: str) -> None:
        self.id: int = next_id()
        self.service_identifier = service_identifier
        self.type: str = BINDING_INVALID
        self.scope: str = scope
        self.activated: bool = False
        self.implementation_type: Optional[type] = None
        self.cache: Any = None
        self.dynamic_value: Optional[Callable[[Any], Any]] = None
        self.factory: Optional[Callable[[Any], Any]] = None
        self.provider: Optional[Callable[[Any], Any]] = None
        self.constraint: Callable[[Any], bool] = _always
        self.on_activation: Optional[Callable[[Any, Any], Any]] = None
        self.on_deactivation: Optional[Callable[[Any], Any]] = None
        self.module_id: Optional[int] = None

    def clone(self) -> "Binding":
        """Return a copy with a new identity and the same configuration.

        Singleton activation state and cache are carried over, so a clone
        taken before a singleton is first resolved stays unresolved. Constant
        and function bindings always keep their stored value.
        """
        clone = Binding(self.service_identifier, self.scope)
        clone.activated = self.activated if self.scope == SCOPE_SINGLETON else False
        clone.implementation_type = self.implementation_type
        clone.dynamic_value = self.dynamic_value
        clone.type = self.type
        clone.factory = self.factory
        clone.provider = self.provider
        clone.constraint = self.constraint
        clone.on_activation = self.on_activation
        clone.on_deactivation = self.on_deactivation
        clone.module_id = self.module_id
        clone.cache = self.cache if clone.activated or self.type in _STORED_VALUES else None
        return clone

    def __repr__(self) -> str:
        return f"Binding(id={self.id}, service_identifier={self.service_identifier!r}, type={self.type}, scope={self.scope})"
