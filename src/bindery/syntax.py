"""Fluent binding syntax.

``container.bind(id)`` returns a :class:`BindingToSyntax`; each step narrows
the binding in progress::

    container.bind("Weapon").to(Katana).in_singleton_scope().when_target_named("strong")
"""

from typing import Any, Callable

from . import constraints as c
from .binding import Binding
from .constants import (
    BINDING_CONSTANT_VALUE,
    BINDING_CONSTRUCTOR,
    BINDING_DYNAMIC_VALUE,
    BINDING_FACTORY,
    BINDING_FUNCTION,
    BINDING_INSTANCE,
    BINDING_PROVIDER,
    SCOPE_REQUEST,
    SCOPE_SINGLETON,
    SCOPE_TRANSIENT,
)
from .exceptions import InvalidFunctionBindingError, InvalidToSelfValueError
from .identifiers import identifier_to_string


class BindingWhenOnSyntax:
    """Constraint and lifecycle-hook steps; every method returns ``self``."""

    def __init__(self, binding: Binding) -> None:
        self._binding = binding

    @property
    def binding(self) -> Binding:
        return self._binding

    def when(self, constraint: Callable[[Any], bool]) -> "BindingWhenOnSyntax":
        self._binding.constraint = constraint
        return self

    def when_target_named(self, name: Any) -> "BindingWhenOnSyntax":
        return self.when(c.named(name))

    def when_target_is_default(self) -> "BindingWhenOnSyntax":
        return self.when(c.Constraint(c.is_default, "default target"))

    def when_target_tagged(self, key: Any, value: Any) -> "BindingWhenOnSyntax":
        return self.when(c.tagged(key, value))

    def when_injected_into(self, parent: Any) -> "BindingWhenOnSyntax":
        return self.when(c.injected_into(parent))

    def when_parent_named(self, name: Any) -> "BindingWhenOnSyntax":
        return self.when(c.parent_matches(c.named(name)))

    def when_parent_tagged(self, key: Any, value: Any) -> "BindingWhenOnSyntax":
        return self.when(c.parent_matches(c.tagged(key, value)))

    def when_any_ancestor_is(self, ancestor: Any) -> "BindingWhenOnSyntax":
        return self.when(c.any_ancestor(c.type_constraint(ancestor), f"is: {identifier_to_string(ancestor)}"))

    def when_no_ancestor_is(self, ancestor: Any) -> "BindingWhenOnSyntax":
        return self.when(c.no_ancestor(c.type_constraint(ancestor), f"is: {identifier_to_string(ancestor)}"))

    def when_any_ancestor_named(self, name: Any) -> "BindingWhenOnSyntax":
        inner = c.named(name)
        return self.when(c.any_ancestor(inner, inner.description))

    def when_no_ancestor_named(self, name: Any) -> "BindingWhenOnSyntax":
        inner = c.named(name)
        return self.when(c.no_ancestor(inner, inner.description))

    def when_any_ancestor_tagged(self, key: Any, value: Any) -> "BindingWhenOnSyntax":
        inner = c.tagged(key, value)
        return self.when(c.any_ancestor(inner, inner.description))

    def when_no_ancestor_tagged(self, key: Any, value: Any) -> "BindingWhenOnSyntax":
        inner = c.tagged(key, value)
        return self.when(c.no_ancestor(inner, inner.description))

    def when_any_ancestor_matches(self, predicate: Callable[[Any], bool]) -> "BindingWhenOnSyntax":
        return self.when(c.any_ancestor(predicate, "matches"))

    def when_no_ancestor_matches(self, predicate: Callable[[Any], bool]) -> "BindingWhenOnSyntax":
        return self.when(c.no_ancestor(predicate, "matches"))

    def on_activation(self, handler: Callable[[Any, Any], Any]) -> "BindingWhenOnSyntax":
        """Post-process freshly produced values: ``handler(context, value)`` returns the value to use."""
        self._binding.on_activation = handler
        return self

    def on_deactivation(self, handler: Callable[[Any], Any]) -> "BindingWhenOnSyntax":
        """Run ``handler(value)`` for a cached singleton when its binding is removed."""
        self._binding.on_deactivation = handler
        return self


class BindingInWhenOnSyntax(BindingWhenOnSyntax):
    """Scope step, followed by the constraint and hook steps."""

    def _in(self, scope: str) -> BindingWhenOnSyntax:
        self._binding.scope = scope
        return BindingWhenOnSyntax(self._binding)

    def in_singleton_scope(self) -> BindingWhenOnSyntax:
        return self._in(SCOPE_SINGLETON)

    def in_transient_scope(self) -> BindingWhenOnSyntax:
        return self._in(SCOPE_TRANSIENT)

    def in_request_scope(self) -> BindingWhenOnSyntax:
        return self._in(SCOPE_REQUEST)


class BindingToSyntax:
    """First step of the fluent syntax: choose the production strategy."""

    def __init__(self, binding: Binding) -> None:
        self._binding = binding

    @property
    def binding(self) -> Binding:
        return self._binding

    def to(self, implementation: type) -> BindingInWhenOnSyntax:
        self._binding.type = BINDING_INSTANCE
        self._binding.implementation_type = implementation
        return BindingInWhenOnSyntax(self._binding)

    def to_self(self) -> BindingInWhenOnSyntax:
        if not isinstance(self._binding.service_identifier, type):
            raise InvalidToSelfValueError()
        return self.to(self._binding.service_identifier)

    def to_constant_value(self, value: Any) -> BindingWhenOnSyntax:
        b = self._binding
        b.type = BINDING_CONSTANT_VALUE
        b.cache = value
        b.activated = False
        b.scope = SCOPE_SINGLETON
        b.dynamic_value = None
        b.implementation_type = None
        return BindingWhenOnSyntax(b)

    def to_dynamic_value(self, func: Callable[[Any], Any]) -> BindingInWhenOnSyntax:
        b = self._binding
        b.type = BINDING_DYNAMIC_VALUE
        b.cache = None
        b.activated = False
        b.dynamic_value = func
        b.implementation_type = None
        return BindingInWhenOnSyntax(b)

    def to_constructor(self, constructor: type) -> BindingWhenOnSyntax:
        self._binding.type = BINDING_CONSTRUCTOR
        self._binding.implementation_type = constructor
        return BindingWhenOnSyntax(self._binding)

    def to_function(self, func: Callable[..., Any]) -> BindingWhenOnSyntax:
        if not callable(func):
            raise InvalidFunctionBindingError()
        binding_when_on = self.to_constant_value(func)
        self._binding.type = BINDING_FUNCTION
        return binding_when_on

    def to_factory(self, factory: Callable[[Any], Any]) -> BindingWhenOnSyntax:
        self._binding.type = BINDING_FACTORY
        self._binding.factory = factory
        return BindingWhenOnSyntax(self._binding)

    def to_provider(self, provider: Callable[[Any], Any]) -> BindingWhenOnSyntax:
        self._binding.type = BINDING_PROVIDER
        self._binding.provider = provider
        return BindingWhenOnSyntax(self._binding)

    def to_auto_factory(self, service_identifier: Any) -> BindingWhenOnSyntax:
        return self.to_factory(lambda context: lambda: context.container.get(service_identifier))

    def to_auto_named_factory(self, service_identifier: Any) -> BindingWhenOnSyntax:
        return self.to_factory(lambda context: lambda name: context.container.get_named(service_identifier, name))

    def to_service(self, service_identifier: Any) -> None:
        self.to_dynamic_value(lambda context: context.container.get(service_identifier))
