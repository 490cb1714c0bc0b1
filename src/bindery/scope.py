"""Scope caches for binding lifecycles.

Provides the cache objects that tie produced values to a lifetime:
:class:`SingletonCache` stores on the binding itself, :class:`RequestCache`
lives on a resolution context, and transient bindings get a no-op cache.
:func:`cache_for` picks the right one for a binding.
"""

from typing import Any, Dict

from .constants import SCOPE_REQUEST, SCOPE_SINGLETON

MISSING = object()
"""Sentinel returned by caches on a miss; ``None`` is a legitimate value."""


class ScopeCache:
    """Protocol for scope caches keyed by binding."""

    def get(self, binding) -> Any:
        return MISSING

    def put(self, binding, value: Any) -> None:
        return


class SingletonCache(ScopeCache):
    """Stores the value on the binding, so it follows the binding through clones and snapshots."""

    def get(self, binding) -> Any:
        return binding.cache if binding.activated else MISSING

    def put(self, binding, value: Any) -> None:
        binding.cache = value
        binding.activated = True


class RequestCache(ScopeCache):
    """Values shared within one top-level resolution, keyed by binding id."""

    def __init__(self) -> None:
        self._instances: Dict[int, Any] = {}

    def get(self, binding) -> Any:
        return self._instances.get(binding.id, MISSING)

    def put(self, binding, value: Any) -> None:
        self._instances[binding.id] = value


_TRANSIENT = ScopeCache()
_SINGLETON = SingletonCache()


def cache_for(binding, context) -> ScopeCache:
    if binding.scope == SCOPE_SINGLETON:
        return _SINGLETON
    if binding.scope == SCOPE_REQUEST:
        return context.request_cache
    return _TRANSIENT

