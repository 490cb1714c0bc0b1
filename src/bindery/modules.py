"""Container modules: named groups of bindings loaded and unloaded together.

A module wraps a registry callback. ``Container.load`` calls it with
``bind``, ``unbind``, ``is_bound`` and ``rebind`` helpers; bindings created
through ``bind`` and ``rebind`` are stamped with the module id so
``Container.unload`` can remove exactly them::

    weapons = ContainerModule(lambda bind, unbind, is_bound, rebind: bind("Katana").to(Katana))
    container.load(weapons)
    container.unload(weapons)
"""

from typing import Any, Awaitable, Callable

from ._state import next_id

Registry = Callable[[Callable[..., Any], Callable[..., Any], Callable[..., Any], Callable[..., Any]], Any]
AsyncRegistry = Callable[[Callable[..., Any], Callable[..., Any], Callable[..., Any], Callable[..., Any]], Awaitable[Any]]


class ContainerModule:
    def __init__(self, registry: Registry) -> None:
        self.id: int = next_id()
        self.registry = registry

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


class AsyncContainerModule(ContainerModule):
    """A module whose registry is a coroutine function; load it with ``Container.load_async``."""

    def __init__(self, registry: AsyncRegistry) -> None:
        super().__init__(registry)
