# src/bindery/container.py
import inspect
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Callable, List, Optional, Tuple

from ._state import next_id
from .binding import Binding
from .constants import LOGGER, NAMED_TAG, SCOPE_SINGLETON, TARGET_VARIABLE
from .exceptions import (
    CannotUnbindError,
    InvalidMiddlewareReturnError,
    KeyNotFoundError,
    NoMoreSnapshotsAvailableError,
)
from .identifiers import identifier_to_string
from .lookup import Lookup
from .metadata import MetadataReader
from .modules import AsyncContainerModule, ContainerModule
from .options import ContainerOptions
from .planning import Context, create_mock_request, discard_auto_bindings, get_binding_dictionary, plan
from .resolution import resolve
from .syntax import BindingToSyntax


def _same_context(context: Context) -> Context:
    return context


@dataclass(frozen=True)
class NextArgs:
    """Arguments of one lookup, passed unchanged (or replaced) through the middleware chain."""
    avoid_constraints: bool
    is_multi_inject: bool
    service_identifier: Any
    target_type: str = TARGET_VARIABLE
    key: Any = None
    value: Any = None
    context_interceptor: Callable[[Context], Context] = field(default=_same_context)


Next = Callable[[NextArgs], Any]
Middleware = Callable[[Next], Next]


class ContainerSnapshot:
    __slots__ = ("bindings", "middleware")

    def __init__(self, bindings: Lookup, middleware: Optional[Next]) -> None:
        self.bindings = bindings
        self.middleware = middleware

    @classmethod
    def of(cls, bindings: Lookup, middleware: Optional[Next]) -> "ContainerSnapshot":
        return cls(bindings, middleware)


class Container:
    """Registry of bindings and entry point for resolution.

    Args:
        options: ``None``, a :class:`ContainerOptions` or a mapping with the
            same keys.

    Raises:
        InvalidContainerOptionsError: If *options* is malformed.

    Example:
        >>> container = Container({"default_scope": "singleton"})
        >>> container.bind("Weapon").to(Katana)
        >>> container.get("Weapon")
    """

    def __init__(self, options: Any = None) -> None:
        self.options: ContainerOptions = ContainerOptions.from_value(options)
        self.id: int = next_id()
        self.parent: Optional["Container"] = None
        self._binding_dictionary: Lookup[Binding] = Lookup()
        self._snapshots: List[ContainerSnapshot] = []
        self._middleware: Optional[Next] = None
        self._metadata_reader = MetadataReader()

    @staticmethod
    def merge(container1: "Container", container2: "Container", *containers: "Container") -> "Container":
        """Return a new container holding clones of every binding of the inputs, in order."""
        merged = Container()
        destination = get_binding_dictionary(merged)

        def copy_bindings(key: Any, bindings: List[Binding]) -> None:
            for binding in bindings:
                destination.add(binding.service_identifier, binding.clone())

        for source in (container1, container2) + containers:
            get_binding_dictionary(source).traverse(copy_bindings)
        return merged

    def debug(self, msg: str, *args: Any) -> None:
        LOGGER.debug(f"[container {self.id}] {msg}", *args)

    # -- registration -----------------------------------------------------

    def bind(self, service_identifier: Any) -> BindingToSyntax:
        binding = Binding(service_identifier, self.options.default_scope)
        self._binding_dictionary.add(service_identifier, binding)
        self.debug("bind %s (binding %d)", identifier_to_string(service_identifier), binding.id)
        return BindingToSyntax(binding)

    def rebind(self, service_identifier: Any) -> BindingToSyntax:
        if self._binding_dictionary.has_key(service_identifier):
            self.unbind(service_identifier)
        return self.bind(service_identifier)

    def unbind(self, service_identifier: Any) -> None:
        try:
            removed = self._binding_dictionary.remove(service_identifier)
        except KeyNotFoundError as e:
            raise CannotUnbindError(service_identifier) from e
        self.debug("unbind %s", identifier_to_string(service_identifier))
        self._deactivate(removed)

    def unbind_all(self) -> None:
        removed: List[Binding] = []
        self._binding_dictionary.traverse(lambda key, bindings: removed.extend(bindings))
        self._binding_dictionary = Lookup()
        self.debug("unbind all (%d bindings)", len(removed))
        self._deactivate(removed)

    def _deactivate(self, bindings: List[Binding]) -> None:
        for binding in bindings:
            if binding.scope != SCOPE_SINGLETON or not binding.activated or binding.on_deactivation is None:
                continue
            try:
                binding.on_deactivation(binding.cache)
            except Exception as e:
                LOGGER.warning(
                    "Deactivation handler for %s failed: %s",
                    identifier_to_string(binding.service_identifier),
                    e,
                )

    def is_bound(self, service_identifier: Any) -> bool:
        bound = self._binding_dictionary.has_key(service_identifier)
        if not bound and self.parent is not None:
            bound = self.parent.is_bound(service_identifier)
        return bound

    def is_bound_named(self, service_identifier: Any, named: Any) -> bool:
        return self.is_bound_tagged(service_identifier, NAMED_TAG, named)

    def is_bound_tagged(self, service_identifier: Any, key: Any, value: Any) -> bool:
        bound = False
        if self._binding_dictionary.has_key(service_identifier):
            request = create_mock_request(self, service_identifier, key, value)
            bound = any(b.constraint(request) for b in self._binding_dictionary.get(service_identifier))
        if not bound and self.parent is not None:
            bound = self.parent.is_bound_tagged(service_identifier, key, value)
        return bound

    # -- modules ------------------------------------------------------------

    def _module_helpers(self, module_id: int) -> Tuple[Callable[..., Any], ...]:
        def bind(service_identifier: Any) -> BindingToSyntax:
            syntax = self.bind(service_identifier)
            syntax.binding.module_id = module_id
            return syntax

        def unbind(service_identifier: Any) -> None:
            self.unbind(service_identifier)

        def is_bound(service_identifier: Any) -> bool:
            return self.is_bound(service_identifier)

        def rebind(service_identifier: Any) -> BindingToSyntax:
            syntax = self.rebind(service_identifier)
            syntax.binding.module_id = module_id
            return syntax

        return bind, unbind, is_bound, rebind

    def load(self, *modules: ContainerModule) -> None:
        for module in modules:
            self.debug("load module %d", module.id)
            module.registry(*self._module_helpers(module.id))

    async def load_async(self, *modules: AsyncContainerModule) -> None:
        for module in modules:
            self.debug("load module %d (async)", module.id)
            result = module.registry(*self._module_helpers(module.id))
            if inspect.isawaitable(result):
                await result

    def unload(self, *modules: ContainerModule) -> None:
        for module in modules:
            removed = self._binding_dictionary.remove_by_condition(lambda b, mid=module.id: b.module_id == mid)
            self.debug("unload module %d (%d bindings)", module.id, len(removed))
            self._deactivate(removed)

    # -- snapshots ----------------------------------------------------------

    def snapshot(self) -> None:
        self._snapshots.append(ContainerSnapshot.of(self._binding_dictionary.clone(), self._middleware))
        self.debug("snapshot %d taken", len(self._snapshots))

    def restore(self) -> None:
        if not self._snapshots:
            raise NoMoreSnapshotsAvailableError()
        snapshot = self._snapshots.pop()
        self._binding_dictionary = snapshot.bindings
        self._middleware = snapshot.middleware
        self.debug("snapshot %d restored", len(self._snapshots) + 1)

    # -- hierarchy and extension points --------------------------------------

    def create_child(self, options: Any = None) -> "Container":
        child = Container(options if options is not None else self.options)
        child.parent = self
        return child

    def apply_middleware(self, *middlewares: Middleware) -> None:
        """Wrap the current resolution entry point with each middleware in turn.

        A middleware receives ``next`` and returns a callable taking
        :class:`NextArgs`; the last middleware applied runs first.
        """
        initial: Next = self._middleware if self._middleware is not None else self._plan_and_resolve()
        self._middleware = reduce(lambda prev, curr: curr(prev), middlewares, initial)
        self.debug("applied %d middleware(s)", len(middlewares))

    def apply_custom_metadata_reader(self, metadata_reader: MetadataReader) -> None:
        self._metadata_reader = metadata_reader

    # -- resolution ----------------------------------------------------------

    def get(self, service_identifier: Any) -> Any:
        return self._get(False, False, TARGET_VARIABLE, service_identifier)

    def get_tagged(self, service_identifier: Any, key: Any, value: Any) -> Any:
        return self._get(False, False, TARGET_VARIABLE, service_identifier, key, value)

    def get_named(self, service_identifier: Any, named: Any) -> Any:
        return self.get_tagged(service_identifier, NAMED_TAG, named)

    def get_all(self, service_identifier: Any) -> List[Any]:
        return self._get(True, True, TARGET_VARIABLE, service_identifier)

    def get_all_tagged(self, service_identifier: Any, key: Any, value: Any) -> List[Any]:
        return self._get(False, True, TARGET_VARIABLE, service_identifier, key, value)

    def get_all_named(self, service_identifier: Any, named: Any) -> List[Any]:
        return self.get_all_tagged(service_identifier, NAMED_TAG, named)

    def resolve(self, cls: type) -> Any:
        """Construct *cls* without registering it, through a throwaway child container."""
        temp = self.create_child()
        temp.bind(cls).to_self()
        return temp.get(cls)

    def _get(
        self,
        avoid_constraints: bool,
        is_multi_inject: bool,
        target_type: str,
        service_identifier: Any,
        key: Any = None,
        value: Any = None,
    ) -> Any:
        args = NextArgs(
            avoid_constraints=avoid_constraints,
            is_multi_inject=is_multi_inject,
            service_identifier=service_identifier,
            target_type=target_type,
            key=key,
            value=value,
        )
        if self._middleware is not None:
            result = self._middleware(args)
            if result is None:
                raise InvalidMiddlewareReturnError()
            return result
        return self._plan_and_resolve()(args)

    def _plan_and_resolve(self) -> Next:
        def plan_and_resolve(args: NextArgs) -> Any:
            context = plan(
                self._metadata_reader,
                self,
                args.is_multi_inject,
                args.target_type,
                args.service_identifier,
                args.key,
                args.value,
                args.avoid_constraints,
            )
            try:
                return resolve(args.context_interceptor(context))
            except Exception:
                discard_auto_bindings(context)
                raise
        return plan_and_resolve

    def __repr__(self) -> str:
        return f"Container(id={self.id}, bindings={len(self._binding_dictionary)})"
