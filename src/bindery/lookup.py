"""Ordered multi-map from service identifier to bindings."""

from typing import Any, Callable, Dict, Generic, List, TypeVar

from .exceptions import KeyNotFoundError, NullArgumentError

T = TypeVar("T")


class Lookup(Generic[T]):
    """Insertion-ordered mapping of service identifier to a list of values.

    The order of the list decides tie-breaks and the element order of
    multi-injection. A key whose last value is removed disappears, so no key
    ever maps to an empty list.
    """

    def __init__(self) -> None:
        self._map: Dict[Any, List[T]] = {}

    def get_map(self) -> Dict[Any, List[T]]:
        return self._map

    def add(self, service_identifier: Any, value: T) -> None:
        if service_identifier is None or value is None:
            raise NullArgumentError()
        self._map.setdefault(service_identifier, []).append(value)

    def get(self, service_identifier: Any) -> List[T]:
        if service_identifier is None:
            raise NullArgumentError()
        if service_identifier not in self._map:
            raise KeyNotFoundError(service_identifier)
        return self._map[service_identifier]

    def remove(self, service_identifier: Any) -> List[T]:
        if service_identifier is None:
            raise NullArgumentError()
        if service_identifier not in self._map:
            raise KeyNotFoundError(service_identifier)
        return self._map.pop(service_identifier)

    def remove_by_condition(self, condition: Callable[[T], bool]) -> List[T]:
        """Remove every value matching *condition* across all keys.

        Returns:
            The removed values, in lookup order.
        """
        removed: List[T] = []
        for key in list(self._map.keys()):
            kept: List[T] = []
            for value in self._map[key]:
                (removed if condition(value) else kept).append(value)
            if kept:
                self._map[key] = kept
            else:
                del self._map[key]
        return removed

    def has_key(self, service_identifier: Any) -> bool:
        if service_identifier is None:
            raise NullArgumentError()
        return service_identifier in self._map

    def clone(self) -> "Lookup[T]":
        copy: Lookup[T] = Lookup()
        for key, values in self._map.items():
            for value in values:
                copy.add(key, value.clone())
        return copy

    def traverse(self, visitor: Callable[[Any, List[T]], None]) -> None:
        for key, values in self._map.items():
            visitor(key, values)

    def __len__(self) -> int:
        return len(self._map)
