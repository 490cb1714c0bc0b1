"""Exception hierarchy for bindery.

All framework-specific exceptions inherit from :class:`BinderyError`, making
it easy to catch any bindery error with a single ``except BinderyError``
clause. Messages always embed the human-readable service identifier.
"""

from typing import Any, Iterable, Sequence

from .identifiers import identifier_to_string


class BinderyError(Exception):
    """Base exception for all bindery errors."""

    pass


class NotRegisteredError(BinderyError):
    """Raised when no binding is eligible for a requested service identifier.

    Attributes:
        service_identifier: The identifier that could not be satisfied.
    """

    def __init__(self, service_identifier: Any, registered: str = ""):
        msg = f"No matching bindings found for serviceIdentifier: {identifier_to_string(service_identifier)}"
        if registered:
            msg = f"{msg}\n{registered}"
        super().__init__(msg)
        self.service_identifier = service_identifier


class AmbiguousMatchError(BinderyError):
    """Raised when a single-result lookup finds more than one eligible binding.

    Attributes:
        service_identifier: The identifier with several eligible bindings.
    """

    def __init__(self, service_identifier: Any, registered: str = ""):
        msg = f"Ambiguous match found for serviceIdentifier: {identifier_to_string(service_identifier)}"
        if registered:
            msg = f"{msg}\n{registered}"
        super().__init__(msg)
        self.service_identifier = service_identifier


class CircularDependencyError(BinderyError):
    """Raised when a service identifier reappears in its own ancestor chain.

    Attributes:
        chain: The identifiers from the root request to the repeated one.
    """

    def __init__(self, chain: Sequence[Any]):
        self.chain = tuple(chain)
        path = " --> ".join(identifier_to_string(k) for k in self.chain)
        super().__init__(f"Circular dependency found: {path}")


class CannotUnbindError(BinderyError):
    """Raised by ``unbind`` when the identifier has no binding in the container."""

    def __init__(self, service_identifier: Any):
        super().__init__(f"Could not unbind serviceIdentifier: {identifier_to_string(service_identifier)}")
        self.service_identifier = service_identifier


class NoMoreSnapshotsAvailableError(BinderyError):
    """Raised by ``restore`` when the snapshot stack is empty."""

    def __init__(self):
        super().__init__("No snapshot available to restore.")


class InvalidMiddlewareReturnError(BinderyError):
    """Raised when a middleware chain returns ``None``."""

    def __init__(self):
        super().__init__("Invalid return type in middleware. Middleware must return!")


class MissingInjectableAnnotationError(BinderyError):
    """Raised when a class lacking ``@injectable`` must be constructed by the container."""

    def __init__(self, cls: Any):
        super().__init__(f"Missing required @injectable annotation in: {identifier_to_string(cls)}.")
        self.cls = cls


class MissingInjectAnnotationError(BinderyError):
    """Raised when a constructor parameter has neither a usable type hint nor a default."""

    def __init__(self, cls: Any, parameter: str):
        super().__init__(
            f"Missing required Inject or MultiInject annotation in: argument '{parameter}' "
            f"in class {identifier_to_string(cls)}."
        )
        self.cls = cls
        self.parameter = parameter


class UnresolvableTypeHintError(BinderyError):
    """Raised when the type hints of an injectable class cannot be evaluated.

    Attributes:
        cls: The class whose constructor or attributes carry the hint.
    """

    def __init__(self, cls: Any, error: Exception):
        super().__init__(f"Could not resolve type hints of {identifier_to_string(cls)}: {error}")
        self.cls = cls


class ArgumentsLengthMismatchError(BinderyError):
    """Raised when a derived class takes fewer constructor arguments than its base class."""

    def __init__(self, cls: Any):
        name = identifier_to_string(cls)
        super().__init__(
            f"The number of constructor arguments in the derived class {name} must be >= "
            f"than the number of constructor arguments of its base class."
        )
        self.cls = cls


class InvalidBindingTypeError(BinderyError):
    """Raised when a binding reaches resolution without a production strategy."""

    def __init__(self, service_identifier: Any):
        super().__init__(f"Invalid binding type: {identifier_to_string(service_identifier)}")
        self.service_identifier = service_identifier


class InvalidToSelfValueError(BinderyError):
    """Raised when ``to_self`` is used with an identifier that is not a class."""

    def __init__(self):
        super().__init__("The to_self function can only be applied when a class is used as service identifier")


class InvalidFunctionBindingError(BinderyError):
    """Raised when ``to_function`` receives a value that is not callable."""

    def __init__(self):
        super().__init__("Value provided to function binding must be a function!")


class KeyNotFoundError(BinderyError):
    """Raised by the binding lookup when a key is absent.

    Attributes:
        key: The missing key.
    """

    def __init__(self, key: Any):
        super().__init__(f"Key Not Found: {identifier_to_string(key)}")
        self.key = key


class NullArgumentError(BinderyError):
    """Raised by the binding lookup when a ``None`` key or value is added."""

    def __init__(self):
        super().__init__("NULL argument")


class ConfigurationError(BinderyError):
    """Raised for configuration problems (invalid sources, unreadable files)."""

    def __init__(self, msg: str):
        super().__init__(msg)


class InvalidContainerOptionsError(ConfigurationError):
    """Raised when container construction options are malformed.

    Attributes:
        errors: Human-readable descriptions of each invalid option.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))
