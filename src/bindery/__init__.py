# bindery/__init__.py
try:
    from ._version import __version__
except Exception:
    __version__ = "0.0.0"

from .binding import Binding
from .config_sources import DictSource, EnvSource, FlatDictSource, JsonTreeSource, YamlTreeSource
from .constants import NAMED_TAG, SCOPE_REQUEST, SCOPE_SINGLETON, SCOPE_TRANSIENT
from .constraints import Constraint
from .container import Container, ContainerSnapshot, NextArgs
from .exceptions import (
    AmbiguousMatchError,
    ArgumentsLengthMismatchError,
    BinderyError,
    CannotUnbindError,
    CircularDependencyError,
    ConfigurationError,
    InvalidBindingTypeError,
    InvalidContainerOptionsError,
    InvalidFunctionBindingError,
    InvalidMiddlewareReturnError,
    InvalidToSelfValueError,
    KeyNotFoundError,
    MissingInjectAnnotationError,
    MissingInjectableAnnotationError,
    NoMoreSnapshotsAvailableError,
    NotRegisteredError,
    NullArgumentError,
    UnresolvableTypeHintError,
)
from .identifiers import Token, identifier_to_string
from .lookup import Lookup
from .metadata import Inject, MetadataReader, MultiInject, Named, Tagged, Target, injectable, optional, unmanaged
from .modules import AsyncContainerModule, ContainerModule
from .options import ContainerOptions, load_options
from .planning import Context, Plan, Request, get_binding_dictionary

__all__ = [
    "__version__",
    "Container",
    "ContainerSnapshot",
    "ContainerOptions",
    "ContainerModule",
    "AsyncContainerModule",
    "NextArgs",
    "Binding",
    "Lookup",
    "Token",
    "identifier_to_string",
    "Constraint",
    "Context",
    "Plan",
    "Request",
    "Target",
    "MetadataReader",
    "get_binding_dictionary",
    "injectable",
    "Inject",
    "MultiInject",
    "Named",
    "Tagged",
    "optional",
    "unmanaged",
    "load_options",
    "EnvSource",
    "FlatDictSource",
    "DictSource",
    "JsonTreeSource",
    "YamlTreeSource",
    "NAMED_TAG",
    "SCOPE_TRANSIENT",
    "SCOPE_SINGLETON",
    "SCOPE_REQUEST",
    "BinderyError",
    "NotRegisteredError",
    "AmbiguousMatchError",
    "CircularDependencyError",
    "CannotUnbindError",
    "NoMoreSnapshotsAvailableError",
    "InvalidMiddlewareReturnError",
    "MissingInjectableAnnotationError",
    "MissingInjectAnnotationError",
    "ArgumentsLengthMismatchError",
    "InvalidBindingTypeError",
    "InvalidToSelfValueError",
    "InvalidFunctionBindingError",
    "KeyNotFoundError",
    "NullArgumentError",
    "UnresolvableTypeHintError",
    "ConfigurationError",
    "InvalidContainerOptionsError",
]
