"""Constants used throughout the bindery runtime.

This module defines the framework logger, the binding scopes, the binding
production strategies, the target kinds and the reserved tag names.
"""

import logging

LOGGER_NAME: str = "bindery"
"""Default logger name for the bindery runtime."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for bindery internal diagnostics."""

SCOPE_TRANSIENT: str = "transient"
"""Built-in scope: a new value on every resolution."""

SCOPE_SINGLETON: str = "singleton"
"""Built-in scope: one value per binding for the container lifetime."""

SCOPE_REQUEST: str = "request"
"""Built-in scope: one value per binding for a single top-level ``get*`` call."""

BINDING_SCOPES: tuple = (SCOPE_TRANSIENT, SCOPE_SINGLETON, SCOPE_REQUEST)

BINDING_INVALID: str = "Invalid"
BINDING_INSTANCE: str = "Instance"
BINDING_CONSTANT_VALUE: str = "ConstantValue"
BINDING_DYNAMIC_VALUE: str = "DynamicValue"
BINDING_CONSTRUCTOR: str = "Constructor"
BINDING_FACTORY: str = "Factory"
BINDING_FUNCTION: str = "Function"
BINDING_PROVIDER: str = "Provider"

TARGET_CONSTRUCTOR_ARGUMENT: str = "ConstructorArgument"
TARGET_CLASS_PROPERTY: str = "ClassProperty"
TARGET_VARIABLE: str = "Variable"

NAMED_TAG: str = "named"
"""Reserved tag key used by ``Named`` / ``when_target_named``."""

INJECTABLE_FLAG: str = "_bindery_injectable"
"""Attribute name stamped onto classes decorated with ``@injectable``."""
