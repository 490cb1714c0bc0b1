from typing import Any, Dict, List, Tuple

from .constants import (
    BINDING_CONSTANT_VALUE,
    BINDING_CONSTRUCTOR,
    BINDING_DYNAMIC_VALUE,
    BINDING_FACTORY,
    BINDING_FUNCTION,
    BINDING_INSTANCE,
    BINDING_PROVIDER,
    TARGET_CLASS_PROPERTY,
)
from .exceptions import InvalidBindingTypeError
from .planning import Context, Request
from .scope import MISSING, cache_for

_UNCACHED = (BINDING_FACTORY, BINDING_PROVIDER)


def resolve(context: Context) -> Any:
    """Materialise the plan held by *context*.

    Returns a single value, or a list for multi-injection plans.
    """
    result = _resolve_request(context, context.plan.root_request)
    return None if result is MISSING else result


def _resolve_request(context: Context, request: Request) -> Any:
    if request.is_multi_inject:
        return [_resolve_request(context, child) for child in request.child_requests]
    if not request.bindings:
        return MISSING
    return _resolve_binding(context, request, request.bindings[0])


def _resolve_binding(context: Context, request: Request, binding) -> Any:
    cache = cache_for(binding, context)
    cached = cache.get(binding)
    if cached is not MISSING:
        return cached

    kind = binding.type
    if kind == BINDING_INSTANCE:
        result = build_instance(context, binding.implementation_type, request.child_requests)
    elif kind in (BINDING_CONSTANT_VALUE, BINDING_FUNCTION):
        result = binding.cache
    elif kind == BINDING_CONSTRUCTOR:
        result = binding.implementation_type
    elif kind == BINDING_DYNAMIC_VALUE:
        context.set_current_request(request)
        result = binding.dynamic_value(context)
    elif kind == BINDING_FACTORY:
        context.set_current_request(request)
        result = binding.factory(context)
    elif kind == BINDING_PROVIDER:
        context.set_current_request(request)
        result = binding.provider(context)
    else:
        raise InvalidBindingTypeError(binding.service_identifier)

    if binding.on_activation is not None:
        result = binding.on_activation(context, result)

    if kind not in _UNCACHED:
        cache.put(binding, result)
    return result


def _resolve_args(context: Context, child_requests: List[Request]) -> Tuple[Dict[str, Any], List[Tuple[str, Any]]]:
    kwargs: Dict[str, Any] = {}
    properties: List[Tuple[str, Any]] = []
    for child in child_requests:
        target = child.target
        value = _resolve_request(context, child)
        is_property = target.target_type == TARGET_CLASS_PROPERTY
        if value is MISSING:
            if is_property or target.has_default:
                continue
            value = None
        if is_property:
            properties.append((target.name, value))
        else:
            kwargs[target.name] = value
    return kwargs, properties


def build_instance(context: Context, cls: type, child_requests: List[Request]) -> Any:
    kwargs, properties = _resolve_args(context, child_requests)
    if cls.__init__ is object.__init__:
        inst = cls()
    else:
        inst = cls(**kwargs)
    for name, value in properties:
        setattr(inst, name, value)
    return inst
