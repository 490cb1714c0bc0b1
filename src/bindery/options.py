"""Container construction options.

:class:`ContainerOptions` validates eagerly, so a malformed option fails the
``Container(...)`` call itself. :func:`load_options` assembles options from
configuration sources.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional

from .config_sources import FlatSource, TreeSource
from .constants import BINDING_SCOPES, SCOPE_TRANSIENT
from .exceptions import ConfigurationError, InvalidContainerOptionsError

_TRUTHY = {"1", "true", "yes", "on", "y", "t"}
_FALSY = {"0", "false", "no", "off", "n", "f", ""}


@dataclass(frozen=True)
class ContainerOptions:
    """Options shared by a container and, by default, its children.

    Attributes:
        default_scope: Scope given to new bindings (``transient``,
            ``singleton`` or ``request``).
        auto_bind_injectable: Bind ``@injectable`` classes to themselves the
            first time they are requested without a binding.
        skip_base_class_checks: Do not require base classes to be
            ``@injectable`` nor compare constructor arities.

    Raises:
        InvalidContainerOptionsError: On any invalid value.
    """
    default_scope: str = SCOPE_TRANSIENT
    auto_bind_injectable: bool = False
    skip_base_class_checks: bool = False

    def __post_init__(self) -> None:
        errors: List[str] = []
        if not isinstance(self.default_scope, str) or self.default_scope not in BINDING_SCOPES:
            errors.append(
                "Invalid Container option. Default scope must be one of "
                f"{', '.join(repr(s) for s in BINDING_SCOPES)}; got {self.default_scope!r}."
            )
        if not isinstance(self.auto_bind_injectable, bool):
            errors.append("Invalid Container option. Auto bind injectable must be a boolean.")
        if not isinstance(self.skip_base_class_checks, bool):
            errors.append("Invalid Container option. Skip base check must be a boolean.")
        if errors:
            raise InvalidContainerOptionsError(errors)

    @classmethod
    def from_value(cls, value: Any) -> "ContainerOptions":
        """Accept ``None``, a :class:`ContainerOptions` or a mapping of option names."""
        if value is None:
            return cls()
        if isinstance(value, ContainerOptions):
            return value
        if not isinstance(value, Mapping):
            raise InvalidContainerOptionsError(
                ["Invalid Container constructor argument. Container options must be a mapping."]
            )
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in value if k not in known)
        if unknown:
            raise InvalidContainerOptionsError([f"Unknown Container options: {unknown}"])
        return cls(**{k: v for k, v in value.items() if v is not None})


def _coerce_flag(value: Any) -> Any:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    return value


def load_options(
    *sources: Any,
    section: str = "container",
    overrides: Optional[Mapping[str, Any]] = None,
) -> ContainerOptions:
    """Build :class:`ContainerOptions` from configuration sources.

    Sources are applied in order, later ones winning; *overrides* win over
    every source. Flat sources are asked for the upper-case option names,
    tree sources contribute their *section* mapping. String flags such as
    ``"true"`` or ``"0"`` are coerced to booleans.

    Raises:
        ConfigurationError: If a source has an unknown type or its section is
            not a mapping.
        InvalidContainerOptionsError: If the merged options are invalid.

    Example:
        >>> opts = load_options(DictSource({"container": {"default_scope": "singleton"}}),
        ...                     EnvSource(prefix="APP_"))
    """
    names = [f.name for f in fields(ContainerOptions)]
    merged: Dict[str, Any] = {}
    for src in sources:
        if isinstance(src, TreeSource):
            part = src.get_tree().get(section, {})
            if not isinstance(part, Mapping):
                raise ConfigurationError(f"Configuration section '{section}' must be a mapping")
            merged.update(part)
        elif isinstance(src, FlatSource):
            for name in names:
                raw = src.get(name.upper())
                if raw is not None:
                    merged[name] = raw
        else:
            raise ConfigurationError(f"Unknown configuration source type: {type(src)}")
    merged.update(overrides or {})
    coerced = {k: (_coerce_flag(v) if k != "default_scope" else v) for k, v in merged.items()}
    if isinstance(coerced.get("default_scope"), str):
        coerced["default_scope"] = coerced["default_scope"].strip().lower()
    return ContainerOptions.from_value(coerced)
