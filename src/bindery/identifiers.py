"""Service identifiers.

A service identifier is a ``str``, a :class:`Token` or a class. Strings
compare structurally, classes and plain tokens by identity.
"""

from typing import Any, Dict, Union


class Token:
    """Opaque identity key, the Python counterpart of a symbol.

    Two tokens created with the same name are distinct keys. Use
    :meth:`for_name` to obtain an interned token shared by every caller
    that asks for the same name.

    Example:
        >>> WEAPON = Token("Weapon")
        >>> WEAPON == Token("Weapon")
        False
        >>> Token.for_name("Weapon") is Token.for_name("Weapon")
        True
    """

    __slots__ = ("name",)

    _registry: Dict[str, "Token"] = {}

    def __init__(self, name: str = "") -> None:
        self.name = name

    @classmethod
    def for_name(cls, name: str) -> "Token":
        tok = cls._registry.get(name)
        if tok is None:
            tok = cls(name)
            cls._registry[name] = tok
        return tok

    def __repr__(self) -> str:
        return f"Token({self.name})"


ServiceIdentifier = Union[str, Token, type]


def identifier_to_string(service_identifier: Any) -> str:
    if isinstance(service_identifier, type) or callable(service_identifier):
        return getattr(service_identifier, "__name__", repr(service_identifier))
    if isinstance(service_identifier, Token):
        return repr(service_identifier)
    return str(service_identifier)
