"""Configuration sources for container options.

Flat sources (:class:`EnvSource`, :class:`FlatDictSource`) answer
upper-case keys such as ``DEFAULT_SCOPE``. Tree sources
(:class:`DictSource`, :class:`JsonTreeSource`, :class:`YamlTreeSource`)
return a nested mapping whose ``container`` section holds the options.
"""

import json
import os
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError


class FlatSource:
    """Base class for flat (key-value) configuration sources."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError


class EnvSource(FlatSource):
    """Configuration source backed by OS environment variables.

    Args:
        prefix: Prefix prepended to every key lookup
            (``"BINDERY_"`` turns a lookup for ``"DEFAULT_SCOPE"`` into
            ``"BINDERY_DEFAULT_SCOPE"``).
    """
    def __init__(self, prefix: str = "BINDERY_") -> None:
        self.prefix = prefix

    def get(self, key: str) -> Optional[str]:
        return os.environ.get(self.prefix + key)


class FlatDictSource(FlatSource):
    """Configuration source backed by an in-memory dictionary.

    Args:
        data: The key-value mapping.
        prefix: Optional prefix prepended to every key lookup.
        case_sensitive: If ``False``, keys are normalised to upper-case
            for lookup.
    """

    def __init__(self, data: Mapping[str, Any], prefix: str = "", case_sensitive: bool = True):
        base = dict(data)
        if case_sensitive:
            self._data = {str(k): v for k, v in base.items()}
            self._prefix = prefix
        else:
            self._data = {str(k).upper(): v for k, v in base.items()}
            self._prefix = prefix.upper()
        self._case_sensitive = case_sensitive

    def get(self, key: str) -> Optional[str]:
        if not key:
            return None
        k = f"{self._prefix}{key}" if self._prefix else key
        if not self._case_sensitive:
            k = k.upper()
        v = self._data.get(k)
        if v is None:
            return None
        if isinstance(v, (str, int, float, bool)):
            return str(v)
        return None


class TreeSource:
    """Base class for tree-structured configuration sources.

    Subclasses must implement :meth:`get_tree` to return a nested mapping.
    """

    def get_tree(self) -> Mapping[str, Any]:
        """Return the configuration tree as a nested mapping.

        Raises:
            NotImplementedError: Always (must be overridden by subclasses).
        """
        raise NotImplementedError


class DictSource(TreeSource):
    """Tree source backed by an in-memory dictionary.

    Example:
        >>> src = DictSource({"container": {"default_scope": "singleton"}})
        >>> src.get_tree()["container"]["default_scope"]
        'singleton'
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def get_tree(self) -> Mapping[str, Any]:
        return self._data


class _FileTreeSource(TreeSource):
    """Tree source read from a file on every :meth:`get_tree` call."""

    label = "file"

    def __init__(self, path: str):
        self._path = path

    def _parse(self, stream: Any) -> Any:
        raise NotImplementedError

    def get_tree(self) -> Mapping[str, Any]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = self._parse(f)
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Failed to load {self.label} config: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"{self.label} config {self._path} must contain a mapping")
        return data


class JsonTreeSource(_FileTreeSource):
    """Tree source that reads configuration from a JSON file.

    Raises:
        ConfigurationError: If the file cannot be loaded or parsed.
    """

    label = "JSON"

    def _parse(self, stream: Any) -> Any:
        return json.load(stream)


class YamlTreeSource(_FileTreeSource):
    """Tree source that reads configuration from a YAML file.

    Requires ``PyYAML`` to be installed (``pip install bindery[yaml]``).

    Raises:
        ConfigurationError: If PyYAML is not installed, or if the file
            cannot be loaded or parsed.
    """

    label = "YAML"

    def _parse(self, stream: Any) -> Any:
        try:
            import yaml
        except ImportError as e:
            raise ConfigurationError("PyYAML not installed") from e
        return yaml.safe_load(stream)
