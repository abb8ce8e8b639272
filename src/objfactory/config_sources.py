"""Where a :class:`~objfactory.config.FactoryConfig` comes from.

A source produces the raw settings tree: the ``classloader`` entry naming
the loaders to start, and the ``object-factory`` table mapping class names
(or ``default``) to factory class names. Parsing and validating those two
keys is left to :meth:`~objfactory.config.FactoryConfig.from_tree`; sources
only guarantee that the top level is a mapping.
"""

import json
from os import PathLike
from typing import Any, Mapping, Union

from .exceptions import ConfigurationError

PathT = Union[str, PathLike]


def _require_mapping(data: Any, origin: str) -> Mapping[str, Any]:
    # an empty file means "no loaders, no factories"
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{origin} must contain a mapping at the top level, got {type(data).__name__}")
    return data


class TreeSource:
    """A provider of factory service settings."""

    def get_tree(self) -> Mapping[str, Any]:
        """Return the settings tree holding ``classloader`` and ``object-factory``."""
        raise NotImplementedError


class DictSource(TreeSource):
    """Settings already held in memory, e.g. built by application code.

    Example:
        >>> src = DictSource({"object-factory": {"default": "app.factories.Pooled"}})
        >>> src.get_tree()["object-factory"]["default"]
        'app.factories.Pooled'
    """

    def __init__(self, data: Mapping[str, Any]):
        self._data = data

    def get_tree(self) -> Mapping[str, Any]:
        return _require_mapping(self._data, "DictSource")


class JsonTreeSource(TreeSource):
    """Settings read from a JSON document.

    Unreadable or malformed files raise :class:`ConfigurationError` naming
    the path.
    """

    def __init__(self, path: PathT):
        self._path = path

    def get_tree(self) -> Mapping[str, Any]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load JSON config {self._path}: {e}") from e
        return _require_mapping(data, str(self._path))


class YamlTreeSource(TreeSource):
    """Settings read from a YAML document (needs the ``yaml`` extra).

    A missing PyYAML install is reported as :class:`ConfigurationError`
    when the tree is first read, not at construction.
    """

    def __init__(self, path: PathT):
        self._path = path

    def get_tree(self) -> Mapping[str, Any]:
        try:
            import yaml
        except ImportError as e:
            raise ConfigurationError("PyYAML not installed") from e
        try:
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load YAML config {self._path}: {e}") from e
        return _require_mapping(data, str(self._path))
