"""The configuration shape consumed by :class:`~objfactory.service.FactoryService`.

::

    classloader:
      - app.loaders.PluginLoader
    object-factory:
      default: app.factories.Pooled
      app.model.Order: app.factories.OrderFactory
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple, Union

from .config_sources import DictSource, TreeSource
from .constants import CLASS_LOADER, OBJECT_FACTORY
from .exceptions import ConfigurationError


def _parse_loaders(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"'{CLASS_LOADER}' must be a class name or a list of class names")
    names = []
    for item in value:
        if not isinstance(item, str) or not item:
            raise ConfigurationError(f"Invalid '{CLASS_LOADER}' entry: {item!r}")
        names.append(item)
    return tuple(names)


def _parse_factories(value: Any) -> Mapping[str, str]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{OBJECT_FACTORY}' must be a mapping of class name to factory class name")
    table = {}
    for key, factory_class in value.items():
        if not isinstance(key, str) or not isinstance(factory_class, str) or not factory_class:
            raise ConfigurationError(f"Invalid '{OBJECT_FACTORY}' entry: {key!r}: {factory_class!r}")
        table[key] = factory_class
    return MappingProxyType(table)


@dataclass(frozen=True)
class FactoryConfig:
    """Loader class names and the factory table, as read from configuration.

    Attributes:
        loaders: Loader class names, instantiated without arguments at
            initialization and tried in this order after the default loader.
        factories: Class name (or ``"default"``) to factory class name.
    """

    loaders: Tuple[str, ...] = ()
    factories: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_tree(cls, tree: Mapping[str, Any]) -> "FactoryConfig":
        return cls(
            loaders=_parse_loaders(tree.get(CLASS_LOADER)),
            factories=_parse_factories(tree.get(OBJECT_FACTORY)),
        )

    @classmethod
    def load(cls, source: Union["FactoryConfig", TreeSource, Mapping[str, Any], None]) -> "FactoryConfig":
        """Normalise any accepted configuration input into a :class:`FactoryConfig`."""
        if source is None:
            return cls()
        if isinstance(source, FactoryConfig):
            return source
        if isinstance(source, Mapping):
            source = DictSource(source)
        if not isinstance(source, TreeSource):
            raise ConfigurationError(f"Unsupported configuration source: {type(source).__name__}")
        return cls.from_tree(source.get_tree())
