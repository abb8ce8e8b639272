# objfactory/__init__.py
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("objfactory")
except PackageNotFoundError:
    __version__ = "0.0.0"

from .api import init
from .config import FactoryConfig
from .config_sources import DictSource, JsonTreeSource, TreeSource, YamlTreeSource
from .exceptions import (
    ConfigurationError,
    ConstructionError,
    FactoryError,
    IncorrectFactoryError,
    InstantiationError,
    TypeNotFoundError,
)
from .factory import Factory
from .loaders import DefaultLoader, IsolatedLoader, TypeLoader
from .migration import switch_object_context
from .registry import FactoryRegistry
from .resolver import TypeResolver
from .service import FactoryService
from .signature import SignatureMatcher

__all__ = [
    "__version__",
    "init",
    "FactoryService",
    "FactoryConfig",
    "FactoryRegistry",
    "Factory",
    "TypeLoader",
    "DefaultLoader",
    "IsolatedLoader",
    "TypeResolver",
    "SignatureMatcher",
    "switch_object_context",
    "TreeSource",
    "DictSource",
    "JsonTreeSource",
    "YamlTreeSource",
    "FactoryError",
    "TypeNotFoundError",
    "InstantiationError",
    "ConstructionError",
    "IncorrectFactoryError",
    "ConfigurationError",
]
