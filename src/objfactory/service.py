"""The factory service: instantiate classes by name.

:class:`FactoryService` ties the pieces together. For a class name it first
asks the :class:`~objfactory.registry.FactoryRegistry` for a configured
factory and delegates to it; otherwise it resolves the class through the
:class:`~objfactory.resolver.TypeResolver` and calls a constructor matching
the requested signature.
"""

import inspect
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .config import FactoryConfig
from .config_sources import TreeSource
from .constants import LOGGER, PRIMITIVE_TYPES
from .exceptions import (
    ConfigurationError,
    ConstructionError,
    FactoryError,
    InstantiationError,
)
from .factory import Factory
from .loaders import TypeLoader
from .registry import FactoryRegistry
from .resolver import TypeResolver
from .signature import SignatureMatcher

ConfigT = Union[FactoryConfig, TreeSource, Mapping[str, Any], None]

_INT_BITS = {"byte": 8, "short": 16, "int": 32, "long": 64}


def _coerce_primitive(kind: str, value: Any) -> Any:
    if value is None:
        raise TypeError(f"None is not a valid {kind}")
    if kind == "boolean":
        if isinstance(value, bool):
            return value
    elif kind == "char":
        if isinstance(value, str) and len(value) == 1:
            return value
    elif kind in _INT_BITS:
        if isinstance(value, int) and not isinstance(value, bool):
            bound = 1 << (_INT_BITS[kind] - 1)
            if not -bound <= value < bound:
                raise TypeError(f"{value} is out of range for {kind}")
            return value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # float and double: ints widen
        return float(value)
    raise TypeError(f"{type(value).__name__} is not a valid {kind}")


class FactoryService:
    """Creates objects from class names.

    Args:
        loaders: Additional loading contexts, tried after the default one.
        factories: Class name (or ``"default"``) to factory class name.
    """

    def __init__(self, loaders: Iterable[TypeLoader] = (), factories: Optional[Mapping[str, str]] = None) -> None:
        self._resolver = TypeResolver(loaders)
        self._matcher = SignatureMatcher(self._resolver)
        self._registry = FactoryRegistry(self._create_factory)
        self._loader_names: Tuple[str, ...] = ()
        if factories:
            self._registry.configure(factories)

    @property
    def resolver(self) -> TypeResolver:
        return self._resolver

    @property
    def registry(self) -> FactoryRegistry:
        return self._registry

    @property
    def loaders(self) -> Tuple[TypeLoader, ...]:
        return self._resolver.loaders

    # -- lifecycle ---------------------------------------------------------

    def configure(self, config: ConfigT) -> None:
        """Store loader class names and the factory table.

        Loaders are only instantiated by :meth:`initialize`; factories on
        first use.
        """
        cfg = FactoryConfig.load(config)
        self._loader_names = cfg.loaders
        self._registry.configure(cfg.factories)

    def initialize(self) -> None:
        """Instantiate the configured loaders.

        Raises:
            ConfigurationError: If a loader cannot be created or is not a
                :class:`TypeLoader`. The service should not be used then.
        """
        for name in self._loader_names:
            try:
                loader = self.instantiate(self._load(name, None))
            except FactoryError as e:
                raise ConfigurationError(f"No such loader '{name}' for FactoryService: {e}") from e
            if not isinstance(loader, TypeLoader):
                raise ConfigurationError(f"'{name}' is not a TypeLoader (got {type(loader).__name__})")
            self._resolver.add_loader(loader)
            LOGGER.info("Registered loader %s", name)
        self._loader_names = ()

    def shutdown(self) -> None:
        """Drop cached factories, the factory table and the loaders."""
        self._registry.clear()
        self._resolver.clear()
        self._loader_names = ()

    # -- instantiation -----------------------------------------------------

    def get_instance(
        self,
        class_name: str,
        loader: Optional[TypeLoader] = None,
        params: Optional[Sequence[Any]] = None,
        signature: Optional[Sequence[str]] = None,
    ) -> Any:
        """Get a new instance of a named class.

        If a factory is configured for *class_name* (or a ``default`` one),
        the call is delegated to it as is. Otherwise the class is resolved
        in *loader*, or the default chain when *loader* is ``None``, and
        constructed.

        Args:
            class_name: The name of the class.
            loader: Loading context to resolve the class in.
            params: Constructor arguments. Arguments migrated to another
                loading context are replaced in this list.
            signature: Parameter type names for *params*; primitive names
                such as ``"int"`` or ``"double"`` are accepted.

        Returns:
            The new instance.

        Raises:
            InstantiationError: If the class cannot be resolved or
                constructed, or its factory is misconfigured.
        """
        if class_name is None:
            raise FactoryError("Missing class name")
        factory = self._registry.get(class_name)
        if factory is not None:
            return factory.get_instance(loader=loader, params=params, signature=signature)
        cls = self._load(class_name, loader)
        return self.instantiate(cls, params, signature)

    def is_loader_supported(self, class_name: str) -> bool:
        """Whether an explicit loader is honoured for *class_name*."""
        factory = self._registry.get(class_name)
        return factory.is_loader_supported() if factory is not None else True

    def get_signature(
        self,
        cls: type,
        params: Optional[Sequence[Any]],
        signature: Optional[Sequence[str]],
    ) -> Optional[Tuple[type, ...]]:
        """Resolve parameter types for constructing *cls*.

        See :meth:`SignatureMatcher.get_signature`.
        """
        return self._matcher.get_signature(cls, params, signature)

    def load_type(self, class_name: str, loader: Optional[TypeLoader] = None) -> type:
        return self._resolver.resolve(class_name, loader)

    def instantiate(
        self,
        cls: type,
        params: Optional[Sequence[Any]] = None,
        signature: Optional[Sequence[str]] = None,
    ) -> Any:
        """Construct an already resolved class.

        Raises:
            InstantiationError: If a signature type cannot be resolved.
            ConstructionError: If the arguments do not match, or the
                constructor raises.
        """
        if signature is None:
            if params:
                raise ConstructionError(cls, msg=f"Instantiation failed for {cls.__qualname__}: parameters given without a signature")
            try:
                return cls()
            except Exception as e:
                raise ConstructionError(cls, e) from e

        args: List[Any] = params if isinstance(params, list) else list(params or ())
        if len(args) != len(signature):
            raise ConstructionError(
                cls, msg=f"Instantiation failed for {cls.__qualname__}: {len(signature)} types, {len(args)} parameters"
            )
        try:
            types = self._matcher.get_signature(cls, args, signature)
        except Exception as e:
            raise InstantiationError(cls, e) from e

        try:
            values = []
            for i, (name, param_type, value) in enumerate(zip(signature, types, args)):
                if name in PRIMITIVE_TYPES:
                    value = _coerce_primitive(name, value)
                elif value is not None and not isinstance(value, param_type):
                    raise TypeError(f"argument {i} is {type(value).__qualname__}, expected {param_type.__qualname__}")
                values.append(value)
            self._bind(cls, values)
            return cls(*values)
        except Exception as e:
            raise ConstructionError(cls, e) from e

    @staticmethod
    def _bind(cls: type, values: List[Any]) -> None:
        try:
            sig = inspect.signature(cls)
        except (TypeError, ValueError):
            return
        sig.bind(*values)

    def _load(self, class_name: str, loader: Optional[TypeLoader]) -> type:
        try:
            return self._resolver.resolve(class_name, loader)
        except Exception as e:
            raise InstantiationError(class_name, e) from e

    def _create_factory(self, factory_class: str) -> Factory:
        # Direct construction: the registry is not consulted for factory classes.
        return self.instantiate(self._load(factory_class, None))
