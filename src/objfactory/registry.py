"""Lazily created, cached factory strategies."""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from .constants import DEFAULT_FACTORY
from .exceptions import FactoryError, IncorrectFactoryError, InstantiationError
from .factory import Factory

_logger = logging.getLogger(__name__)


class FactoryRegistry:
    """Maps class names to factory instances.

    Factory class names come from configuration and are only instantiated
    on first use, through *builder*. Live factories are cached per requested
    class name with :meth:`dict.setdefault`, so concurrent first uses all
    receive the instance that was stored first.

    Args:
        builder: Creates an instance from a factory class name with its
            zero-argument constructor.
    """

    def __init__(self, builder: Callable[[str], Any]) -> None:
        self._builder = builder
        self._classes: Mapping[str, str] = MappingProxyType({})
        self._factories: Dict[str, Factory] = {}

    def configure(self, classes: Mapping[str, str]) -> None:
        self._classes = MappingProxyType(dict(classes))

    @property
    def classes(self) -> Mapping[str, str]:
        """The configured class name to factory class name table."""
        return self._classes

    def cached(self) -> Dict[str, Factory]:
        return dict(self._factories)

    def factory_class_for(self, class_name: str) -> Optional[str]:
        factory_class = self._classes.get(class_name)
        if factory_class is None:
            factory_class = self._classes.get(DEFAULT_FACTORY)
        return factory_class

    def get(self, class_name: str) -> Optional[Factory]:
        """Return the factory for *class_name*, creating it on first use.

        Returns:
            The cached factory, or ``None`` if neither *class_name* nor
            ``default`` is configured.

        Raises:
            InstantiationError: If the factory class cannot be instantiated,
                or its ``init`` fails.
            IncorrectFactoryError: If the instance is not a :class:`Factory`.
        """
        factory = self._factories.get(class_name)
        if factory is not None:
            return factory

        factory_class = self.factory_class_for(class_name)
        if factory_class is None:
            return None

        candidate = self._builder(factory_class)
        if not isinstance(candidate, Factory):
            raise IncorrectFactoryError(factory_class, class_name)
        try:
            candidate.init(class_name)
        except FactoryError:
            raise
        except Exception as e:
            raise InstantiationError(class_name, e) from e

        factory = self._factories.setdefault(class_name, candidate)
        if factory is candidate:
            _logger.debug("Created factory %s for %s", factory_class, class_name)
        else:
            _logger.debug("Discarded concurrently created factory %s for %s", factory_class, class_name)
        return factory

    def clear(self) -> None:
        self._factories.clear()
        self._classes = MappingProxyType({})
