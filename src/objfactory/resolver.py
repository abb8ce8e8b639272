"""Class name resolution across the default and additional loading contexts."""

import logging
from typing import Any, Iterable, Optional, Tuple

from .exceptions import TypeNotFoundError
from .loaders import DefaultLoader, TypeLoader, isolated_owner

_logger = logging.getLogger(__name__)


class TypeResolver:
    """Resolves class names through an ordered chain of loaders.

    The default loader is always tried first, then each additional loader
    in registration order. Nothing is cached: every call re-resolves.

    Args:
        loaders: Additional loaders, tried after the default one.
        default: The process loading context. A :class:`DefaultLoader` is
            created when omitted.
    """

    def __init__(self, loaders: Iterable[TypeLoader] = (), default: Optional[TypeLoader] = None) -> None:
        self._default = default if default is not None else DefaultLoader()
        self._loaders: Tuple[TypeLoader, ...] = tuple(loaders)

    @property
    def default(self) -> TypeLoader:
        return self._default

    @property
    def loaders(self) -> Tuple[TypeLoader, ...]:
        """The additional loaders, in resolution order."""
        return self._loaders

    def add_loader(self, loader: TypeLoader) -> None:
        # Replaced, never mutated: readers keep a consistent snapshot.
        self._loaders = self._loaders + (loader,)

    def clear(self) -> None:
        self._loaders = ()

    def resolve(self, name: str, loader: Optional[TypeLoader] = None) -> type:
        """Resolve *name* to a class.

        Args:
            name: The class name.
            loader: If given, resolution happens in this loader only.

        Returns:
            The resolved class.

        Raises:
            TypeNotFoundError: If *loader* cannot resolve *name*, or, with no
                explicit loader, if every loader in the chain fails. In the
                latter case the default loader's error is raised.
        """
        if loader is not None:
            return loader.load_type(name)
        try:
            return self._default.load_type(name)
        except TypeNotFoundError as e:
            original = e
        for extra in self._loaders:
            try:
                cls = extra.load_type(name)
            except TypeNotFoundError:
                continue
            _logger.debug("Resolved %s through %r", name, extra)
            return cls
        raise original

    def find_class(self, module: str, qualname: str) -> Any:
        """Look up an arbitrary global through the same chain as :meth:`resolve`."""
        try:
            return self._default.find_class(module, qualname)
        except TypeNotFoundError as e:
            original = e
        for extra in self._loaders:
            try:
                return extra.find_class(module, qualname)
            except TypeNotFoundError:
                continue
        raise original

    def context_of(self, cls: type) -> Optional[TypeLoader]:
        """Return the loader that defines *cls*, or ``None`` if none does.

        The default loader is checked first, then the registered loaders,
        then any other live :class:`IsolatedLoader`. Classes that cannot be
        reached by name (for example those created inside a function) have
        no context.
        """
        if self._default.defines(cls):
            return self._default
        for extra in self._loaders:
            if extra.defines(cls):
                return extra
        return isolated_owner(cls)
