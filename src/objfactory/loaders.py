"""Loading contexts: objects that turn class names into classes.

A :class:`TypeLoader` resolves ``"module.QualName"`` names. The process
context is :class:`DefaultLoader`, backed by :mod:`importlib` and
``sys.modules``. :class:`IsolatedLoader` executes modules from its own search
path into a private module table, so two loaders can hand out distinct
classes under the same name.
"""

import importlib
import importlib.machinery
import importlib.util
import logging
import sys
import threading
import weakref
from os import PathLike
from types import ModuleType
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import TypeNotFoundError

_logger = logging.getLogger(__name__)

_live: "weakref.WeakSet[IsolatedLoader]" = weakref.WeakSet()


def split_class_name(name: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(module, qualname)`` candidates for *name*, longest module first.

    ``"pkg.mod:Outer.Inner"`` names the split explicitly. A name without a
    dot is looked up in :mod:`builtins`. Names with an empty dotted segment
    (``".Foo"``, ``"a..B"``, ``"Foo."``) yield nothing.
    """
    if ":" in name:
        module, _, qualname = name.partition(":")
        if _dotted(module) and _dotted(qualname):
            yield module, qualname
        return
    if not _dotted(name):
        return
    parts = name.split(".")
    if len(parts) == 1:
        yield "builtins", name
        return
    for i in range(len(parts) - 1, 0, -1):
        yield ".".join(parts[:i]), ".".join(parts[i:])


def _dotted(name: str) -> bool:
    return all(name.split("."))


def _walk(module: ModuleType, qualname: str) -> Any:
    obj: Any = module
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj


def _lookup(module: Optional[ModuleType], cls: type) -> bool:
    if module is None:
        return False
    try:
        return _walk(module, cls.__qualname__) is cls
    except AttributeError:
        return False


def _is_missing(error: ModuleNotFoundError, module: str) -> bool:
    missing = error.name or ""
    return module == missing or module.startswith(missing + ".")


class TypeLoader:
    """Base class for loading contexts.

    Subclasses implement :meth:`find_class` and :meth:`defines`;
    :meth:`load_type` is built on top of them.
    """

    def find_class(self, module: str, qualname: str) -> Any:
        """Return the object bound to *qualname* inside *module*.

        Raises:
            TypeNotFoundError: If the module or attribute does not exist in
                this context.
        """
        raise NotImplementedError

    def defines(self, cls: type) -> bool:
        """Return ``True`` if *cls* was loaded by this context."""
        raise NotImplementedError

    def load_type(self, name: str) -> type:
        """Resolve a class name to a class.

        Args:
            name: A ``"module.QualName"`` or ``"module:QualName"`` string.

        Returns:
            The class.

        Raises:
            TypeNotFoundError: If no module prefix of *name* yields a class.
        """
        if not isinstance(name, str) or not name:
            raise TypeNotFoundError(repr(name), self, "class name must be a non-empty string")
        last: Optional[TypeNotFoundError] = None
        for module, qualname in split_class_name(name):
            try:
                obj = self.find_class(module, qualname)
            except TypeNotFoundError as e:
                last = e
                continue
            if not isinstance(obj, type):
                raise TypeNotFoundError(name, self, f"{type(obj).__name__} object is not a class")
            return obj
        raise TypeNotFoundError(name, self) from last

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class DefaultLoader(TypeLoader):
    """The process loading context (``importlib.import_module``)."""

    def find_class(self, module: str, qualname: str) -> Any:
        try:
            mod = importlib.import_module(module)
        except ModuleNotFoundError as e:
            if _is_missing(e, module):
                raise TypeNotFoundError(f"{module}.{qualname}", self, str(e)) from e
            raise
        try:
            return _walk(mod, qualname)
        except AttributeError as e:
            raise TypeNotFoundError(f"{module}.{qualname}", self, str(e)) from e

    def defines(self, cls: type) -> bool:
        return _lookup(sys.modules.get(cls.__module__), cls)


class IsolatedLoader(TypeLoader):
    """A loading context that executes modules from its own search path.

    Modules are kept in a private table and never published to
    ``sys.modules``. By default lookups go to *parent* first (the process
    context unless given); only names the parent cannot resolve are loaded
    from *paths*. With ``parent_first=False`` the loader's own modules win.
    Imports performed by the loaded modules themselves still go through the
    normal import system.

    Args:
        paths: Directories searched for top-level modules and packages.
        parent: The delegation target.
        parent_first: Consult *parent* before *paths*.
    """

    def __init__(
        self,
        paths: Iterable[Union[str, PathLike]] = (),
        parent: Optional[TypeLoader] = None,
        parent_first: bool = True,
    ) -> None:
        self._paths: List[str] = [str(p) for p in paths]
        self._parent = parent if parent is not None else DefaultLoader()
        self._parent_first = parent_first
        self._modules: Dict[str, ModuleType] = {}
        self._lock = threading.RLock()
        _live.add(self)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(self._paths)

    @property
    def parent(self) -> TypeLoader:
        return self._parent

    def find_class(self, module: str, qualname: str) -> Any:
        if not self._parent_first:
            try:
                return self._find_own(module, qualname)
            except TypeNotFoundError:
                return self._parent.find_class(module, qualname)
        try:
            return self._parent.find_class(module, qualname)
        except TypeNotFoundError:
            return self._find_own(module, qualname)

    def _find_own(self, module: str, qualname: str) -> Any:
        mod = self._import(module)
        try:
            return _walk(mod, qualname)
        except AttributeError as e:
            raise TypeNotFoundError(f"{module}.{qualname}", self, str(e)) from e

    def defines(self, cls: type) -> bool:
        return _lookup(self._modules.get(cls.__module__), cls)

    def _import(self, module: str) -> ModuleType:
        with self._lock:
            mod = self._modules.get(module)
            if mod is not None:
                return mod
            package, _, _ = module.rpartition(".")
            if package:
                search = getattr(self._import(package), "__path__", None)
                if search is None:
                    raise TypeNotFoundError(module, self, f"'{package}' is not a package")
            else:
                search = self._paths
            spec = importlib.machinery.PathFinder.find_spec(module, list(search))
            if spec is None or spec.loader is None:
                raise TypeNotFoundError(module, self, f"no module named '{module}' on {self._paths}")
            mod = importlib.util.module_from_spec(spec)
            self._modules[module] = mod
            try:
                spec.loader.exec_module(mod)
            except BaseException:
                del self._modules[module]
                raise
            _logger.debug("Loaded module %s from %s into %r", module, spec.origin, self)
            return mod

    def __repr__(self) -> str:
        return f"<{type(self).__name__} paths={self._paths!r}>"


def isolated_owner(cls: type) -> Optional[IsolatedLoader]:
    """Return the live :class:`IsolatedLoader` that loaded *cls*, if any."""
    for loader in list(_live):
        if loader.defines(cls):
            return loader
    return None
