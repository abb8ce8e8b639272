"""Exception hierarchy for objfactory.

All framework-specific exceptions inherit from :class:`FactoryError`, making
it easy to catch any objfactory error with a single ``except FactoryError``
clause.
"""

from typing import Any, Optional


def _loader_name(loader: Any) -> str:
    return type(loader).__name__ if loader is not None else "default chain"


class FactoryError(Exception):
    """Base exception for all objfactory errors."""

    pass


class TypeNotFoundError(FactoryError, LookupError):
    """Raised when a class name cannot be resolved in any loader tried.

    Attributes:
        name: The class name that was requested.
        loader: The loader resolution was scoped to, or ``None`` for the
            default chain.
    """

    def __init__(self, name: str, loader: Any = None, detail: Optional[str] = None):
        msg = f"Class '{name}' not found (loader: {_loader_name(loader)})"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)
        self.name = name
        self.loader = loader


class InstantiationError(FactoryError):
    """Raised when an instance of a named class could not be produced.

    Attributes:
        name: The class name (or class) whose instantiation failed.
        cause: The original exception, if any.
    """

    def __init__(self, name: Any, cause: Optional[BaseException] = None, msg: Optional[str] = None):
        n = getattr(name, "__qualname__", name)
        if msg is None:
            msg = f"Instantiation failed for class {n}"
            if cause is not None:
                msg = f"{msg}; cause: {cause.__class__.__name__}: {cause}"
        super().__init__(msg)
        self.name = name
        self.cause = cause


class ConstructionError(InstantiationError):
    """Raised when no usable constructor matches, or the constructor raises."""


class IncorrectFactoryError(InstantiationError):
    """Raised when a configured factory class does not implement :class:`~objfactory.factory.Factory`.

    Attributes:
        factory_class: The configured factory class name.
    """

    def __init__(self, factory_class: str, name: str, cause: Optional[BaseException] = None):
        super().__init__(name, cause, msg=f"Incorrect factory {factory_class} for class {name}")
        self.factory_class = factory_class


class ConfigurationError(FactoryError):
    """Raised for configuration problems (bad shapes, unloadable loaders)."""

    def __init__(self, msg: str):
        super().__init__(msg)
