"""The pluggable factory strategy capability.

A factory takes over instantiation for one class name, or for every class
name when configured under the ``default`` key. The service creates each
factory once per class name, calls :meth:`Factory.init` with that name, and
then routes every ``get_instance`` call for the name to it.
"""

from typing import Any, List, Optional, Protocol, Sequence, runtime_checkable

from .loaders import TypeLoader


@runtime_checkable
class Factory(Protocol):
    """Protocol every configured factory class must satisfy.

    Subclass it explicitly or implement the three methods structurally;
    the service checks with ``isinstance`` and raises
    :class:`~objfactory.exceptions.IncorrectFactoryError` otherwise.
    """

    def init(self, class_name: str) -> None:
        """Bind the factory to the class name it will produce."""
        ...

    def get_instance(
        self,
        loader: Optional[TypeLoader] = None,
        params: Optional[List[Any]] = None,
        signature: Optional[Sequence[str]] = None,
    ) -> Any:
        """Produce an instance.

        Args:
            loader: Loading context requested by the caller, if any.
            params: Constructor arguments, if any.
            signature: Parameter type names for *params*, if any.
        """
        ...

    def is_loader_supported(self) -> bool:
        """Whether an explicit *loader* is honoured by :meth:`get_instance`."""
        ...
