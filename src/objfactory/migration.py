"""Moving objects between loading contexts by a pickle round trip.

An argument built from one context's class cannot satisfy a parameter typed
with another context's class of the same name. :func:`switch_object_context`
serializes the object and rebuilds it with every class looked up through the
target loader first.
"""

import io
import logging
import pickle
from typing import Any, BinaryIO, Callable, Optional

from .exceptions import TypeNotFoundError
from .loaders import TypeLoader

_logger = logging.getLogger(__name__)

ClassLookup = Callable[[str, str], Any]


class ContextUnpickler(pickle.Unpickler):
    """Unpickler that resolves globals through a given loader.

    Lookup order: *loader*, then *fallback* (typically
    :meth:`TypeResolver.find_class`), then the stock import-based lookup.

    Args:
        file: Binary stream holding the pickle.
        loader: The loader whose classes the rebuilt object should use.
        fallback: Optional ``(module, qualname) -> object`` lookup.
    """

    def __init__(self, file: BinaryIO, loader: TypeLoader, fallback: Optional[ClassLookup] = None) -> None:
        super().__init__(file)
        self._loader = loader
        self._fallback = fallback

    def find_class(self, module: str, name: str) -> Any:
        try:
            return self._loader.find_class(module, name)
        except TypeNotFoundError:
            pass
        if self._fallback is not None:
            try:
                return self._fallback(module, name)
            except TypeNotFoundError:
                pass
        return super().find_class(module, name)


def switch_object_context(obj: Any, loader: TypeLoader, fallback: Optional[ClassLookup] = None) -> Any:
    """Rebuild *obj* with classes taken from *loader*.

    Best effort: if the object cannot be pickled, or the pickle cannot be
    loaded back in the target context, *obj* itself is returned.

    Args:
        obj: The object to migrate.
        loader: The target loading context.
        fallback: Lookup used for globals *loader* cannot resolve.

    Returns:
        The migrated copy, or *obj* unchanged.
    """
    try:
        data = pickle.dumps(obj, protocol=pickle.HIGHEST_PROTOCOL)
    except Exception as e:
        _logger.debug("Cannot serialize %s for %r, keeping original: %s", type(obj).__qualname__, loader, e)
        return obj

    try:
        return ContextUnpickler(io.BytesIO(data), loader, fallback).load()
    except Exception as e:
        _logger.debug("Cannot rebuild %s in %r, keeping original: %s", type(obj).__qualname__, loader, e)
        return obj
