"""Constructor signature matching.

Turns a list of parameter type names into classes, using the primitive
table for primitive names and the target class's own loading context for
everything else. Arguments whose class comes from a different context than
their parameter type are migrated in place.
"""

import logging
from collections.abc import MutableSequence
from typing import Any, Optional, Sequence, Tuple

from .constants import PRIMITIVE_TYPES
from .migration import switch_object_context
from .resolver import TypeResolver

_logger = logging.getLogger(__name__)


class SignatureMatcher:
    """Maps constructor signatures, given as type names, to classes.

    Args:
        resolver: Resolves non-primitive names and reports the loading
            context of classes and arguments.
    """

    def __init__(self, resolver: TypeResolver) -> None:
        self._resolver = resolver

    def get_signature(
        self,
        cls: type,
        params: Optional[Sequence[Any]],
        signature: Optional[Sequence[str]],
    ) -> Optional[Tuple[type, ...]]:
        """Compute the parameter types for constructing *cls*.

        Args:
            cls: The class about to be constructed.
            params: Constructor arguments. When it is a mutable sequence,
                migrated arguments replace the originals in place.
            signature: Parameter type names, positionally paired with
                *params*.

        Returns:
            One class per entry of *signature*, or ``None`` when *signature*
            is ``None`` (zero-argument construction).

        Raises:
            TypeNotFoundError: If a non-primitive name cannot be resolved.
            ValueError: If *params* and *signature* differ in length.
        """
        if signature is None:
            return None
        if params is not None and len(params) != len(signature):
            raise ValueError(f"Signature has {len(signature)} types but {len(params)} parameters were given")

        loader = self._resolver.context_of(cls)
        types = []
        for i, name in enumerate(signature):
            primitive = PRIMITIVE_TYPES.get(name)
            if primitive is not None:
                types.append(primitive)
                continue

            if loader is not None:
                param_type = loader.load_type(name)
            else:
                param_type = self._resolver.resolve(name)
            types.append(param_type)

            if params is not None and params[i] is not None:
                self._maybe_migrate(params, i, param_type)
        return tuple(types)

    def _maybe_migrate(self, params: Sequence[Any], i: int, param_type: type) -> None:
        target = self._resolver.context_of(param_type)
        if target is None:
            return
        # Unreachable by name but not isolated: the process context.
        source = self._resolver.context_of(type(params[i])) or self._resolver.default
        if target is source:
            return
        migrated = switch_object_context(params[i], target, self._resolver.find_class)
        if migrated is params[i]:
            return
        if isinstance(params, MutableSequence):
            params[i] = migrated
        else:
            _logger.debug("Parameter %d migrated but %s is immutable; keeping original", i, type(params).__name__)
