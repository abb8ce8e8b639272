from typing import Iterable

from .loaders import TypeLoader
from .service import ConfigT, FactoryService


def init(config: ConfigT = None, *, loaders: Iterable[TypeLoader] = ()) -> FactoryService:
    """Build a ready-to-use :class:`FactoryService`.

    Args:
        config: A :class:`FactoryConfig`, a :class:`TreeSource`, or a plain
            mapping with ``classloader`` and ``object-factory`` keys.
        loaders: Already constructed loaders, tried before configured ones.

    Returns:
        The configured and initialized service.

    Raises:
        ConfigurationError: If the configuration is malformed or a
            configured loader cannot be created.
    """
    service = FactoryService(loaders)
    service.configure(config)
    service.initialize()
    return service
