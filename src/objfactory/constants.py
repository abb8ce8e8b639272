"""Constants used throughout objfactory.

This module defines the framework logger, the configuration keys read at
startup, and the table of primitive type names accepted in constructor
signatures.
"""

import logging
from typing import Dict

LOGGER_NAME: str = "objfactory"
"""Default logger name for objfactory."""

LOGGER: logging.Logger = logging.getLogger(LOGGER_NAME)
"""Pre-configured logger instance for objfactory internal diagnostics."""

CLASS_LOADER: str = "classloader"
"""Configuration key listing additional loader class names."""

OBJECT_FACTORY: str = "object-factory"
"""Configuration group mapping class names to factory class names."""

DEFAULT_FACTORY: str = "default"
"""Reserved ``object-factory`` key for the catch-all factory."""

PRIMITIVE_TYPES: Dict[str, type] = {
    "boolean": bool,
    "char": str,
    "byte": int,
    "short": int,
    "int": int,
    "long": int,
    "float": float,
    "double": float,
}
"""Primitive signature names and the runtime types they stand for."""
