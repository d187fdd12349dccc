"""
schemalog: generate ordered changelog changes from a database schema diff.

schemalog takes the structural comparison of a reference schema against a
comparison schema and produces the changes that bring the comparison schema
in line with the reference, in an order that respects object dependencies.
"""

__version__ = "0.1.0"
__author__ = "schemalog Contributors"

from .config import SchemalogConfig
from .exceptions import (
    ConfigurationError,
    GenerationError,
    GeneratorConflictError,
    OrderingCycleError,
    SchemalogError,
)

__all__ = [
    "__version__",
    "SchemalogConfig",
    "SchemalogError",
    "ConfigurationError",
    "GenerationError",
    "GeneratorConflictError",
    "OrderingCycleError",
]
