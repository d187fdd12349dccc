"""
Change generation package for schemalog.

This package provides:
- Change generators per object kind and diff kind
- Generator registry with priority-based selection
- Dependency ordering of object kinds
- Naming scope resolution for catalog/schema qualification
"""

from .base import (
    ChangedObjectChangeGenerator,
    ChangeGenerator,
    GenerationContext,
    MissingObjectChangeGenerator,
    Priority,
    UnexpectedObjectChangeGenerator,
)
from .chain import GenerationChain, GenerationResult, resolve_kind_order
from .naming import NamingScope, join_names, resolve_owner_scope, resolve_referenced_scope
from .registry import GeneratorRegistry

__all__ = [
    "ChangedObjectChangeGenerator",
    "ChangeGenerator",
    "GenerationChain",
    "GenerationContext",
    "GenerationResult",
    "GeneratorRegistry",
    "MissingObjectChangeGenerator",
    "NamingScope",
    "Priority",
    "UnexpectedObjectChangeGenerator",
    "join_names",
    "resolve_kind_order",
    "resolve_owner_scope",
    "resolve_referenced_scope",
]
