"""
Output control shared by every generator during one diff-to-changelog run.
"""

import logging
from typing import Dict, Iterable, Optional, Set, Tuple

from ..config import DiffOutputSettings
from ..structure import SchemaObject
from .result import DiffKind


logger = logging.getLogger(__name__)


class DiffOutputControl:
    """Qualification flags plus the already-handled registry.

    The flags are fixed for the run. The already-handled registry is the
    only writable state; once an object is marked, no later generator emits
    a change for it under the same diff kind.
    """

    def __init__(
        self,
        include_catalog: bool = False,
        include_schema: bool = False,
        consider_catalogs_as_schemas: bool = False,
    ):
        self._include_catalog = include_catalog
        self._include_schema = include_schema
        self._consider_catalogs_as_schemas = consider_catalogs_as_schemas
        self._already_handled: Dict[DiffKind, Set[Tuple[Optional[str], ...]]] = {
            kind: set() for kind in DiffKind
        }

    @classmethod
    def from_settings(cls, settings: DiffOutputSettings) -> "DiffOutputControl":
        return cls(
            include_catalog=settings.include_catalog,
            include_schema=settings.include_schema,
            consider_catalogs_as_schemas=settings.consider_catalogs_as_schemas,
        )

    @property
    def include_catalog(self) -> bool:
        return self._include_catalog

    @property
    def include_schema(self) -> bool:
        return self._include_schema

    @property
    def consider_catalogs_as_schemas(self) -> bool:
        return self._consider_catalogs_as_schemas

    def mark_handled(self, obj: Optional[SchemaObject], diff_kind: DiffKind) -> None:
        if obj is None:
            return
        if obj.key not in self._already_handled[diff_kind]:
            logger.debug(f"Marking {obj!r} as already handled ({diff_kind.value})")
            self._already_handled[diff_kind].add(obj.key)

    def mark_all_handled(
        self, objects: Iterable[Optional[SchemaObject]], diff_kind: DiffKind
    ) -> None:
        for obj in objects:
            self.mark_handled(obj, diff_kind)

    def is_handled(self, obj: SchemaObject, diff_kind: DiffKind) -> bool:
        return obj.key in self._already_handled[diff_kind]

    def handled_count(self, diff_kind: DiffKind) -> int:
        return len(self._already_handled[diff_kind])

    def __repr__(self) -> str:
        return (
            f"DiffOutputControl(include_catalog={self._include_catalog}, "
            f"include_schema={self._include_schema}, "
            f"consider_catalogs_as_schemas={self._consider_catalogs_as_schemas})"
        )
