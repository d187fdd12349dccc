"""
Structural diff between a reference and a comparison database.

The diff is produced upstream by comparing two snapshots; this module only
holds its classification of objects into missing, unexpected and changed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..database import Database
from ..structure import ObjectKind, SchemaObject


class DiffKind(str, Enum):
    """How an object differs between reference and comparison."""

    MISSING = "missing"         # Only in reference
    UNEXPECTED = "unexpected"   # Only in comparison
    CHANGED = "changed"         # In both, but different


@dataclass(frozen=True)
class Difference:
    """A single differing attribute of a changed object."""

    field: str
    reference_value: Any
    comparison_value: Any


@dataclass
class ObjectDifferences:
    """All differing attributes of one changed object."""

    differences: Dict[str, Difference] = field(default_factory=dict)

    @classmethod
    def of(cls, *differences: Difference) -> "ObjectDifferences":
        return cls({d.field: d for d in differences})

    def add(self, difference: Difference) -> None:
        self.differences[difference.field] = difference

    def get(self, field_name: str) -> Optional[Difference]:
        return self.differences.get(field_name)

    def is_different(self, field_name: str) -> bool:
        return field_name in self.differences

    @property
    def has_differences(self) -> bool:
        return bool(self.differences)

    def __len__(self) -> int:
        return len(self.differences)


class DiffResult:
    """Classification of schema objects produced by a snapshot comparison."""

    def __init__(self, reference_database: Database, comparison_database: Database):
        self.reference_database = reference_database
        self.comparison_database = comparison_database
        self._missing: List[SchemaObject] = []
        self._unexpected: List[SchemaObject] = []
        self._changed: List[Tuple[SchemaObject, ObjectDifferences]] = []

    def add_missing(self, obj: SchemaObject) -> None:
        self._missing.append(obj)

    def add_unexpected(self, obj: SchemaObject) -> None:
        self._unexpected.append(obj)

    def add_changed(self, obj: SchemaObject, differences: ObjectDifferences) -> None:
        self._changed.append((obj, differences))

    @property
    def missing(self) -> List[SchemaObject]:
        return list(self._missing)

    @property
    def unexpected(self) -> List[SchemaObject]:
        return list(self._unexpected)

    @property
    def changed(self) -> Dict[SchemaObject, ObjectDifferences]:
        return dict(self._changed)

    def objects_of(self, kind: ObjectKind, diff_kind: DiffKind) -> List[SchemaObject]:
        """Objects of ``kind`` classified as ``diff_kind``, in insertion order."""
        if diff_kind == DiffKind.MISSING:
            source: Iterable[SchemaObject] = self._missing
        elif diff_kind == DiffKind.UNEXPECTED:
            source = self._unexpected
        else:
            source = (obj for obj, _ in self._changed)
        return [obj for obj in source if obj.kind == kind]

    def kinds_present(self, diff_kind: DiffKind) -> List[ObjectKind]:
        return [kind for kind in ObjectKind if self.objects_of(kind, diff_kind)]

    def differences_for(self, obj: SchemaObject) -> ObjectDifferences:
        for changed, differences in self._changed:
            if changed == obj:
                return differences
        return ObjectDifferences()

    @property
    def is_empty(self) -> bool:
        return not (self._missing or self._unexpected or self._changed)

    def summary(self) -> Dict[str, int]:
        return {
            DiffKind.MISSING.value: len(self._missing),
            DiffKind.UNEXPECTED.value: len(self._unexpected),
            DiffKind.CHANGED.value: len(self._changed),
        }
