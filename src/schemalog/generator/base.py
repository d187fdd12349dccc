"""
Base classes for change generators.

A change generator turns one diffed schema object into zero or more changes.
There is one generator per (object kind, diff kind) pair; each declares its
priority for a kind and dialect, and which kinds must be processed before or
after its own.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, FrozenSet, Iterable, List, Optional

from ..changes import Change
from ..database import Database
from ..diff.output import DiffOutputControl
from ..diff.result import DiffKind, ObjectDifferences
from ..structure import ObjectKind, SchemaObject


logger = logging.getLogger(__name__)


class Priority(IntEnum):
    """Generator priorities. Higher wins; NONE means not applicable."""

    NONE = -1
    DEFAULT = 1
    DATABASE = 5


@dataclass
class GenerationContext:
    """Everything a generator may consult during one invocation."""

    control: DiffOutputControl
    reference_database: Database
    comparison_database: Database
    log: logging.Logger = field(default=logger)


class ChangeGenerator(ABC):
    """Base class for all change generators."""

    object_kind: ClassVar[ObjectKind]
    diff_kind: ClassVar[DiffKind]
    run_after: ClassVar[FrozenSet[ObjectKind]] = frozenset()
    run_before: ClassVar[FrozenSet[ObjectKind]] = frozenset()

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def get_priority(self, kind: ObjectKind, database: Database) -> int:
        """Priority of this generator for ``kind`` on ``database``."""
        if kind == self.object_kind:
            return Priority.DEFAULT
        return Priority.NONE

    def run_after_kinds(self) -> FrozenSet[ObjectKind]:
        return self.run_after

    def run_before_kinds(self) -> FrozenSet[ObjectKind]:
        return self.run_before

    def claims(
        self, obj: SchemaObject, context: GenerationContext
    ) -> Iterable[Optional[SchemaObject]]:
        """Objects whose change is implied by the change for ``obj``.

        The chain marks them already handled before any generator of this
        diff kind runs.
        """
        return ()

    @abstractmethod
    def generate(
        self,
        obj: SchemaObject,
        context: GenerationContext,
        differences: Optional[ObjectDifferences] = None,
    ) -> List[Change]:
        """Produce the changes for ``obj``."""

    def __repr__(self) -> str:
        return f"{self.name}({self.object_kind.value}, {self.diff_kind.value})"


class MissingObjectChangeGenerator(ChangeGenerator):
    """Generates additive changes for objects only in the reference."""

    diff_kind = DiffKind.MISSING

    @abstractmethod
    def fix_missing(
        self, missing_object: SchemaObject, context: GenerationContext
    ) -> List[Change]:
        ...

    def generate(self, obj, context, differences=None):
        return self.fix_missing(obj, context)


class UnexpectedObjectChangeGenerator(ChangeGenerator):
    """Generates drop changes for objects only in the comparison."""

    diff_kind = DiffKind.UNEXPECTED

    @abstractmethod
    def fix_unexpected(
        self, unexpected_object: SchemaObject, context: GenerationContext
    ) -> List[Change]:
        ...

    def generate(self, obj, context, differences=None):
        return self.fix_unexpected(obj, context)


class ChangedObjectChangeGenerator(ChangeGenerator):
    """Generates alterations for objects present on both sides."""

    diff_kind = DiffKind.CHANGED

    @abstractmethod
    def fix_changed(
        self,
        changed_object: SchemaObject,
        differences: ObjectDifferences,
        context: GenerationContext,
    ) -> List[Change]:
        ...

    def generate(self, obj, context, differences=None):
        return self.fix_changed(obj, differences or ObjectDifferences(), context)
