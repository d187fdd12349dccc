"""
Registry of change generators.
"""

import logging
from typing import Iterable, List, Optional, Type

from ..database import Database
from ..diff.result import DiffKind
from ..exceptions import GeneratorConflictError
from ..structure import ObjectKind
from .base import ChangeGenerator, Priority
from .changed import (
    ChangedColumnChangeGenerator,
    ChangedForeignKeyChangeGenerator,
    ChangedIndexChangeGenerator,
    ChangedPrimaryKeyChangeGenerator,
    ChangedTableChangeGenerator,
    ChangedUniqueConstraintChangeGenerator,
)
from .missing import (
    MissingColumnChangeGenerator,
    MissingForeignKeyChangeGenerator,
    MissingIndexChangeGenerator,
    MissingPrimaryKeyChangeGenerator,
    MissingTableChangeGenerator,
    MissingUniqueConstraintChangeGenerator,
)
from .unexpected import (
    UnexpectedColumnChangeGenerator,
    UnexpectedForeignKeyChangeGenerator,
    UnexpectedIndexChangeGenerator,
    UnexpectedPrimaryKeyChangeGenerator,
    UnexpectedTableChangeGenerator,
    UnexpectedUniqueConstraintChangeGenerator,
)


logger = logging.getLogger(__name__)


class GeneratorRegistry:
    """Holds generators and selects the best one for an object kind."""

    # Core generators registered by default()
    _CORE_GENERATORS: List[Type[ChangeGenerator]] = [
        MissingTableChangeGenerator,
        MissingColumnChangeGenerator,
        MissingPrimaryKeyChangeGenerator,
        MissingUniqueConstraintChangeGenerator,
        MissingIndexChangeGenerator,
        MissingForeignKeyChangeGenerator,
        UnexpectedTableChangeGenerator,
        UnexpectedColumnChangeGenerator,
        UnexpectedPrimaryKeyChangeGenerator,
        UnexpectedUniqueConstraintChangeGenerator,
        UnexpectedIndexChangeGenerator,
        UnexpectedForeignKeyChangeGenerator,
        ChangedTableChangeGenerator,
        ChangedColumnChangeGenerator,
        ChangedPrimaryKeyChangeGenerator,
        ChangedUniqueConstraintChangeGenerator,
        ChangedIndexChangeGenerator,
        ChangedForeignKeyChangeGenerator,
    ]

    def __init__(self, generators: Optional[Iterable[ChangeGenerator]] = None):
        self._generators: List[ChangeGenerator] = []
        for generator in generators or []:
            self.register(generator)

    @classmethod
    def default(cls) -> "GeneratorRegistry":
        """Create a registry holding every core generator."""
        return cls(generator_class() for generator_class in cls._CORE_GENERATORS)

    def register(self, generator: ChangeGenerator) -> None:
        logger.debug(f"Registering {generator!r}")
        self._generators.append(generator)

    def unregister(self, generator_class: Type[ChangeGenerator]) -> None:
        self._generators = [
            g for g in self._generators if not isinstance(g, generator_class)
        ]

    def generators_for(self, diff_kind: DiffKind) -> List[ChangeGenerator]:
        """Registered generators of one diff kind, in registration order."""
        return [g for g in self._generators if g.diff_kind == diff_kind]

    def applicable_generators(
        self, kind: ObjectKind, diff_kind: DiffKind, database: Database
    ) -> List[ChangeGenerator]:
        """Generators reporting a priority other than NONE for ``kind``."""
        return [
            g
            for g in self.generators_for(diff_kind)
            if g.get_priority(kind, database) > Priority.NONE
        ]

    def select_generator(
        self, kind: ObjectKind, diff_kind: DiffKind, database: Database
    ) -> Optional[ChangeGenerator]:
        """
        Select the highest-priority generator for a kind on a database.

        Args:
            kind: Object kind to generate changes for
            diff_kind: Missing, unexpected or changed
            database: Database the changes are generated for

        Returns:
            The winning generator, or None when no generator applies

        Raises:
            GeneratorConflictError: If two generators share the top priority
        """
        best_priority = Priority.NONE
        best: List[ChangeGenerator] = []

        for generator in self.generators_for(diff_kind):
            priority = generator.get_priority(kind, database)
            if priority <= Priority.NONE:
                continue
            if priority > best_priority:
                best_priority = priority
                best = [generator]
            elif priority == best_priority:
                best.append(generator)

        if len(best) > 1:
            raise GeneratorConflictError(
                kind.value,
                diff_kind.value,
                int(best_priority),
                (g.name for g in best),
            )
        return best[0] if best else None

    def __len__(self) -> int:
        return len(self._generators)
