"""
Generation chain: orders object kinds and runs the selected generators.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from ..changes import Change
from ..database import Database
from ..diff.output import DiffOutputControl
from ..diff.result import DiffKind, DiffResult
from ..exceptions import GenerationError, OrderingCycleError, SchemalogError
from ..structure import ObjectKind, SchemaObject
from .base import ChangeGenerator, GenerationContext
from .registry import GeneratorRegistry


logger = logging.getLogger(__name__)

# Drops run first, dependents before what they depend on. Additions and
# alterations then share one kind order, so foreign keys come after every
# table, column, key and index change.
PASSES: Tuple[Tuple[DiffKind, ...], ...] = (
    (DiffKind.UNEXPECTED,),
    (DiffKind.MISSING, DiffKind.CHANGED),
)

PlanStep = Tuple[DiffKind, ChangeGenerator, List[SchemaObject]]


def resolve_kind_order(
    registry: GeneratorRegistry,
    diff_kinds: Union[DiffKind, Sequence[DiffKind]],
    database: Database,
) -> List[ObjectKind]:
    """
    Topologically sort all object kinds by the generators' declarations.

    A generator for kind B declaring run-after A adds the edge A -> B; a
    generator for kind A declaring run-before B adds the same edge. Kinds
    with no constraint between them keep their declaration order. When
    several diff kinds are given, the declarations of all their generators
    are combined into one order.

    Raises:
        OrderingCycleError: If the declarations contain a cycle
    """
    if isinstance(diff_kinds, DiffKind):
        diff_kinds = (diff_kinds,)

    edges: Dict[ObjectKind, Set[ObjectKind]] = {kind: set() for kind in ObjectKind}

    for diff_kind in diff_kinds:
        for kind in ObjectKind:
            for generator in registry.applicable_generators(kind, diff_kind, database):
                for before in generator.run_after_kinds():
                    if before != kind:
                        edges[before].add(kind)
                for after in generator.run_before_kinds():
                    if after != kind:
                        edges[kind].add(after)

    in_degree = {kind: 0 for kind in ObjectKind}
    for targets in edges.values():
        for target in targets:
            in_degree[target] += 1

    ready: List[Tuple[int, ObjectKind]] = [
        (kind.declaration_index, kind) for kind in ObjectKind if in_degree[kind] == 0
    ]
    heapq.heapify(ready)

    order: List[ObjectKind] = []
    while ready:
        _, kind = heapq.heappop(ready)
        order.append(kind)
        for target in edges[kind]:
            in_degree[target] -= 1
            if in_degree[target] == 0:
                heapq.heappush(ready, (target.declaration_index, target))

    if len(order) != len(in_degree):
        remaining = [kind.value for kind in ObjectKind if kind not in order]
        raise OrderingCycleError("+".join(d.value for d in diff_kinds), remaining)

    return order


@dataclass
class GenerationResult:
    """Changes produced by one chain run plus bookkeeping."""

    changes: List[Change] = field(default_factory=list)
    kind_order: Dict[DiffKind, List[ObjectKind]] = field(default_factory=dict)
    skipped: List[SchemaObject] = field(default_factory=list)
    unsupported: List[SchemaObject] = field(default_factory=list)

    @property
    def change_count(self) -> int:
        return len(self.changes)

    def count_by_type(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for change in self.changes:
            counts[change.change_type] = counts.get(change.change_type, 0) + 1
        return counts


class GenerationChain:
    """
    Turns a diff into an ordered list of changes.

    Unexpected objects are dropped first. Missing and changed objects are
    then handled together, kind by kind: for each kind, missing objects
    before changed ones. Objects of one kind keep diff order. Objects
    already handled as a side effect of an earlier change are skipped.
    """

    def __init__(
        self,
        registry: Optional[GeneratorRegistry] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.registry = registry or GeneratorRegistry.default()
        self.log = log or logger

    def kind_order(self, diff_kind: DiffKind, database: Database) -> List[ObjectKind]:
        """Kind order used for ``diff_kind``, including the kinds it shares a pass with."""
        for diff_kinds in PASSES:
            if diff_kind in diff_kinds:
                return resolve_kind_order(self.registry, diff_kinds, database)
        return resolve_kind_order(self.registry, diff_kind, database)

    def generate(self, diff: DiffResult, control: DiffOutputControl) -> List[Change]:
        """Generate the changes for ``diff``."""
        return self.run(diff, control).changes

    def run(self, diff: DiffResult, control: DiffOutputControl) -> GenerationResult:
        context = GenerationContext(
            control=control,
            reference_database=diff.reference_database,
            comparison_database=diff.comparison_database,
            log=self.log,
        )
        result = GenerationResult()

        # Resolve every order up front so a configuration error aborts
        # before any change is produced.
        plans = []
        for diff_kinds in PASSES:
            order = resolve_kind_order(
                self.registry, diff_kinds, diff.comparison_database
            )
            for diff_kind in diff_kinds:
                result.kind_order[diff_kind] = order
            plans.append(self._plan(diff, diff_kinds, order, result))

        for plan in plans:
            self._run_plan(diff, plan, context, result)

        logger.info(
            f"Generated {result.change_count} changes "
            f"({len(result.skipped)} objects already handled)"
        )
        return result

    def _plan(
        self,
        diff: DiffResult,
        diff_kinds: Sequence[DiffKind],
        order: List[ObjectKind],
        result: GenerationResult,
    ) -> List[PlanStep]:
        plan = []
        for kind in order:
            for diff_kind in diff_kinds:
                objects = diff.objects_of(kind, diff_kind)
                if not objects:
                    continue
                generator = self.registry.select_generator(
                    kind, diff_kind, diff.comparison_database
                )
                if generator is None:
                    logger.debug(
                        f"No {diff_kind.value} generator for {kind.value}, "
                        f"skipping {len(objects)} objects"
                    )
                    result.unsupported.extend(objects)
                    continue
                plan.append((diff_kind, generator, objects))
        return plan

    def _run_plan(
        self,
        diff: DiffResult,
        plan: List[PlanStep],
        context: GenerationContext,
        result: GenerationResult,
    ) -> None:
        control = context.control

        # Claim side effects first, so suppression does not depend on the
        # claiming kind running before the claimed one.
        for diff_kind, generator, objects in plan:
            for obj in objects:
                if not control.is_handled(obj, diff_kind):
                    control.mark_all_handled(generator.claims(obj, context), diff_kind)

        for diff_kind, generator, objects in plan:
            for obj in objects:
                if control.is_handled(obj, diff_kind):
                    logger.debug(f"Skipping {obj!r}, already handled")
                    result.skipped.append(obj)
                    continue

                differences = (
                    diff.differences_for(obj) if diff_kind == DiffKind.CHANGED else None
                )
                try:
                    changes = generator.generate(obj, context, differences)
                except SchemalogError:
                    raise
                except Exception as e:
                    raise GenerationError(
                        f"{generator.name} failed for {obj!r}: {e}",
                        {"generator": generator.name, "diff_kind": diff_kind.value},
                        cause=e,
                    ) from e

                logger.debug(f"{generator.name} produced {len(changes)} changes for {obj!r}")
                result.changes.extend(changes)
