"""
Exception classes for schemalog.
"""

from typing import Any, Dict, Iterable, Optional


class SchemalogError(Exception):
    """Base exception for all schemalog errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            result += f" [{details_str}]"
        if self.cause:
            result += f" (caused by: {self.cause})"
        return result


class ConfigurationError(SchemalogError):
    """Raised when there's an error in configuration."""

    pass


class GeneratorConflictError(ConfigurationError):
    """Raised when two generators claim the same object kind with equal priority."""

    def __init__(
        self,
        object_kind: str,
        diff_kind: str,
        priority: int,
        generators: Iterable[str],
    ) -> None:
        generator_names = sorted(generators)
        super().__init__(
            f"Multiple {diff_kind} generators claim '{object_kind}' "
            f"with priority {priority}: {', '.join(generator_names)}",
            {"object_kind": object_kind, "diff_kind": diff_kind},
        )
        self.object_kind = object_kind
        self.diff_kind = diff_kind
        self.priority = priority
        self.generators = generator_names


class OrderingCycleError(ConfigurationError):
    """Raised when run-after/run-before declarations form a cycle."""

    def __init__(self, diff_kind: str, kinds: Iterable[str]) -> None:
        cycle_kinds = list(kinds)
        super().__init__(
            f"Cannot order {diff_kind} generators, cycle between: "
            f"{', '.join(cycle_kinds)}",
            {"diff_kind": diff_kind},
        )
        self.diff_kind = diff_kind
        self.kinds = cycle_kinds


class DiffLoadError(SchemalogError):
    """Raised when a diff document cannot be read or is malformed."""

    pass


class GenerationError(SchemalogError):
    """Raised when a generator fails on a particular schema object."""

    pass
