"""Exception taxonomy for the seed orchestration engine.

Configuration errors are raised while the registry is built or while a run is
being resolved, always before the first write. Runtime errors wrap whatever an
area's seed/clear callable raised. EmptySetError signals a tracker read on a
bucket nobody has populated yet, which almost always means an area ran before
its prerequisite.
"""
from __future__ import annotations

from collections.abc import Sequence


class SeedError(Exception):
    """Base class for every error raised by the seed engine."""


# ---------------------------------------------------------------------------
# Configuration errors (raised before any write)
# ---------------------------------------------------------------------------


class ConfigurationError(SeedError):
    """The registry or run configuration is unusable; nothing was written."""


class DuplicateAreaError(ConfigurationError):
    def __init__(self, area_id: str) -> None:
        self.area_id = area_id
        super().__init__(f"Seed area '{area_id}' is registered more than once")


class UnknownAreaError(ConfigurationError):
    def __init__(self, area_id: str, required_by: str | None = None) -> None:
        self.area_id = area_id
        self.required_by = required_by
        if required_by is None:
            message = f"Unknown seed area '{area_id}'"
        else:
            message = f"Seed area '{required_by}' depends on unknown area '{area_id}'"
        super().__init__(message)


class NotFoundError(ConfigurationError, LookupError):
    def __init__(self, area_id: str) -> None:
        self.area_id = area_id
        super().__init__(f"No seed area registered with id '{area_id}'")


class PhaseOrderingError(ConfigurationError):
    """A selected area depends on an area from a later phase."""

    def __init__(self, area_id: str, area_phase: int, dependency_id: str, dependency_phase: int) -> None:
        self.area_id = area_id
        self.dependency_id = dependency_id
        super().__init__(
            f"Seed area '{area_id}' (phase {area_phase}) depends on "
            f"'{dependency_id}' (phase {dependency_phase}), which is outside the selected phases"
        )


class CyclicDependencyError(ConfigurationError):
    """The dependency graph contains a cycle; ``cycle`` lists ids in encounter order."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        path = " -> ".join([*self.cycle, self.cycle[0]]) if self.cycle else ""
        super().__init__(f"Cyclic seed area dependency: {path}")


class InvalidConfigError(ConfigurationError):
    """A profile name or override key is not recognised, or a value is out of range."""


# ---------------------------------------------------------------------------
# Runtime errors
# ---------------------------------------------------------------------------


class RuntimeSeedError(SeedError):
    """An area's seed or clear callable raised.

    Attributes:
        area_id: Id of the area that failed.
        operation: ``"seed"`` or ``"clear"``.
        completed: Number of areas that finished the same operation before the failure.
        cause: The original exception (also chained as ``__cause__``).
    """

    def __init__(self, area_id: str, operation: str, completed: int, cause: BaseException) -> None:
        self.area_id = area_id
        self.operation = operation
        self.completed = completed
        self.cause = cause
        super().__init__(
            f"{operation} failed in area '{area_id}' after {completed} completed area(s): "
            f"{type(cause).__name__}: {cause}"
        )


class EmptySetError(SeedError, LookupError):
    """No identifiers are tracked for the requested model (and tenant)."""

    def __init__(self, model: str, tenant_id: str | None = None) -> None:
        self.model = model
        self.tenant_id = tenant_id
        if tenant_id is None:
            message = f"No '{model}' ids have been tracked yet"
        else:
            message = f"No '{model}' ids have been tracked for clinic '{tenant_id}'"
        super().__init__(message)
