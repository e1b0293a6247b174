"""Static catalog of seed areas.

An area is a named, phase-tagged unit of seeding work. The registry is built
once, validated once, and never mutated: the resolver and orchestrator receive
it as a plain value.

Usage:
    registry = AreaRegistry([
        SeedArea(id="core", name="Core", phase=0, seed=seed_core),
        SeedArea(id="users", name="Users", phase=1, dependencies={"core"}, seed=seed_users),
    ])
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from src.seed_engine.errors import DuplicateAreaError, NotFoundError, UnknownAreaError

if TYPE_CHECKING:
    from src.seed_engine.context import SeedContext


@dataclass(frozen=True)
class SeedArea:
    """One seeding unit.

    ``dependencies`` accepts any iterable of ids and is stored as a frozenset.
    Only ``id``, ``phase`` and ``dependencies`` take part in equality/hashing.
    """

    id: str
    name: str = field(compare=False)
    phase: int
    seed: Callable[[SeedContext], Any] = field(compare=False, repr=False)
    dependencies: frozenset[str] = frozenset()
    clear: Callable[[SeedContext], Any] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("SeedArea.id must be a non-empty string")
        if self.phase < 0:
            raise ValueError(f"SeedArea '{self.id}' has negative phase {self.phase}")
        object.__setattr__(self, "dependencies", frozenset(self.dependencies))


class AreaRegistry:
    """Validated, read-only collection of seed areas in registration order."""

    def __init__(self, areas: Iterable[SeedArea]) -> None:
        ordered = tuple(areas)

        by_id: dict[str, SeedArea] = {}
        for area in ordered:
            if area.id in by_id:
                raise DuplicateAreaError(area.id)
            by_id[area.id] = area

        for area in ordered:
            for dependency_id in sorted(area.dependencies):
                if dependency_id not in by_id:
                    raise UnknownAreaError(dependency_id, required_by=area.id)

        self._areas = ordered
        self._by_id = MappingProxyType(by_id)
        self._positions = MappingProxyType({area.id: index for index, area in enumerate(ordered)})

    def lookup(self, area_id: str) -> SeedArea:
        try:
            return self._by_id[area_id]
        except KeyError:
            raise NotFoundError(area_id) from None

    def all(self) -> tuple[SeedArea, ...]:
        """Return every area in registration order."""
        return self._areas

    def ids(self) -> tuple[str, ...]:
        return tuple(area.id for area in self._areas)

    def index_of(self, area_id: str) -> int:
        """Registration position of ``area_id``; the resolver's tie-break key."""
        try:
            return self._positions[area_id]
        except KeyError:
            raise NotFoundError(area_id) from None

    def __contains__(self, area_id: object) -> bool:
        return area_id in self._by_id

    def __iter__(self) -> Iterator[SeedArea]:
        return iter(self._areas)

    def __len__(self) -> int:
        return len(self._areas)

    def __repr__(self) -> str:
        return f"AreaRegistry({list(self.ids())!r})"
