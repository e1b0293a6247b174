"""Dependency-graph resolution over an AreaRegistry.

Every method is a pure function of the registry and its arguments: it selects
areas, expands them with their prerequisites, and orders them so that each
prerequisite is seeded before (and cleared after) everything that depends on it.

Ties between unrelated areas are broken by registration order, so the same
registry always yields the same order.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from src.seed_engine.errors import CyclicDependencyError, PhaseOrderingError, UnknownAreaError
from src.seed_engine.registry import AreaRegistry, SeedArea

if TYPE_CHECKING:
    from src.seed_engine.config import SeedConfig

logger = logging.getLogger(__name__)


class _Mark(Enum):
    WHITE = 0  # not visited
    GRAY = 1  # on the current DFS path
    BLACK = 2  # emitted


@dataclass(frozen=True)
class RunPlan:
    """The resolved shape of one run, computed before anything is written."""

    areas: frozenset[SeedArea]
    seed_order: tuple[SeedArea, ...]
    clear_order: tuple[SeedArea, ...]

    @property
    def seed_ids(self) -> list[str]:
        return [area.id for area in self.seed_order]

    @property
    def clear_ids(self) -> list[str]:
        return [area.id for area in self.clear_order]


class DependencyGraphResolver:
    """Computes area selections and safe execution orders for a registry."""

    def __init__(self, registry: AreaRegistry) -> None:
        self.registry = registry

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def expand_with_dependencies(self, ids: Iterable[str]) -> frozenset[SeedArea]:
        """Return the requested areas plus every direct and indirect prerequisite.

        Raises:
            UnknownAreaError: If a requested id is not registered.
        """
        selected: dict[str, SeedArea] = {}
        pending = list(ids)
        while pending:
            area_id = pending.pop()
            if area_id in selected:
                continue
            if area_id not in self.registry:
                raise UnknownAreaError(area_id)
            area = self.registry.lookup(area_id)
            selected[area_id] = area
            pending.extend(dep for dep in area.dependencies if dep not in selected)
        return frozenset(selected.values())

    def areas_up_to(self, max_phase: int) -> frozenset[SeedArea]:
        """Return every area whose own phase is ``<= max_phase``.

        Higher-phase prerequisites are never pulled in implicitly.

        Raises:
            PhaseOrderingError: If a selected area depends on an area from a
                later phase than ``max_phase``.
        """
        selected = [area for area in self.registry.all() if area.phase <= max_phase]
        for area in selected:
            for dependency_id in self._ordered_dependencies(area):
                dependency = self.registry.lookup(dependency_id)
                if dependency.phase > max_phase:
                    raise PhaseOrderingError(area.id, area.phase, dependency.id, dependency.phase)
        return frozenset(selected)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def resolve_seed_order(self, areas: Iterable[SeedArea]) -> list[SeedArea]:
        """Topologically sort ``areas`` so prerequisites come first.

        Three-colour depth-first traversal: roots and dependency edges are both
        visited in registration order, and an area is emitted only after all of
        its dependencies inside ``areas`` have been emitted. Edges to areas
        outside the given set are ignored.

        Raises:
            CyclicDependencyError: On a back edge, with the cycle in encounter order.
        """
        selected = {area.id: area for area in areas}
        marks = {area_id: _Mark.WHITE for area_id in selected}
        path: list[str] = []
        order: list[SeedArea] = []

        def visit(area_id: str) -> None:
            marks[area_id] = _Mark.GRAY
            path.append(area_id)
            for dependency_id in self._ordered_dependencies(selected[area_id]):
                if dependency_id not in selected:
                    continue
                mark = marks[dependency_id]
                if mark is _Mark.GRAY:
                    raise CyclicDependencyError(path[path.index(dependency_id):])
                if mark is _Mark.WHITE:
                    visit(dependency_id)
            path.pop()
            marks[area_id] = _Mark.BLACK
            order.append(selected[area_id])

        for area_id in sorted(selected, key=self._position):
            if marks[area_id] is _Mark.WHITE:
                visit(area_id)

        return order

    def resolve_clear_order(self, areas: Iterable[SeedArea]) -> list[SeedArea]:
        """Reverse of the seed order: dependents are torn down before prerequisites."""
        return list(reversed(self.resolve_seed_order(areas)))

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def select(self, config: SeedConfig) -> frozenset[SeedArea]:
        """Pick the areas a run covers: explicit ids if given, else a phase cap."""
        if config.areas is not None:
            return self.expand_with_dependencies(config.areas)
        return self.areas_up_to(config.max_phase)

    def plan(self, config: SeedConfig) -> RunPlan:
        areas = self.select(config)
        seed_order = self.resolve_seed_order(areas)
        plan = RunPlan(
            areas=areas,
            seed_order=tuple(seed_order),
            clear_order=tuple(reversed(seed_order)),
        )
        logger.debug("Resolved seed order: %s", plan.seed_ids)
        return plan

    def _ordered_dependencies(self, area: SeedArea) -> list[str]:
        return sorted(area.dependencies, key=self._position)

    def _position(self, area_id: str) -> tuple[int, str]:
        # Unregistered ids cannot occur for a validated registry; sort them last.
        if area_id in self.registry:
            return (self.registry.index_of(area_id), area_id)
        return (len(self.registry), area_id)
