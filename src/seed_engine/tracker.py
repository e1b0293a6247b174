"""Run-scoped index of identifiers produced by seed areas.

Areas register every record a later area may reference; later areas draw from
the tracker instead of re-reading the database. The tracker is a cache of
writes already made, not a source of truth, and lives for exactly one run.

Ids are kept twice, in lockstep: once globally per model and, when the record
belongs to a clinic, once more in the ``(model, clinic)`` bucket.
"""
from __future__ import annotations

import random
from collections import defaultdict

from src.seed_engine.errors import EmptySetError


class IdTracker:
    """Append-only id lists keyed by model name and, optionally, by clinic."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._global: defaultdict[str, list[str]] = defaultdict(list)
        self._scoped: defaultdict[tuple[str, str], list[str]] = defaultdict(list)

    def add(self, model: str, id: str, tenant_id: str | None = None) -> None:
        """Record one created row. Call exactly once per record; no deduplication."""
        self._global[model].append(id)
        if tenant_id is not None:
            self._scoped[(model, tenant_id)].append(id)

    # ------------------------------------------------------------------
    # Global reads
    # ------------------------------------------------------------------

    def get_all(self, model: str) -> tuple[str, ...]:
        return tuple(self._global.get(model, ()))

    def get_random(self, model: str) -> str:
        """Uniform pick across every clinic.

        Raises:
            EmptySetError: If no ``model`` ids have been tracked yet.
        """
        ids = self._global.get(model)
        if not ids:
            raise EmptySetError(model)
        return self._rng.choice(ids)

    def get_first(self, model: str) -> str:
        """First id ever added for ``model``; use where determinism matters."""
        ids = self._global.get(model)
        if not ids:
            raise EmptySetError(model)
        return ids[0]

    # ------------------------------------------------------------------
    # Clinic-scoped reads
    # ------------------------------------------------------------------

    def get_by_clinic(self, model: str, tenant_id: str) -> tuple[str, ...]:
        return tuple(self._scoped.get((model, tenant_id), ()))

    def get_random_by_clinic(self, model: str, tenant_id: str) -> str:
        """Uniform pick restricted to one clinic.

        Raises:
            EmptySetError: If that clinic has no tracked ``model`` ids, even
                when other clinics do.
        """
        ids = self._scoped.get((model, tenant_id))
        if not ids:
            raise EmptySetError(model, tenant_id)
        return self._rng.choice(ids)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has(self, model: str) -> bool:
        return bool(self._global.get(model))

    def count(self, model: str) -> int:
        return len(self._global.get(model, ()))

    def models(self) -> list[str]:
        """Tracked model names in first-add order."""
        return [model for model, ids in self._global.items() if ids]

    def summary(self) -> dict[str, int]:
        return {model: len(ids) for model, ids in self._global.items() if ids}

    def clear(self) -> None:
        """Forget everything. Only between independent runs, never mid-run."""
        self._global.clear()
        self._scoped.clear()

    def __repr__(self) -> str:
        return f"IdTracker({self.summary()!r})"
