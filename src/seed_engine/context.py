"""Context threaded into every area callable.

A SeedContext bundles the database handle, the run's configuration, the id
tracker, the clinic currently being seeded, and a logger. It is frozen: a
clinic-scoped variant is produced with ``for_clinic`` and the original is left
untouched, so contexts held by different areas cannot interfere.
"""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any

from src.seed_engine.config import SeedConfig
from src.seed_engine.tracker import IdTracker


class SeedLogger(logging.LoggerAdapter):
    """Logger adapter with area bracketing helpers.

    Records carry ``clinic_id`` in ``extra`` and, when a clinic is set, the
    message is prefixed with it.
    """

    def __init__(self, logger: logging.Logger, clinic_id: str | None = None) -> None:
        super().__init__(logger, {"clinic_id": clinic_id})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **(self.extra or {})}
        clinic_id = (self.extra or {}).get("clinic_id")
        if clinic_id is not None:
            msg = f"[clinic {clinic_id}] {msg}"
        return msg, kwargs

    def for_clinic(self, clinic_id: str | None) -> SeedLogger:
        return SeedLogger(self.logger, clinic_id)

    def start_area(self, name: str) -> None:
        self.info("Seeding area: %s", name)

    def end_area(self, name: str, count: int) -> None:
        self.info("Finished area: %s (%d records)", name, count)

    def success(self, msg: str, *args: Any) -> None:
        self.info("OK " + msg, *args)


@dataclass(frozen=True)
class SeedContext:
    """Everything an area's seed/clear callable may touch."""

    db: Any
    config: SeedConfig
    id_tracker: IdTracker
    logger: SeedLogger
    current_tenant_id: str | None = None

    def for_clinic(self, tenant_id: str | None) -> SeedContext:
        """Return a copy scoped to ``tenant_id``; ``self`` is not modified."""
        return dataclasses.replace(
            self,
            current_tenant_id=tenant_id,
            logger=self.logger.for_clinic(tenant_id),
        )

    def track(self, model: str, id: str) -> None:
        """Add ``id`` to the tracker under the context's current clinic (if any)."""
        self.id_tracker.add(model, id, self.current_tenant_id)
