"""Drives one end-to-end seed run.

    CONFIGURING -> RESOLVING -> [CLEARING] -> SEEDING -> SUMMARIZING -> DONE

Any non-terminal state moves to FAILED on the first unhandled error.

Areas run strictly one after another: area N+1 is not started until area N's
callable, and any awaitable it returned, has completed. Resolution errors abort
the run before any write. A failing area aborts the rest of the run; areas that
already completed are not rolled back.

Usage:
    orchestrator = SeedOrchestrator(build_default_registry(), engine)
    summary = await orchestrator.run(profile="minimal", clear_before_seed=True)
"""
from __future__ import annotations

import inspect
import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.seed_engine.config import SeedConfig, build_config
from src.seed_engine.context import SeedContext, SeedLogger
from src.seed_engine.errors import ConfigurationError, RuntimeSeedError
from src.seed_engine.registry import AreaRegistry, SeedArea
from src.seed_engine.resolver import DependencyGraphResolver, RunPlan
from src.seed_engine.tracker import IdTracker

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    CONFIGURING = "configuring"
    RESOLVING = "resolving"
    CLEARING = "clearing"
    SEEDING = "seeding"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.CONFIGURING: frozenset({RunState.RESOLVING}),
    RunState.RESOLVING: frozenset({RunState.CLEARING, RunState.SEEDING}),
    RunState.CLEARING: frozenset({RunState.SEEDING, RunState.SUMMARIZING}),
    RunState.SEEDING: frozenset({RunState.SUMMARIZING}),
    RunState.SUMMARIZING: frozenset({RunState.DONE}),
    RunState.DONE: frozenset(),
    RunState.FAILED: frozenset(),
}


@dataclass(frozen=True)
class SeedSummary:
    """Outcome of a completed run; ``counts`` maps model name to tracked ids."""

    counts: dict[str, int]
    seeded: list[str] = field(default_factory=list)
    cleared: list[str] = field(default_factory=list)
    mode: str = "standard"
    elapsed_seconds: float = 0.0

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class SeedOrchestrator:
    """Sequences registry resolution, clearing, seeding and summarising.

    Args:
        registry: Validated catalog of seed areas.
        db: Opaque database handle handed to every area through the context.
        log: Logger used for the context; defaults to this module's logger.
    """

    def __init__(self, registry: AreaRegistry, db: Any, *, log: logging.Logger | None = None) -> None:
        self.registry = registry
        self.resolver = DependencyGraphResolver(registry)
        self.db = db
        self._log = log or logger
        self.state: RunState | None = None
        self.history: list[RunState] = []
        self.id_tracker: IdTracker | None = None

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    async def run(
        self,
        config: SeedConfig | None = None,
        *,
        profile: str | None = None,
        **overrides: Any,
    ) -> SeedSummary:
        """Clear (optionally) and seed the selected areas.

        Args:
            config: Prebuilt configuration; profile and overrides are layered on top.
            profile: Named record-volume profile.
            **overrides: SeedConfig field overrides.

        Returns:
            SeedSummary built from the run's IdTracker.

        Raises:
            ConfigurationError: Resolution failed; nothing was written.
            RuntimeSeedError: An area's callable raised; earlier areas stay committed.
        """
        return await self._execute(config, profile, overrides, seed=True)

    async def clear(
        self,
        config: SeedConfig | None = None,
        *,
        profile: str | None = None,
        **overrides: Any,
    ) -> SeedSummary:
        """Run only the teardown half: resolve, then clear in reverse seed order."""
        return await self._execute(config, profile, overrides, seed=False)

    # ------------------------------------------------------------------
    # Run driver
    # ------------------------------------------------------------------

    async def _execute(
        self,
        config: SeedConfig | None,
        profile: str | None,
        overrides: dict[str, Any],
        *,
        seed: bool,
    ) -> SeedSummary:
        self.state = None
        self.history = []
        started = time.monotonic()
        cleared: list[str] = []
        seeded: list[str] = []

        try:
            self._transition(RunState.CONFIGURING)
            config = self._merge(config, profile, overrides)
            tracker = IdTracker(random.Random(config.random_seed))
            self.id_tracker = tracker
            ctx = SeedContext(
                db=self.db,
                config=config,
                id_tracker=tracker,
                logger=SeedLogger(self._log),
            )

            self._transition(RunState.RESOLVING)
            plan = self.resolver.plan(config)
            self._log.info(
                "Resolved %d seed area(s): %s", len(plan.seed_order), ", ".join(plan.seed_ids) or "-"
            )

            if config.clear_before_seed or not seed:
                self._transition(RunState.CLEARING)
                cleared = await self._clear_areas(ctx, plan)

            if seed:
                self._transition(RunState.SEEDING)
                completed = 0
                for area in plan.seed_order:
                    await self._invoke(area, "seed", area.seed, ctx, completed)
                    seeded.append(area.id)
                    completed += 1

            self._transition(RunState.SUMMARIZING)
            summary = SeedSummary(
                counts=tracker.summary(),
                seeded=seeded,
                cleared=cleared,
                mode=config.mode,
                elapsed_seconds=time.monotonic() - started,
            )
            self._transition(RunState.DONE)
        except Exception as exc:
            self._fail(exc)
            raise

        self._log.info(
            "Seed run complete in %.2fs: %d area(s) seeded, %d cleared, %s",
            summary.elapsed_seconds,
            len(summary.seeded),
            len(summary.cleared),
            summary.counts,
        )
        return summary

    async def _clear_areas(self, ctx: SeedContext, plan: RunPlan) -> list[str]:
        cleared: list[str] = []
        for area in plan.clear_order:
            if area.clear is None:
                self._log.debug("Area '%s' has no clear step; skipping", area.id)
                continue
            await self._invoke(area, "clear", area.clear, ctx, len(cleared))
            cleared.append(area.id)
        return cleared

    async def _invoke(self, area: SeedArea, operation: str, fn: Any, ctx: SeedContext, completed: int) -> None:
        self._log.info("%s area '%s' (%s, phase %d)", operation.capitalize(), area.id, area.name, area.phase)
        try:
            result = fn(ctx)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            raise RuntimeSeedError(area.id, operation, completed, exc) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _merge(config: SeedConfig | None, profile: str | None, overrides: dict[str, Any]) -> SeedConfig:
        if config is None:
            return build_config(profile, overrides)
        if profile is None and not overrides:
            return config
        return build_config(profile, overrides, base=config)

    def _transition(self, new_state: RunState) -> None:
        if self.state is not None and new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal seed run transition {self.state.value} -> {new_state.value}")
        if new_state in self.history:
            raise RuntimeError(f"Seed run state '{new_state.value}' re-entered")
        self.state = new_state
        self.history.append(new_state)

    def _fail(self, exc: Exception) -> None:
        if isinstance(exc, RuntimeSeedError):
            self._log.error(
                "Seed run failed in area '%s' during %s after %d completed area(s): %s: %s",
                exc.area_id,
                exc.operation,
                exc.completed,
                type(exc.cause).__name__,
                exc.cause,
            )
        elif isinstance(exc, ConfigurationError):
            self._log.error("Seed run aborted before any write: %s", exc)
        else:
            self._log.exception("Seed run failed unexpectedly")
        if self.state not in (RunState.DONE, RunState.FAILED):
            self.state = RunState.FAILED
            self.history.append(RunState.FAILED)
