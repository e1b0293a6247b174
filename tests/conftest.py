"""Shared fixtures for seed engine tests."""
from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from src.seed_engine.config import build_config
from src.seed_engine.context import SeedContext, SeedLogger
from src.seed_engine.registry import AreaRegistry, SeedArea
from src.seed_engine.tracker import IdTracker

AreaFactory = Callable[..., SeedArea]


@pytest.fixture
def call_log() -> list[tuple[str, str]]:
    """Ordered (operation, area_id) pairs recorded by areas built with ``make_area``."""
    return []


@pytest.fixture
def make_area(call_log: list[tuple[str, str]]) -> AreaFactory:
    """Build a SeedArea whose callables append to ``call_log``."""

    def _make(
        area_id: str,
        phase: int = 0,
        deps: Iterable[str] = (),
        *,
        clearable: bool = True,
        seed: Callable[[SeedContext], Any] | None = None,
    ) -> SeedArea:
        async def _seed(ctx: SeedContext) -> None:
            call_log.append(("seed", area_id))

        async def _clear(ctx: SeedContext) -> None:
            call_log.append(("clear", area_id))

        return SeedArea(
            id=area_id,
            name=area_id.title(),
            phase=phase,
            dependencies=frozenset(deps),
            seed=seed or _seed,
            clear=_clear if clearable else None,
        )

    return _make


@pytest.fixture
def clinic_registry(make_area: AreaFactory) -> AreaRegistry:
    """Core(0) <- Users(1) <- Patients(2, also on Core)."""
    return AreaRegistry([
        make_area("core", 0),
        make_area("users", 1, ["core"]),
        make_area("patients", 2, ["core", "users"]),
    ])


@pytest.fixture
def tracker() -> IdTracker:
    return IdTracker(random.Random(1234))


@pytest.fixture
def seed_context(tracker: IdTracker) -> SeedContext:
    """A base context with an opaque db handle."""
    return SeedContext(
        db=object(),
        config=build_config("minimal"),
        id_tracker=tracker,
        logger=SeedLogger(logging.getLogger("tests.seed")),
    )
