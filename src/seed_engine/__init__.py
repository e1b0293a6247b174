"""Seed orchestration engine for the multi-tenant clinic database.

Populates interdependent synthetic records in dependency order and tears them
down in exactly the reverse order:
- AreaRegistry: validated, immutable catalog of seed areas
- DependencyGraphResolver: closure expansion, phase filtering, topological order
- IdTracker: run-scoped index of created ids, globally and per clinic
- SeedOrchestrator: drives configure -> resolve -> clear -> seed -> summarize

Usage:
    # From Python:
    from src.seed_engine import SeedOrchestrator, build_default_registry
    summary = await SeedOrchestrator(build_default_registry(), engine).run(profile="minimal")

    # From shell:
    python -m src.seed_engine --mode minimal --clear
"""
from src.seed_engine.areas import build_default_registry
from src.seed_engine.config import DEFAULT_CONFIG, PROFILES, SeedConfig, build_config
from src.seed_engine.context import SeedContext, SeedLogger
from src.seed_engine.errors import (
    ConfigurationError,
    CyclicDependencyError,
    DuplicateAreaError,
    EmptySetError,
    InvalidConfigError,
    NotFoundError,
    PhaseOrderingError,
    RuntimeSeedError,
    SeedError,
    UnknownAreaError,
)
from src.seed_engine.orchestrator import RunState, SeedOrchestrator, SeedSummary
from src.seed_engine.registry import AreaRegistry, SeedArea
from src.seed_engine.resolver import DependencyGraphResolver, RunPlan
from src.seed_engine.tracker import IdTracker

__all__ = [
    "AreaRegistry",
    "ConfigurationError",
    "CyclicDependencyError",
    "DEFAULT_CONFIG",
    "DependencyGraphResolver",
    "DuplicateAreaError",
    "EmptySetError",
    "IdTracker",
    "InvalidConfigError",
    "NotFoundError",
    "PROFILES",
    "PhaseOrderingError",
    "RunPlan",
    "RunState",
    "RuntimeSeedError",
    "SeedArea",
    "SeedConfig",
    "SeedContext",
    "SeedError",
    "SeedLogger",
    "SeedOrchestrator",
    "SeedSummary",
    "UnknownAreaError",
    "build_config",
    "build_default_registry",
]
