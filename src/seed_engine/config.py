"""Per-run seed configuration.

A SeedConfig is built once per invocation by layering, in increasing
precedence: the defaults, a named profile (minimal/standard/full), and caller
overrides. The result is frozen; ``counts`` is exposed as a read-only mapping.

The core never interprets ``counts`` or ``mode``; they are passed through the
context to the area callables.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from src.seed_engine.errors import InvalidConfigError

MODES: tuple[str, ...] = ("minimal", "standard", "full")

DEFAULT_MAX_PHASE: int = 99

# ---------------------------------------------------------------------------
# Record-volume profiles
# ---------------------------------------------------------------------------

PROFILES: dict[str, dict[str, Any]] = {
    "minimal": {
        "mode": "minimal",
        "counts": {"clinics": 1, "users_per_clinic": 2},
    },
    "standard": {
        "mode": "standard",
        "counts": {"clinics": 2, "users_per_clinic": 5},
    },
    "full": {
        "mode": "full",
        "counts": {"clinics": 3, "users_per_clinic": 5},
    },
}


def _frozen_counts(counts: Mapping[str, int] | None = None) -> Mapping[str, int]:
    return MappingProxyType(dict(counts or {}))


@dataclass(frozen=True)
class SeedConfig:
    """Immutable settings for one seed run."""

    counts: Mapping[str, int] = field(default_factory=_frozen_counts)
    mode: str = "standard"
    clear_before_seed: bool = False
    areas: tuple[str, ...] | None = None
    max_phase: int = DEFAULT_MAX_PHASE
    random_seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "counts", _frozen_counts(self.counts))

    def count(self, key: str, default: int = 0) -> int:
        """Convenience accessor for area callables."""
        return self.counts.get(key, default)


DEFAULT_CONFIG = SeedConfig(counts=_frozen_counts(PROFILES["standard"]["counts"]))

_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(SeedConfig))


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


def build_config(
    profile: str | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    base: SeedConfig = DEFAULT_CONFIG,
) -> SeedConfig:
    """Merge ``base``, a named profile, and caller overrides into a SeedConfig.

    Args:
        profile: One of ``PROFILES`` or None to skip the profile layer.
        overrides: Field values that win over the profile. ``counts`` is merged
            key-by-key rather than replaced.
        base: Lowest-precedence layer, ``DEFAULT_CONFIG`` unless given.

    Returns:
        A validated, frozen SeedConfig.

    Raises:
        InvalidConfigError: Unknown profile, unknown override key, or an
            out-of-range value.
    """
    values: dict[str, Any] = {f: getattr(base, f) for f in _FIELD_NAMES}
    counts: dict[str, int] = dict(base.counts)

    for layer in (_profile_layer(profile), dict(overrides or {})):
        unknown = sorted(set(layer) - _FIELD_NAMES)
        if unknown:
            raise InvalidConfigError(f"Unknown seed config key(s): {', '.join(unknown)}")
        layer_counts = layer.pop("counts", None)
        if layer_counts:
            counts.update(layer_counts)
        values.update(layer)

    values["counts"] = counts
    return _validated(values)


def _profile_layer(profile: str | None) -> dict[str, Any]:
    if profile is None:
        return {}
    try:
        layer = PROFILES[profile]
    except KeyError:
        raise InvalidConfigError(
            f"Unknown seed profile '{profile}' (expected one of: {', '.join(PROFILES)})"
        ) from None
    return {"mode": layer["mode"], "counts": dict(layer["counts"])}


def _validated(values: dict[str, Any]) -> SeedConfig:
    mode = values["mode"]
    if mode not in MODES:
        raise InvalidConfigError(f"Unknown seed mode '{mode}' (expected one of: {', '.join(MODES)})")

    max_phase = values["max_phase"]
    if not isinstance(max_phase, int) or max_phase < 0:
        raise InvalidConfigError(f"max_phase must be a non-negative integer, got {max_phase!r}")

    counts = values["counts"]
    for key, value in counts.items():
        if not isinstance(value, int) or value < 0:
            raise InvalidConfigError(f"counts[{key!r}] must be a non-negative integer, got {value!r}")

    clear_before_seed = values["clear_before_seed"]
    if not isinstance(clear_before_seed, bool):
        raise InvalidConfigError(f"clear_before_seed must be a bool, got {clear_before_seed!r}")

    areas = values["areas"]
    if areas is not None:
        areas = _area_ids(areas)

    return SeedConfig(
        counts=_frozen_counts(counts),
        mode=mode,
        clear_before_seed=clear_before_seed,
        areas=areas,
        max_phase=max_phase,
        random_seed=values["random_seed"],
    )


def _area_ids(areas: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(areas, str):
        areas = areas.split(",")
    ids = tuple(area_id.strip() for area_id in areas if area_id.strip())
    if not ids:
        raise InvalidConfigError("areas must name at least one seed area when given")
    return ids
