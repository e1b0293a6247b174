"""AreaRegistry construction, validation and lookup."""
from __future__ import annotations

import pytest

from src.seed_engine.errors import ConfigurationError, DuplicateAreaError, NotFoundError, UnknownAreaError
from src.seed_engine.registry import AreaRegistry, SeedArea


pytestmark = pytest.mark.unit


async def _noop(ctx: object) -> None:
    return None


class TestSeedArea:
    def test_dependencies_stored_as_frozenset(self) -> None:
        area = SeedArea(id="users", name="Users", phase=1, dependencies=["core", "core"], seed=_noop)
        assert area.dependencies == frozenset({"core"})

    def test_negative_phase_rejected(self) -> None:
        with pytest.raises(ValueError, match="negative phase"):
            SeedArea(id="core", name="Core", phase=-1, seed=_noop)

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            SeedArea(id="", name="Nameless", phase=0, seed=_noop)

    def test_areas_are_immutable(self) -> None:
        area = SeedArea(id="core", name="Core", phase=0, seed=_noop)
        with pytest.raises(AttributeError):
            area.phase = 3  # type: ignore[misc]

    def test_equality_ignores_callables_and_name(self) -> None:
        async def other(ctx: object) -> None:
            return None

        a = SeedArea(id="core", name="Core", phase=0, seed=_noop)
        b = SeedArea(id="core", name="Core data", phase=0, seed=other, clear=other)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1


class TestAreaRegistry:
    def test_all_preserves_registration_order(self, make_area) -> None:
        registry = AreaRegistry([make_area("zeta"), make_area("alpha"), make_area("mid")])
        assert [area.id for area in registry.all()] == ["zeta", "alpha", "mid"]
        assert registry.ids() == ("zeta", "alpha", "mid")
        assert registry.index_of("alpha") == 1

    def test_lookup_returns_registered_area(self, clinic_registry: AreaRegistry) -> None:
        area = clinic_registry.lookup("users")
        assert area.id == "users"
        assert area.dependencies == frozenset({"core"})

    def test_lookup_unknown_raises_not_found(self, clinic_registry: AreaRegistry) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            clinic_registry.lookup("billing")
        assert exc_info.value.area_id == "billing"
        assert isinstance(exc_info.value, LookupError)

    def test_duplicate_ids_rejected(self, make_area) -> None:
        with pytest.raises(DuplicateAreaError) as exc_info:
            AreaRegistry([make_area("core"), make_area("users", 1, ["core"]), make_area("core", 2)])
        assert exc_info.value.area_id == "core"

    def test_unknown_dependency_rejected(self, make_area) -> None:
        with pytest.raises(UnknownAreaError) as exc_info:
            AreaRegistry([make_area("core"), make_area("users", 1, ["core", "staff"])])
        assert exc_info.value.area_id == "staff"
        assert exc_info.value.required_by == "users"

    def test_validation_errors_are_configuration_errors(self, make_area) -> None:
        with pytest.raises(ConfigurationError):
            AreaRegistry([make_area("core"), make_area("core")])

    def test_dependency_on_later_registered_area_is_allowed(self, make_area) -> None:
        registry = AreaRegistry([make_area("users", 1, ["core"]), make_area("core", 0)])
        assert "core" in registry
        assert len(registry) == 2

    def test_self_dependency_passes_construction(self, make_area) -> None:
        # Cycles are detected by the resolver, not the registry.
        registry = AreaRegistry([make_area("loop", 0, ["loop"])])
        assert "loop" in registry

    def test_container_protocol(self, clinic_registry: AreaRegistry) -> None:
        assert "core" in clinic_registry
        assert "billing" not in clinic_registry
        assert len(clinic_registry) == 3
        assert [area.id for area in clinic_registry] == ["core", "users", "patients"]

    def test_empty_registry(self) -> None:
        registry = AreaRegistry([])
        assert registry.all() == ()
        assert len(registry) == 0
