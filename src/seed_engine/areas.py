"""Bootstrap seed areas: clinics and their users.

Both areas are idempotent (upserts, not inserts) and write through the
SQLAlchemy AsyncEngine passed as ``ctx.db``. Ids are tracked only after the
transaction has committed, so a later area never sees an id for a row that
was rolled back.

Usage:
    from src.seed_engine.areas import build_default_registry
    orchestrator = SeedOrchestrator(build_default_registry(), engine)
"""
from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

from src.seed_engine.context import SeedContext
from src.seed_engine.fixtures import ALL_CLINIC_IDS, ALL_USER_IDS, SEED_CLINICS, SEED_USERS
from src.seed_engine.registry import AreaRegistry, SeedArea

CLINIC_MODEL = "Clinic"
USER_MODEL = "User"


async def _ensure_tables(conn: AsyncConnection) -> None:
    await conn.execute(
        text("""
            CREATE TABLE IF NOT EXISTS clinics (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                slug TEXT NOT NULL UNIQUE,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)
    )
    await conn.execute(
        text("""
            CREATE TABLE IF NOT EXISTS clinic_users (
                id TEXT PRIMARY KEY,
                clinic_id TEXT NOT NULL REFERENCES clinics (id),
                email TEXT NOT NULL UNIQUE,
                name TEXT NOT NULL,
                role TEXT NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)
    )


# ---------------------------------------------------------------------------
# Clinics
# ---------------------------------------------------------------------------


async def seed_clinics(ctx: SeedContext) -> int:
    """Upsert the first ``counts["clinics"]`` bootstrap clinics.

    Returns:
        Number of clinics upserted.
    """
    requested = ctx.config.count("clinics", len(SEED_CLINICS))
    clinics = SEED_CLINICS[:requested]
    ctx.logger.start_area("Clinics")
    if requested > len(SEED_CLINICS):
        ctx.logger.warning(
            "Requested %d clinics but only %d bootstrap clinics exist; seeding %d",
            requested,
            len(SEED_CLINICS),
            len(clinics),
        )

    async with ctx.db.begin() as conn:
        await _ensure_tables(conn)
        for clinic in clinics:
            await conn.execute(
                text("""
                    INSERT INTO clinics (id, name, slug)
                    VALUES (:id, :name, :slug)
                    ON CONFLICT (id) DO UPDATE SET
                        name = EXCLUDED.name,
                        slug = EXCLUDED.slug
                """),
                {"id": clinic["id"], "name": clinic["name"], "slug": clinic["slug"]},
            )

    for clinic in clinics:
        ctx.id_tracker.add(CLINIC_MODEL, clinic["id"])

    ctx.logger.end_area("Clinics", len(clinics))
    return len(clinics)


async def clear_clinics(ctx: SeedContext) -> None:
    async with ctx.db.begin() as conn:
        await _ensure_tables(conn)
        await conn.execute(
            text("DELETE FROM clinics WHERE id = :id"),
            [{"id": clinic_id} for clinic_id in ALL_CLINIC_IDS],
        )
    ctx.logger.info("Cleared bootstrap clinics")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def seed_users(ctx: SeedContext) -> int:
    """Upsert ``counts["users_per_clinic"]`` users for every tracked clinic.

    Returns:
        Number of users upserted across all clinics.
    """
    ctx.logger.start_area("Users")
    clinic_ids = ctx.id_tracker.get_all(CLINIC_MODEL)
    if not clinic_ids:
        ctx.logger.warning("No clinics tracked; skipping users")
        ctx.logger.end_area("Users", 0)
        return 0

    per_clinic = ctx.config.count("users_per_clinic", 1)
    total = 0
    for clinic_id in clinic_ids:
        scoped = ctx.for_clinic(clinic_id)
        users = SEED_USERS.get(clinic_id, [])[:per_clinic]

        async with scoped.db.begin() as conn:
            for user in users:
                await conn.execute(
                    text("""
                        INSERT INTO clinic_users (id, clinic_id, email, name, role)
                        VALUES (:id, :clinic_id, :email, :name, :role)
                        ON CONFLICT (id) DO UPDATE SET
                            email = EXCLUDED.email,
                            name = EXCLUDED.name,
                            role = EXCLUDED.role
                    """),
                    user,
                )

        for user in users:
            scoped.track(USER_MODEL, user["id"])
        scoped.logger.info("Seeded %d users", len(users))
        total += len(users)

    ctx.logger.end_area("Users", total)
    return total


async def clear_users(ctx: SeedContext) -> None:
    async with ctx.db.begin() as conn:
        await _ensure_tables(conn)
        await conn.execute(
            text("DELETE FROM clinic_users WHERE id = :id"),
            [{"id": user_id} for user_id in ALL_USER_IDS],
        )
    ctx.logger.info("Cleared bootstrap users")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def default_areas() -> list[SeedArea]:
    return [
        SeedArea(id="core", name="Core (clinics)", phase=0, seed=seed_clinics, clear=clear_clinics),
        SeedArea(
            id="users",
            name="Users",
            phase=1,
            dependencies={"core"},
            seed=seed_users,
            clear=clear_users,
        ),
    ]


def build_default_registry() -> AreaRegistry:
    """Registry of the bootstrap areas; extend ``default_areas()`` to add more."""
    return AreaRegistry(default_areas())
