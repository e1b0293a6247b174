"""Root conftest: markers and real-infrastructure fixtures.

Unit tests run everywhere. Integration tests talk to a genuine PostgreSQL
started with Testcontainers and are skipped unless
SEED_USE_TESTCONTAINERS=true.
"""
from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from testcontainers.postgres import PostgresContainer


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers to suppress PytestUnknownMarkWarning."""
    config.addinivalue_line("markers", "unit: Pure in-process tests, no infrastructure")
    config.addinivalue_line("markers", "integration: Requires a real PostgreSQL container")


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Skip integration tests unless Testcontainers is enabled."""
    skip_no_containers = pytest.mark.skip(reason="Testcontainers disabled; set SEED_USE_TESTCONTAINERS=true")

    use_testcontainers = os.getenv("SEED_USE_TESTCONTAINERS", "false").lower() == "true"

    for item in items:
        if "integration" in item.keywords and not use_testcontainers:
            item.add_marker(skip_no_containers)


# ---------------------------------------------------------------------------
# Container fixtures (session-scoped, started once)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Start a real PostgreSQL container for the entire test session."""
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


# ---------------------------------------------------------------------------
# Database engine fixture
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_engine(postgres_container: PostgresContainer) -> AsyncGenerator[AsyncEngine, None]:
    """Async SQLAlchemy engine on the test container, with seeded tables dropped afterwards.

    Function-scoped so the engine's connection pool lives on the test's own event loop.
    """
    url = postgres_container.get_connection_url().replace(
        "postgresql+psycopg2://", "postgresql+asyncpg://"
    )
    engine = create_async_engine(url, echo=False, pool_pre_ping=True)

    yield engine

    async with engine.begin() as conn:
        await conn.execute(text("DROP TABLE IF EXISTS clinic_users"))
        await conn.execute(text("DROP TABLE IF EXISTS clinics"))
    await engine.dispose()
