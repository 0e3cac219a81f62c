import os
from collections.abc import Generator
from pathlib import Path

import pytest
from psycopg_pool import ConnectionPool

from medreport.config.settings import Settings
from medreport.database.connection import create_pool
from medreport.jobs.repositories.postgres_repository import PostgresJobRepository

SCHEMA_PATH = Path(__file__).parents[2] / "medreport" / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "medreport_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[ConnectionPool, None, None]:
    pool = create_pool(test_settings)
    try:
        pool.wait(timeout=5)
    except Exception as e:
        pool.close()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        with pool.connection() as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
        yield pool
    finally:
        pool.close()


@pytest.fixture
def integration_cleanup(integration_pool: ConnectionPool) -> Generator[list[str], None, None]:
    job_ids: list[str] = []
    yield job_ids
    if not job_ids:
        return
    with integration_pool.connection() as conn:
        for job_id in job_ids:
            conn.execute("DELETE FROM analysis_jobs WHERE id = %s", (job_id,))
        conn.commit()


@pytest.fixture
def pg_repo(integration_pool: ConnectionPool) -> PostgresJobRepository:
    return PostgresJobRepository(integration_pool)
