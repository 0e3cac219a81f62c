from psycopg_pool import ConnectionPool

from medreport.config.settings import Settings


def conninfo(settings: Settings) -> str:
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


def create_pool(settings: Settings) -> ConnectionPool:
    """Open a connection pool from settings. The caller owns closing it."""
    return ConnectionPool(
        conninfo(settings),
        min_size=1,
        max_size=settings.max_concurrent_jobs + 2,
        open=True,
    )
