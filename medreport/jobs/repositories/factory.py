from typing import ClassVar

from medreport.config.settings import Settings
from medreport.database.connection import create_pool
from medreport.jobs.repositories.base import BaseJobRepository
from medreport.jobs.repositories.file_repository import FileJobRepository
from medreport.jobs.repositories.postgres_repository import PostgresJobRepository


class JobRepositoryFactory:
    """Creates the configured job store."""

    STORES: ClassVar[tuple[str, ...]] = ("file", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> BaseJobRepository:
        store = settings.job_store.lower()
        if store == "file":
            return FileJobRepository(settings.jobs_dir)
        if store == "postgres":
            return PostgresJobRepository(create_pool(settings))
        raise ValueError(f"Unknown job store '{settings.job_store}'. Choose from: {list(cls.STORES)}")
