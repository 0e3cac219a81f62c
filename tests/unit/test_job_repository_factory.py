from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from medreport.config.settings import Settings
from medreport.database.connection import conninfo, create_pool
from medreport.jobs.repositories.factory import JobRepositoryFactory
from medreport.jobs.repositories.file_repository import FileJobRepository
from medreport.jobs.repositories.postgres_repository import PostgresJobRepository


class TestJobRepositoryFactory:
    def test_creates_file_repository(self, settings: Settings) -> None:
        repo = JobRepositoryFactory.create(settings)

        assert isinstance(repo, FileJobRepository)
        assert Path(settings.jobs_dir).is_dir()

    def test_store_name_is_case_insensitive(self, settings: Settings) -> None:
        settings.job_store = "FILE"

        assert isinstance(JobRepositoryFactory.create(settings), FileJobRepository)

    @patch("medreport.jobs.repositories.factory.create_pool")
    def test_creates_postgres_repository(self, mock_create_pool: MagicMock, settings: Settings) -> None:
        settings.job_store = "postgres"

        repo = JobRepositoryFactory.create(settings)

        assert isinstance(repo, PostgresJobRepository)
        mock_create_pool.assert_called_once_with(settings)

    def test_unknown_store_raises(self, settings: Settings) -> None:
        settings.job_store = "redis"

        with pytest.raises(ValueError, match="Unknown job store 'redis'"):
            JobRepositoryFactory.create(settings)


class TestConnection:
    def test_conninfo_uses_settings(self) -> None:
        settings = Settings(
            db_host="db",
            db_port=6543,
            db_database="reports",
            db_username="worker",
            db_password="pw",
        )

        assert conninfo(settings) == "host=db port=6543 dbname=reports user=worker password=pw"

    @patch("medreport.database.connection.ConnectionPool")
    def test_pool_size_follows_concurrency(self, mock_pool_cls: MagicMock) -> None:
        settings = Settings(max_concurrent_jobs=3)

        create_pool(settings)

        _, kwargs = mock_pool_cls.call_args
        assert kwargs["min_size"] == 1
        assert kwargs["max_size"] == 5
        assert kwargs["open"] is True
