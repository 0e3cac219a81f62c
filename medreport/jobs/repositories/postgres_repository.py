from dataclasses import asdict
from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from medreport.jobs.models import Job, JobStatus
from medreport.jobs.repositories.base import BaseJobRepository

_COLUMNS = (
    "id, status, original_filename, uploaded_at, file_size, consent_given, file_path, "
    "selected_provider, analysis_options, processing_started_at, completed_at, "
    "failed_at, result, error"
)


class PostgresJobRepository(BaseJobRepository):
    """Database operations for the analysis_jobs table."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def get(self, job_id: str) -> Job | None:
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM analysis_jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _row_to_job(row)

    def put(self, job: Job) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                """
                INSERT INTO analysis_jobs (
                    id, status, original_filename, uploaded_at, file_size,
                    consent_given, file_path, selected_provider, analysis_options,
                    processing_started_at, completed_at, failed_at, result, error
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE SET
                    status = EXCLUDED.status,
                    selected_provider = EXCLUDED.selected_provider,
                    analysis_options = EXCLUDED.analysis_options,
                    processing_started_at = EXCLUDED.processing_started_at,
                    completed_at = EXCLUDED.completed_at,
                    failed_at = EXCLUDED.failed_at,
                    result = EXCLUDED.result,
                    error = EXCLUDED.error
                """,
                (
                    job.id,
                    job.status.value,
                    job.original_filename,
                    job.uploaded_at,
                    job.file_size,
                    job.consent_given,
                    job.file_path,
                    *_mutable_values(job),
                ),
            )
            conn.commit()

    def transition(self, job_id: str, expected_status: JobStatus, job: Job) -> bool:
        """Compare-and-swap on the status column."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE analysis_jobs
                    SET status = %s,
                        selected_provider = %s,
                        analysis_options = %s,
                        processing_started_at = %s,
                        completed_at = %s,
                        failed_at = %s,
                        result = %s,
                        error = %s
                    WHERE id = %s AND status = %s
                    """,
                    (job.status.value, *_mutable_values(job), job_id, expected_status.value),
                )
                updated = cur.rowcount == 1
            conn.commit()
        return updated


def _mutable_values(job: Job) -> tuple[Any, ...]:
    return (
        job.selected_provider,
        Jsonb(asdict(job.analysis_options)),
        job.processing_started_at,
        job.completed_at,
        job.failed_at,
        Jsonb(job.result) if job.result is not None else None,
        job.error,
    )


def _isoformat(value: datetime | str | None) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _row_to_job(row: dict[str, Any]) -> Job:
    return Job.from_dict(
        {
            **row,
            "id": str(row["id"]),
            "uploaded_at": _isoformat(row["uploaded_at"]),
            "processing_started_at": _isoformat(row["processing_started_at"]),
            "completed_at": _isoformat(row["completed_at"]),
            "failed_at": _isoformat(row["failed_at"]),
        }
    )
