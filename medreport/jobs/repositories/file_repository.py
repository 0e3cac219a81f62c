import json
import os
import tempfile
import threading
from pathlib import Path

from medreport.jobs.models import Job, JobStatus
from medreport.jobs.repositories.base import BaseJobRepository
from medreport.logging.logger import Log

LOCK_STRIPES = 64


class FileJobRepository(BaseJobRepository):
    """One JSON document per job under `jobs_dir`.

    Transitions hold one of a fixed pool of locks, picked by job id hash,
    across read-check-write and replace the file atomically, so readers never
    observe a partial document.
    """

    def __init__(self, jobs_dir: str | Path) -> None:
        self._jobs_dir = Path(jobs_dir)
        self._jobs_dir.mkdir(parents=True, exist_ok=True)
        self._locks = tuple(threading.Lock() for _ in range(LOCK_STRIPES))

    def get(self, job_id: str) -> Job | None:
        path = self._path(job_id)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        return Job.from_dict(data)

    def put(self, job: Job) -> None:
        with self._lock(job.id):
            self._write(job)

    def transition(self, job_id: str, expected_status: JobStatus, job: Job) -> bool:
        with self._lock(job_id):
            current = self.get(job_id)
            if current is None or current.status is not expected_status:
                Log.debug(
                    f"Job {job_id} transition rejected: expected {expected_status.value}, "
                    f"found {current.status.value if current else 'nothing'}"
                )
                return False
            self._write(job)
            return True

    def _path(self, job_id: str) -> Path:
        return self._jobs_dir / f"{job_id}.json"

    def _lock(self, job_id: str) -> threading.Lock:
        return self._locks[hash(job_id) % LOCK_STRIPES]

    def _write(self, job: Job) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._jobs_dir, prefix=f".{job.id}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(job.to_dict(), handle, indent=2)
            os.replace(tmp_name, self._path(job.id))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
