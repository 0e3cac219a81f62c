from abc import ABC, abstractmethod

from medreport.jobs.models import Job, JobStatus


class BaseJobRepository(ABC):
    """Storage for job records."""

    @abstractmethod
    def get(self, job_id: str) -> Job | None:
        """Return the job, or None if it does not exist."""

    @abstractmethod
    def put(self, job: Job) -> None:
        """Insert or overwrite a job record."""

    @abstractmethod
    def transition(self, job_id: str, expected_status: JobStatus, job: Job) -> bool:
        """Atomically replace the record if its stored status is `expected_status`.

        Returns False, leaving the record untouched, when the stored status
        differs or the job does not exist.
        """
