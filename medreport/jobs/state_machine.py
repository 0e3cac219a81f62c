"""Job lifecycle: uploaded -> processing -> completed | failed.

All transitions go through the repository's compare-and-swap, so concurrent
callers racing on the same job see exactly one winner.
"""

from dataclasses import replace
from typing import Any

from medreport.jobs.exceptions import (
    ConsentRequiredError,
    InvalidJobStatusError,
    JobNotFoundError,
)
from medreport.jobs.models import AnalysisOptions, Job, JobStatus, utc_now, validate_job_id
from medreport.jobs.repositories.base import BaseJobRepository
from medreport.llm.client import ModelClient
from medreport.logging.logger import Log


class JobStateMachine:
    def __init__(self, repository: BaseJobRepository, model_client: ModelClient) -> None:
        self._repository = repository
        self._model_client = model_client

    def get(self, job_id: str) -> Job:
        """Load a job by id.

        Raises:
            InvalidJobIdError: if the id is not a UUID.
            JobNotFoundError: if the job does not exist.
        """
        job_id = validate_job_id(job_id)
        job = self._repository.get(job_id)
        if job is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        return job

    def create(self, job: Job) -> Job:
        if job.status is not JobStatus.UPLOADED:
            raise InvalidJobStatusError(f"New job {job.id} must be uploaded, got {job.status.value}")
        self._repository.put(job)
        Log.info(f"Job {job.id} created for {job.original_filename}")
        return job

    def start(self, job_id: str, provider: str, options: AnalysisOptions) -> Job:
        """Validate an analysis request and move the job to processing.

        Raises:
            InvalidJobIdError, JobNotFoundError, InvalidJobStatusError,
            ConsentRequiredError: input errors, job untouched.
            ProviderUnavailable, ExternalProcessingDisallowed: the provider
                cannot be used for this job, job untouched.
        """
        job = self.get(job_id)
        if job.status is not JobStatus.UPLOADED:
            raise InvalidJobStatusError(
                f"Job {job.id} cannot be analyzed. Current status: {job.status.value}"
            )
        if not job.consent_given:
            raise ConsentRequiredError(f"Job {job.id} has no consent for PHI processing")
        self._model_client.check(provider, consent_given=job.consent_given)

        started = replace(
            job,
            status=JobStatus.PROCESSING,
            selected_provider=provider,
            analysis_options=options,
            processing_started_at=utc_now(),
        )
        if not self._repository.transition(job.id, JobStatus.UPLOADED, started):
            raise InvalidJobStatusError(f"Job {job.id} was already submitted for analysis")
        Log.info(f"Job {job.id} processing with {provider}")
        return started

    def complete(self, job_id: str, result: dict[str, Any]) -> Job:
        job = self._require_processing(job_id)
        completed = replace(job, status=JobStatus.COMPLETED, completed_at=utc_now(), result=result)
        self._commit(job, completed)
        Log.info(f"Job {job.id} completed")
        return completed

    def fail(self, job_id: str, error: str) -> Job:
        job = self._require_processing(job_id)
        failed = replace(job, status=JobStatus.FAILED, failed_at=utc_now(), error=error)
        self._commit(job, failed)
        Log.error(f"Job {job.id} failed: {error}")
        return failed

    def _require_processing(self, job_id: str) -> Job:
        job = self.get(job_id)
        if job.status is not JobStatus.PROCESSING:
            raise InvalidJobStatusError(
                f"Job {job.id} is not processing. Current status: {job.status.value}"
            )
        return job

    def _commit(self, job: Job, updated: Job) -> None:
        if not self._repository.transition(job.id, JobStatus.PROCESSING, updated):
            raise InvalidJobStatusError(f"Job {job.id} left processing concurrently")
