"""Service surface used by transport layers (HTTP routes, CLI)."""

import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Any

from medreport.config.settings import Settings
from medreport.jobs.exceptions import ConsentRequiredError, InvalidUploadError
from medreport.jobs.models import AnalysisOptions, Job, JobStatus, new_job_id, utc_now
from medreport.jobs.state_machine import JobStateMachine
from medreport.llm.client import ModelClient
from medreport.llm.exceptions import ProviderUnavailable
from medreport.logging.logger import Log
from medreport.storage.file_store import LocalFileStore
from medreport.worker.worker import Worker

PDF_MAGIC = b"%PDF"


def result_url(job_id: str) -> str:
    return f"/api/result/{job_id}"


class AnalysisService:
    def __init__(
        self,
        settings: Settings,
        state_machine: JobStateMachine,
        file_store: LocalFileStore,
        model_client: ModelClient,
        worker: Worker,
    ) -> None:
        self._max_file_size = settings.max_file_size_mb * 1024 * 1024
        self._state_machine = state_machine
        self._file_store = file_store
        self._model_client = model_client
        self._worker = worker
        self._inflight: dict[str, Future[Job]] = {}
        self._inflight_guard = threading.Lock()

    def upload(self, data: bytes, filename: str, consent_given: bool) -> Job:
        """Store an uploaded PDF and create its job.

        Raises:
            ConsentRequiredError: if PHI processing consent was not given.
            InvalidUploadError: if the file is empty, too large or not a PDF.
        """
        if not consent_given:
            raise ConsentRequiredError("Consent for PHI processing is required")
        if not data:
            raise InvalidUploadError("Uploaded file is empty")
        if len(data) > self._max_file_size:
            raise InvalidUploadError(
                f"File too large: {len(data)} bytes exceeds {self._max_file_size} bytes"
            )
        if not data.startswith(PDF_MAGIC):
            raise InvalidUploadError("Only PDF files are allowed")

        job_id = new_job_id()
        path = self._file_store.save(job_id, data)
        job = Job(
            id=job_id,
            original_filename=Path(filename).name or "document.pdf",
            uploaded_at=utc_now(),
            file_size=len(data),
            consent_given=consent_given,
            file_path=str(path),
        )
        return self._state_machine.create(job)

    def submit_analysis(
        self,
        job_id: str,
        provider: str | None = None,
        options: AnalysisOptions | None = None,
    ) -> dict[str, Any]:
        """Start analysis and return immediately with a processing acknowledgment.

        Without a provider, the default provider is used.
        """
        provider = provider or self._model_client.default_provider()
        if provider is None:
            raise ProviderUnavailable("No AI provider is available")

        job = self._state_machine.start(job_id, provider, options or AnalysisOptions())
        try:
            future = self._worker.dispatch(job)
        except RuntimeError as exc:
            # Already committed to processing; nothing else will finish it.
            self._state_machine.fail(job.id, f"Could not schedule analysis: {exc}")
            raise
        with self._inflight_guard:
            self._inflight[job.id] = future
        future.add_done_callback(lambda _: self._forget(job.id))
        return {
            "job_id": job.id,
            "status": job.status.value,
            "message": "Analysis started",
            "result_url": result_url(job.id),
        }

    def wait(self, job_id: str, timeout: float | None = None) -> dict[str, Any]:
        """Block until an in-flight job finishes, then return its projection."""
        with self._inflight_guard:
            future = self._inflight.get(job_id)
        if future is not None:
            future.result(timeout=timeout)
        return self.get_result(job_id)

    def get_result(self, job_id: str) -> dict[str, Any]:
        """Return the current projection of a job.

        Raises:
            InvalidJobIdError: if the id is not a UUID.
            JobNotFoundError: if the job does not exist.
        """
        job = self._state_machine.get(job_id)
        projection: dict[str, Any] = {
            "job_id": job.id,
            "status": job.status.value,
            "uploaded_at": job.uploaded_at,
            "filename": job.original_filename,
        }
        if job.status is JobStatus.COMPLETED:
            projection["result"] = job.result
            projection["result_url"] = result_url(job.id)
        elif job.status is JobStatus.FAILED:
            projection["error"] = job.error
        elif job.status is JobStatus.PROCESSING:
            projection["processing_started_at"] = job.processing_started_at
        return projection

    def list_providers(self) -> dict[str, Any]:
        providers = self._model_client.describe()
        return {
            "models": [
                {
                    "id": info.id,
                    "name": info.name,
                    "description": info.description,
                    "requires_phi": info.requires_phi,
                    "enabled": info.enabled,
                }
                for info in providers
            ],
            "default_model": self._model_client.default_provider(),
        }

    def _forget(self, job_id: str) -> None:
        with self._inflight_guard:
            self._inflight.pop(job_id, None)
        Log.debug(f"Job {job_id} no longer in flight")
