import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from medreport.jobs.exceptions import InvalidJobIdError


class JobStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisOptions:
    ocr: bool = False
    embeddings: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "AnalysisOptions":
        data = data or {}
        return cls(ocr=bool(data.get("ocr", False)), embeddings=bool(data.get("embeddings", False)))


@dataclass
class Job:
    """One uploaded document and its analysis lifecycle.

    `result` is set only when completed and `error` only when failed.
    """

    id: str
    original_filename: str
    uploaded_at: str
    file_size: int
    consent_given: bool
    file_path: str
    status: JobStatus = JobStatus.UPLOADED
    selected_provider: str | None = None
    analysis_options: AnalysisOptions = field(default_factory=AnalysisOptions)
    processing_started_at: str | None = None
    completed_at: str | None = None
    failed_at: str | None = None
    result: dict[str, Any] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Job":
        return cls(
            id=data["id"],
            original_filename=data["original_filename"],
            uploaded_at=data["uploaded_at"],
            file_size=data["file_size"],
            consent_given=bool(data["consent_given"]),
            file_path=data["file_path"],
            status=JobStatus(data["status"]),
            selected_provider=data.get("selected_provider"),
            analysis_options=AnalysisOptions.from_dict(data.get("analysis_options")),
            processing_started_at=data.get("processing_started_at"),
            completed_at=data.get("completed_at"),
            failed_at=data.get("failed_at"),
            result=data.get("result"),
            error=data.get("error"),
        )


def new_job_id() -> str:
    return str(uuid.uuid4())


def validate_job_id(job_id: str) -> str:
    """Return the canonical form of a UUID job id.

    Raises:
        InvalidJobIdError: if `job_id` is not a UUID.
    """
    try:
        return str(uuid.UUID(str(job_id)))
    except ValueError as exc:
        raise InvalidJobIdError(f"Invalid job ID format: {job_id}") from exc


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
