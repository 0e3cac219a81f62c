class JobError(Exception):
    """Base exception for job lifecycle errors."""


class InvalidJobIdError(JobError):
    """Raised when a job id is not a well-formed UUID."""


class JobNotFoundError(JobError):
    """Raised when no job exists for the given id."""


class InvalidJobStatusError(JobError):
    """Raised when a job is not in the status an operation requires."""


class ConsentRequiredError(JobError):
    """Raised when PHI processing consent was not given."""


class InvalidUploadError(JobError):
    """Raised when an uploaded file is rejected."""
