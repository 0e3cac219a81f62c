class ProcessorError(Exception):
    """Base exception for pipeline errors."""


class MissingStageOutputError(ProcessorError):
    """Raised when a step runs before the step it depends on."""
