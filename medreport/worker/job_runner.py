from medreport.jobs.models import Job
from medreport.jobs.state_machine import JobStateMachine
from medreport.logging.logger import Log
from medreport.processor.processor import Processor


class JobRunner:
    """Run one job to a terminal status. Failures are not retried."""

    def __init__(self, processor: Processor, state_machine: JobStateMachine) -> None:
        self._processor = processor
        self._state_machine = state_machine

    def run(self, job: Job) -> Job:
        """Execute a started job and record its outcome."""
        Log.info(f"Running job {job.id}")
        try:
            result = self._processor.process(job)
        except Exception as exc:
            return self._handle_failure(job, exc)

        completed = self._state_machine.complete(job.id, result)
        Log.info(f"Job {job.id} completed successfully")
        return completed

    def _handle_failure(self, job: Job, exc: Exception) -> Job:
        Log.exception(f"Analysis failed for job {job.id}: {exc}")
        message = str(exc) or exc.__class__.__name__
        return self._state_machine.fail(job.id, message)
