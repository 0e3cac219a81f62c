from concurrent.futures import Future, ThreadPoolExecutor

from medreport.jobs.models import Job
from medreport.logging.logger import Log
from medreport.worker.job_runner import JobRunner


class Worker:
    """Runs started jobs on a bounded thread pool.

    Each job runs its pipeline sequentially on one thread; jobs run
    concurrently with each other in no particular order.
    """

    def __init__(self, job_runner: JobRunner, max_workers: int) -> None:
        self._job_runner = job_runner
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="medreport-worker",
        )

    def dispatch(self, job: Job) -> Future[Job]:
        """Schedule a job already moved to processing."""
        future = self._executor.submit(self._job_runner.run, job)
        future.add_done_callback(lambda f: self._log_outcome(job, f))
        Log.debug(f"Job {job.id} dispatched")
        return future

    def shutdown(self, wait: bool = True) -> None:
        Log.info("Worker shutting down")
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_outcome(job: Job, future: Future[Job]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            Log.error(f"Job {job.id} could not record its outcome: {exc}")
