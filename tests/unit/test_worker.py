import threading
from collections.abc import Callable
from unittest.mock import MagicMock

from medreport.jobs.models import Job
from medreport.worker.worker import Worker


class TestDispatch:
    def test_runs_job_on_pool(self, make_job: Callable[..., Job]) -> None:
        runner = MagicMock()
        runner.run.return_value = "done"
        worker = Worker(runner, max_workers=2)
        job = make_job()

        future = worker.dispatch(job)

        assert future.result(timeout=5) == "done"
        runner.run.assert_called_once_with(job)
        worker.shutdown()

    def test_runs_on_worker_thread(self, make_job: Callable[..., Job]) -> None:
        seen: list[str] = []
        runner = MagicMock()
        runner.run.side_effect = lambda job: seen.append(threading.current_thread().name)
        worker = Worker(runner, max_workers=1)

        worker.dispatch(make_job()).result(timeout=5)
        worker.shutdown()

        assert seen[0].startswith("medreport-worker")

    def test_runs_jobs_concurrently(self, make_job: Callable[..., Job]) -> None:
        barrier = threading.Barrier(2, timeout=5)
        runner = MagicMock()
        runner.run.side_effect = lambda job: barrier.wait()
        worker = Worker(runner, max_workers=2)

        futures = [worker.dispatch(make_job()), worker.dispatch(make_job())]
        for future in futures:
            future.result(timeout=10)
        worker.shutdown()

        assert runner.run.call_count == 2

    def test_runner_error_surfaces_on_future(self, make_job: Callable[..., Job]) -> None:
        runner = MagicMock()
        runner.run.side_effect = RuntimeError("store down")
        worker = Worker(runner, max_workers=1)

        future = worker.dispatch(make_job())

        assert isinstance(future.exception(timeout=5), RuntimeError)
        worker.shutdown()
