import argparse
import json
import sys
from pathlib import Path

from medreport.config.settings import Settings
from medreport.jobs.exceptions import JobError
from medreport.jobs.models import AnalysisOptions
from medreport.jobs.repositories.factory import JobRepositoryFactory
from medreport.jobs.state_machine import JobStateMachine
from medreport.llm.exceptions import ModelClientError
from medreport.llm.factory import ModelClientFactory
from medreport.logging.logger import Log
from medreport.processor.processor import build_processor
from medreport.service import AnalysisService
from medreport.storage.encryption import FileCipher
from medreport.storage.exceptions import FileStoreError
from medreport.storage.file_store import LocalFileStore
from medreport.worker.job_runner import JobRunner
from medreport.worker.worker import Worker


def build_service(settings: Settings) -> tuple[AnalysisService, Worker]:
    """Wire every component from one Settings value."""
    model_client = ModelClientFactory.create(settings)
    file_store = LocalFileStore(
        files_root=settings.files_root,
        scratch_dir=settings.scratch_dir,
        cipher=FileCipher(settings.encryption_key) if settings.encrypt_files else None,
    )
    state_machine = JobStateMachine(JobRepositoryFactory.create(settings), model_client)
    processor = build_processor(settings, model_client, file_store)
    worker = Worker(JobRunner(processor, state_machine), settings.max_concurrent_jobs)
    service = AnalysisService(settings, state_machine, file_store, model_client, worker)
    return service, worker


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="medreport", description="Analyze a medical PDF report.")
    parser.add_argument("pdf", type=Path, nargs="?", help="PDF file to analyze")
    parser.add_argument("--provider", help="AI provider id (default: first enabled)")
    parser.add_argument("--ocr", action="store_true", help="Skip the text layer and OCR every page")
    parser.add_argument(
        "--consent",
        action="store_true",
        help="Confirm consent to process protected health information",
    )
    parser.add_argument("--list-providers", action="store_true", help="Print providers and exit")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point: upload -> submit -> wait -> print the job projection."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    service, worker = build_service(settings)
    try:
        if args.list_providers:
            print(json.dumps(service.list_providers(), indent=2))
            return 0
        if args.pdf is None:
            Log.error("A PDF path is required")
            return 2
        job = service.upload(args.pdf.read_bytes(), args.pdf.name, args.consent)
        service.submit_analysis(job.id, args.provider, AnalysisOptions(ocr=args.ocr))
        projection = service.wait(job.id)
    except (JobError, ModelClientError, FileStoreError, OSError) as exc:
        Log.error(f"Analysis request failed: {exc}")
        return 1
    finally:
        worker.shutdown()

    print(json.dumps(projection, indent=2))
    return 0 if projection["status"] == "completed" else 1


if __name__ == "__main__":
    sys.exit(main())
