from dataclasses import asdict
from typing import Any

from medreport.config.settings import Settings
from medreport.extraction.text_extractor import TextExtractor
from medreport.jobs.models import Job
from medreport.llm.client import ModelClient
from medreport.logging.logger import Log
from medreport.ocr.tesseract_adapter import TesseractAdapter
from medreport.pdf.factory import PdfExtractorFactory
from medreport.processor.exceptions import MissingStageOutputError
from medreport.processor.pipeline import PipelineContext, PipelineStep
from medreport.processor.steps import (
    AnalyzeStep,
    AssembleResultStep,
    ExtractTextStep,
    LoadDocumentStep,
    ReconcileStep,
    RuleExtractStep,
)
from medreport.reconciliation.reconciler import ResultReconciler
from medreport.rules.extractor import RuleExtractor
from medreport.storage.file_store import LocalFileStore


class Processor:
    """Runs the analysis pipeline for one job.

    Pipeline: load -> extract text -> rule extraction -> model analysis ->
    reconcile -> assemble. Steps run strictly in order on a scratch copy of
    the upload, which is removed however the run ends.
    """

    def __init__(self, steps: list[PipelineStep], file_store: LocalFileStore) -> None:
        self._steps = steps
        self._file_store = file_store

    def process(self, job: Job) -> dict[str, Any]:
        """Return the serialized AnalysisResult for `job`."""
        Log.info(f"Processing job {job.id} with {job.selected_provider}")
        with self._file_store.scratch_copy(job) as scratch_path:
            context = PipelineContext(job=job, scratch_path=scratch_path)
            for step in self._steps:
                context = step.run(context)

        if context.result is None:
            raise MissingStageOutputError(f"Pipeline produced no result for job {job.id}")
        return asdict(context.result)


def build_processor(
    settings: Settings,
    model_client: ModelClient,
    file_store: LocalFileStore,
) -> Processor:
    """Build a Processor with all required adapters."""
    text_extractor = TextExtractor(
        pdf_extractor=PdfExtractorFactory.create(settings),
        ocr_engine=TesseractAdapter(language=settings.ocr_language, dpi=settings.ocr_dpi),
        min_native_text_length=settings.min_native_text_length,
    )
    steps: list[PipelineStep] = [
        LoadDocumentStep(),
        ExtractTextStep(text_extractor),
        RuleExtractStep(RuleExtractor()),
        AnalyzeStep(model_client),
        ReconcileStep(ResultReconciler()),
        AssembleResultStep(),
    ]
    return Processor(steps=steps, file_store=file_store)
