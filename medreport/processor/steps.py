from dataclasses import replace

from medreport.extraction.text_extractor import TextExtractor
from medreport.jobs.models import utc_now
from medreport.llm.client import ModelClient
from medreport.logging.logger import Log
from medreport.processor.exceptions import MissingStageOutputError
from medreport.processor.pipeline import PipelineContext, PipelineStep
from medreport.reconciliation.models import FileMetadata, Timestamps
from medreport.reconciliation.reconciler import ResultReconciler
from medreport.rules.extractor import RuleExtractor


class LoadDocumentStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = context.scratch_path.read_bytes()
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for job {context.job.id}")
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, text_extractor: TextExtractor) -> None:
        self._text_extractor = text_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        extracted = self._text_extractor.extract(
            context.raw_bytes,
            force_ocr=context.job.analysis_options.ocr,
        )
        context.extracted = extracted
        Log.info(
            f"Extracted {len(extracted.text)} chars from {extracted.page_count} pages "
            f"for job {context.job.id} ({extracted.extraction_method.value})"
        )
        return context


class RuleExtractStep(PipelineStep):
    def __init__(self, rule_extractor: RuleExtractor) -> None:
        self._rule_extractor = rule_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extracted is None:
            raise MissingStageOutputError("Text must be extracted before rule extraction")
        context.baseline = self._rule_extractor.extract(context.extracted.text)
        return context


class AnalyzeStep(PipelineStep):
    def __init__(self, model_client: ModelClient) -> None:
        self._model_client = model_client

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extracted is None or context.baseline is None:
            raise MissingStageOutputError("Baseline must be extracted before analysis")
        job = context.job
        if not job.selected_provider:
            raise MissingStageOutputError(f"Job {job.id} has no selected provider")
        context.raw_result = self._model_client.analyze(
            context.extracted.text,
            context.baseline,
            job.selected_provider,
            consent_given=job.consent_given,
        )
        return context


class ReconcileStep(PipelineStep):
    def __init__(self, reconciler: ResultReconciler) -> None:
        self._reconciler = reconciler

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.raw_result is None:
            raise MissingStageOutputError("Model analysis must run before reconciliation")
        context.result = self._reconciler.merge(context.raw_result, context.baseline)
        return context


class AssembleResultStep(PipelineStep):
    """Attaches job and extraction metadata to the reconciled result."""

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.result is None or context.extracted is None:
            raise MissingStageOutputError("Result must be reconciled before assembly")
        job = context.job
        extracted = context.extracted
        source_pages = context.result.source_pages or [page.page_number for page in extracted.pages]
        if not source_pages:
            source_pages = list(range(1, extracted.page_count + 1))
        context.result = replace(
            context.result,
            source_pages=source_pages,
            timestamps=Timestamps(uploaded_at=job.uploaded_at, analyzed_at=utc_now()),
            extraction_method=extracted.extraction_method.value,
            file_metadata=FileMetadata(
                original_filename=job.original_filename,
                file_size=job.file_size,
            ),
        )
        return context
