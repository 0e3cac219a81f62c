from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from medreport.extraction.models import ExtractedText
from medreport.jobs.models import Job
from medreport.llm.models import RawLLMResult
from medreport.reconciliation.models import AnalysisResult
from medreport.rules.models import BaselineRecord


@dataclass(slots=True)
class PipelineContext:
    job: Job
    scratch_path: Path
    raw_bytes: bytes = b""
    extracted: ExtractedText | None = None
    baseline: BaselineRecord | None = None
    raw_result: RawLLMResult | None = None
    result: AnalysisResult | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
