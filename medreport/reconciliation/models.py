from dataclasses import dataclass, field

from medreport.rules.models import Diagnosis, LabResult, Medication, Patient, Vitals

URGENT = "urgent"
NON_URGENT = "non-urgent"


@dataclass
class Recommendation:
    text: str
    urgency: str = NON_URGENT


@dataclass
class Timestamps:
    uploaded_at: str | None = None
    analyzed_at: str | None = None


@dataclass
class FileMetadata:
    original_filename: str | None = None
    file_size: int | None = None


@dataclass
class AnalysisResult:
    """Final, always well-formed analysis attached to a completed job."""

    patient: Patient = field(default_factory=Patient)
    medications: list[Medication] = field(default_factory=list)
    diagnoses: list[Diagnosis] = field(default_factory=list)
    labs: list[LabResult] = field(default_factory=list)
    vitals: Vitals = field(default_factory=Vitals)
    impression: str = ""
    recommendations: list[Recommendation] = field(default_factory=list)
    confidence_overall: float = 0.5
    source_pages: list[int] = field(default_factory=list)
    timestamps: Timestamps = field(default_factory=Timestamps)
    notes: list[str] = field(default_factory=list)
    patient_summary: str = ""
    llm_provider: str = ""
    llm_model: str = ""
    extraction_method: str = ""
    file_metadata: FileMetadata = field(default_factory=FileMetadata)
