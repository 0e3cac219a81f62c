from dataclasses import dataclass, field

MEDICATION_CONFIDENCE = 0.8
LAB_CONFIDENCE = 0.85
DIAGNOSIS_CONFIDENCE = 0.7
BASELINE_CONFIDENCE = 0.75


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score into [0, 1]."""
    return max(0.0, min(1.0, value))


@dataclass
class Patient:
    name: str | None = None
    dob: str | None = None
    sex: str | None = None
    id: str | None = None


@dataclass
class Medication:
    name: str | None
    dose: str | None
    frequency: str | None = None
    route: str | None = None
    duration: str | None = None
    raw_text: str = ""
    confidence: float = MEDICATION_CONFIDENCE


@dataclass
class Diagnosis:
    text: str
    icd10: str | None = None
    confidence: float = DIAGNOSIS_CONFIDENCE


@dataclass
class LabResult:
    name: str
    value: float | None
    units: str = ""
    ref_range: str | None = None
    flag: str = "normal"
    confidence: float = LAB_CONFIDENCE


@dataclass
class Vitals:
    temperature: str | None = None
    blood_pressure: str | None = None
    heart_rate: str | None = None
    respiratory_rate: str | None = None
    oxygen_saturation: str | None = None


@dataclass
class BaselineRecord:
    """Deterministic rule-based extraction of a document."""

    patient: Patient = field(default_factory=Patient)
    medications: list[Medication] = field(default_factory=list)
    diagnoses: list[Diagnosis] = field(default_factory=list)
    labs: list[LabResult] = field(default_factory=list)
    vitals: Vitals = field(default_factory=Vitals)
    confidence_overall: float = BASELINE_CONFIDENCE
