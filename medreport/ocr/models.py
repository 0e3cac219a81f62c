from dataclasses import dataclass, field


@dataclass(frozen=True)
class OcrPage:
    """Recognized text of a single rendered page."""

    page_number: int
    text: str
    confidence: float


@dataclass(frozen=True)
class OcrResult:
    """Output of an OCR engine. Confidence is the mean word confidence in [0, 1]."""

    text: str
    confidence: float
    pages: list[OcrPage] = field(default_factory=list)
