from dataclasses import dataclass, field
from enum import Enum


class ExtractionMethod(str, Enum):
    NATIVE = "native"
    OCR = "ocr"


@dataclass(frozen=True)
class PageText:
    """Text of one page as seen by the extractor that produced it."""

    page_number: int
    text: str
    word_count: int
    confidence: float | None = None


@dataclass(frozen=True)
class ExtractedText:
    """Output of TextExtractor. `text` is always a string, possibly empty."""

    text: str
    page_count: int
    extraction_method: ExtractionMethod
    confidence: float | None = None
    pages: list[PageText] = field(default_factory=list)
