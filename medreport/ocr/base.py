from abc import ABC, abstractmethod

from medreport.ocr.models import OcrResult


class BaseOcrEngine(ABC):
    """Contract for OCR engines."""

    @abstractmethod
    def recognize(self, pdf_bytes: bytes) -> OcrResult:
        """Recognize the text of every page of a PDF.

        Raises:
            OcrError: if the document cannot be rendered or recognized.
        """
