"""Native-first text extraction with OCR fallback."""

from medreport.extraction.exceptions import ExtractionError
from medreport.extraction.models import ExtractedText, ExtractionMethod, PageText
from medreport.logging.logger import Log
from medreport.ocr.base import BaseOcrEngine
from medreport.pdf.base import BasePdfExtractor

MIN_NATIVE_TEXT_LENGTH = 50


class TextExtractor:
    """Turns PDF bytes into plain text, preferring the native text layer.

    Native text is accepted when its stripped length reaches
    `min_native_text_length`; shorter output (typically a scanned document)
    and native parse errors both fall back to OCR. OCR failure is terminal.
    """

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        ocr_engine: BaseOcrEngine,
        min_native_text_length: int = MIN_NATIVE_TEXT_LENGTH,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._ocr_engine = ocr_engine
        self._min_native_text_length = min_native_text_length

    def extract(self, pdf_bytes: bytes, force_ocr: bool = False) -> ExtractedText:
        if force_ocr:
            Log.info("OCR forced by analysis options")
            return self._extract_with_ocr(pdf_bytes)

        try:
            native = self._extract_native(pdf_bytes)
        except Exception as exc:
            Log.warning(f"Native text extraction failed, trying OCR: {exc}")
            return self._extract_with_ocr(pdf_bytes)

        if self.is_meaningful(native.text):
            Log.info(f"Native text extraction accepted ({len(native.text)} chars)")
            return native

        Log.info(
            f"Native text extraction yielded {len(native.text.strip())} chars, trying OCR"
        )
        return self._extract_with_ocr(pdf_bytes)

    def is_meaningful(self, text: str) -> bool:
        return len(text.strip()) >= self._min_native_text_length

    def _extract_native(self, pdf_bytes: bytes) -> ExtractedText:
        pdf_text = self._pdf_extractor.extract(pdf_bytes)
        pages = [
            PageText(page_number=number, text=text, word_count=len(text.split()))
            for number, text in enumerate(pdf_text.pages, start=1)
        ]
        return ExtractedText(
            text=pdf_text.text,
            page_count=pdf_text.page_count,
            extraction_method=ExtractionMethod.NATIVE,
            pages=pages,
        )

    def _extract_with_ocr(self, pdf_bytes: bytes) -> ExtractedText:
        try:
            result = self._ocr_engine.recognize(pdf_bytes)
        except Exception as exc:
            raise ExtractionError(f"Failed to extract text from PDF: {exc}") from exc

        pages = [
            PageText(
                page_number=page.page_number,
                text=page.text,
                word_count=len(page.text.split()),
                confidence=page.confidence,
            )
            for page in result.pages
        ]
        return ExtractedText(
            text=result.text or "",
            page_count=len(pages),
            extraction_method=ExtractionMethod.OCR,
            confidence=result.confidence,
            pages=pages,
        )
