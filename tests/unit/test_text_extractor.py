from unittest.mock import MagicMock

import pytest

from medreport.extraction.exceptions import ExtractionError
from medreport.extraction.models import ExtractionMethod
from medreport.extraction.text_extractor import TextExtractor
from medreport.ocr.exceptions import OcrError
from medreport.ocr.models import OcrPage, OcrResult
from medreport.pdf.exceptions import PdfExtractionError
from medreport.pdf.models import PdfText

LONG_TEXT = "Patient: John Doe\nDOB: 01/15/1980\nMedications: Amoxicillin 500mg TID"
OCR_RESULT = OcrResult(
    text="scanned text",
    confidence=0.87,
    pages=[OcrPage(page_number=1, text="scanned text", confidence=0.87)],
)


def _make_extractor(
    native: PdfText | Exception, ocr: OcrResult | Exception = OCR_RESULT
) -> tuple[TextExtractor, MagicMock, MagicMock]:
    pdf_extractor = MagicMock()
    ocr_engine = MagicMock()
    if isinstance(native, Exception):
        pdf_extractor.extract.side_effect = native
    else:
        pdf_extractor.extract.return_value = native
    if isinstance(ocr, Exception):
        ocr_engine.recognize.side_effect = ocr
    else:
        ocr_engine.recognize.return_value = ocr
    return TextExtractor(pdf_extractor, ocr_engine), pdf_extractor, ocr_engine


class TestNativeExtraction:
    def test_accepts_meaningful_native_text(self) -> None:
        extractor, _pdf, ocr_engine = _make_extractor(PdfText(pages=[LONG_TEXT]))

        result = extractor.extract(b"%PDF")

        assert result.extraction_method is ExtractionMethod.NATIVE
        assert result.text == LONG_TEXT
        assert result.confidence is None
        ocr_engine.recognize.assert_not_called()

    def test_reports_pages(self) -> None:
        extractor, _pdf, _ocr = _make_extractor(PdfText(pages=[LONG_TEXT, "second page"]))

        result = extractor.extract(b"%PDF")

        assert result.page_count == 2
        assert [p.page_number for p in result.pages] == [1, 2]
        assert result.pages[1].word_count == 2

    def test_threshold_is_inclusive(self) -> None:
        extractor, _pdf, ocr_engine = _make_extractor(PdfText(pages=["x" * 50]))

        result = extractor.extract(b"%PDF")

        assert result.extraction_method is ExtractionMethod.NATIVE
        ocr_engine.recognize.assert_not_called()


class TestOcrFallback:
    def test_short_native_text_falls_back_to_ocr(self) -> None:
        extractor, _pdf, ocr_engine = _make_extractor(PdfText(pages=["x" * 49]))

        result = extractor.extract(b"%PDF")

        assert result.extraction_method is ExtractionMethod.OCR
        assert result.text == "scanned text"
        assert result.confidence == pytest.approx(0.87)
        ocr_engine.recognize.assert_called_once()

    def test_whitespace_does_not_count(self) -> None:
        extractor, _pdf, _ocr = _make_extractor(PdfText(pages=[" " * 100 + "short"]))

        result = extractor.extract(b"%PDF")

        assert result.extraction_method is ExtractionMethod.OCR

    def test_native_error_falls_back_to_ocr(self) -> None:
        extractor, _pdf, _ocr = _make_extractor(PdfExtractionError("broken xref"))

        result = extractor.extract(b"%PDF")

        assert result.extraction_method is ExtractionMethod.OCR

    def test_force_ocr_skips_native(self) -> None:
        extractor, pdf_extractor, _ocr = _make_extractor(PdfText(pages=[LONG_TEXT]))

        result = extractor.extract(b"%PDF", force_ocr=True)

        assert result.extraction_method is ExtractionMethod.OCR
        pdf_extractor.extract.assert_not_called()

    def test_ocr_failure_raises_extraction_error(self) -> None:
        extractor, _pdf, _ocr = _make_extractor(PdfText(pages=[""]), OcrError("no tesseract"))

        with pytest.raises(ExtractionError, match="Failed to extract text from PDF"):
            extractor.extract(b"%PDF")

    def test_ocr_failure_after_native_error_raises(self) -> None:
        extractor, _pdf, _ocr = _make_extractor(
            PdfExtractionError("broken"), OcrError("no tesseract")
        )

        with pytest.raises(ExtractionError):
            extractor.extract(b"%PDF")

    def test_empty_ocr_output_is_empty_string(self) -> None:
        extractor, _pdf, _ocr = _make_extractor(
            PdfText(pages=[""]), OcrResult(text="", confidence=0.0, pages=[])
        )

        result = extractor.extract(b"%PDF")

        assert result.text == ""


class TestCustomThreshold:
    def test_threshold_from_constructor(self) -> None:
        pdf_extractor = MagicMock()
        pdf_extractor.extract.return_value = PdfText(pages=["tiny"])
        extractor = TextExtractor(pdf_extractor, MagicMock(), min_native_text_length=4)

        assert extractor.extract(b"%PDF").extraction_method is ExtractionMethod.NATIVE
