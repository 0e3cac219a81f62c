import io

import pdfplumber
from pdfminer.pdfdocument import PDFPasswordIncorrect

from medreport.pdf.base import BasePdfExtractor
from medreport.pdf.exceptions import PdfExtractionError


def _is_password_error(exc: Exception) -> bool:
    # pdfplumber re-raises pdfminer errors wrapped in PdfminerException.
    return isinstance(exc, PDFPasswordIncorrect) or any(
        isinstance(arg, PDFPasswordIncorrect) for arg in exc.args
    )


class PdfPlumberAdapter(BasePdfExtractor):
    name = "pdfplumber"

    def _read_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            if _is_password_error(exc):
                raise PdfExtractionError("PDF is password protected") from exc
            raise
