import pymupdf

from medreport.pdf.base import BasePdfExtractor
from medreport.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    name = "pymupdf"

    def _read_pages(self, pdf_bytes: bytes) -> list[str]:
        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            if doc.needs_pass:
                raise PdfExtractionError("PDF is password protected")
            return [page.get_text() for page in doc]
