from abc import ABC, abstractmethod
from typing import ClassVar

from medreport.pdf.exceptions import PdfExtractionError
from medreport.pdf.models import PdfText


class BasePdfExtractor(ABC):
    """Reads the native text layer of a PDF, page by page.

    Adapters only implement `_read_pages`; error wrapping and page
    normalization are shared.
    """

    name: ClassVar[str]

    def extract(self, pdf_bytes: bytes) -> PdfText:
        """Return the text of every page, in page order.

        Raises:
            PdfExtractionError: if the document cannot be parsed, is
                password protected or has no pages.
        """
        try:
            pages = self._read_pages(pdf_bytes)
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"{self.name} extraction failed: {exc}") from exc
        if not pages:
            raise PdfExtractionError(f"{self.name} found no pages in the document")
        return PdfText(pages=[page.strip() for page in pages])

    @abstractmethod
    def _read_pages(self, pdf_bytes: bytes) -> list[str]:
        raise NotImplementedError
