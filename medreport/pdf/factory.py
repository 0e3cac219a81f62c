from medreport.config.settings import Settings
from medreport.pdf.base import BasePdfExtractor
from medreport.pdf.pdfplumber_adapter import PdfPlumberAdapter
from medreport.pdf.pymupdf_adapter import PyMuPdfAdapter

_ENGINES: dict[str, type[BasePdfExtractor]] = {
    adapter.name: adapter for adapter in (PdfPlumberAdapter, PyMuPdfAdapter)
}
_ALIASES = {"fitz": PyMuPdfAdapter.name}


class PdfExtractorFactory:
    """Picks the native text-layer reader named by `settings.pdf_engine`."""

    @staticmethod
    def engines() -> list[str]:
        return sorted(_ENGINES)

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        requested = settings.pdf_engine.strip().lower()
        engine = _ALIASES.get(requested, requested)
        if engine not in _ENGINES:
            raise ValueError(
                f"Unknown PDF engine '{settings.pdf_engine}'. Choose from: {cls.engines()}"
            )
        return _ENGINES[engine]()
