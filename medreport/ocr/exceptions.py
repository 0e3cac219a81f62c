class OcrError(Exception):
    """Raised when OCR cannot produce text for a document."""
