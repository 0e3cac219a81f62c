class ExtractionError(Exception):
    """Raised when neither the native text layer nor OCR yields text."""
