class PdfExtractionError(Exception):
    """Raised when the native text layer of a PDF cannot be read."""
