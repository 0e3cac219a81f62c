class FileStoreError(Exception):
    """Raised when an uploaded file cannot be stored or read back."""
