"""History store errors."""


class HistoryError(Exception):
    """Base exception for history store operations."""


class ExportError(HistoryError):
    """Raised when an export snapshot cannot be written."""
