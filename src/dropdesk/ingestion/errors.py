"""Ingestion errors."""


class DescriptorError(Exception):
    """Raised when a presented path cannot be described."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message
