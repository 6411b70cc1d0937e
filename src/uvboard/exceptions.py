"""Custom exceptions for uvboard."""

from pathlib import Path


class UvboardError(Exception):
    """Base exception for all uvboard errors."""

    pass


class DocumentLoadError(UvboardError):
    """Raised when repository documents cannot be collected."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
