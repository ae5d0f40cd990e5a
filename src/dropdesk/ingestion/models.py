"""Data models used by the presentation pipeline."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from dropdesk.history.models import FileDescriptor


class PresentationError(BaseModel):
    """A presented path that could not be recorded."""

    path: str
    message: str


class PresentationResult(BaseModel):
    """Aggregated outcome of recording a batch of presented paths."""

    files: List[FileDescriptor] = Field(default_factory=list)
    folders: List[FileDescriptor] = Field(default_factory=list)
    errors: List[PresentationError] = Field(default_factory=list)

    @property
    def recorded(self) -> List[FileDescriptor]:
        return [*self.files, *self.folders]

    @property
    def succeeded(self) -> bool:
        return bool(self.recorded) or not self.errors


__all__ = ["PresentationError", "PresentationResult"]
