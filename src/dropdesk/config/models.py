"""Settings models describing DropDesk preferences."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DropDeskBaseModel(BaseModel):
    """Shared configuration for DropDesk Pydantic models.

    Stored documents use camelCase keys while Python code works with
    snake_case attributes.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DropDeskSettings(DropDeskBaseModel):
    """Flat user preferences persisted in ``settings.json``.

    Unknown keys are kept so documents written by newer builds survive a
    round trip through this model.

    Attributes:
        theme: UI theme consumed by the presentation layer.
        max_history_items: Maximum number of records kept in the history.
        log_level: Verbosity of the rotating log file.
        log_max_size_mb: Size at which the log file is rotated.
        log_backup_count: Number of rotated log files to retain.
    """

    model_config = ConfigDict(extra="allow")

    theme: Literal["light", "dark", "system"] = "light"
    max_history_items: int = Field(default=100, ge=1)
    log_level: str = "WARNING"
    log_max_size_mb: int = Field(default=5, ge=1)
    log_backup_count: int = Field(default=3, ge=0)

    def to_document(self) -> dict:
        """Return the on-disk representation, camelCase keys included."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["DropDeskBaseModel", "DropDeskSettings"]
