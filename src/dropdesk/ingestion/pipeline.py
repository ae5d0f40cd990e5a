"""Record presented paths in the history."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from dropdesk.history import HistoryError, HistoryStore

from .descriptors import DescriptorBuilder
from .errors import DescriptorError
from .models import PresentationError, PresentationResult

LOGGER = logging.getLogger(__name__)


class IngestionPipeline:
    """Classify, describe and upsert each path of a presented batch."""

    def __init__(self, history: HistoryStore, builder: DescriptorBuilder | None = None) -> None:
        self.history = history
        self.builder = builder or DescriptorBuilder()

    def run(self, paths: Iterable[Path | str]) -> PresentationResult:
        """Record every path, routing directories and files separately.

        A failing path is reported in ``errors`` and does not stop the rest
        of the batch.
        """
        result = PresentationResult()
        for path in paths:
            try:
                descriptor = self.builder.build(path)
                stored = self.history.upsert(descriptor)
            except (DescriptorError, HistoryError) as exc:
                LOGGER.warning("Could not record %s: %s", path, exc)
                result.errors.append(PresentationError(path=str(path), message=str(exc)))
                continue

            if stored.is_folder:
                result.folders.append(stored)
            else:
                result.files.append(stored)
        return result

    def run_folders(self, paths: Iterable[Path | str]) -> PresentationResult:
        """Record paths that the caller already knows are folders."""
        result = PresentationResult()
        for path in paths:
            try:
                stored = self.history.upsert(self.builder.build_folder(path))
            except (DescriptorError, HistoryError) as exc:
                LOGGER.warning("Could not record folder %s: %s", path, exc)
                result.errors.append(PresentationError(path=str(path), message=str(exc)))
                continue
            result.folders.append(stored)
        return result


__all__ = ["IngestionPipeline"]
