"""Ingestion data models."""

from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

from picnamion.organization.models import AmbiguityReport, RenameEvent, RenameOperation


class SkippedFile(BaseModel):
    """A file left alone because it is not media the engine handles."""

    path: Path
    reason: str


class BatchResult(BaseModel):
    """Aggregated outcome of one batch of files.

    Attributes:
        resolved: Rename operations decided (applied when moving).
        ambiguous: Files needing a human decision.
        skipped: Non-media inputs.
        errors: Per-file recoverable failures.
        events: Renames actually applied, in order.
        moved: Whether renames were applied.
    """

    resolved: List[RenameOperation] = Field(default_factory=list)
    ambiguous: List[AmbiguityReport] = Field(default_factory=list)
    skipped: List[SkippedFile] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    events: List[RenameEvent] = Field(default_factory=list)
    moved: bool = False

    def counts(self) -> dict[str, int]:
        return {
            "resolved": len(self.resolved),
            "ambiguous": len(self.ambiguous),
            "skipped": len(self.skipped),
            "errors": len(self.errors),
        }


__all__ = ["BatchResult", "SkippedFile"]
