"""Rename plan data models."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from picnamion.timestamps.models import TimestampCandidate


class RenameOperation(BaseModel):
    """Represents prefixing a file with its capture time.

    Attributes:
        source: Original file path prior to the rename.
        destination: Target path after the rename.
        prefix: Capture-time prefix added to the name.
        reasoning: Rule that decided the prefix.
        mime_type: MIME type reported by the extractor.
    """

    source: Path
    destination: Path
    prefix: str
    reasoning: Optional[str] = None
    mime_type: Optional[str] = None


class RenameOption(BaseModel):
    """One choice offered to a human for an ambiguous file."""

    label: str
    destination: Path
    command: str


class AmbiguityReport(BaseModel):
    """Everything a human needs to settle an ambiguous file by hand.

    Attributes:
        path: File left untouched.
        candidates: Metadata candidates with their tags and scores.
        filename_timestamps: Date-times taken from the filename.
        options: Rename command for every candidate and filename reading.
    """

    path: Path
    candidates: List[TimestampCandidate] = Field(default_factory=list)
    filename_timestamps: List[datetime] = Field(default_factory=list)
    options: List[RenameOption] = Field(default_factory=list)


class RenameEvent(BaseModel):
    """Record of an applied rename."""

    timestamp: datetime
    source: Path
    destination: Path
    postprocess_output: Optional[str] = None
