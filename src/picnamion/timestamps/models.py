"""Data models used by the timestamp reconciliation engine."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Literal, Union

from pydantic import BaseModel, Field, computed_field, field_validator

from .prefix import format_prefix
from .scoring import FILE_FALLBACK_TAG, score_tags

SENTINEL_OFFSET = timedelta(hours=-12)
UTC_OFFSET = timedelta(0)


class TimestampCandidate(BaseModel):
    """A capture time observed in metadata, with its corroborating tags.

    Attributes:
        instant: Zone-aware point in time.
        tags: Ordered, duplicate-free source tag names (``"<group> <tag>"``).
        adjustment: Offset applied on top of the tag weights by timezone
            correction; the score never drifts from the tag set otherwise.
    """

    instant: datetime
    tags: List[str] = Field(min_length=1)
    adjustment: int = 0

    @field_validator("instant")
    @classmethod
    def _require_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("candidate instants must carry a UTC offset")
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score(self) -> int:
        """Return the summed tag weight plus any correction adjustment."""
        return max(0, score_tags(self.tags) + self.adjustment)

    @property
    def wall_clock(self) -> datetime:
        """Return the zone-less date-time reading of the instant."""
        return self.instant.replace(tzinfo=None)

    @property
    def offset(self) -> timedelta:
        return self.instant.utcoffset()  # type: ignore[return-value]

    @property
    def is_file_fallback(self) -> bool:
        """Return True for the synthetic filesystem-timestamp candidate."""
        return self.tags == [FILE_FALLBACK_TAG]

    @property
    def prefix(self) -> str:
        return format_prefix(self.instant)

    def add_tag(self, tag: str) -> None:
        """Attach another source tag to this candidate."""
        if tag not in self.tags:
            self.tags.append(tag)

    def same_reading(self, instant: datetime) -> bool:
        """Return True when ``instant`` is the same moment under the same offset."""
        return self.instant == instant and self.offset == instant.utcoffset()

    def describe(self) -> str:
        return f"{self.instant.isoformat()} score={self.score} tags={', '.join(self.tags)}"


class ResolvedTimestamp(BaseModel):
    """Outcome when a single capture time could be chosen.

    Attributes:
        prefix: Canonical ``YYYY-MM-DD_HH-MM-SS--`` prefix.
        decided_at: Zone-less date-time the prefix encodes.
        source: Whether the filename or metadata reading won.
        reason: Short description of the rule that decided.
    """

    kind: Literal["resolved"] = "resolved"
    prefix: str
    decided_at: datetime
    source: Literal["filename", "metadata"]
    reason: str

    @classmethod
    def from_datetime(
        cls,
        value: datetime,
        *,
        source: Literal["filename", "metadata"],
        reason: str,
    ) -> "ResolvedTimestamp":
        return cls(
            prefix=format_prefix(value),
            decided_at=value.replace(tzinfo=None),
            source=source,
            reason=reason,
        )


class AmbiguousTimestamp(BaseModel):
    """Outcome when no capture time could be chosen safely.

    Attributes:
        candidates: Surviving metadata candidates, best score first.
        filename_timestamps: Zone-less date-times extracted from the filename.
    """

    kind: Literal["ambiguous"] = "ambiguous"
    candidates: List[TimestampCandidate] = Field(default_factory=list)
    filename_timestamps: List[datetime] = Field(default_factory=list)

    def options(self) -> list[tuple[str, str]]:
        """Return ``(label, prefix)`` pairs for every choice a human could make."""
        choices = [
            (candidate.instant.isoformat(), candidate.prefix) for candidate in self.candidates
        ]
        choices.extend(
            (value.isoformat(), format_prefix(value)) for value in self.filename_timestamps
        )
        return choices


ReconciliationResult = Union[ResolvedTimestamp, AmbiguousTimestamp]


__all__ = [
    "SENTINEL_OFFSET",
    "UTC_OFFSET",
    "TimestampCandidate",
    "ResolvedTimestamp",
    "AmbiguousTimestamp",
    "ReconciliationResult",
]
