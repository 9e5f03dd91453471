"""Accumulate timestamp candidates for one file."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from .errors import MissingTimestampError
from .models import SENTINEL_OFFSET, TimestampCandidate
from .scoring import FILE_FALLBACK_TAG, tag_weight

LOGGER = logging.getLogger(__name__)

MAX_MERGE_HOURS = 12
_HOUR = timedelta(hours=1)


class CandidateStore:
    """Collect candidates, folding hour-shifted readings of one moment together.

    A store is scoped to a single file and is not reused.
    """

    def __init__(self) -> None:
        self._candidates: List[TimestampCandidate] = []
        self._file_timestamp: Optional[datetime] = None

    @property
    def candidates(self) -> List[TimestampCandidate]:
        return list(self._candidates)

    @property
    def file_timestamp(self) -> Optional[datetime]:
        """Return the earliest filesystem timestamp seen so far."""
        return self._file_timestamp

    def record(self, tag: str, instant: datetime) -> TimestampCandidate:
        """Record that ``tag`` reported ``instant``.

        Args:
            tag: Fully-qualified tag name.
            instant: Zone-aware timestamp the tag carried.

        Returns:
            TimestampCandidate: The candidate now holding the tag.

        Raises:
            UnknownTagError: If the tag is missing from the scoring table.
        """
        new_weight = tag_weight(tag)

        for candidate in self._candidates:
            if candidate.same_reading(instant):
                candidate.add_tag(tag)
                return candidate

        target = self._merge_target(instant)
        if target is None:
            candidate = TimestampCandidate(instant=instant, tags=[tag])
            self._candidates.append(candidate)
            return candidate

        kept = self._preferred_instant(target, instant, new_weight)
        LOGGER.warning(
            "Timestamps %s and %s are a whole number of hours apart and probably the same "
            "moment; keeping %s for tag %s.",
            target.instant.isoformat(),
            instant.isoformat(),
            kept.isoformat(),
            tag,
        )
        target.instant = kept
        target.add_tag(tag)
        return target

    def record_file_timestamp(self, instant: datetime) -> None:
        """Keep ``instant`` if it is the earliest filesystem timestamp so far.

        Filesystem times drift later, rarely earlier, than the real capture.
        """
        if self._file_timestamp is None or instant < self._file_timestamp:
            self._file_timestamp = instant

    def finalize(self) -> List[TimestampCandidate]:
        """Return candidates ordered by descending score.

        When no metadata tag produced a timestamp, a synthetic candidate is
        built from the earliest filesystem timestamp.

        Raises:
            MissingTimestampError: If neither metadata nor filesystem
                timestamps were recorded.
        """
        if not self._candidates:
            if self._file_timestamp is None:
                raise MissingTimestampError("No metadata or filesystem timestamps were found.")
            self._candidates.append(
                TimestampCandidate(instant=self._file_timestamp, tags=[FILE_FALLBACK_TAG])
            )
        return sorted(self._candidates, key=lambda candidate: candidate.score, reverse=True)

    # Internal helpers -------------------------------------------------

    def _merge_target(self, instant: datetime) -> Optional[TimestampCandidate]:
        for candidate in self._candidates:
            delta = abs(candidate.instant - instant)
            if delta % _HOUR == timedelta(0) and delta <= MAX_MERGE_HOURS * _HOUR:
                return candidate
        return None

    def _preferred_instant(
        self, target: TimestampCandidate, instant: datetime, new_weight: int
    ) -> datetime:
        if new_weight > target.score:
            return instant
        if target.score > new_weight:
            return target.instant
        if instant.utcoffset() == SENTINEL_OFFSET:
            return target.instant
        return instant


__all__ = ["CandidateStore", "MAX_MERGE_HOURS"]
