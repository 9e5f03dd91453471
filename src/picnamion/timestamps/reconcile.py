"""Decide between filename and metadata capture times."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from .models import (
    AmbiguousTimestamp,
    ReconciliationResult,
    ResolvedTimestamp,
    TimestampCandidate,
)

LOGGER = logging.getLogger(__name__)

NEAR_MATCH_WINDOW = timedelta(minutes=1)
# About ten seconds past a whole hour; readings short of the hour never match.
HOUR_FRACTION_TOLERANCE = 0.003
NEARBY_ZONE_HOURS = 7
MAX_SHIFT_HOURS = 12
SCORE_DOMINANCE_FACTOR = 2


class Reconciler:
    """Pick the prefix for one file from ranked candidates and the filename."""

    def reconcile(
        self,
        candidates: Sequence[TimestampCandidate],
        filename_timestamp: Optional[datetime],
    ) -> ReconciliationResult:
        """Return the decided prefix or an ambiguity report.

        Args:
            candidates: Metadata candidates sorted by descending score.
            filename_timestamp: Zone-less date-time taken from the filename.

        Returns:
            ReconciliationResult: Resolved prefix or ambiguous outcome.
        """
        real = [candidate for candidate in candidates if not candidate.is_file_fallback]

        if filename_timestamp is None:
            LOGGER.warning("No timestamp found in the filename; falling back to metadata.")
            return self._from_metadata(real, candidates)

        pool = real or list(candidates)
        matched = self._match_filename(filename_timestamp, pool)
        if matched is not None:
            return matched

        if not real:
            LOGGER.warning(
                "No metadata timestamp other than the filesystem one; using the filename timestamp."
            )
            return ResolvedTimestamp.from_datetime(
                filename_timestamp, source="filename", reason="filename only"
            )

        return AmbiguousTimestamp(candidates=real, filename_timestamps=[filename_timestamp])

    # Filename tiers ---------------------------------------------------

    def _match_filename(
        self, value: datetime, pool: List[TimestampCandidate]
    ) -> Optional[ResolvedTimestamp]:
        for candidate in pool:
            if value == candidate.wall_clock:
                LOGGER.info(
                    "Exact match between filename timestamp %s and metadata timestamp %s.",
                    value.isoformat(),
                    candidate.instant.isoformat(),
                )
                return ResolvedTimestamp.from_datetime(
                    value, source="filename", reason="exact match"
                )

        for candidate in pool:
            delta = abs(value - candidate.wall_clock)
            if delta < NEAR_MATCH_WINDOW:
                LOGGER.info(
                    "Close match between filename timestamp %s and metadata timestamp %s "
                    "(%s apart).",
                    value.isoformat(),
                    candidate.instant.isoformat(),
                    delta,
                )
                return ResolvedTimestamp.from_datetime(
                    value, source="filename", reason="near match"
                )

        for candidate in pool:
            hours = abs(value - candidate.wall_clock).total_seconds() / 3600
            whole = math.floor(hours)
            if hours - whole > HOUR_FRACTION_TOLERANCE:
                continue
            if hours < NEARBY_ZONE_HOURS:
                LOGGER.warning(
                    "Filename timestamp %s is %d hours off metadata timestamp %s; assuming a "
                    "nearby time zone and keeping the filename value.",
                    value.isoformat(),
                    whole,
                    candidate.instant.isoformat(),
                )
                return ResolvedTimestamp.from_datetime(
                    value, source="filename", reason=f"{whole}h zone shift"
                )
            if hours <= MAX_SHIFT_HOURS:
                LOGGER.warning(
                    "Filename timestamp %s is %d hours off metadata timestamp %s; assuming the "
                    "filename is UTC or similar and using the metadata value.",
                    value.isoformat(),
                    whole,
                    candidate.instant.isoformat(),
                )
                return ResolvedTimestamp.from_datetime(
                    candidate.wall_clock, source="metadata", reason=f"{whole}h filename shift"
                )
            LOGGER.info(
                "Filename timestamp %s is %d hours off metadata timestamp %s; too far to be a "
                "time zone shift.",
                value.isoformat(),
                whole,
                candidate.instant.isoformat(),
            )
        return None

    # Metadata-only fallback -------------------------------------------

    def _from_metadata(
        self,
        real: List[TimestampCandidate],
        candidates: Sequence[TimestampCandidate],
    ) -> ReconciliationResult:
        if not real:
            fallback = candidates[0]
            LOGGER.warning(
                "No metadata timestamps; taking the earliest filesystem timestamp %s.",
                fallback.instant.isoformat(),
            )
            return ResolvedTimestamp.from_datetime(
                fallback.wall_clock, source="metadata", reason="filesystem timestamp"
            )

        if len(real) == 1:
            return ResolvedTimestamp.from_datetime(
                real[0].wall_clock, source="metadata", reason="single metadata timestamp"
            )

        first, second = real[0], real[1]
        if first.score >= second.score * SCORE_DOMINANCE_FACTOR:
            LOGGER.warning(
                "Picking best timestamp by score: %s over %s.",
                first.describe(),
                second.describe(),
            )
            return ResolvedTimestamp.from_datetime(
                first.wall_clock, source="metadata", reason="dominant score"
            )

        LOGGER.warning(
            "Too many plausible timestamps and not enough score difference between %s and %s.",
            first.describe(),
            second.describe(),
        )
        return AmbiguousTimestamp(candidates=real)


__all__ = [
    "HOUR_FRACTION_TOLERANCE",
    "MAX_SHIFT_HOURS",
    "NEARBY_ZONE_HOURS",
    "NEAR_MATCH_WINDOW",
    "Reconciler",
]
