"""Repair candidates whose UTC offset is bogus or suspicious."""

from __future__ import annotations

import logging
from datetime import timezone
from typing import Iterable, List
from zoneinfo import ZoneInfo

from .models import SENTINEL_OFFSET, UTC_OFFSET, TimestampCandidate

LOGGER = logging.getLogger(__name__)


class TimezoneCorrector:
    """Rewrite sentinel offsets and shadow UTC readings in a fallback zone.

    Args:
        fallback_zone: IANA zone name used whenever no real zone is known.
    """

    def __init__(self, fallback_zone: str) -> None:
        self.fallback_zone = ZoneInfo(fallback_zone)

    def apply(self, candidates: Iterable[TimestampCandidate]) -> List[TimestampCandidate]:
        """Return a corrected copy of ``candidates``.

        Each sentinel (``-12:00``) candidate is replaced by the same wall-clock
        reading in the fallback zone and, unless it is the filesystem fallback,
        joined by a sibling that reads the wall clock as UTC (score one lower).
        Each UTC candidate is kept and joined by a sibling converted to the
        fallback zone (score one higher than the rescored original).
        """
        corrected: List[TimestampCandidate] = []
        for candidate in candidates:
            if candidate.offset == SENTINEL_OFFSET:
                corrected.extend(self._replace_sentinel(candidate))
            elif candidate.offset == UTC_OFFSET:
                corrected.extend(self._shadow_utc(candidate))
            else:
                corrected.append(candidate)
        return corrected

    def _replace_sentinel(self, candidate: TimestampCandidate) -> List[TimestampCandidate]:
        local = candidate.model_copy(
            deep=True,
            update={"instant": candidate.wall_clock.replace(tzinfo=self.fallback_zone)},
        )
        LOGGER.warning(
            "Coerced timestamp %s to %s because it had no real time zone; now %s.",
            candidate.instant.isoformat(),
            self.fallback_zone.key,
            local.instant.isoformat(),
        )
        replacements = [local]

        if not candidate.is_file_fallback:
            from_utc = candidate.model_copy(
                deep=True,
                update={
                    "instant": candidate.wall_clock.replace(tzinfo=timezone.utc).astimezone(
                        self.fallback_zone
                    ),
                    "adjustment": candidate.adjustment - 1,
                },
            )
            LOGGER.warning(
                "Also adding a copy read as UTC and shifted to %s: %s.",
                self.fallback_zone.key,
                from_utc.instant.isoformat(),
            )
            replacements.append(from_utc)
        return replacements

    def _shadow_utc(self, candidate: TimestampCandidate) -> List[TimestampCandidate]:
        shifted = candidate.model_copy(
            deep=True,
            update={
                "instant": candidate.instant.astimezone(self.fallback_zone),
                "adjustment": 1,
            },
        )
        LOGGER.warning(
            "Added a copy of UTC timestamp %s in %s because UTC is usually bogus: %s.",
            candidate.instant.isoformat(),
            self.fallback_zone.key,
            shifted.instant.isoformat(),
        )
        return [candidate, shifted]


__all__ = ["TimezoneCorrector"]
