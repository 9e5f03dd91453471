"""Reconcile one file's metadata and filename into a rename prefix."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from .correction import TimezoneCorrector
from .filenames import FilenameMatcher, FilenamePattern
from .metadata import collect_candidates
from .models import ReconciliationResult, TimestampCandidate
from .reconcile import Reconciler

LOGGER = logging.getLogger(__name__)


class TimestampEngine:
    """Run the scoring, correction, filename and reconciliation stages.

    Args:
        fallback_zone: IANA zone used when no real zone is known.
        patterns: Ordered filename patterns.
        utc_markers: Filename substrings whose producers encode UTC.
    """

    def __init__(
        self,
        fallback_zone: str,
        patterns: Iterable[str | FilenamePattern],
        utc_markers: Sequence[str] = ("PXL_",),
    ) -> None:
        self.corrector = TimezoneCorrector(fallback_zone)
        self.matcher = FilenameMatcher(patterns, fallback_zone, utc_markers)
        self.reconciler = Reconciler()

    def candidates(self, metadata: Mapping[str, Any]) -> list[TimestampCandidate]:
        """Return corrected metadata candidates, best score first."""
        store = collect_candidates(metadata)
        corrected = self.corrector.apply(store.finalize())
        ranked = sorted(corrected, key=lambda candidate: candidate.score, reverse=True)
        for candidate in ranked:
            LOGGER.debug("Candidate %s", candidate.describe())
        return ranked

    def resolve(self, metadata: Mapping[str, Any], filename: str) -> ReconciliationResult:
        """Decide the prefix for ``filename`` given its grouped metadata.

        Args:
            metadata: Grouped extractor output for the file.
            filename: Base name of the file.

        Returns:
            ReconciliationResult: Resolved prefix or ambiguity report.
        """
        ranked = self.candidates(metadata)
        filename_timestamp = self.matcher.match(filename)
        return self.reconciler.reconcile(ranked, filename_timestamp)


__all__ = ["TimestampEngine"]
