"""Extract zone-less timestamps from filenames."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from .errors import PatternContractError, TimestampParseError

LOGGER = logging.getLogger(__name__)

CALENDAR_GROUPS = ("year", "month", "day", "hour", "minute", "second")
EPOCH_GROUP = "sse"


@dataclass(frozen=True)
class FilenamePattern:
    """A regular expression with either calendar groups or an epoch group."""

    regex: re.Pattern[str]

    @classmethod
    def compile(cls, pattern: str) -> "FilenamePattern":
        return cls(re.compile(pattern))

    @property
    def is_epoch(self) -> bool:
        return EPOCH_GROUP in self.regex.groupindex

    def declares_contract(self) -> bool:
        """Return True when the pattern names a complete capture-group set."""
        groups = self.regex.groupindex
        return self.is_epoch or all(name in groups for name in CALENDAR_GROUPS)


class FilenameMatcher:
    """Try configured patterns in order; the first match decides.

    Args:
        patterns: Ordered regular expressions.
        fallback_zone: IANA zone used for epoch values and UTC-encoded names.
        utc_markers: Filename substrings whose producers encode UTC.
    """

    def __init__(
        self,
        patterns: Iterable[str | FilenamePattern],
        fallback_zone: str,
        utc_markers: Sequence[str] = ("PXL_",),
    ) -> None:
        self.patterns = [
            item if isinstance(item, FilenamePattern) else FilenamePattern.compile(item)
            for item in patterns
        ]
        self.fallback_zone = ZoneInfo(fallback_zone)
        self.utc_markers = tuple(utc_markers)

    def match(self, filename: str) -> Optional[datetime]:
        """Return the zone-less date-time encoded in ``filename``, if any.

        Raises:
            PatternContractError: If a pattern matched without the groups it
                must provide.
            TimestampParseError: If the captured text is not a valid date-time.
        """
        for pattern in self.patterns:
            found = pattern.regex.search(filename)
            if found is None:
                continue
            captures = {name: value for name, value in found.groupdict().items() if value}
            if all(name in captures for name in CALENDAR_GROUPS):
                value = self._from_calendar(captures, filename)
            elif EPOCH_GROUP in captures:
                value = self._from_epoch(captures[EPOCH_GROUP])
            else:
                raise PatternContractError(
                    f"Pattern {pattern.regex.pattern!r} matched {filename!r} without producing "
                    "any expected capture groups."
                )
            LOGGER.info("Filename timestamp for %s: %s", filename, value.isoformat())
            return value
        return None

    def _from_calendar(self, captures: dict[str, str], filename: str) -> datetime:
        try:
            value = datetime(*(int(captures[name]) for name in CALENDAR_GROUPS))
        except ValueError as exc:
            raise TimestampParseError(
                f"Filename {filename!r} does not encode a valid date-time: {exc}"
            ) from exc
        if any(marker in filename for marker in self.utc_markers):
            value = (
                value.replace(tzinfo=timezone.utc)
                .astimezone(self.fallback_zone)
                .replace(tzinfo=None)
            )
        return value

    def _from_epoch(self, raw: str) -> datetime:
        try:
            seconds = int(raw)
            value = datetime.fromtimestamp(seconds, tz=self.fallback_zone)
        except (ValueError, OverflowError, OSError) as exc:
            raise TimestampParseError(f"Invalid seconds-since-epoch value {raw!r}: {exc}") from exc
        return value.replace(tzinfo=None)


__all__ = ["CALENDAR_GROUPS", "EPOCH_GROUP", "FilenameMatcher", "FilenamePattern"]
