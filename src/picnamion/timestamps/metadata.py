"""Harvest timestamp-bearing tags from grouped extractor output."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Mapping, Optional

from .errors import ConflictingOffsetError, TimestampParseError
from .store import CandidateStore

LOGGER = logging.getLogger(__name__)

DATE_MARKER = "##DATE## "
DATE_FORMAT = "##DATE## %Y-%m-%d %H:%M:%S %z"
SENTINEL_SUFFIX = " -1200"

FILE_GROUP = "File"
IGNORED_GROUPS = frozenset({"ICC_Profile"})
OFFSET_GROUP = "EXIF"
OFFSET_TAGS = ("OffsetTimeOriginal", "OffsetTimeDigitized", "OffsetTime")
_OFFSET_RE = re.compile(r"^[+-]\d\d:?\d\d$")


def harvest_offset(metadata: Mapping[str, Any]) -> Optional[str]:
    """Return the one real UTC offset recorded in the offset tags, if any.

    Offsets starting with ``-12`` are the no-zone sentinel and are skipped.
    The result drops the colon (``+0200``).

    Raises:
        ConflictingOffsetError: If two offset tags disagree.
    """
    group = metadata.get(OFFSET_GROUP)
    if not isinstance(group, Mapping):
        return None

    found: Optional[str] = None
    for tag in OFFSET_TAGS:
        value = group.get(tag)
        if not isinstance(value, str):
            continue
        if not _OFFSET_RE.match(value) or value.startswith("-12"):
            continue
        normalized = value.replace(":", "")
        if found is not None and found != normalized:
            raise ConflictingOffsetError(
                f"Offset tags disagree: {found!r} vs {normalized!r} ({OFFSET_GROUP} {tag})."
            )
        found = normalized
    return found


def parse_timestamp(value: str, real_offset: Optional[str] = None) -> datetime:
    """Parse a marked timestamp, substituting ``real_offset`` for the sentinel.

    Raises:
        TimestampParseError: If the text does not follow the marked format.
    """
    text = value
    if real_offset and text.endswith(SENTINEL_SUFFIX):
        text = text[: -len(SENTINEL_SUFFIX)] + f" {real_offset}"
    try:
        return datetime.strptime(text, DATE_FORMAT)
    except ValueError as exc:
        raise TimestampParseError(f"Unparseable timestamp {value!r}: {exc}") from exc


def collect_candidates(metadata: Mapping[str, Any]) -> CandidateStore:
    """Feed every timestamp-bearing tag of ``metadata`` into a store.

    Args:
        metadata: Mapping of group name to a mapping of tag name to value.

    Returns:
        CandidateStore: The populated store.
    """
    store = CandidateStore()
    real_offset = harvest_offset(metadata)
    LOGGER.debug("Real offset from metadata: %s", real_offset or "none")

    for group, tags in metadata.items():
        if group in IGNORED_GROUPS or not isinstance(tags, Mapping):
            continue
        for tag, value in tags.items():
            if not isinstance(value, str) or not value.startswith(DATE_MARKER):
                continue
            timestamp = parse_timestamp(value, real_offset)
            LOGGER.debug("%s %s %s", group, tag, timestamp.isoformat())
            if group == FILE_GROUP:
                store.record_file_timestamp(timestamp)
            else:
                store.record(f"{group} {tag}", timestamp)
    return store


__all__ = [
    "DATE_FORMAT",
    "DATE_MARKER",
    "OFFSET_TAGS",
    "collect_candidates",
    "harvest_offset",
    "parse_timestamp",
]
