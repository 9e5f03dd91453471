"""Trust weights for timestamp-bearing metadata tags."""

from __future__ import annotations

from typing import Iterable, Mapping

from .errors import UnknownTagError

FILE_FALLBACK_TAG = "File Earliest"

# Closed table: every tag the extractor can emit must be listed here. Tags
# carrying only a date or only a time weigh zero.
TAG_WEIGHTS: Mapping[str, int] = {
    "Composite SubSecDateTimeOriginal": 5,
    "Composite SubSecCreateDate": 5,
    "Composite SubSecModifyDate": 3,
    "Composite DateTimeCreated": 5,
    "Composite DigitalCreationDateTime": 5,
    "Composite GPSDateTime": 3,
    "EXIF DateTimeOriginal": 5,
    "EXIF CreateDate": 3,
    "EXIF ModifyDate": 3,
    "XMP GPSDateTime": 3,
    "XMP CreationDate": 3,
    "XMP CreateDate": 3,
    "XMP DateCreated": 3,
    "XMP ModifyDate": 3,
    "XMP HistoryWhen": 1,
    "XMP MetadataDate": 1,
    "ASF CreationDate": 3,
    "QuickTime DateTimeOriginal": 3,
    "QuickTime ContentCreateDate": 3,
    "QuickTime CreationDate": 3,
    "QuickTime CreationDate-und-US": 3,
    "QuickTime CreateDate": 3,
    "QuickTime MediaCreateDate": 3,
    "QuickTime MediaModifyDate": 1,
    "QuickTime ModifyDate": 1,
    "QuickTime TrackCreateDate": 1,
    "QuickTime TrackModifyDate": 1,
    "RIFF DateTimeOriginal": 1,
    "PNG ModifyDate": 1,
    "IPTC DateCreated": 0,
    "IPTC TimeCreated": 0,
    "IPTC DigitalCreationDate": 0,
    "IPTC DigitalCreationTime": 0,
    FILE_FALLBACK_TAG: 1,
}


def tag_weight(tag: str) -> int:
    """Return the trust weight for a fully-qualified tag name.

    Raises:
        UnknownTagError: If the tag is not in the scoring table.
    """
    try:
        return TAG_WEIGHTS[tag]
    except KeyError:
        raise UnknownTagError(tag) from None


def score_tags(tags: Iterable[str]) -> int:
    """Return the summed weight of all tags."""
    return sum(tag_weight(tag) for tag in tags)


__all__ = ["FILE_FALLBACK_TAG", "TAG_WEIGHTS", "score_tags", "tag_weight"]
