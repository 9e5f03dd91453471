"""Timestamp reconciliation engine."""

from .correction import TimezoneCorrector
from .engine import TimestampEngine
from .errors import (
    ConfigurationDefect,
    ConflictingOffsetError,
    ExtractionError,
    MissingTimestampError,
    PatternContractError,
    PicnamionError,
    TimestampParseError,
    UnknownTagError,
)
from .filenames import FilenameMatcher, FilenamePattern
from .metadata import collect_candidates, harvest_offset, parse_timestamp
from .models import (
    AmbiguousTimestamp,
    ReconciliationResult,
    ResolvedTimestamp,
    TimestampCandidate,
)
from .prefix import format_prefix, has_prefix, parse_prefix
from .reconcile import Reconciler
from .scoring import FILE_FALLBACK_TAG, TAG_WEIGHTS, score_tags, tag_weight
from .store import CandidateStore

__all__ = [
    "AmbiguousTimestamp",
    "CandidateStore",
    "ConfigurationDefect",
    "ConflictingOffsetError",
    "ExtractionError",
    "FILE_FALLBACK_TAG",
    "FilenameMatcher",
    "FilenamePattern",
    "MissingTimestampError",
    "PatternContractError",
    "PicnamionError",
    "ReconciliationResult",
    "Reconciler",
    "ResolvedTimestamp",
    "TAG_WEIGHTS",
    "TimestampCandidate",
    "TimestampEngine",
    "TimestampParseError",
    "TimezoneCorrector",
    "UnknownTagError",
    "collect_candidates",
    "format_prefix",
    "harvest_offset",
    "has_prefix",
    "parse_prefix",
    "parse_timestamp",
    "score_tags",
    "tag_weight",
]
