"""Tests for filename/metadata reconciliation."""

from datetime import datetime, timedelta, timezone

from picnamion.timestamps import (
    FILE_FALLBACK_TAG,
    AmbiguousTimestamp,
    Reconciler,
    ResolvedTimestamp,
    TimestampCandidate,
)

PDT = timezone(timedelta(hours=-7))
FILENAME_TS = datetime(2023, 6, 1, 14, 22, 5)


def _candidate(value: datetime, *tags: str) -> TimestampCandidate:
    return TimestampCandidate(instant=value.replace(tzinfo=PDT), tags=list(tags))


def _resolved(result) -> ResolvedTimestamp:
    assert isinstance(result, ResolvedTimestamp)
    return result


def test_exact_match_wins_over_higher_scored_shift() -> None:
    shifted = _candidate(datetime(2023, 6, 1, 22, 22, 5), "EXIF DateTimeOriginal")
    exact = _candidate(FILENAME_TS, "QuickTime ModifyDate")

    result = _resolved(Reconciler().reconcile([shifted, exact], FILENAME_TS))

    assert result.prefix == "2023-06-01_14-22-05--"
    assert result.source == "filename"
    assert result.reason == "exact match"


def test_near_match_keeps_filename_value() -> None:
    candidate = _candidate(datetime(2023, 6, 1, 14, 22, 40), "EXIF DateTimeOriginal")

    result = _resolved(Reconciler().reconcile([candidate], FILENAME_TS))

    assert result.prefix == "2023-06-01_14-22-05--"
    assert result.reason == "near match"


def test_small_whole_hour_shift_keeps_filename_value() -> None:
    candidate = _candidate(datetime(2023, 6, 1, 15, 22, 5), "EXIF DateTimeOriginal")

    result = _resolved(Reconciler().reconcile([candidate], FILENAME_TS))

    assert result.prefix == "2023-06-01_14-22-05--"
    assert result.source == "filename"
    assert result.reason == "1h zone shift"


def test_large_whole_hour_shift_uses_metadata_value() -> None:
    candidate = _candidate(datetime(2023, 6, 1, 22, 22, 5), "EXIF DateTimeOriginal")

    result = _resolved(Reconciler().reconcile([candidate], FILENAME_TS))

    assert result.prefix == "2023-06-01_22-22-05--"
    assert result.source == "metadata"
    assert result.reason == "8h filename shift"


def test_shift_beyond_twelve_hours_is_ambiguous() -> None:
    candidate = _candidate(datetime(2023, 6, 2, 3, 22, 5), "EXIF DateTimeOriginal")

    result = Reconciler().reconcile([candidate], FILENAME_TS)

    assert isinstance(result, AmbiguousTimestamp)
    assert result.candidates == [candidate]
    assert result.filename_timestamps == [FILENAME_TS]


def test_whole_hour_tolerance_is_about_ten_seconds() -> None:
    within = _candidate(datetime(2023, 6, 1, 15, 22, 12), "EXIF DateTimeOriginal")
    outside = _candidate(datetime(2023, 6, 1, 15, 22, 30), "EXIF DateTimeOriginal")

    assert _resolved(Reconciler().reconcile([within], FILENAME_TS)).reason == "1h zone shift"
    assert isinstance(Reconciler().reconcile([outside], FILENAME_TS), AmbiguousTimestamp)


def test_gap_just_under_a_whole_hour_is_not_a_shift() -> None:
    short = _candidate(datetime(2023, 6, 1, 15, 21, 58), "EXIF DateTimeOriginal")
    shorter = _candidate(datetime(2023, 6, 1, 15, 22, 0), "EXIF DateTimeOriginal")

    assert isinstance(Reconciler().reconcile([short], FILENAME_TS), AmbiguousTimestamp)
    assert isinstance(Reconciler().reconcile([shorter], FILENAME_TS), AmbiguousTimestamp)


def test_twelve_hour_bound_uses_fractional_hours() -> None:
    exact = _candidate(datetime(2023, 6, 2, 2, 22, 5), "EXIF DateTimeOriginal")
    past = _candidate(datetime(2023, 6, 2, 2, 22, 10), "EXIF DateTimeOriginal")

    assert _resolved(Reconciler().reconcile([exact], FILENAME_TS)).reason == "12h filename shift"
    assert isinstance(Reconciler().reconcile([past], FILENAME_TS), AmbiguousTimestamp)


def test_shift_tier_follows_score_order() -> None:
    best = _candidate(datetime(2023, 6, 1, 23, 22, 5), "EXIF DateTimeOriginal")
    other = _candidate(datetime(2023, 6, 1, 15, 22, 5), "EXIF CreateDate")

    result = _resolved(Reconciler().reconcile([best, other], FILENAME_TS))

    assert result.prefix == "2023-06-01_23-22-05--"
    assert result.reason == "9h filename shift"


def test_without_filename_dominant_score_resolves() -> None:
    best = _candidate(
        datetime(2023, 6, 1, 9, 0), "EXIF DateTimeOriginal", "Composite SubSecDateTimeOriginal"
    )
    other = _candidate(datetime(2023, 6, 1, 9, 30), "EXIF CreateDate", "QuickTime ModifyDate")
    assert (best.score, other.score) == (10, 4)

    result = _resolved(Reconciler().reconcile([best, other], None))

    assert result.prefix == "2023-06-01_09-00-00--"
    assert result.source == "metadata"
    assert result.reason == "dominant score"


def test_without_filename_close_scores_are_ambiguous() -> None:
    best = _candidate(
        datetime(2023, 6, 1, 9, 0), "EXIF DateTimeOriginal", "Composite SubSecDateTimeOriginal"
    )
    other = _candidate(datetime(2023, 6, 1, 9, 30), "EXIF CreateDate", "XMP CreateDate")
    assert (best.score, other.score) == (10, 6)

    result = Reconciler().reconcile([best, other], None)

    assert isinstance(result, AmbiguousTimestamp)
    assert result.candidates == [best, other]
    assert result.filename_timestamps == []


def test_without_filename_single_candidate_resolves() -> None:
    only = _candidate(datetime(2023, 6, 1, 9, 0), "XMP HistoryWhen")

    result = _resolved(Reconciler().reconcile([only], None))

    assert result.prefix == "2023-06-01_09-00-00--"
    assert result.reason == "single metadata timestamp"


def test_filesystem_fallback_used_when_nothing_else_exists() -> None:
    fallback = _candidate(datetime(2023, 6, 1, 9, 0), FILE_FALLBACK_TAG)

    result = _resolved(Reconciler().reconcile([fallback], None))

    assert result.prefix == "2023-06-01_09-00-00--"
    assert result.reason == "filesystem timestamp"


def test_filename_wins_over_unmatched_filesystem_fallback() -> None:
    fallback = _candidate(datetime(2022, 1, 1, 9, 0), FILE_FALLBACK_TAG)

    result = _resolved(Reconciler().reconcile([fallback], FILENAME_TS))

    assert result.prefix == "2023-06-01_14-22-05--"
    assert result.reason == "filename only"


def test_filesystem_fallback_can_confirm_filename() -> None:
    fallback = _candidate(datetime(2023, 6, 1, 15, 22, 5), FILE_FALLBACK_TAG)

    result = _resolved(Reconciler().reconcile([fallback], FILENAME_TS))

    assert result.reason == "1h zone shift"


def test_filesystem_fallback_ignored_once_metadata_exists() -> None:
    real = _candidate(datetime(2021, 3, 1, 9, 0), "EXIF DateTimeOriginal")
    fallback = _candidate(FILENAME_TS, FILE_FALLBACK_TAG)

    result = Reconciler().reconcile([real, fallback], FILENAME_TS)

    assert isinstance(result, AmbiguousTimestamp)
    assert result.candidates == [real]


def test_ambiguity_options_list_every_choice() -> None:
    candidate = _candidate(datetime(2023, 6, 2, 3, 22, 5), "EXIF DateTimeOriginal")

    result = Reconciler().reconcile([candidate], FILENAME_TS)

    assert isinstance(result, AmbiguousTimestamp)
    assert [prefix for _, prefix in result.options()] == [
        "2023-06-02_03-22-05--",
        "2023-06-01_14-22-05--",
    ]
