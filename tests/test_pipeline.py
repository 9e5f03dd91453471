"""Tests for the rename pipeline."""

import sys
from pathlib import Path
from typing import Any, Dict

import pytest

from picnamion.config.models import DEFAULT_FILENAME_PATTERNS
from picnamion.ingestion import RenamePipeline
from picnamion.organization import RenameExecutor
from picnamion.timestamps import ConflictingOffsetError, TimestampEngine, UnknownTagError


class FakeExtractor:
    """Serve canned metadata keyed by file name."""

    def __init__(self, metadata: Dict[str, Dict[str, Any]]) -> None:
        self.metadata = metadata
        self.calls: list[Path] = []

    def extract(self, path: Path) -> Dict[str, Any]:
        self.calls.append(path)
        return self.metadata[path.name]


def _image(**exif: str) -> Dict[str, Any]:
    return {"File": {"MIMEType": "image/jpeg"}, "EXIF": dict(exif)}


def _pipeline(metadata: Dict[str, Dict[str, Any]], **kwargs: Any) -> RenamePipeline:
    engine = TimestampEngine("America/Los_Angeles", DEFAULT_FILENAME_PATTERNS)
    return RenamePipeline(engine, FakeExtractor(metadata), **kwargs)


def _touch(directory: Path, name: str) -> Path:
    path = directory / name
    path.write_bytes(b"\xff\xd8")
    return path


def test_dry_run_plans_without_renaming(tmp_path: Path) -> None:
    photo = _touch(tmp_path, "IMG_20230601_142205.jpg")
    pipeline = _pipeline(
        {photo.name: _image(DateTimeOriginal="##DATE## 2023-06-01 14:22:05 -1200")}
    )

    result = pipeline.run([photo])

    assert result.counts() == {"resolved": 1, "ambiguous": 0, "skipped": 0, "errors": 0}
    operation = result.resolved[0]
    assert operation.destination == tmp_path / "2023-06-01_14-22-05--IMG_20230601_142205.jpg"
    assert operation.reasoning == "filename: exact match"
    assert operation.mime_type == "image/jpeg"
    assert photo.exists()
    assert result.moved is False
    assert result.events == []


def test_move_applies_rename(tmp_path: Path) -> None:
    photo = _touch(tmp_path, "IMG_20230601_142205.jpg")
    pipeline = _pipeline(
        {photo.name: _image(DateTimeOriginal="##DATE## 2023-06-01 14:22:05 -1200")}
    )

    result = pipeline.run([photo], move=True)

    assert not photo.exists()
    renamed = tmp_path / "2023-06-01_14-22-05--IMG_20230601_142205.jpg"
    assert renamed.exists()
    assert result.moved is True
    (event,) = result.events
    assert event.source == photo
    assert event.destination == renamed
    assert event.postprocess_output is None


def test_ambiguous_file_is_left_alone(tmp_path: Path) -> None:
    photo = _touch(tmp_path, "holiday.jpg")
    pipeline = _pipeline(
        {photo.name: _image(DateTimeOriginal="##DATE## 2023-06-01 14:22:05 -1200")}
    )

    result = pipeline.run([photo], move=True)

    assert photo.exists()
    assert result.resolved == []
    (report,) = result.ambiguous
    assert report.path == photo
    assert [option.destination.name for option in report.options] == [
        "2023-06-01_14-22-05--holiday.jpg",
        "2023-06-01_07-22-05--holiday.jpg",
    ]
    assert report.options[0].command.startswith("mv ")
    assert report.options[0].command.endswith("2023-06-01_14-22-05--holiday.jpg")


def test_non_media_files_are_skipped(tmp_path: Path) -> None:
    notes = _touch(tmp_path, "notes.txt")
    pipeline = _pipeline({notes.name: {"File": {"MIMEType": "text/plain"}}})

    result = pipeline.run([notes], move=True)

    assert notes.exists()
    assert result.skipped[0].path == notes
    assert "text/plain" in result.skipped[0].reason


def test_per_file_errors_do_not_stop_the_batch(tmp_path: Path) -> None:
    broken = _touch(tmp_path, "broken.jpg")
    good = _touch(tmp_path, "IMG_20230601_142205.jpg")
    pipeline = _pipeline(
        {
            broken.name: _image(DateTimeOriginal="##DATE## not a date"),
            good.name: _image(DateTimeOriginal="##DATE## 2023-06-01 14:22:05 -1200"),
        }
    )

    result = pipeline.run([broken, good])

    assert len(result.errors) == 1
    assert result.errors[0].startswith(str(broken))
    assert len(result.resolved) == 1


def test_unknown_tag_aborts_by_default(tmp_path: Path) -> None:
    photo = _touch(tmp_path, "photo.jpg")
    pipeline = _pipeline({photo.name: _image(Mystery="##DATE## 2023-06-01 14:22:05 +0000")})

    with pytest.raises(UnknownTagError):
        pipeline.run([photo])


def test_unknown_tag_can_be_skipped(tmp_path: Path) -> None:
    photo = _touch(tmp_path, "photo.jpg")
    pipeline = _pipeline(
        {photo.name: _image(Mystery="##DATE## 2023-06-01 14:22:05 +0000")},
        unknown_tag_policy="skip",
    )

    result = pipeline.run([photo])

    assert len(result.errors) == 1
    assert "EXIF Mystery" in result.errors[0]


def test_conflicting_offsets_stop_the_batch(tmp_path: Path) -> None:
    photo = _touch(tmp_path, "photo.jpg")
    pipeline = _pipeline(
        {
            photo.name: _image(
                DateTimeOriginal="##DATE## 2023-06-01 14:22:05 -1200",
                OffsetTime="+01:00",
                OffsetTimeOriginal="+02:00",
            )
        },
        unknown_tag_policy="skip",
    )

    with pytest.raises(ConflictingOffsetError):
        pipeline.run([photo])


def test_occupied_destination_is_reported(tmp_path: Path) -> None:
    photo = _touch(tmp_path, "IMG_20230601_142205.jpg")
    _touch(tmp_path, "2023-06-01_14-22-05--IMG_20230601_142205.jpg")
    pipeline = _pipeline(
        {photo.name: _image(DateTimeOriginal="##DATE## 2023-06-01 14:22:05 -1200")}
    )

    result = pipeline.run([photo], move=True)

    assert photo.exists()
    assert len(result.errors) == 1
    assert "already exists" in result.errors[0]


def test_videos_are_post_processed_after_rename(tmp_path: Path) -> None:
    video = _touch(tmp_path, "VID_20230601_142205.mp4")
    marker = tmp_path / "postprocessed.txt"
    command = [
        sys.executable,
        "-c",
        f"import sys, pathlib; pathlib.Path({str(marker)!r}).write_text(sys.argv[1])",
    ]
    pipeline = _pipeline(
        {
            video.name: {
                "File": {"MIMEType": "video/mp4"},
                "QuickTime": {"CreateDate": "##DATE## 2023-06-01 21:22:05 +0000"},
            }
        },
        executor=RenameExecutor(video_command=command),
    )

    result = pipeline.run([video], move=True)

    renamed = tmp_path / "2023-06-01_14-22-05--VID_20230601_142205.mp4"
    assert result.counts()["resolved"] == 1
    assert renamed.exists()
    assert marker.read_text() == str(renamed)
    (event,) = result.events
    assert event.destination == renamed
    assert event.postprocess_output == ""


def test_failing_post_process_is_recorded(tmp_path: Path) -> None:
    video = _touch(tmp_path, "VID_20230601_142205.mp4")
    pipeline = _pipeline(
        {
            video.name: {
                "File": {"MIMEType": "video/mp4"},
                "QuickTime": {"CreateDate": "##DATE## 2023-06-01 21:22:05 +0000"},
            }
        },
        executor=RenameExecutor(video_command=[sys.executable, "-c", "raise SystemExit(3)"]),
    )

    result = pipeline.run([video], move=True)

    assert len(result.errors) == 1
    assert (tmp_path / "2023-06-01_14-22-05--VID_20230601_142205.mp4").exists()
