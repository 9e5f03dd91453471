"""Tests for media discovery."""

from pathlib import Path

from picnamion.ingestion import MediaScanner


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def test_scanner_walks_directories_in_order(tmp_path: Path) -> None:
    _touch(tmp_path / "b.jpg")
    _touch(tmp_path / "a.jpg")
    _touch(tmp_path / "nested" / "c.mp4")

    found = list(MediaScanner().scan([tmp_path]))

    assert [path.relative_to(tmp_path).as_posix() for path in found] == [
        "a.jpg",
        "b.jpg",
        "nested/c.mp4",
    ]


def test_scanner_respects_recursion_and_hidden_flags(tmp_path: Path) -> None:
    _touch(tmp_path / "a.jpg")
    _touch(tmp_path / ".hidden.jpg")
    _touch(tmp_path / ".cache" / "b.jpg")
    _touch(tmp_path / "nested" / "c.jpg")

    flat = list(MediaScanner(recursive=False).scan([tmp_path]))
    everything = list(MediaScanner(include_hidden=True).scan([tmp_path]))

    assert [path.name for path in flat] == ["a.jpg"]
    assert sorted(path.name for path in everything) == [".hidden.jpg", "a.jpg", "b.jpg", "c.jpg"]


def test_scanner_skips_already_prefixed_files_in_directories(tmp_path: Path) -> None:
    _touch(tmp_path / "2023-06-01_14-22-05--IMG_1.jpg")
    _touch(tmp_path / "IMG_2.jpg")

    found = list(MediaScanner().scan([tmp_path]))

    assert [path.name for path in found] == ["IMG_2.jpg"]


def test_explicit_files_are_always_yielded(tmp_path: Path) -> None:
    prefixed = _touch(tmp_path / "2023-06-01_14-22-05--IMG_1.jpg")
    hidden = _touch(tmp_path / ".IMG_2.jpg")

    found = list(MediaScanner().scan([prefixed, hidden, tmp_path / "missing.jpg"]))

    assert found == [prefixed, hidden]


def test_symlinks_are_skipped_unless_followed(tmp_path: Path) -> None:
    target = _touch(tmp_path / "real" / "a.jpg")
    (tmp_path / "link.jpg").symlink_to(target)

    default = list(MediaScanner().scan([tmp_path]))
    followed = list(MediaScanner(follow_symlinks=True).scan([tmp_path]))

    assert [path.name for path in default] == ["a.jpg"]
    assert sorted(path.name for path in followed) == ["a.jpg", "link.jpg"]
