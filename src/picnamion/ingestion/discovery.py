"""Media file discovery."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from picnamion.timestamps.prefix import has_prefix

LOGGER = logging.getLogger(__name__)


def _is_hidden(path: Path) -> bool:
    return any(part.startswith(".") for part in path.parts if part not in (".", ".."))


class MediaScanner:
    """Expand file and directory arguments into files awaiting a prefix.

    Files named explicitly are always yielded. Files found by walking a
    directory are skipped when they already carry a rename prefix.
    """

    def __init__(
        self,
        *,
        recursive: bool = True,
        include_hidden: bool = False,
        follow_symlinks: bool = False,
    ) -> None:
        self.recursive = recursive
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks

    def scan(self, targets: Iterable[Path]) -> Iterator[Path]:
        """Yield files to process for each target path in order."""
        for target in targets:
            target = target.expanduser()
            if target.is_file():
                yield target
            elif target.is_dir():
                yield from self._scan_directory(target)
            else:
                LOGGER.warning("Skipping %s: not a file or directory.", target)

    def _scan_directory(self, root: Path) -> Iterator[Path]:
        walker = root.rglob("*") if self.recursive else root.iterdir()
        for path in sorted(walker):
            if path.is_symlink() and not self.follow_symlinks:
                continue
            if not path.is_file():
                continue
            if not self.include_hidden and _is_hidden(path.relative_to(root)):
                continue
            if has_prefix(path.name):
                continue
            yield path


__all__ = ["MediaScanner"]
