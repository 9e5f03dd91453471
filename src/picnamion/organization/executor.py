"""Executor for rename operations."""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from .models import RenameEvent, RenameOperation

LOGGER = logging.getLogger(__name__)


class RenameExecutor:
    """Apply rename operations and the optional video post-processing hook.

    Args:
        video_command: Argv run with the renamed path appended for videos.
    """

    def __init__(self, video_command: Optional[Sequence[str]] = None) -> None:
        self.video_command = list(video_command) if video_command else None

    def apply(self, operation: RenameOperation) -> RenameEvent:
        """Rename the file and run post-processing when configured.

        Raises:
            FileNotFoundError: If the source vanished.
            FileExistsError: If the destination is already taken.
            subprocess.CalledProcessError: If post-processing fails.
        """
        source, destination = operation.source, operation.destination
        if not source.exists():
            raise FileNotFoundError(f"Source path is missing: {source}")
        if destination.exists() and destination != source:
            raise FileExistsError(f"Destination already exists: {destination}")

        LOGGER.info("Moving file %s to %s", source, destination)
        source.rename(destination)

        output = None
        if self.video_command and (operation.mime_type or "").startswith("video/"):
            output = self._postprocess(self.video_command, destination)

        return RenameEvent(
            timestamp=datetime.now(timezone.utc),
            source=source,
            destination=destination,
            postprocess_output=output,
        )

    def _postprocess(self, command: Sequence[str], path: Path) -> str:
        completed = subprocess.run(
            [*command, str(path)],
            check=True,
            capture_output=True,
            text=True,
        )
        LOGGER.info("Post-processing output for %s: %s", path, completed.stdout.strip())
        return completed.stdout


__all__ = ["RenameExecutor"]
