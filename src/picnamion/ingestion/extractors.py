"""Metadata extraction through ExifTool."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import exiftool
from exiftool.exceptions import ExifToolException

from picnamion.config.models import ExifToolSettings
from picnamion.timestamps.errors import ExtractionError

LOGGER = logging.getLogger(__name__)


def media_type(metadata: Dict[str, Any]) -> Optional[str]:
    """Return the MIME type ExifTool reported in the ``File`` group."""
    group = metadata.get("File")
    if not isinstance(group, dict):
        return None
    value = group.get("MIMEType")
    return value if isinstance(value, str) else None


def is_media(mime: Optional[str]) -> bool:
    return mime is not None and (mime.startswith("image/") or mime.startswith("video/"))


class MetadataExtractor:
    """Read grouped metadata for files with one long-running ExifTool process.

    Use as a context manager so the process is stopped after the batch.
    """

    def __init__(self, settings: ExifToolSettings | None = None) -> None:
        self.settings = settings or ExifToolSettings()
        self._helper: exiftool.ExifToolHelper | None = None

    def __enter__(self) -> "MetadataExtractor":
        self.start()
        return self

    def __exit__(self, *_: object) -> None:
        self.stop()

    def start(self) -> exiftool.ExifToolHelper:
        if self._helper is not None:
            return self._helper
        helper = exiftool.ExifToolHelper(
            executable=self.settings.executable,
            common_args=list(self.settings.common_args),
        )
        try:
            helper.run()
        except (ExifToolException, OSError) as exc:
            raise ExtractionError(
                f"Unable to start {self.settings.executable}: {exc}"
            ) from exc
        self._helper = helper
        return helper

    def stop(self) -> None:
        if self._helper is not None:
            self._helper.terminate()
            self._helper = None

    def extract(self, path: Path) -> Dict[str, Any]:
        """Return metadata for ``path`` as a mapping of group to tag values.

        Raises:
            ExtractionError: If ExifTool fails or reports nothing.
        """
        helper = self.start()
        try:
            results = helper.execute_json(str(path))
        except (ExifToolException, OSError) as exc:
            raise ExtractionError(f"ExifTool failed for {path}: {exc}") from exc
        if not results:
            raise ExtractionError(f"ExifTool returned no metadata for {path}")
        LOGGER.debug("Metadata groups for %s: %s", path, ", ".join(results[0]))
        return results[0]


__all__ = ["MetadataExtractor", "is_media", "media_type"]
