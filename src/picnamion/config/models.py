"""Configuration models describing picnamion settings."""

from __future__ import annotations

import re
from typing import List, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from picnamion.timestamps.filenames import FilenamePattern
from picnamion.timestamps.metadata import DATE_FORMAT

DEFAULT_FILENAME_PATTERNS = [
    # IMG_20230601_142205.jpg, PXL_20230601_142205123.mp4, VID_20230601_142205.mp4
    r"(?P<year>(?:19|20)\d{2})(?P<month>\d{2})(?P<day>\d{2})"
    r"_(?P<hour>\d{2})(?P<minute>\d{2})(?P<second>\d{2})",
    # Screenshot 2023-06-01 14.22.05.png, signal-2023-06-01-14-22-05.jpg
    r"(?P<year>(?:19|20)\d{2})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[ _-](?P<hour>\d{2})[.-](?P<minute>\d{2})[.-](?P<second>\d{2})",
    # 1685654525.mp4 (seconds since the epoch)
    r"^(?P<sse>1\d{9})(?:\D|$)",
]


class PicnamionBaseModel(BaseModel):
    """Shared configuration for picnamion Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class TimezoneSettings(PicnamionBaseModel):
    """Time zone assumptions.

    Attributes:
        fallback_zone: IANA zone used whenever no real zone can be determined.
    """

    fallback_zone: str = "America/Los_Angeles"

    @field_validator("fallback_zone")
    @classmethod
    def _validate_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone {value!r}") from exc
        return value


class FilenameSettings(PicnamionBaseModel):
    """Filename timestamp patterns.

    Attributes:
        patterns: Ordered regular expressions; the first match wins.
        utc_markers: Filename substrings whose producers write UTC times.
    """

    patterns: List[str] = Field(default_factory=lambda: list(DEFAULT_FILENAME_PATTERNS))
    utc_markers: List[str] = Field(default_factory=lambda: ["PXL_"])

    @field_validator("patterns")
    @classmethod
    def _validate_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                compiled = FilenamePattern.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid pattern {pattern!r}: {exc}") from exc
            if not compiled.declares_contract():
                raise ValueError(
                    f"pattern {pattern!r} must name year/month/day/hour/minute/second or sse groups"
                )
        return value


class ExifToolSettings(PicnamionBaseModel):
    """Metadata extractor invocation.

    Attributes:
        executable: ExifTool binary or wrapper script.
        common_args: Arguments passed on every call. The defaults group tags
            by family, render dates with a marker, and report zone-less
            values at ``-1200``.
    """

    executable: str = "exiftool"
    common_args: List[str] = Field(
        default_factory=lambda: [
            "-g",
            "-api",
            "TimeZone=Etc/GMT+12",
            "-d",
            DATE_FORMAT,
        ]
    )


class ProcessingOptions(PicnamionBaseModel):
    """Processing options governing discovery and error policy.

    Attributes:
        recurse_directories: Whether to recurse into subdirectories.
        process_hidden_files: Whether hidden files should be included.
        follow_symlinks: Whether to traverse symbolic links.
        unknown_tag_policy: ``abort`` stops the batch on an unscored tag,
            ``skip`` reports the file and continues.
    """

    recurse_directories: bool = True
    process_hidden_files: bool = False
    follow_symlinks: bool = False
    unknown_tag_policy: Literal["abort", "skip"] = "abort"


class PostProcessSettings(PicnamionBaseModel):
    """Commands run after a successful rename.

    Attributes:
        video_command: Optional argv run with the renamed path appended for videos.
    """

    video_command: Optional[List[str]] = None


class LoggingSettings(PicnamionBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 100
    backup_count: int = 5


class CLIOptions(PicnamionBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class PicnamionConfig(PicnamionBaseModel):
    """Top-level configuration struct for picnamion."""

    timezone: TimezoneSettings = Field(default_factory=TimezoneSettings)
    filenames: FilenameSettings = Field(default_factory=FilenameSettings)
    exiftool: ExifToolSettings = Field(default_factory=ExifToolSettings)
    processing: ProcessingOptions = Field(default_factory=ProcessingOptions)
    postprocess: PostProcessSettings = Field(default_factory=PostProcessSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DEFAULT_FILENAME_PATTERNS",
    "PicnamionBaseModel",
    "TimezoneSettings",
    "FilenameSettings",
    "ExifToolSettings",
    "ProcessingOptions",
    "PostProcessSettings",
    "LoggingSettings",
    "CLIOptions",
    "PicnamionConfig",
]
