"""Canonical rename prefix helpers."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

PREFIX_FORMAT = "%Y-%m-%d_%H-%M-%S--"
PREFIX_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}--")


def format_prefix(value: datetime) -> str:
    """Render the wall-clock reading of ``value`` as a rename prefix."""
    return value.strftime(PREFIX_FORMAT)


def has_prefix(name: str) -> bool:
    """Return True when ``name`` already starts with a rename prefix."""
    return PREFIX_PATTERN.match(name) is not None


def parse_prefix(name: str) -> Optional[datetime]:
    """Return the naive date-time encoded at the start of ``name``, if any."""
    match = PREFIX_PATTERN.match(name)
    if match is None:
        return None
    return datetime.strptime(match.group(0), PREFIX_FORMAT)


__all__ = ["PREFIX_FORMAT", "PREFIX_PATTERN", "format_prefix", "has_prefix", "parse_prefix"]
