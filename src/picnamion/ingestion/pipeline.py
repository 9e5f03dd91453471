"""Batch orchestration: extract, reconcile, plan and (optionally) rename."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Protocol

from picnamion.organization.executor import RenameExecutor
from picnamion.organization.planner import RenamePlanner
from picnamion.timestamps.engine import TimestampEngine
from picnamion.timestamps.errors import ConfigurationDefect, PicnamionError, UnknownTagError
from picnamion.timestamps.models import AmbiguousTimestamp

from .extractors import is_media, media_type
from .models import BatchResult, SkippedFile

LOGGER = logging.getLogger(__name__)


class Extractor(Protocol):
    def extract(self, path: Path) -> Dict[str, Any]: ...


class RenamePipeline:
    """Process files one at a time, end to end, with no state shared between them.

    Args:
        engine: Timestamp reconciliation engine.
        extractor: Metadata source for each file.
        planner: Builds rename operations and ambiguity reports.
        executor: Applies renames when moving.
        unknown_tag_policy: ``abort`` re-raises unscored tags, ``skip``
            records them against the file and continues.
    """

    def __init__(
        self,
        engine: TimestampEngine,
        extractor: Extractor,
        planner: RenamePlanner | None = None,
        executor: RenameExecutor | None = None,
        unknown_tag_policy: Literal["abort", "skip"] = "abort",
    ) -> None:
        self.engine = engine
        self.extractor = extractor
        self.planner = planner or RenamePlanner()
        self.executor = executor or RenameExecutor()
        self.unknown_tag_policy = unknown_tag_policy

    def run(self, paths: Iterable[Path], *, move: bool = False) -> BatchResult:
        """Reconcile every path and rename the decided ones when ``move`` is set.

        Raises:
            ConfigurationDefect: When the static tables are out of sync with
                the metadata (subject to the unknown-tag policy).
        """
        result = BatchResult(moved=move)
        for path in paths:
            LOGGER.info("Processing %s", path)
            try:
                self._process(path, result, move)
            except UnknownTagError as exc:
                if self.unknown_tag_policy == "abort":
                    raise
                LOGGER.error("Skipping %s: %s", path, exc)
                result.errors.append(f"{path}: {exc}")
            except ConfigurationDefect:
                raise
            except (PicnamionError, OSError, subprocess.CalledProcessError) as exc:
                LOGGER.error("Failed to process %s: %s", path, exc)
                result.errors.append(f"{path}: {exc}")
        return result

    def _process(self, path: Path, result: BatchResult, move: bool) -> None:
        metadata = self.extractor.extract(path)
        mime = media_type(metadata)
        if not is_media(mime):
            LOGGER.warning("File %s is not an image or video (%s); skipping.", path, mime)
            result.skipped.append(SkippedFile(path=path, reason=f"not media: {mime or 'unknown'}"))
            return

        outcome = self.engine.resolve(metadata, path.name)
        if isinstance(outcome, AmbiguousTimestamp):
            LOGGER.error("Unable to decide on an acceptable prefix for file %s.", path)
            result.ambiguous.append(self.planner.build_report(path, outcome))
            return

        LOGGER.info("Prefix determined for %s: %s", path, outcome.prefix)
        operation = self.planner.build_rename(path, outcome, mime_type=mime)
        if move:
            result.events.append(self.executor.apply(operation))
        result.resolved.append(operation)


__all__ = ["Extractor", "RenamePipeline"]
