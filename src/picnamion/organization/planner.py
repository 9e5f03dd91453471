"""Planner turning reconciliation results into rename operations."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Optional

from picnamion.timestamps.models import AmbiguousTimestamp, ResolvedTimestamp

from .models import AmbiguityReport, RenameOperation, RenameOption


class RenamePlanner:
    """Derive rename operations and ambiguity reports for single files."""

    def build_rename(
        self,
        path: Path,
        resolved: ResolvedTimestamp,
        *,
        mime_type: Optional[str] = None,
    ) -> RenameOperation:
        """Return the operation prefixing ``path`` with the resolved capture time.

        Args:
            path: File to rename.
            resolved: Reconciliation outcome for the file.
            mime_type: MIME type reported by the extractor.

        Returns:
            RenameOperation: Move within the same directory under the new name.
        """
        return RenameOperation(
            source=path,
            destination=self._destination(path, resolved.prefix),
            prefix=resolved.prefix,
            reasoning=f"{resolved.source}: {resolved.reason}",
            mime_type=mime_type,
        )

    def build_report(self, path: Path, ambiguous: AmbiguousTimestamp) -> AmbiguityReport:
        """Return a report listing every choice with the command to apply it."""
        options = []
        for label, prefix in ambiguous.options():
            destination = self._destination(path, prefix)
            options.append(
                RenameOption(
                    label=label,
                    destination=destination,
                    command=shlex.join(["mv", str(path), str(destination)]),
                )
            )
        return AmbiguityReport(
            path=path,
            candidates=list(ambiguous.candidates),
            filename_timestamps=list(ambiguous.filename_timestamps),
            options=options,
        )

    def _destination(self, path: Path, prefix: str) -> Path:
        return path.with_name(f"{prefix}{path.name}")


__all__ = ["RenamePlanner"]
