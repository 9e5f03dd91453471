"""Command line interface for picnamion."""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Mapping, NoReturn

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from picnamion.config import (
    ConfigError,
    ConfigManager,
    PicnamionConfig,
    assign_dotted,
    resolve_with_precedence,
)
from picnamion.config.models import CLIOptions, LoggingSettings
from picnamion.ingestion import BatchResult, MediaScanner, MetadataExtractor, RenamePipeline
from picnamion.organization import AmbiguityReport, RenameExecutor, RenamePlanner
from picnamion.timestamps import ConfigurationDefect, TimestampEngine

console = Console()
LOGGER = logging.getLogger(__name__)

_HANDLER_MARK = "_picnamion"


@dataclass(frozen=True)
class OutputMode:
    """How much a command prints, resolved from flags and CLI defaults.

    Attributes:
        json: Emit a single JSON document instead of console text.
        quiet: Only errors are printed.
        summary_only: Only summary, warning and error lines are printed.
    """

    json: bool = False
    quiet: bool = False
    summary_only: bool = False

    @classmethod
    def resolve(
        cls,
        ctx: click.Context,
        defaults: CLIOptions,
        *,
        json_output: bool,
        quiet: bool,
        summary: bool,
    ) -> "OutputMode":
        """Combine explicit flags with configured defaults.

        Raises:
            click.ClickException: If the requested modes contradict each other.
        """
        quiet_given = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
        summary_given = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

        if json_output:
            if quiet_given and quiet:
                raise click.ClickException("--json and --quiet are mutually exclusive.")
            if summary_given and summary:
                raise click.ClickException("--json and --summary are mutually exclusive.")
            return cls(json=True)

        mode = cls(
            quiet=quiet if quiet_given else defaults.quiet_default,
            summary_only=summary if summary_given else defaults.summary_default,
        )
        if mode.quiet and mode.summary_only:
            raise click.ClickException(
                "Quiet and summary output are both enabled; change the flags or cli defaults."
            )
        return mode

    def allows(self, kind: str) -> bool:
        """Return True when a line of ``kind`` should be printed."""
        if kind == "error":
            return True
        if self.quiet:
            return False
        return not self.summary_only or kind in {"summary", "warning"}


def _emit(message: Any, kind: str, mode: OutputMode) -> None:
    if mode.allows(kind):
        console.print(message)


def _fail(
    message: str,
    *,
    code: str,
    mode: OutputMode,
    error: Exception,
    details: Mapping[str, Any] | None = None,
) -> NoReturn:
    """Report a failure as JSON or a Click error and stop the command.

    Raises:
        SystemExit: After printing the JSON error document.
        click.ClickException: In console mode.
    """
    if mode.json:
        body: dict[str, Any] = {"code": code, "message": message}
        if details:
            body["details"] = dict(details)
        console.print_json(data={"error": body})
        raise SystemExit(1)
    if isinstance(error, click.ClickException):
        raise error
    raise click.ClickException(message) from error


def _configure_logging(settings: LoggingSettings) -> None:
    """Route log records to stderr through Rich and optionally to a rotating file."""
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level {settings.level!r}.")

    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_MARK, False)]:
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [
        RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    ]
    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        rotating.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handlers.append(rotating)

    for handler in handlers:
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)
    root.setLevel(level)


def _build_pipeline(config: PicnamionConfig, extractor: MetadataExtractor) -> RenamePipeline:
    engine = TimestampEngine(
        config.timezone.fallback_zone,
        config.filenames.patterns,
        config.filenames.utc_markers,
    )
    return RenamePipeline(
        engine=engine,
        extractor=extractor,
        planner=RenamePlanner(),
        executor=RenameExecutor(config.postprocess.video_command),
        unknown_tag_policy=config.processing.unknown_tag_policy,
    )


def _ambiguity_table(report: AmbiguityReport) -> Table:
    table = Table(title=f"No safe prefix for {report.path}")
    table.add_column("Source")
    table.add_column("Timestamp")
    table.add_column("Score", justify="right")
    table.add_column("Tags")
    for candidate in report.candidates:
        table.add_row(
            "metadata",
            candidate.instant.isoformat(),
            str(candidate.score),
            ", ".join(candidate.tags),
        )
    for value in report.filename_timestamps:
        table.add_row("filename", value.isoformat(), "-", "-")
    return table


def _print_batch(result: BatchResult, mode: OutputMode) -> None:
    verb = "Renamed" if result.moved else "Would rename"
    for operation in result.resolved:
        _emit(
            f"{verb} {operation.source} -> {operation.destination.name} ({operation.reasoning})",
            "detail",
            mode,
        )

    for skipped in result.skipped:
        _emit(f"[yellow]Skipped {skipped.path}: {skipped.reason}[/yellow]", "warning", mode)

    for report in result.ambiguous:
        _emit(_ambiguity_table(report), "warning", mode)
        for option in report.options:
            _emit(f"  {option.label}:\n  {option.command}", "warning", mode)

    if result.errors:
        _emit("[red]Errors encountered:[/red]", "error", mode)
        for entry in result.errors:
            _emit(f"  - {entry}", "error", mode)

    metrics: dict[str, Any] = dict(result.counts())
    if not result.moved:
        metrics["dry_run"] = True
    summary = ", ".join(f"{key}={value}" for key, value in metrics.items())
    _emit(f"[green]Rename summary: {summary}.[/green]", "summary", mode)


def _batch_payload(result: BatchResult) -> dict[str, Any]:
    return {
        "moved": result.moved,
        "counts": result.counts(),
        "resolved": [operation.model_dump(mode="json") for operation in result.resolved],
        "ambiguous": [report.model_dump(mode="json") for report in result.ambiguous],
        "skipped": [skipped.model_dump(mode="json") for skipped in result.skipped],
        "errors": list(result.errors),
        "events": [event.model_dump(mode="json") for event in result.events],
    }


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="picnamion")
def cli() -> None:
    """picnamion prefixes photos and videos with their most trustworthy capture time."""


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("-m", "--move", is_flag=True, help="Actually rename files (default only reports).")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing decisions.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only print summary lines.")
@click.option("--quiet", is_flag=True, help="Only print errors.")
@click.pass_context
def rename(
    ctx: click.Context,
    paths: tuple[Path, ...],
    move: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Decide a capture-time prefix for every media file under PATHS.

    Files whose capture time cannot be decided safely are reported with the
    command for each option and left untouched.
    """
    mode = OutputMode(json=json_output)
    try:
        config = ConfigManager().load()
        _configure_logging(config.logging)
        mode = OutputMode.resolve(
            ctx, config.cli, json_output=json_output, quiet=quiet, summary=summary_mode
        )

        scanner = MediaScanner(
            recursive=config.processing.recurse_directories,
            include_hidden=config.processing.process_hidden_files,
            follow_symlinks=config.processing.follow_symlinks,
        )
        with MetadataExtractor(config.exiftool) as extractor:
            result = _build_pipeline(config, extractor).run(scanner.scan(paths), move=move)
    except ConfigError as exc:
        _fail(str(exc), code="config_error", mode=mode, error=exc)
    except ConfigurationDefect as exc:
        _fail(
            f"Configuration defect, stopping: {exc}",
            code="configuration_defect",
            mode=mode,
            error=exc,
            details={"exception": type(exc).__name__},
        )
    except click.ClickException as exc:
        _fail(exc.format_message(), code="cli_error", mode=mode, error=exc)
    except Exception as exc:
        LOGGER.exception("Rename failed")
        _fail(
            f"Unexpected error while renaming files: {exc}",
            code="internal_error",
            mode=mode,
            error=exc,
            details={"exception": type(exc).__name__},
        )

    if mode.json:
        console.print_json(data=_batch_payload(result))
    else:
        _print_batch(result, mode)


# Configuration commands ------------------------------------------------


def _store_validated(manager: ConfigManager, data: dict[str, Any]) -> list[str]:
    """Validate ``data`` as file overrides, persist it and return a unified diff.

    Raises:
        click.ClickException: If the overrides do not form a valid configuration.
    """
    try:
        resolve_with_precedence(defaults=PicnamionConfig(), file_overrides=data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    before = manager.read_text().splitlines()
    manager.save(data)
    return list(
        difflib.unified_diff(
            before,
            manager.read_text().splitlines(),
            fromfile=f"{manager.config_path.name} (old)",
            tofile=f"{manager.config_path.name} (new)",
            lineterm="",
        )
    )


@cli.group()
def config() -> None:
    """Inspect and change picnamion settings."""


@config.command("view")
@click.option("--section", help="Only show one top-level section, e.g. 'timezone'.")
@click.option("--no-env", is_flag=True, help="Show file values without environment overrides.")
def config_view(section: str | None, no_env: bool) -> None:
    """Print the effective configuration as YAML."""
    try:
        effective = ConfigManager().load(include_env=not no_env).model_dump(mode="python")
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if section is not None:
        if section not in effective:
            raise click.ClickException(
                f"Unknown section {section!r}; choose from {', '.join(effective)}."
            )
        effective = {section: effective[section]}
    console.print(Syntax(yaml.safe_dump(effective, sort_keys=False), "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML value stored at KEY.")
def config_set(key: str, value: str) -> None:
    """Store VALUE at the dotted KEY in the configuration file."""
    path = [part.strip() for part in key.split(".") if part.strip()]
    if not path:
        raise click.ClickException("KEY must be a dotted path such as 'timezone.fallback_zone'.")
    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"VALUE is not valid YAML: {exc}") from exc

    manager = ConfigManager()
    manager.ensure_exists()
    try:
        current = manager.read_overrides()
        updated = manager.read_overrides()
        assign_dotted(updated, path, parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if updated == current:
        console.print(f"[yellow]{'.'.join(path)} already has that value.[/yellow]")
        return
    console.print(Syntax("\n".join(_store_validated(manager, updated)), "diff"))
    console.print(f"[green]Updated {'.'.join(path)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Edit the configuration file in $EDITOR and validate the result."""
    manager = ConfigManager()
    manager.ensure_exists()

    current = manager.read_text()
    edited = click.edit(current, extension=".yaml")
    if edited is None or edited == current:
        console.print("[yellow]Nothing changed.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Edited file is not valid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.ClickException("The configuration must be a mapping at the top level.")

    _store_validated(manager, parsed)
    console.print("[green]Configuration updated.[/green]")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
