"""Configuration management for picnamion."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import PicnamionConfig
from .resolver import assign_dotted, overrides_from_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.picnamion/config.yaml")
CONFIG_FILE_ENV = "PICNAMION_CONFIG_FILE"
FILE_HEADER = (
    "# picnamion configuration file\n"
    "# Change it with `picnamion config set` or `picnamion config edit`.\n"
)


class ConfigManager:
    """Read, layer and write the YAML configuration file.

    Precedence, lowest first: built-in defaults, the file,
    ``PICNAMION__SECTION__KEY`` environment variables, CLI overrides.

    Args:
        config_path: File to use. Defaults to ``$PICNAMION_CONFIG_FILE`` or
            ``~/.picnamion/config.yaml``.
        env: Environment mapping; ``os.environ`` when omitted.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._env = os.environ if env is None else env
        if config_path is None:
            override = self._env.get(CONFIG_FILE_ENV)
            config_path = Path(override) if override else DEFAULT_CONFIG_PATH
        self._path = config_path.expanduser()

    @property
    def config_path(self) -> Path:
        return self._path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
    ) -> PicnamionConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted-key overrides with the highest precedence.
            include_env: Whether ``PICNAMION__`` variables are applied.
            ensure_file: Write a default file first when none exists.

        Raises:
            ConfigError: If the file is malformed or a value is invalid.
        """
        if ensure_file:
            self.ensure_exists()
        return resolve_with_precedence(
            defaults=PicnamionConfig(),
            file_overrides=self.read_overrides(),
            env_overrides=overrides_from_env(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def read_overrides(self) -> dict[str, Any]:
        """Return the mapping stored in the file, or an empty one.

        Raises:
            ConfigError: If the file is not a YAML mapping.
        """
        text = self.read_text()
        if not text:
            return {}
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Cannot parse {self._path}: {exc}") from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{self._path} must hold a mapping at the top level.")
        return data

    def read_text(self) -> str:
        if not self._path.exists():
            return ""
        return self._path.read_text(encoding="utf-8")

    def save(self, config: PicnamionConfig | Mapping[str, Any]) -> None:
        """Write ``config`` to the file under a header with the write time."""
        if isinstance(config, PicnamionConfig):
            data: dict[str, Any] = config.model_dump(mode="python")
        else:
            data = dict(config)
        written = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        body = yaml.safe_dump(data, sort_keys=False)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(f"{FILE_HEADER}# Last updated: {written}\n{body}", encoding="utf-8")

    def ensure_exists(self) -> Path:
        """Write the defaults when the file is missing and return its path."""
        if not self._path.exists():
            self.save(PicnamionConfig())
        return self._path


__all__ = [
    "CONFIG_FILE_ENV",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "PicnamionConfig",
    "assign_dotted",
    "resolve_with_precedence",
]
