"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping, Sequence

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import PicnamionConfig

ENV_PREFIX = "PICNAMION__"


def resolve_with_precedence(
    *,
    defaults: PicnamionConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> PicnamionConfig:
    """Layer file, environment and CLI overrides (in that order) over defaults.

    Raises:
        ConfigError: If an override source is malformed or the merged
            values fail validation.
    """
    merged: dict[str, Any] = defaults.model_dump(mode="python")
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is None:
            continue
        if not isinstance(source, MappingABC):
            raise ConfigError(f"{name.capitalize()} overrides must be a mapping.")
        expanded: dict[str, Any] = {}
        for key, value in source.items():
            if not isinstance(key, str):
                raise ConfigError(f"{name.capitalize()} override keys must be strings.")
            assign_dotted(expanded, key.split("."), value)
        merged = _deep_merge(merged, expanded)

    try:
        return PicnamionConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def overrides_from_env(env: Mapping[str, str], prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Return nested overrides from ``PICNAMION__SECTION__KEY`` variables.

    Values are parsed as YAML so lists and booleans survive the trip.
    """
    overrides: dict[str, Any] = {}
    for key, raw_value in env.items():
        if not key.startswith(prefix):
            continue
        path = [segment.lower() for segment in key[len(prefix) :].split("__") if segment]
        if not path:
            continue
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        assign_dotted(overrides, path, value)
    return overrides


def assign_dotted(target: dict[str, Any], path: Sequence[str], value: Any) -> None:
    """Assign ``value`` at ``path`` inside ``target``, creating sections.

    Raises:
        ConfigError: If an intermediate segment already holds a scalar.
    """
    node = target
    for segment in path[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(f"Override for {'.'.join(path)} conflicts with existing value.")
        node = existing
    leaf = path[-1]
    if isinstance(value, MappingABC) and isinstance(node.get(leaf), dict):
        node[leaf] = _deep_merge(node[leaf], value)
    else:
        node[leaf] = deepcopy(value)


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, MappingABC) and isinstance(merged.get(key), MappingABC):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["ENV_PREFIX", "assign_dotted", "overrides_from_env", "resolve_with_precedence"]
