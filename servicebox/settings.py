"""Container settings.

Loads the container's concurrency mode and logging options from
environment variables or from a JSON/YAML file.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .core.errors import ConfigError
from .logging_config import configure_logging

ENV_PREFIX = "SERVICEBOX_"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def parse_bool(value: Any, key: str = "value") -> bool:
    """Parse a boolean from config input.

    Args:
        value: bool or string such as "true", "0", "yes"
        key: Setting name used in the error message

    Raises:
        ConfigError: If the value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


@dataclass
class ContainerSettings:
    """Settings for building a container."""

    synchronized: bool = True
    name: str = "default"
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ContainerSettings:
        """Load settings from ``SERVICEBOX_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            ContainerSettings instance; unset variables keep their defaults
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is not None:
                values[f.name] = raw
        return cls.from_mapping(values)

    @classmethod
    def from_file(cls, path: Path) -> ContainerSettings:
        """Load settings from a JSON or YAML file.

        A missing file yields the defaults.
        """
        if not path.exists():
            return cls()

        content = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            try:
                data = json.loads(content or "{}")
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON: {exc}") from exc
        elif path.suffix in (".yml", ".yaml"):
            try:
                data = yaml.safe_load(content) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
        else:
            raise ConfigError(f"Unsupported settings file type: {path.suffix or path.name}")

        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ContainerSettings:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        settings = cls()
        if "synchronized" in data:
            settings.synchronized = parse_bool(data["synchronized"], "synchronized")
        if "log_json" in data:
            settings.log_json = parse_bool(data["log_json"], "log_json")
        if "name" in data:
            settings.name = str(data["name"]).strip() or settings.name
        if "log_level" in data:
            level = str(data["log_level"]).strip().upper()
            if not isinstance(logging.getLevelName(level), int):
                raise ConfigError(f"log_level: unknown level {data['log_level']!r}")
            settings.log_level = level
        return settings

    def configure_logging(self, log_file: Path | None = None) -> None:
        configure_logging(
            level=self.log_level,
            json_output=self.log_json,
            log_file=log_file,
            colors=not self.log_json,
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
