from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

_CONFIG_VERSION = 1

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "required": ["version", "addons", "upstream_url", "contributors_url"],
    "properties": {
        "version": {"const": _CONFIG_VERSION},
        "addons": {
            "type": "array",
            "items": {"type": "string", "pattern": "^[A-Za-z0-9_-]+$"},
            "uniqueItems": True,
        },
        "new_addons": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
        },
        "upstream_url": {"type": "string", "minLength": 1},
        "contributors_url": {"type": "string", "minLength": 1},
        "meta": {"type": "object"},
    },
}


class ConfigError(ValueError):
    def __init__(self, message: str, *, problems: list[str] | None = None) -> None:
        super().__init__(message)
        self.problems = problems or []


@dataclass(frozen=True)
class PullConfig:
    addons: tuple[str, ...]
    new_addons: frozenset[str]
    upstream_url: str
    contributors_url: str
    source_path: Path | None = None

    def is_new(self, addon_id: str) -> bool:
        return addon_id in self.new_addons


def validate_config(data: Any) -> list[str]:
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: str(e.path))
    formatted: list[str] = []
    for error in errors:
        path = "$"
        for part in error.path:
            path += f"[{part!r}]" if isinstance(part, int) else f".{part}"
        formatted.append(f"{path}: {error.message}")
    return formatted


def parse_config(data: Any, *, path: Path | None = None) -> PullConfig:
    where = str(path) if path is not None else "<config>"
    problems = validate_config(data)
    if problems:
        raise ConfigError(f"Invalid config {where}: " + "; ".join(problems), problems=problems)
    return PullConfig(
        addons=tuple(data["addons"]),
        new_addons=frozenset(data.get("new_addons") or ()),
        upstream_url=data["upstream_url"],
        contributors_url=data["contributors_url"],
        source_path=path,
    )


def load_config(path: Path) -> PullConfig:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(raw).__name__}.")
    return parse_config(raw, path=path)
