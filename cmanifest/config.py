"""Configuration loading for cmanifest (.cmanifest.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cmanifest.ir.policy import DEFAULT_EXCLUDED_PATTERNS

CONFIG_FILE_NAME = ".cmanifest.yml"
VALID_FORMATS = {"json", "yaml"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ManifestConfig:
    """Settings for a manifest extraction run."""

    output_dir: Path = Path("out")
    format: str = "json"
    indent: int = 2
    excluded_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_PATTERNS)
    )


def load_config(config_path: str | Path) -> ManifestConfig:
    """Load configuration from disk; a missing file yields the defaults.

    ``config_path`` may be the file itself or the directory containing it.
    Relative ``output_dir`` values resolve against the config file's directory.
    """
    config_file = _resolve_config_path(Path(config_path))
    if not config_file.exists():
        return ManifestConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = ManifestConfig()

    output_dir = data.get("output_dir")
    if output_dir is not None:
        if not isinstance(output_dir, str) or not output_dir.strip():
            raise ConfigError("'output_dir' must be a non-empty string")
        config.output_dir = config_file.parent / output_dir

    fmt = data.get("format")
    if fmt is not None:
        if fmt not in VALID_FORMATS:
            raise ConfigError(f"Invalid format '{fmt}'. Must be one of: {sorted(VALID_FORMATS)}")
        config.format = fmt

    indent = data.get("indent")
    if indent is not None:
        if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
            raise ConfigError("'indent' must be a non-negative integer")
        config.indent = indent

    patterns = data.get("excluded_patterns")
    if patterns is not None:
        if not isinstance(patterns, list) or not all(
            isinstance(p, str) and p for p in patterns
        ):
            raise ConfigError("'excluded_patterns' must be a list of non-empty strings")
        config.excluded_patterns = list(patterns)

    unknown = sorted(set(data) - {"output_dir", "format", "indent", "excluded_patterns"})
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}
