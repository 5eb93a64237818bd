"""Tool configuration: executable names and logging defaults."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping
import json
import os
import tomllib

import yaml

from core.config_loader import collect_config_files, load_config_file, merge_mappings, resolve_config_paths

from .errors import ConfigError

CONFIG_STEM = "config"
CONFIG_DIR_ENV = "IROHA_WASM_PACK_CONFIG_DIR"
APP_DIR_NAME = "iroha_wasm_pack"


@dataclass(frozen=True, slots=True)
class ToolPaths:
    cargo: str = "cargo"
    rustc: str = "rustc"
    rustup: str = "rustup"
    wasm_opt: str = "wasm-opt"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ToolPaths":
        allowed_keys = {"cargo", "rustc", "rustup", "wasm_opt"}
        unknown = {str(key) for key in data.keys() if str(key) not in allowed_keys}
        if unknown:
            joined = ", ".join(sorted(unknown))
            raise ValueError(f"[tools] contains unknown keys: {joined}")
        values: Dict[str, str] = {}
        for key in allowed_keys:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"tools.{key} must be a non-empty string")
            values[key] = value.strip()
        return cls(**values)


@dataclass(frozen=True, slots=True)
class ToolConfig:
    log_level: str | None = None
    tools: ToolPaths = field(default_factory=ToolPaths)
    sources: tuple[Path, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, sources: Iterable[Path] = ()) -> "ToolConfig":
        global_section = data.get("global", {})
        tools_section = data.get("tools", {})
        if not isinstance(global_section, Mapping):
            raise ValueError("[global] must be a table")
        if not isinstance(tools_section, Mapping):
            raise ValueError("[tools] must be a table")
        log_level = global_section.get("log_level")
        return cls(
            log_level=str(log_level) if log_level else None,
            tools=ToolPaths.from_mapping(tools_section),
            sources=tuple(sources),
        )

    @classmethod
    def load(cls, directories: Iterable[Path], *, workspace: Path) -> "ToolConfig":
        """Merge ``config.*`` from ``directories``; later directories win."""

        existing, _missing = resolve_config_paths(workspace, directories)
        merged: Dict[str, Any] = {}
        sources: List[Path] = []
        for directory in existing:
            try:
                files = collect_config_files(directory, stem=CONFIG_STEM)
            except ValueError as exc:
                raise ConfigError(str(exc), directory) from exc
            path = files.get(CONFIG_STEM)
            if path is None:
                continue
            try:
                data = load_config_file(path)
            except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError, TypeError, OSError) as exc:
                raise ConfigError(str(exc), path) from exc
            merged = merge_mappings(merged, data)
            sources.append(path)

        try:
            return cls.from_mapping(merged, sources=sources)
        except ValueError as exc:
            origin = sources[-1] if sources else None
            raise ConfigError(str(exc), origin) from exc


def _split_config_values(values: Iterable[str]) -> List[str]:
    parts: List[str] = []
    for value in values:
        if not value:
            continue
        for segment in value.split(os.pathsep):
            trimmed = segment.strip()
            if trimmed:
                parts.append(trimmed)
    return parts


def default_config_directory() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_DIR_NAME


def resolve_config_directories(workspace: Path, cli_values: Iterable[str]) -> List[Path]:
    """Config directories in increasing priority: user dir, environment, CLI."""

    config_dirs: List[Path] = [default_config_directory()]
    env_value = os.environ.get(CONFIG_DIR_ENV)
    if env_value:
        config_dirs.extend(Path(entry) for entry in _split_config_values([env_value]))
    config_dirs.extend(Path(entry) for entry in _split_config_values(cli_values))
    return [path if path.is_absolute() else workspace / path for path in config_dirs]


__all__ = [
    "CONFIG_DIR_ENV",
    "ToolConfig",
    "ToolPaths",
    "default_config_directory",
    "resolve_config_directories",
]
