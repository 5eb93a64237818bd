"""Cargo manifest discovery and parsing."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping
import tomllib

from core.config_loader import load_config_file

from .errors import ManifestParseError, ProjectNotFound

MANIFEST_FILENAME = "Cargo.toml"

# Cargo accepts both spellings; tooling that writes manifests may emit either.
_CRATE_TYPE_KEYS = ("crate_type", "crate-type")


@dataclass(frozen=True, slots=True)
class ManifestView:
    """The part of a Cargo manifest the build pipeline cares about."""

    package_name: str
    crate_types: tuple[str, ...]


def find_project_root(start: Path) -> Path:
    """Return the closest directory at or above ``start`` holding a manifest."""

    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / MANIFEST_FILENAME).is_file():
            return candidate
    raise ProjectNotFound(start)


def read_manifest(root: Path) -> ManifestView:
    path = root / MANIFEST_FILENAME
    try:
        data = load_config_file(path)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ManifestParseError(path, str(exc)) from exc
    except OSError as exc:
        raise ManifestParseError(path, f"cannot read {path}: {exc}") from exc
    return _manifest_from_mapping(path, data)


def _manifest_from_mapping(path: Path, data: Mapping[str, Any]) -> ManifestView:
    package = data.get("package")
    if not isinstance(package, Mapping):
        raise ManifestParseError(path, "missing field `package`")
    name = package.get("name")
    if not isinstance(name, str):
        raise ManifestParseError(path, "missing field `name` in `package`")

    lib = data.get("lib")
    if not isinstance(lib, Mapping):
        raise ManifestParseError(path, "missing field `lib`")
    present = [key for key in _CRATE_TYPE_KEYS if key in lib]
    if not present:
        raise ManifestParseError(path, "missing field `crate_type` in `lib`")
    if len(present) > 1:
        raise ManifestParseError(path, "duplicate field `crate_type` in `lib`")

    raw_types = lib[present[0]]
    if not isinstance(raw_types, list) or not all(isinstance(item, str) for item in raw_types):
        raise ManifestParseError(path, "`lib.crate-type` must be an array of strings")

    return ManifestView(package_name=name, crate_types=tuple(raw_types))


__all__ = ["MANIFEST_FILENAME", "ManifestView", "find_project_root", "read_manifest"]
