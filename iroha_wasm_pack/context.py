"""Build context shared by every step of a single build run."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import MissingLibraryKind
from .manifest import MANIFEST_FILENAME, find_project_root, read_manifest

WASM_TARGET = "wasm32-unknown-unknown"
RELEASE_FLAG = "--release"


@dataclass(frozen=True, slots=True)
class BuildArgs:
    """Options of the ``build`` command; forwarded verbatim to cargo."""

    extra_options: tuple[str, ...] = ()

    @property
    def is_release(self) -> bool:
        return RELEASE_FLAG in self.extra_options


@dataclass(frozen=True, slots=True)
class BuildContext:
    root: Path
    profile: str
    crate_type: str
    wasm_in: Path
    wasm_out: Path

    @classmethod
    def from_args(cls, args: BuildArgs, cwd: Path) -> "BuildContext":
        root = find_project_root(cwd)
        manifest = read_manifest(root)
        if not manifest.crate_types:
            raise MissingLibraryKind(root / MANIFEST_FILENAME)

        profile = "release" if args.is_release else "debug"
        wasm_folder = artifact_dir(root, profile)
        name = manifest.package_name
        return cls(
            root=root,
            profile=profile,
            crate_type=manifest.crate_types[0],
            wasm_in=wasm_folder / f"{name}.wasm",
            wasm_out=wasm_folder / f"{name}_optimized.wasm",
        )


def artifact_dir(root: Path, profile: str) -> Path:
    """Directory cargo writes ``--target wasm32-unknown-unknown`` artifacts to."""

    return root / "target" / WASM_TARGET / profile


__all__ = ["BuildArgs", "BuildContext", "RELEASE_FLAG", "WASM_TARGET", "artifact_dir"]
