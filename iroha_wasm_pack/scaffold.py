"""The ``iroha_wasm_pack new`` command: scaffold a smart-contract crate.

Steps run in order and stop at the first failure. A failure after
``cargo new`` leaves the partially initialised directory in place.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from core.command_runner import CommandError

from .console import Console
from .errors import FileWriteFailed, ProjectInitFailed
from .manifest import MANIFEST_FILENAME
from .pipeline import Step, StepPipeline
from .templates import ENTRYPOINT, cargo_manifest
from .toolchain import Toolchain

ENTRYPOINT_PATH = Path("src") / "lib.rs"


@dataclass(frozen=True, slots=True)
class NewArgs:
    name: str
    workspace: Path

    @property
    def project_dir(self) -> Path:
        return self.workspace / self.name


def write(path: Path, contents: str) -> None:
    """Write ``contents`` to ``path``, replacing any existing file."""

    try:
        path.write_text(contents, encoding="utf-8")
    except OSError as exc:
        raise FileWriteFailed(path, str(exc)) from exc


class ScaffoldSteps:
    def __init__(self, toolchain: Toolchain, *, console: Console | None = None) -> None:
        self._toolchain = toolchain
        self._console = console or Console("none")

    def steps(self) -> List[Step]:
        return [
            Step("cargo new", self.cargo_new),
            Step("write Cargo.toml", self.write_manifest),
            Step("write entrypoint", self.write_entrypoint),
        ]

    def pipeline(self) -> StepPipeline:
        return StepPipeline(self.steps(), console=self._console)

    def cargo_new(self, args: NewArgs) -> None:
        try:
            self._toolchain.cargo_new(args.name, cwd=args.workspace)
        except (CommandError, OSError) as exc:
            raise ProjectInitFailed(args.name, str(exc)) from exc

    def write_manifest(self, args: NewArgs) -> None:
        path = args.project_dir / MANIFEST_FILENAME
        write(path, cargo_manifest(args.name))
        self._console.info(f"Wrote {path}")

    def write_entrypoint(self, args: NewArgs) -> None:
        path = args.project_dir / ENTRYPOINT_PATH
        write(path, ENTRYPOINT)
        self._console.info(f"Wrote {path}")


__all__ = ["ENTRYPOINT_PATH", "NewArgs", "ScaffoldSteps", "write"]
