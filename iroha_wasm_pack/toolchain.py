"""Thin adapters over the external tools the pipelines delegate to."""
from __future__ import annotations

from pathlib import Path
from typing import Sequence
import re

from core.command_runner import CommandError, CommandRunner

from .config import ToolPaths
from .console import Console
from .errors import ToolchainUnavailable

_RUSTC_VERSION_PATTERN = re.compile(r"^rustc (?P<major>\d+)\.(?P<minor>\d+)")

CARGO_BUILD_FLAGS = (
    "+nightly",
    "build",
    "-Z",
    "build-std",
    "-Z",
    "build-std-features=panic_immediate_abort",
)


def parse_rustc_version(output: str) -> tuple[int, int]:
    match = _RUSTC_VERSION_PATTERN.match(output.strip())
    if match is None:
        raise ValueError(f"unrecognised rustc version output: {output.strip()!r}")
    return int(match.group("major")), int(match.group("minor"))


class Toolchain:
    """Invokes cargo, rustc, rustup and wasm-opt through a command runner.

    Query methods translate launch and exit failures into
    :class:`ToolchainUnavailable`. Action methods let :class:`CommandError`
    and :class:`OSError` propagate so the calling step can pick the
    diagnostic.
    """

    def __init__(self, runner: CommandRunner, *, tools: ToolPaths | None = None, console: Console | None = None) -> None:
        self._runner = runner
        self.tools = tools or ToolPaths()
        self._console = console or Console("none")

    def _run(self, command: Sequence[str], *, cwd: Path | None = None, stream: bool = False):
        self._console.debug(f"Running: {self._runner.format_command(command)}")
        return self._runner.run(command, cwd=cwd, stream=stream)

    def _query(self, command: Sequence[str]) -> str:
        try:
            result = self._run(command)
        except (CommandError, OSError) as exc:
            raise ToolchainUnavailable(
                f"Running `{self._runner.format_command(command)}` wasn't successful: {exc}"
            ) from exc
        return result.stdout.strip()

    def rustc_version(self) -> tuple[int, int]:
        try:
            stdout = self._query([self.tools.rustc, "--version"])
            version = parse_rustc_version(stdout)
        except (ToolchainUnavailable, ValueError) as exc:
            raise ToolchainUnavailable(
                "We can't figure out what your Rust version is- which means you might not have Rust installed. "
                f"Please install Rust version 1.30.0 or higher. ({exc})"
            ) from exc
        self._console.info(f"Checked rustc version {stdout}")
        return version

    def sysroot(self) -> Path:
        stdout = self._query([self.tools.rustc, "--print", "sysroot"])
        if not stdout:
            raise ToolchainUnavailable("Getting rustc's sysroot wasn't successful. Got empty output")
        self._console.info(f"Rustc sysroot: {stdout}")
        return Path(stdout)

    def add_target(self, target: str) -> None:
        self._run([self.tools.rustup, "target", "add", target], stream=True)

    def cargo_build(self, extra_options: Sequence[str], *, target: str, cwd: Path) -> None:
        command = [self.tools.cargo, *CARGO_BUILD_FLAGS, "--target", target, *extra_options]
        self._run(command, cwd=cwd, stream=True)

    def cargo_new(self, name: str, *, cwd: Path) -> None:
        self._run([self.tools.cargo, "new", name, "--lib"], cwd=cwd, stream=True)

    def wasm_opt(self, source: Path, destination: Path) -> None:
        """Optimize ``source`` for size into ``destination`` (``-Os``)."""

        self._run([self.tools.wasm_opt, "-Os", str(source), "-o", str(destination)])


__all__ = ["CARGO_BUILD_FLAGS", "Toolchain", "parse_rustc_version"]
