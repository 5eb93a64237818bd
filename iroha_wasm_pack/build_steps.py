"""The six ordered steps of ``iroha_wasm_pack build``.

Order matters: each step assumes every earlier one succeeded.
"""
from __future__ import annotations

from typing import List

from core.command_runner import CommandError

from .console import Console
from .context import WASM_TARGET, BuildArgs, BuildContext
from .errors import (
    ArtifactTooLarge,
    CompilationFailed,
    InvalidLibraryKind,
    OptimizationFailed,
    TargetInstallFailed,
    ToolchainTooOld,
)
from .pipeline import Step, StepPipeline
from .toolchain import Toolchain

MIN_RUSTC_VERSION = (1, 30)
REQUIRED_CRATE_TYPE = "cdylib"
MAX_BINARY_SIZE = 4194304
TOOLCHAIN_MANAGER_MARKER = "rustup"


class BuildSteps:
    def __init__(self, toolchain: Toolchain, *, console: Console | None = None) -> None:
        self._toolchain = toolchain
        self._console = console or Console("none")

    def steps(self) -> List[Step]:
        return [
            Step("check rustc version", self.check_rustc_version),
            Step("check crate config", self.check_crate_config),
            Step("check for wasm target", self.check_for_wasm_target),
            Step("build wasm", self.build_wasm),
            Step("optimize wasm", self.wasm_opt),
            Step("check binary size", self.check_binary_size),
        ]

    def pipeline(self) -> StepPipeline:
        return StepPipeline(self.steps(), console=self._console)

    def check_rustc_version(self, args: BuildArgs, ctx: BuildContext) -> None:
        version = self._toolchain.rustc_version()
        if version < MIN_RUSTC_VERSION:
            raise ToolchainTooOld(version, MIN_RUSTC_VERSION)

    def check_crate_config(self, args: BuildArgs, ctx: BuildContext) -> None:
        if ctx.crate_type != REQUIRED_CRATE_TYPE:
            raise InvalidLibraryKind(ctx.crate_type, REQUIRED_CRATE_TYPE, WASM_TARGET)

    def check_for_wasm_target(self, args: BuildArgs, ctx: BuildContext) -> None:
        sysroot = self._toolchain.sysroot()
        rustlib_path = sysroot / "lib" / "rustlib"
        self._console.info(f"Looking for {WASM_TARGET} in {rustlib_path}")
        if (rustlib_path / WASM_TARGET).exists():
            self._console.info(f"Found {WASM_TARGET} in {rustlib_path}")
            return
        self._console.info(f"Failed to find {WASM_TARGET} in {rustlib_path}")

        if TOOLCHAIN_MANAGER_MARKER not in str(sysroot):
            self._console.warning(
                f"{WASM_TARGET} is not installed and {sysroot} is not managed by rustup; "
                "continuing and leaving target installation to you"
            )
            return
        try:
            self._toolchain.add_target(WASM_TARGET)
        except (CommandError, OSError) as exc:
            raise TargetInstallFailed(WASM_TARGET, str(exc)) from exc

    def build_wasm(self, args: BuildArgs, ctx: BuildContext) -> None:
        self._console.info(f"Compiling {ctx.root} ({ctx.profile})")
        try:
            self._toolchain.cargo_build(args.extra_options, target=WASM_TARGET, cwd=ctx.root)
        except (CommandError, OSError) as exc:
            raise CompilationFailed(str(exc)) from exc

    def wasm_opt(self, args: BuildArgs, ctx: BuildContext) -> None:
        if not ctx.wasm_in.is_file():
            raise OptimizationFailed(f"compiled artifact not found at {ctx.wasm_in}")
        try:
            self._toolchain.wasm_opt(ctx.wasm_in, ctx.wasm_out)
        except (CommandError, OSError) as exc:
            raise OptimizationFailed(str(exc)) from exc

    def check_binary_size(self, args: BuildArgs, ctx: BuildContext) -> None:
        try:
            size = ctx.wasm_out.stat().st_size
        except OSError as exc:
            raise OptimizationFailed(f"optimized artifact not readable at {ctx.wasm_out}: {exc}") from exc
        if size > MAX_BINARY_SIZE:
            raise ArtifactTooLarge(MAX_BINARY_SIZE, size)
        self._console.info(f"Wasm binary written to {ctx.wasm_out} ({size} bytes)")


__all__ = [
    "BuildSteps",
    "MAX_BINARY_SIZE",
    "MIN_RUSTC_VERSION",
    "REQUIRED_CRATE_TYPE",
]
