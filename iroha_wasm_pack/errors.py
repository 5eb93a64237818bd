"""Error taxonomy for the build and scaffold pipelines.

Every error is terminal: it aborts the pipeline it was raised in and is
reported to the user as-is. Nothing is retried.
"""
from __future__ import annotations

from pathlib import Path


class WasmPackError(RuntimeError):
    """Base class for every diagnosable failure of the tool."""


class ConfigError(WasmPackError):
    """Raised when the tool's own configuration files are invalid."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(f"[{path}] {message}" if path else message)


class ProjectNotFound(WasmPackError):
    def __init__(self, start: Path) -> None:
        self.start = start
        super().__init__(
            "No Cargo.toml found from current dir or parent, "
            "you should init a project by `iroha_wasm_pack new` first"
        )


class ManifestParseError(WasmPackError):
    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"parse cargo toml failed, error = {detail}")


class MissingLibraryKind(WasmPackError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"{path} declares an empty crate-type list. Add the following to your Cargo.toml file:\n\n"
            "[lib]\n"
            'crate-type = ["cdylib"]'
        )


class ToolchainUnavailable(WasmPackError):
    """The compiler could not be queried (missing, failing or unparsable)."""


class ToolchainTooOld(WasmPackError):
    def __init__(self, version: tuple[int, int], minimum: tuple[int, int]) -> None:
        self.version = version
        self.minimum = minimum
        local = ".".join(str(part) for part in version)
        required = ".".join(str(part) for part in minimum)
        super().__init__(
            f"Your version of Rust, '{local}', is not supported. "
            f"Please install Rust version {required}.0 or higher."
        )


class InvalidLibraryKind(WasmPackError):
    def __init__(self, crate_type: str, required: str, target: str) -> None:
        self.crate_type = crate_type
        self.required = required
        super().__init__(
            f"crate-type must be {required} to compile to {target}. "
            "Add the following to your Cargo.toml file:\n\n"
            "[lib]\n"
            f'crate-type = ["{required}"]'
        )


class TargetInstallFailed(WasmPackError):
    def __init__(self, target: str, detail: str) -> None:
        self.target = target
        super().__init__(f"Adding the {target} target with rustup failed, error = {detail}")


class CompilationFailed(WasmPackError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"build wasm failed, error = {detail}")


class OptimizationFailed(WasmPackError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"optimize wasm failed, error = {detail}")


class ArtifactTooLarge(WasmPackError):
    def __init__(self, limit: int, size: int) -> None:
        self.limit = limit
        self.size = size
        super().__init__(f"Wasm binary too large, max size is {limit}, but got {size}")


class ProjectInitFailed(WasmPackError):
    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        super().__init__(f"init project failed, error = {detail}")


class FileWriteFailed(WasmPackError):
    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        super().__init__(f"write to {path} failed, error = {detail}")


__all__ = [
    "ArtifactTooLarge",
    "CompilationFailed",
    "ConfigError",
    "FileWriteFailed",
    "InvalidLibraryKind",
    "ManifestParseError",
    "MissingLibraryKind",
    "OptimizationFailed",
    "ProjectInitFailed",
    "ProjectNotFound",
    "TargetInstallFailed",
    "ToolchainTooOld",
    "ToolchainUnavailable",
    "WasmPackError",
]
