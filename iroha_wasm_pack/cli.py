"""Command line interface for iroha_wasm_pack."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Iterable
import sys

from core.command_runner import CommandRunner, SubprocessCommandRunner

from .build_steps import BuildSteps
from .config import ToolConfig, resolve_config_directories
from .console import Console
from .context import BuildArgs, BuildContext
from .errors import ConfigError, WasmPackError
from .scaffold import NewArgs, ScaffoldSteps
from .toolchain import Toolchain

PROG = "iroha_wasm_pack"
_GLOBAL_OPTIONS_WITH_VALUE = frozenset({"-C", "--config-dir", "--log-level"})


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog=PROG,
        description="Build and release your wasm smart contract",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-C",
        "--config-dir",
        dest="config_dirs",
        action="append",
        default=[],
        metavar="PATH",
        help="Additional configuration directory (repeat or separate with PATH separator)",
    )
    parser.add_argument("--log-level", choices=list(Console.LEVELS), help="Console verbosity")
    parser.add_argument("-v", "--verbose", action="store_true", help="Shortcut for --log-level debug")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "build",
        help="Build your wasm package",
        description="Build your wasm package. Every argument after `build` is passed to cargo.",
        allow_abbrev=False,
        usage=f"{PROG} build [extra-options ...]",
    )

    new_parser = subparsers.add_parser("new", help="Create a new project")
    new_parser.add_argument("name", help="Name of the new project")
    return parser


def _command_index(argv: list[str]) -> int | None:
    """Return the position of the subcommand, skipping global options and their values."""

    index = 0
    while index < len(argv):
        token = argv[index]
        if token in _GLOBAL_OPTIONS_WITH_VALUE:
            index += 2
            continue
        if not token.startswith("-"):
            return index
        index += 1
    return None


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = _build_parser()
    tokens = list(argv)
    index = _command_index(tokens)
    if index is None or tokens[index] != "build":
        return parser.parse_args(tokens)

    # Only the tokens after `build` are cargo pass-through options; anything
    # unknown before it is a usage error.
    args = parser.parse_args(tokens[: index + 1])
    args.extra_options = tokens[index + 1 :]
    return args


def _make_console(args: Namespace, config: ToolConfig) -> Console:
    if getattr(args, "log_level", None):
        return Console(args.log_level)
    if getattr(args, "verbose", False):
        return Console("debug")
    if config.log_level:
        try:
            return Console(config.log_level)
        except ValueError as exc:
            origin = config.sources[-1] if config.sources else None
            raise ConfigError(str(exc), origin) from exc
    return Console()


def _prepare(args: Namespace, workspace: Path, runner: CommandRunner | None) -> tuple[Console, Toolchain]:
    directories = resolve_config_directories(workspace, getattr(args, "config_dirs", []))
    config = ToolConfig.load(directories, workspace=workspace)
    console = _make_console(args, config)
    for source in config.sources:
        console.debug(f"Loaded configuration from {source}")
    toolchain = Toolchain(runner or SubprocessCommandRunner(), tools=config.tools, console=console)
    return console, toolchain


def _handle_build(args: Namespace, workspace: Path, *, runner: CommandRunner | None = None) -> int:
    console, toolchain = _prepare(args, workspace, runner)
    build_args = BuildArgs(extra_options=tuple(args.extra_options))
    ctx = BuildContext.from_args(build_args, workspace)
    console.debug(f"Project root: {ctx.root} ({ctx.profile}); artifacts {ctx.wasm_in} -> {ctx.wasm_out}")
    BuildSteps(toolchain, console=console).pipeline().run(build_args, ctx)
    return 0


def _handle_new(args: Namespace, workspace: Path, *, runner: CommandRunner | None = None) -> int:
    console, toolchain = _prepare(args, workspace, runner)
    new_args = NewArgs(name=args.name, workspace=workspace)
    ScaffoldSteps(toolchain, console=console).pipeline().run(new_args)
    console.info(f"Created project '{new_args.name}' in {new_args.project_dir}")
    return 0


_HANDLERS = {"build": _handle_build, "new": _handle_new}


def main(argv: Iterable[str] | None = None, *, runner: CommandRunner | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    workspace = Path.cwd()

    handler = _HANDLERS[args.command]
    try:
        return handler(args, workspace, runner=runner)
    except WasmPackError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
