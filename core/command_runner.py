"""Utilities for executing external tools and faking them in tests."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Sequence
import shlex
import subprocess


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str
    streamed: bool = False


class CommandError(RuntimeError):
    """Raised when a command exits with a non-zero status."""

    def __init__(self, result: CommandResult):
        message = f"Command failed with exit code {result.returncode}: {format_command(result.command)}"
        if result.streamed:
            message = f"{message}\nstdout/stderr already streamed above."
        elif result.stderr.strip():
            message = f"{message}\nstderr: {result.stderr.strip()}"
        super().__init__(message)
        self.result = result


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in command)


class CommandRunner:
    """Abstract command runner interface.

    ``run`` blocks until the child process exits. There is no timeout.
    Launch failures (executable missing from ``PATH``) surface as
    :class:`OSError`, non-zero exits as :class:`CommandError` when ``check``
    is set.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        stream: bool = False,
    ) -> CommandResult:
        raise NotImplementedError

    def format_command(self, command: Sequence[str]) -> str:
        return format_command(command)


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`."""

    @staticmethod
    def _finalize(result: CommandResult, *, check: bool) -> CommandResult:
        if check and result.returncode != 0:
            raise CommandError(result)
        return result

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        stream: bool = False,
    ) -> CommandResult:
        if not stream:
            process = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                check=False,
            )
            return self._finalize(
                CommandResult(
                    command=command,
                    returncode=process.returncode,
                    stdout=process.stdout,
                    stderr=process.stderr,
                ),
                check=check,
            )

        # Inherit stdio so compiler diagnostics reach the terminal as they happen.
        process = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd else None,
            check=False,
        )
        return self._finalize(
            CommandResult(
                command=command,
                returncode=process.returncode,
                stdout="",
                stderr="",
                streamed=True,
            ),
            check=check,
        )


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    stream: bool


@dataclass(slots=True)
class ScriptedResponse:
    """Canned outcome returned for commands starting with ``prefix``."""

    prefix: tuple[str, ...]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    missing: bool = False
    effects: List[Callable[[RecordedCommand], None]] = field(default_factory=list)


class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them.

    Responses are matched by longest command prefix. Unmatched commands
    succeed with empty output. A response marked ``missing`` raises
    :class:`FileNotFoundError` the way a launch of an absent executable does.
    """

    def __init__(self) -> None:
        self.commands: List[RecordedCommand] = []
        self._responses: List[ScriptedResponse] = []

    def respond(
        self,
        *prefix: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        missing: bool = False,
        effect: Callable[[RecordedCommand], None] | None = None,
    ) -> ScriptedResponse:
        """Script the result of commands starting with ``prefix``.

        ``effect`` is called with the recorded command before the result is
        returned, which lets tests emulate files a tool would write.
        """

        response = ScriptedResponse(
            prefix=tuple(prefix),
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
            missing=missing,
            effects=[effect] if effect else [],
        )
        self._responses = [item for item in self._responses if item.prefix != response.prefix]
        self._responses.append(response)
        return response

    def _match(self, command: Sequence[str]) -> ScriptedResponse | None:
        best: ScriptedResponse | None = None
        for response in self._responses:
            size = len(response.prefix)
            if tuple(command[:size]) != response.prefix:
                continue
            if best is None or size > len(best.prefix):
                best = response
        return best

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        stream: bool = False,
    ) -> CommandResult:
        record = RecordedCommand(
            command=[str(part) for part in command],
            cwd=str(cwd) if cwd else None,
            stream=stream,
        )
        self.commands.append(record)

        response = self._match(record.command)
        if response is None:
            return CommandResult(command=command, returncode=0, stdout="", stderr="", streamed=stream)
        if response.missing:
            raise FileNotFoundError(2, "No such file or directory", record.command[0])
        for effect in response.effects:
            effect(record)
        result = CommandResult(
            command=command,
            returncode=response.returncode,
            stdout="" if stream else response.stdout,
            stderr="" if stream else response.stderr,
            streamed=stream,
        )
        if check and result.returncode != 0:
            raise CommandError(result)
        return result

    def iter_commands(self) -> Iterable[RecordedCommand]:
        return iter(self.commands)

    def command_lines(self) -> List[List[str]]:
        return [record.command for record in self.commands]


__all__ = [
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "RecordedCommand",
    "RecordingCommandRunner",
    "ScriptedResponse",
    "SubprocessCommandRunner",
    "format_command",
]
