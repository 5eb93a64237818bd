"""Level-filtered console output for pipeline progress."""
from __future__ import annotations

import sys


class Console:
    """Simple console output handler with configurable log level.

    Levels: none < error < warning < info < debug
    Default: 'warning'
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "warning": 2,
        "info": 3,
        "debug": 4,
    }

    def __init__(self, level: str = "warning") -> None:
        normalized = level.strip().lower()
        if normalized not in self.LEVELS:
            choices = ", ".join(self.LEVELS)
            raise ValueError(f"Unknown log level '{level}'. Expected one of: {choices}")
        self.level_name = normalized
        self.level = self.LEVELS[normalized]

    def enabled(self, level: str) -> bool:
        return self.level >= self.LEVELS[level]

    def error(self, message: str) -> None:
        if self.enabled("error"):
            print(f"[ERROR] {message}", file=sys.stderr)

    def warning(self, message: str) -> None:
        if self.enabled("warning"):
            print(f"[WARN] {message}", file=sys.stderr)

    def info(self, message: str) -> None:
        if self.enabled("info"):
            print(f"[INFO] {message}")

    def debug(self, message: str) -> None:
        if self.enabled("debug"):
            print(f"[DEBUG] {message}")
