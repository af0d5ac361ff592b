"""Colored status markers for operator-facing console output."""

from __future__ import annotations

import sys
from typing import TextIO

from convert.run_report import StatusLevel

_MARKER_COLORS: dict[str, str] = {
    "good": "\033[1;32m",
    "bad": "\033[1;31m",
    "warn": "\033[1;33m",
}
_RESET = "\033[0m"


def echo(level: StatusLevel, message: str, stream: TextIO | None = None) -> None:
    """Print one message behind a colored asterisk."""
    target = stream if stream is not None else sys.stdout
    print(f"{_MARKER_COLORS[level]} *{_RESET} {message}", file=target)


def echo_good(message: str) -> None:
    """Print a success line."""
    echo("good", message)


def echo_bad(message: str) -> None:
    """Print a failure line."""
    echo("bad", message)


def echo_warn(message: str) -> None:
    """Print a warning line."""
    echo("warn", message)
