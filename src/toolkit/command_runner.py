"""Blocking subprocess execution for external image tools."""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Sequence

from core.constants import STDERR_TAIL_CHARS
from core.errors import TiffpressToolError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def run_command(tool_name: str, command: Sequence[str], timeout_seconds: float) -> str:
    """Run one tool to completion and return its stdout.

    Args:
        tool_name: Logical tool name used in errors and logs.
        command: Full argument vector, executable first.
        timeout_seconds: Hard time limit for the process.

    Returns:
        Captured standard output.

    Raises:
        TiffpressToolError: If the tool cannot start, times out, or exits non-zero.
    """
    _LOGGER.debug("tool_invoked", tool=tool_name, command=list(command))
    try:
        completed = subprocess.run(
            list(command),
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
        )
    except FileNotFoundError as error:
        raise TiffpressToolError(tool_name, f"executable not found: {command[0]}") from error
    except subprocess.TimeoutExpired as error:
        raise TiffpressToolError(tool_name, f"timed out after {timeout_seconds}s") from error
    if completed.returncode != 0:
        raise TiffpressToolError(
            tool_name,
            f"exited with status {completed.returncode}",
            returncode=completed.returncode,
            stderr=completed.stderr[-STDERR_TAIL_CHARS:],
        )
    return completed.stdout


def run_piped_to_file(
    tool_name: str,
    producer: Sequence[str],
    consumer: Sequence[str],
    output_path: Path,
    timeout_seconds: float,
) -> None:
    """Run ``producer | consumer > output_path`` and check both exit codes.

    Args:
        tool_name: Logical name of the combined operation.
        producer: Argument vector writing to stdout.
        consumer: Argument vector reading stdin.
        output_path: File receiving the consumer's stdout.
        timeout_seconds: Time limit applied to the consumer.

    Raises:
        TiffpressToolError: If either process fails or times out.
    """
    _LOGGER.debug("tool_invoked", tool=tool_name, producer=list(producer), consumer=list(consumer))
    try:
        with output_path.open("wb") as output_file:
            upstream = subprocess.Popen(
                list(producer), stdout=subprocess.PIPE, stderr=subprocess.DEVNULL
            )
            try:
                downstream = subprocess.run(
                    list(consumer),
                    stdin=upstream.stdout,
                    stdout=output_file,
                    stderr=subprocess.PIPE,
                    check=False,
                    timeout=timeout_seconds,
                )
            finally:
                if upstream.stdout is not None:
                    upstream.stdout.close()
                upstream_code = _wait_or_kill(upstream, timeout_seconds)
    except FileNotFoundError as error:
        raise TiffpressToolError(tool_name, f"executable not found: {error.filename}") from error
    except subprocess.TimeoutExpired as error:
        raise TiffpressToolError(tool_name, f"timed out after {timeout_seconds}s") from error
    if upstream_code != 0:
        raise TiffpressToolError(
            tool_name, f"{producer[0]} exited with status {upstream_code}", returncode=upstream_code
        )
    if downstream.returncode != 0:
        raise TiffpressToolError(
            tool_name,
            f"{consumer[0]} exited with status {downstream.returncode}",
            returncode=downstream.returncode,
            stderr=downstream.stderr.decode("utf-8", errors="replace")[-STDERR_TAIL_CHARS:],
        )


def _wait_or_kill(process: subprocess.Popen[bytes], timeout_seconds: float) -> int:
    try:
        return process.wait(timeout=timeout_seconds)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()
        raise
