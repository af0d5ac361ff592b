"""Unit tests for subprocess execution helpers."""

from __future__ import annotations

import sys

import pytest

from core.errors import TiffpressToolError
from toolkit.command_runner import run_command, run_piped_to_file


def test_run_command_returns_stdout() -> None:
    """Successful tools should return captured stdout."""
    output = run_command("echo", [sys.executable, "-c", "print('Bits/Sample: 8')"], 30.0)

    assert output.strip() == "Bits/Sample: 8"


def test_run_command_raises_with_returncode_and_stderr() -> None:
    """Non-zero exits should raise with exit status and stderr tail."""
    script = "import sys; sys.stderr.write('bad magic'); sys.exit(3)"

    with pytest.raises(TiffpressToolError) as error_info:
        run_command("tiffinfo", [sys.executable, "-c", script], 30.0)

    assert error_info.value.returncode == 3 and "bad magic" in error_info.value.stderr


def test_run_command_raises_for_missing_executable(tmp_path) -> None:
    """Unlaunchable executables should raise tool errors."""
    with pytest.raises(TiffpressToolError):
        run_command("missing", [str(tmp_path / "no-such-tool")], 30.0)


def test_run_piped_to_file_writes_consumer_output(tmp_path) -> None:
    """Piped commands should stream producer output through the consumer."""
    output_path = tmp_path / "out.bin"
    producer = [sys.executable, "-c", "import sys; sys.stdout.write('pixels')"]
    consumer = [
        sys.executable,
        "-c",
        "import sys; sys.stdout.write(sys.stdin.read().upper())",
    ]

    run_piped_to_file("g4_recompress", producer, consumer, output_path, 30.0)

    assert output_path.read_text() == "PIXELS"


def test_run_piped_to_file_raises_when_producer_fails(tmp_path) -> None:
    """A failing producer should fail the whole operation."""
    producer = [sys.executable, "-c", "import sys; sys.exit(2)"]
    consumer = [sys.executable, "-c", "import sys; sys.stdin.read()"]

    with pytest.raises(TiffpressToolError):
        run_piped_to_file("g4_recompress", producer, consumer, tmp_path / "out.bin", 30.0)
