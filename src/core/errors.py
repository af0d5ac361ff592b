"""tiffpress exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class TiffpressError(Exception):
    """Base exception for all tiffpress failures."""


class TiffpressConfigError(TiffpressError):
    """Raised for invalid runtime configuration."""


class TiffpressEnvironmentError(TiffpressError):
    """Raised when a required external tool cannot be resolved."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Abort! This required command cannot be found: {tool_name}")
        self.tool_name = tool_name


class TiffpressToolError(TiffpressError):
    """Raised when an external tool invocation fails."""

    def __init__(
        self,
        tool_name: str,
        message: str,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(f"{tool_name}: {message}")
        self.tool_name = tool_name
        self.returncode = returncode
        self.stderr = stderr


class TiffpressProbeError(TiffpressToolError):
    """Raised when image metadata cannot be probed or parsed."""


class TiffpressStagingError(TiffpressError):
    """Raised for staging directory misuse or allocation failures."""


class TiffpressQuarantineError(TiffpressError):
    """Raised when a quarantine rename is refused or fails."""
