"""Runtime configuration model for tiffpress.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
import tempfile
from typing import Mapping

from core.constants import (
    DEFAULT_JOBS,
    DEFAULT_TOOL_TIMEOUT_SECONDS,
    PREFERRED_STAGING_ROOT,
    REQUIRED_TOOLS,
    TOOL_OVERRIDE_ENV_TEMPLATE,
)
from core.errors import TiffpressConfigError


@dataclass(frozen=True)
class TiffpressConfig:
    """Validated runtime configuration.

    Attributes:
        staging_root: Directory under which per-image staging dirs are made.
        tool_timeout_seconds: Upper bound for one external tool invocation.
        jobs: Number of images processed concurrently.
        process_bitonals: Whether bitonal images are recompressed.
        process_contones: Whether contone images are converted to JP2.
        tool_overrides: Explicit executable paths keyed by tool name.
    """

    staging_root: Path
    tool_timeout_seconds: float = DEFAULT_TOOL_TIMEOUT_SECONDS
    jobs: int = DEFAULT_JOBS
    process_bitonals: bool = True
    process_contones: bool = True
    tool_overrides: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "TiffpressConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TiffpressConfigError: If environment values are invalid.
        """
        staging_value = os.getenv("TIFFPRESS_STAGING_ROOT")
        timeout_value = os.getenv("TIFFPRESS_TOOL_TIMEOUT", str(DEFAULT_TOOL_TIMEOUT_SECONDS))
        jobs_value = os.getenv("TIFFPRESS_JOBS", str(DEFAULT_JOBS))
        return cls(
            staging_root=_resolve_staging_root(staging_value),
            tool_timeout_seconds=_parse_timeout(timeout_value),
            jobs=parse_jobs(jobs_value, "TIFFPRESS_JOBS"),
            tool_overrides=_read_tool_overrides(),
        )


def parse_jobs(raw_value: str, source_name: str) -> int:
    """Parse a positive worker count.

    Args:
        raw_value: Raw string from environment or CLI.
        source_name: Name used in the error message.

    Returns:
        Parsed worker count.

    Raises:
        TiffpressConfigError: If value is not a positive integer.
    """
    try:
        jobs = int(raw_value)
    except ValueError as error:
        raise TiffpressConfigError(
            f"Invalid {source_name} value: expected integer, got '{raw_value}'."
        ) from error
    if jobs < 1:
        raise TiffpressConfigError(f"Invalid {source_name} value: must be >= 1, got {jobs}.")
    return jobs


def _parse_timeout(raw_value: str) -> float:
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise TiffpressConfigError(
            "Invalid TIFFPRESS_TOOL_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise TiffpressConfigError("Invalid TIFFPRESS_TOOL_TIMEOUT value: must be positive.")
    return timeout


def _resolve_staging_root(raw_value: str | None) -> Path:
    """Pick the staging root, preferring the ramdisk used on scan servers."""
    if raw_value:
        return Path(raw_value).expanduser().resolve()
    if PREFERRED_STAGING_ROOT.is_dir() and os.access(PREFERRED_STAGING_ROOT, os.W_OK):
        return PREFERRED_STAGING_ROOT
    return Path(tempfile.gettempdir()).resolve()


def _read_tool_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for tool_name in REQUIRED_TOOLS:
        env_name = TOOL_OVERRIDE_ENV_TEMPLATE.format(name=tool_name.upper())
        value = os.getenv(env_name)
        if value:
            overrides[tool_name] = value
    return overrides
