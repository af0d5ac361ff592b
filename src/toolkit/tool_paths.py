"""Resolve external tool executables before any image is touched."""

from __future__ import annotations

from pathlib import Path
import shutil
from typing import Callable

from core.config import TiffpressConfig
from core.constants import PREFERRED_TOOL_LOCATIONS, REQUIRED_TOOLS
from core.errors import TiffpressEnvironmentError
from core.types import ToolPaths

WhichFunction = Callable[[str], "str | None"]


def resolve_tool_paths(
    config: TiffpressConfig,
    which: WhichFunction = shutil.which,
) -> ToolPaths:
    """Resolve every required tool or fail.

    Explicit overrides win, then pinned install locations, then PATH.

    Args:
        config: Runtime configuration carrying tool overrides.
        which: PATH lookup function.

    Returns:
        Resolved executable paths.

    Raises:
        TiffpressEnvironmentError: For the first tool that cannot be found.
    """
    executables: dict[str, str] = {}
    for tool_name in REQUIRED_TOOLS:
        resolved = _resolve_one(tool_name, config, which)
        if resolved is None:
            raise TiffpressEnvironmentError(tool_name)
        executables[tool_name] = resolved
    return ToolPaths(executables=executables)


def _resolve_one(tool_name: str, config: TiffpressConfig, which: WhichFunction) -> str | None:
    override = config.tool_overrides.get(tool_name)
    if override:
        return which(override)
    preferred = PREFERRED_TOOL_LOCATIONS.get(tool_name)
    if preferred is not None and _is_executable_file(preferred):
        return str(preferred)
    return which(tool_name)


def _is_executable_file(path: Path) -> bool:
    return path.is_file() and shutil.which(str(path)) is not None
