"""Public SDK surface for tiffpress.

This module provides a stable import path for programmatic users.
It re-exports the driver, configuration, and result models.
"""

from __future__ import annotations

from pathlib import Path

from core.config import TiffpressConfig
from core.types import (
    ConversionResult,
    Converted,
    Ignored,
    MetadataSnapshot,
    Quarantined,
    RunSummary,
    SourceImage,
)
from convert.classifier import classify_snapshot
from convert.driver import PipelineDriver
from convert.encoder_params import compute_decomposition_levels
from convert.run_report import save_run_summary
from toolkit.cli_toolkit import CommandLineToolkit
from toolkit.tool_paths import resolve_tool_paths

__all__ = [
    "ConversionResult",
    "Converted",
    "Ignored",
    "MetadataSnapshot",
    "PipelineDriver",
    "Quarantined",
    "RunSummary",
    "SourceImage",
    "TiffpressConfig",
    "classify_snapshot",
    "compute_decomposition_levels",
    "process_shipment",
    "save_run_summary",
]


def process_shipment(root: str | Path, config: TiffpressConfig | None = None) -> RunSummary:
    """Process a shipment tree with the installed command-line tools.

    Args:
        root: Shipment root directory.
        config: Optional configuration; read from the environment when omitted.

    Returns:
        Run summary with one result per image.

    Raises:
        TiffpressEnvironmentError: If a required tool is missing.
    """
    runtime_config = config or TiffpressConfig.from_env()
    toolkit = CommandLineToolkit(
        resolve_tool_paths(runtime_config), runtime_config.tool_timeout_seconds
    )
    return PipelineDriver(toolkit, runtime_config).run(Path(root))
