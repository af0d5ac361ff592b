"""tiffpress CLI entry point.

This module maps the shipment flags onto a configured pipeline driver.
Unknown arguments are reported and ignored; a missing external tool
aborts before any image is touched.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.console import echo, echo_bad, echo_good, echo_warn
from core.config import TiffpressConfig, parse_jobs
from core.errors import TiffpressConfigError, TiffpressEnvironmentError
from core.logging_config import configure_logging
from core.types import ConversionResult
from convert.driver import PipelineDriver
from convert.run_report import describe_result, render_summary_line, save_run_summary
from toolkit.cli_toolkit import CommandLineToolkit
from toolkit.tool_paths import resolve_tool_paths


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="tiffpress",
        allow_abbrev=False,
        description=(
            "G4-compress bitonal TIFFs and convert contone TIFFs to JPEG 2000 "
            "across a shipment tree."
        ),
    )
    parser.set_defaults(process_bitonals=True, process_contones=True)
    parser.add_argument(
        "--with-bitonals",
        dest="process_bitonals",
        action="store_true",
        help="Bitonal TIFFs will be G4-compressed (default)",
    )
    parser.add_argument(
        "--without-bitonals",
        dest="process_bitonals",
        action="store_false",
        help="Bitonal TIFFs will be ignored",
    )
    parser.add_argument(
        "--with-contones",
        dest="process_contones",
        action="store_true",
        help="Contone TIFFs will be converted to JP2s (default)",
    )
    parser.add_argument(
        "--without-contones",
        dest="process_contones",
        action="store_false",
        help="Contone TIFFs will be ignored",
    )
    parser.add_argument("--root", default=".", help="Shipment root directory (default: cwd)")
    parser.add_argument("--jobs", help="Number of images processed concurrently")
    parser.add_argument("--report", help="Write a JSON run summary to this path")
    parser.add_argument("--staging-root", help="Override TIFFPRESS_STAGING_ROOT")
    parser.add_argument("--verbose", action="store_true", help="Emit debug log events")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tiffpress CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    for argument in unknown:
        echo_warn(f"Ignoring unknown argument: {argument}")
    configure_logging(args.verbose)
    try:
        config = _build_config(args)
    except TiffpressConfigError as error:
        echo_bad(str(error))
        return 2
    try:
        tool_paths = resolve_tool_paths(config)
    except TiffpressEnvironmentError as error:
        echo_bad(str(error))
        return 1
    toolkit = CommandLineToolkit(tool_paths, config.tool_timeout_seconds)
    driver = PipelineDriver(toolkit, config, on_result=_print_result)
    try:
        summary = driver.run(Path(args.root))
    except TiffpressConfigError as error:
        echo_bad(str(error))
        return 2
    if args.report:
        try:
            report_path = save_run_summary(summary, Path(args.report))
        except OSError as error:
            echo_bad(f"Could not write run summary to {args.report}: {error}")
        else:
            echo_good(f"Wrote run summary to {report_path}")
    echo_good(f"Finished processing images. {render_summary_line(summary)}")
    return 0


def _build_config(args: argparse.Namespace) -> TiffpressConfig:
    """Build config from environment with CLI overrides applied."""
    config = TiffpressConfig.from_env()
    config = replace(
        config,
        process_bitonals=args.process_bitonals,
        process_contones=args.process_contones,
    )
    if args.jobs is not None:
        config = replace(config, jobs=parse_jobs(args.jobs, "--jobs"))
    if args.staging_root:
        config = replace(config, staging_root=Path(args.staging_root).expanduser().resolve())
    return config


def _print_result(result: ConversionResult) -> None:
    level, message = describe_result(result)
    echo(level, message)
