"""Command-line implementation of the image toolkit.

This module maps each toolkit operation onto libtiff utilities,
exiftool, ImageMagick, netpbm, and Kakadu's ``kdu_compress``.
Argument vectors are built by pure functions so they can be tested
without the binaries installed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

from core.constants import (
    FOREIGN_METADATA_GROUPS,
    G4_ROWS_PER_STRIP,
    TOOL_CONVERT,
    TOOL_EXIFTOOL,
    TOOL_KDU_COMPRESS,
    TOOL_PNMTOTIFF,
    TOOL_TIFFCP,
    TOOL_TIFFINFO,
    TOOL_TIFFSET,
    TOOL_TIFFTOPNM,
)
from core.errors import TiffpressProbeError, TiffpressToolError
from core.types import (
    Jp2EncoderParams,
    MetadataSnapshot,
    TagTransfer,
    ToolPaths,
    TranscodeOperation,
)
from toolkit.command_runner import run_command, run_piped_to_file
from toolkit.tiffinfo_parser import parse_tiffinfo

_TRANSCODE_ARGUMENTS: dict[str, tuple[str, ...]] = {
    "flatten_alpha": ("-alpha", "off"),
    "strip_profiles": ("-strip",),
}


class CommandLineToolkit:
    """Toolkit backed by blocking subprocess calls."""

    def __init__(self, tool_paths: ToolPaths, timeout_seconds: float) -> None:
        self._tools = tool_paths
        self._timeout = timeout_seconds

    def probe(self, image_path: Path) -> MetadataSnapshot:
        """Read a metadata snapshot with tiffinfo."""
        try:
            report = run_command(
                TOOL_TIFFINFO,
                [self._tools.get(TOOL_TIFFINFO), str(image_path)],
                self._timeout,
            )
        except TiffpressToolError as error:
            raise TiffpressProbeError(
                TOOL_TIFFINFO, str(error), error.returncode, error.stderr
            ) from error
        return parse_tiffinfo(report)

    def strip_foreign_metadata(self, source_path: Path, output_path: Path) -> None:
        """Write a copy of the source without XMP or maker notes."""
        command = build_strip_metadata_command(
            self._tools.get(TOOL_EXIFTOOL), source_path, output_path
        )
        run_command(TOOL_EXIFTOOL, command, self._timeout)

    def transcode(
        self,
        source_path: Path,
        output_path: Path,
        operation: TranscodeOperation,
    ) -> None:
        """Rewrite pixels with ImageMagick for one operation."""
        command = build_transcode_command(
            self._tools.get(TOOL_CONVERT), source_path, output_path, operation
        )
        run_command(TOOL_CONVERT, command, self._timeout)

    def encode_jp2(
        self,
        source_path: Path,
        output_path: Path,
        params: Jp2EncoderParams,
    ) -> None:
        """Encode a TIFF into JPEG 2000 with kdu_compress."""
        command = build_kdu_command(
            self._tools.get(TOOL_KDU_COMPRESS), source_path, output_path, params
        )
        run_command(TOOL_KDU_COMPRESS, command, self._timeout)

    def recompress_g4(self, source_path: Path, output_path: Path) -> None:
        """Recompress a bitonal TIFF with Group 4 in a single strip."""
        run_piped_to_file(
            "g4_recompress",
            [self._tools.get(TOOL_TIFFTOPNM), str(source_path)],
            [
                self._tools.get(TOOL_PNMTOTIFF),
                "-g4",
                "-rowsperstrip",
                str(G4_ROWS_PER_STRIP),
            ],
            output_path,
            self._timeout,
        )

    def copy_tags(
        self,
        source_path: Path,
        target_path: Path,
        transfers: Sequence[TagTransfer],
        assignments: Mapping[str, str] | None = None,
    ) -> None:
        """Copy whitelisted tags from source to target in place."""
        command = build_copy_tags_command(
            self._tools.get(TOOL_EXIFTOOL), source_path, target_path, transfers, assignments
        )
        run_command(TOOL_EXIFTOOL, command, self._timeout)

    def assign_tags(self, target_path: Path, assignments: Mapping[str, str]) -> None:
        """Write literal tag values; an empty value deletes the tag."""
        command = [
            self._tools.get(TOOL_EXIFTOOL),
            *_assignment_arguments(assignments),
            "-overwrite_original",
            str(target_path),
        ]
        run_command(TOOL_EXIFTOOL, command, self._timeout)

    def set_tiff_tag(self, target_path: Path, tag_number: int, value: str) -> None:
        """Set one numeric TIFF tag with tiffset."""
        command = [
            self._tools.get(TOOL_TIFFSET),
            "-s",
            str(tag_number),
            value,
            str(target_path),
        ]
        run_command(TOOL_TIFFSET, command, self._timeout)

    def copy_first_page(self, source_path: Path, output_path: Path) -> None:
        """Copy only directory zero of a TIFF with tiffcp."""
        command = [self._tools.get(TOOL_TIFFCP), f"{source_path},0", str(output_path)]
        run_command(TOOL_TIFFCP, command, self._timeout)


def build_strip_metadata_command(
    exiftool: str, source_path: Path, output_path: Path
) -> list[str]:
    """Build the exiftool call that drops foreign metadata groups."""
    return [
        exiftool,
        *(f"-{group}=" for group in FOREIGN_METADATA_GROUPS),
        str(source_path),
        "-o",
        str(output_path),
    ]


def build_transcode_command(
    convert: str,
    source_path: Path,
    output_path: Path,
    operation: TranscodeOperation,
) -> list[str]:
    """Build the ImageMagick call for one transcode operation."""
    try:
        arguments = _TRANSCODE_ARGUMENTS[operation]
    except KeyError as error:
        raise TiffpressToolError(TOOL_CONVERT, f"unsupported operation: {operation}") from error
    return [convert, str(source_path), *arguments, str(output_path)]


def build_kdu_command(
    kdu_compress: str,
    source_path: Path,
    output_path: Path,
    params: Jp2EncoderParams,
) -> list[str]:
    """Build the kdu_compress call for one image.

    ``-jp2_space`` is only passed when the parameters name a colour space.
    """
    color_space = ["-jp2_space", params.color_space] if params.color_space else []
    return [
        kdu_compress,
        "-quiet",
        "-i",
        str(source_path),
        "-o",
        str(output_path),
        *color_space,
        f"Clevels={params.levels}",
        f"Clayers={params.layers}",
        f"Corder={params.order}",
        f"Cuse_sop={_yes_no(params.use_sop)}",
        f"Cuse_eph={_yes_no(params.use_eph)}",
        f"Cmodes={params.modes}",
        "-no_weights",
        "-slope",
        str(params.slope),
    ]


def build_copy_tags_command(
    exiftool: str,
    source_path: Path,
    target_path: Path,
    transfers: Sequence[TagTransfer],
    assignments: Mapping[str, str] | None = None,
) -> list[str]:
    """Build the exiftool ``-tagsFromFile`` call."""
    return [
        exiftool,
        "-tagsFromFile",
        str(source_path),
        *(_transfer_argument(transfer) for transfer in transfers),
        *_assignment_arguments(assignments or {}),
        "-overwrite_original",
        str(target_path),
    ]


def _transfer_argument(transfer: TagTransfer) -> str:
    if transfer.target_tag is None:
        return f"-{transfer.source_tag}"
    return f"-{transfer.source_tag}>{transfer.target_tag}"


def _assignment_arguments(assignments: Mapping[str, str]) -> list[str]:
    return [f"-{tag}={value}" for tag, value in assignments.items()]


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"
