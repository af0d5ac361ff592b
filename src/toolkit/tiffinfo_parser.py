"""Parse ``tiffinfo`` text reports into metadata snapshots."""

from __future__ import annotations

import re

from core.errors import TiffpressProbeError
from core.constants import TOOL_TIFFINFO
from core.types import MetadataSnapshot

_DIRECTORY_PATTERN = re.compile(r"^TIFF Directory at offset", re.MULTILINE)
_DIMENSIONS_PATTERN = re.compile(r"Image Width:\s*(\d+)\s+Image Length:\s*(\d+)")
_BITS_PATTERN = re.compile(r"^[ \t]*Bits/Sample:[ \t]*(\d+)", re.MULTILINE)
_SAMPLES_PATTERN = re.compile(r"^[ \t]*Samples/Pixel:[ \t]*(\d+)", re.MULTILINE)
_ALPHA_PATTERN = re.compile(r"Extra Samples:\s*1<unassoc-alpha>")
_ICC_PATTERN = re.compile(r"ICC Profile:\s*<present>")
_DATETIME_PATTERN = re.compile(r"^[ \t]*DateTime:[ \t]*([^\n]*)$", re.MULTILINE)
_SOFTWARE_PATTERN = re.compile(r"^[ \t]*Software:[ \t]*([^\n]*)$", re.MULTILINE)


def parse_tiffinfo(report: str) -> MetadataSnapshot:
    """Build a snapshot from a tiffinfo report.

    Depths are collected across every directory so that inconsistent
    multi-page files can be rejected; all other fields come from the
    first directory.

    Args:
        report: Full tiffinfo stdout.

    Returns:
        Parsed metadata snapshot.

    Raises:
        TiffpressProbeError: If the report contains no TIFF directory.
    """
    directories = _split_directories(report)
    if not directories:
        raise TiffpressProbeError(TOOL_TIFFINFO, "report contains no TIFF directory")
    first = directories[0]
    width, height = _parse_dimensions(first)
    return MetadataSnapshot(
        bits_per_sample=_distinct_depths(report),
        samples_per_pixel=_parse_optional_int(_SAMPLES_PATTERN, first),
        has_unassociated_alpha=_ALPHA_PATTERN.search(first) is not None,
        has_icc_profile=_ICC_PATTERN.search(first) is not None,
        width=width,
        height=height,
        datetime=_parse_optional_text(_DATETIME_PATTERN, first),
        software=_parse_optional_text(_SOFTWARE_PATTERN, first),
    )


def _split_directories(report: str) -> list[str]:
    starts = [match.start() for match in _DIRECTORY_PATTERN.finditer(report)]
    if not starts:
        return []
    bounds = starts[1:] + [len(report)]
    return [report[start:end] for start, end in zip(starts, bounds)]


def _distinct_depths(report: str) -> tuple[int, ...]:
    depths: list[int] = []
    for match in _BITS_PATTERN.finditer(report):
        depth = int(match.group(1))
        if depth not in depths:
            depths.append(depth)
    return tuple(depths)


def _parse_dimensions(directory: str) -> tuple[int | None, int | None]:
    match = _DIMENSIONS_PATTERN.search(directory)
    if match is None:
        return None, None
    return int(match.group(1)), int(match.group(2))


def _parse_optional_int(pattern: re.Pattern[str], directory: str) -> int | None:
    match = pattern.search(directory)
    return int(match.group(1)) if match else None


def _parse_optional_text(pattern: re.Pattern[str], directory: str) -> str | None:
    match = pattern.search(directory)
    if match is None:
        return None
    value = match.group(1).strip()
    return value or None
