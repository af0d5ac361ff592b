"""Core constants used across tiffpress modules.

This module centralizes file naming, encoder settings, and tag tables.
Keeping values here avoids magic literals in pipeline logic.
"""

from __future__ import annotations

from pathlib import Path

SOURCE_IMAGE_SUFFIX = ".tif"
QUARANTINE_MARKER = "-error"
CONTONE_OUTPUT_SUFFIX = ".jp2"
PARTIAL_OUTPUT_SUFFIX = ".partial"
MIN_DISCOVERY_DEPTH = 2

STAGING_DIR_PREFIX = "tiffpress-"
PREFERRED_STAGING_ROOT = Path("/ram")
DEFAULT_TOOL_TIMEOUT_SECONDS = 600.0
DEFAULT_JOBS = 1
STDERR_TAIL_CHARS = 4000

CONTONE_BITS_PER_SAMPLE = 8
BITONAL_BITS_PER_SAMPLE = 1
RGB_SAMPLES_PER_PIXEL = 3
LUMINANCE_SAMPLES_PER_PIXEL = 1

JP2_LEVEL_MIN = 5
JP2_LEVEL_SIZE_DIVISOR = 100
JP2_LAYERS = 8
JP2_ORDER = "RLCP"
JP2_USE_SOP = True
JP2_USE_EPH = True
JP2_MODES = "RESET|RESTART|CAUSAL|ERTERM|SEGMARK"
JP2_SLOPE = 42988
JP2_SPACE_RGB = "sRGB"
JP2_SPACE_LUMINANCE = "sLUM"

# pnmtotiff wants a rows-per-strip larger than any scan to emit one strip.
G4_ROWS_PER_STRIP = 196136698

DATE_FORMAT_TIFF = "%Y:%m:%d %H:%M:%S"
DATE_FORMAT_XMP = "%Y-%m-%dT%H:%M:%S"

TIFF_TAG_DOCUMENT_NAME = 269
TIFF_TAG_SOFTWARE = 305
TIFF_TAG_DATETIME = 306

TOOL_TIFFINFO = "tiffinfo"
TOOL_TIFFSET = "tiffset"
TOOL_TIFFCP = "tiffcp"
TOOL_EXIFTOOL = "exiftool"
TOOL_KDU_COMPRESS = "kdu_compress"
TOOL_CONVERT = "convert"
TOOL_TIFFTOPNM = "tifftopnm"
TOOL_PNMTOTIFF = "pnmtotiff"
REQUIRED_TOOLS = (
    TOOL_TIFFINFO,
    TOOL_TIFFSET,
    TOOL_TIFFCP,
    TOOL_EXIFTOOL,
    TOOL_KDU_COMPRESS,
    TOOL_CONVERT,
    TOOL_TIFFTOPNM,
    TOOL_PNMTOTIFF,
)
PREFERRED_TOOL_LOCATIONS = {
    TOOL_KDU_COMPRESS: Path("/l/local/kakadu-7.2/bin/Linux-x86-64-gcc/kdu_compress"),
    TOOL_CONVERT: Path("/usr/bin/convert"),
}
TOOL_OVERRIDE_ENV_TEMPLATE = "TIFFPRESS_{name}_PATH"

FOREIGN_METADATA_GROUPS = ("XMP:All", "MakerNotes:All")

CONTONE_TAG_WHITELIST = (
    "ImageWidth",
    "ImageHeight",
    "BitsPerSample",
    "PhotometricInterpretation",
    "Orientation",
    "SamplesPerPixel",
    "XResolution",
    "YResolution",
    "ResolutionUnit",
    "Artist",
    "Make",
    "Model",
    "Software",
)
CONTONE_CHANNEL_TAGS = (
    "BitsPerSample",
    "SamplesPerPixel",
    "PhotometricInterpretation",
)
BITONAL_TAG_WHITELIST = (
    "DocumentName",
    "Orientation",
    "XResolution",
    "YResolution",
    "ResolutionUnit",
    "ModifyDate",
    "Artist",
    "Make",
    "Model",
    "Software",
)
BITONAL_CLEARED_TAGS = ("ImageDescription",)

