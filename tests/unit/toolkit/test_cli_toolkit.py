"""Unit tests for command-line toolkit argument vectors."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import TiffpressToolError
from core.types import Jp2EncoderParams, TagTransfer
from toolkit.cli_toolkit import (
    build_copy_tags_command,
    build_kdu_command,
    build_strip_metadata_command,
    build_transcode_command,
)


def _params(levels: int = 6, color_space: str | None = "sRGB") -> Jp2EncoderParams:
    return Jp2EncoderParams(
        levels=levels,
        layers=8,
        order="RLCP",
        use_sop=True,
        use_eph=True,
        modes="RESET|RESTART|CAUSAL|ERTERM|SEGMARK",
        slope=42988,
        color_space=color_space,
    )


def test_kdu_command_carries_fixed_and_derived_parameters() -> None:
    """Encoder call should include levels, color space, and fixed settings."""
    command = build_kdu_command("kdu_compress", Path("in.tif"), Path("out.jp2"), _params())

    assert command[:6] == ["kdu_compress", "-quiet", "-i", "in.tif", "-o", "out.jp2"]
    assert "Clevels=6" in command and "Clayers=8" in command
    assert "Corder=RLCP" in command and "Cuse_sop=yes" in command and "Cuse_eph=yes" in command
    assert "Cmodes=RESET|RESTART|CAUSAL|ERTERM|SEGMARK" in command
    assert command[-3:] == ["-no_weights", "-slope", "42988"]
    assert command[command.index("-jp2_space") + 1] == "sRGB"


def test_kdu_command_omits_unknown_color_space() -> None:
    """Without a colour space the encoder should infer it."""
    command = build_kdu_command(
        "kdu_compress", Path("in.tif"), Path("out.jp2"), _params(color_space=None)
    )

    assert "-jp2_space" not in command
    assert command[6] == "Clevels=6"


def test_strip_metadata_command_drops_xmp_and_maker_notes() -> None:
    """Stripping should clear XMP and maker notes into a new file."""
    command = build_strip_metadata_command("exiftool", Path("a.tif"), Path("sparse.tif"))

    assert command == ["exiftool", "-XMP:All=", "-MakerNotes:All=", "a.tif", "-o", "sparse.tif"]


def test_transcode_command_maps_operations() -> None:
    """Each transcode operation should map onto ImageMagick flags."""
    flatten = build_transcode_command("convert", Path("s.tif"), Path("o.tif"), "flatten_alpha")
    strip = build_transcode_command("convert", Path("s.tif"), Path("o.tif"), "strip_profiles")

    assert flatten == ["convert", "s.tif", "-alpha", "off", "o.tif"]
    assert strip == ["convert", "s.tif", "-strip", "o.tif"]


def test_transcode_command_rejects_unknown_operation() -> None:
    """Unknown operations should fail as tool errors."""
    with pytest.raises(TiffpressToolError):
        build_transcode_command("convert", Path("s.tif"), Path("o.tif"), "sharpen")  # type: ignore[arg-type]


def test_copy_tags_command_renders_transfers_and_assignments() -> None:
    """Transfers and literal assignments should render as exiftool arguments."""
    command = build_copy_tags_command(
        "exiftool",
        Path("orig.tif"),
        Path("new.jp2"),
        [TagTransfer("IFD0:Artist", "XMP-tiff:Artist"), TagTransfer("IFD0:Orientation")],
        {"XMP-dc:source": "a.jp2", "IFD0:ImageDescription": ""},
    )

    assert command == [
        "exiftool",
        "-tagsFromFile",
        "orig.tif",
        "-IFD0:Artist>XMP-tiff:Artist",
        "-IFD0:Orientation",
        "-XMP-dc:source=a.jp2",
        "-IFD0:ImageDescription=",
        "-overwrite_original",
        "new.jp2",
    ]
