"""Unit tests for tiffinfo report parsing."""

from __future__ import annotations

import pytest

from core.errors import TiffpressProbeError
from toolkit.tiffinfo_parser import parse_tiffinfo

_CONTONE_REPORT = """TIFF Directory at offset 0x2dc6c08 (47999496)
  Subfile Type: (0 = 0x0)
  Image Width: 4000 Image Length: 3000
  Resolution: 400, 400 pixels/inch
  Bits/Sample: 8
  Compression Scheme: None
  Photometric Interpretation: RGB color
  Extra Samples: 1<unassoc-alpha>
  Samples/Pixel: 4
  Rows/Strip: 1
  Planar Configuration: single image plane
  ICC Profile: <present>, 3144 bytes
  DateTime: 2012:07:16 10:00:00
  Software: Adobe Photoshop CS5 Macintosh
  Artist: Digitization Unit
"""

_BITONAL_REPORT = """TIFF Directory at offset 0x8 (8)
  Image Width: 2550 Image Length: 3300
  Bits/Sample: 1
  Compression Scheme: None
  Photometric Interpretation: min-is-white
  Samples/Pixel: 1
"""


def test_parse_contone_report_reads_routing_fields() -> None:
    """Contone reports should expose depth, channels, alpha, and ICC flags."""
    snapshot = parse_tiffinfo(_CONTONE_REPORT)

    assert snapshot.bits_per_sample == (8,)
    assert snapshot.samples_per_pixel == 4
    assert snapshot.has_unassociated_alpha and snapshot.has_icc_profile
    assert (snapshot.width, snapshot.height) == (4000, 3000)


def test_parse_contone_report_reads_descriptive_fields() -> None:
    """Datetime and software should be captured verbatim."""
    snapshot = parse_tiffinfo(_CONTONE_REPORT)

    assert snapshot.datetime == "2012:07:16 10:00:00"
    assert snapshot.software == "Adobe Photoshop CS5 Macintosh"


def test_parse_bitonal_report_without_optional_tags() -> None:
    """Missing optional tags should become None or False."""
    snapshot = parse_tiffinfo(_BITONAL_REPORT)

    assert snapshot.bits_per_sample == (1,)
    assert snapshot.datetime is None and snapshot.software is None
    assert not snapshot.has_unassociated_alpha and not snapshot.has_icc_profile


def test_parse_empty_tag_values_do_not_borrow_next_line() -> None:
    """Blank Software and DateTime lines should read as absent."""
    report = _BITONAL_REPORT + "  DateTime: \n  Software: \n  Artist: Digitization Unit\n"

    snapshot = parse_tiffinfo(report)

    assert snapshot.software is None
    assert snapshot.datetime is None


def test_parse_collects_depths_across_directories() -> None:
    """Multi-directory files should report every distinct depth."""
    snapshot = parse_tiffinfo(_CONTONE_REPORT + _BITONAL_REPORT)

    assert snapshot.bits_per_sample == (8, 1)
    assert snapshot.width == 4000


def test_parse_rejects_report_without_directory() -> None:
    """Non-TIFF output should raise a probe error."""
    with pytest.raises(TiffpressProbeError):
        parse_tiffinfo("tiffinfo: Not a TIFF or MDI file, bad magic number 18761.\n")
