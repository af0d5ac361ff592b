"""In-memory stand-in for the command-line image toolkit."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Mapping, Sequence

from core.config import TiffpressConfig
from core.errors import TiffpressProbeError, TiffpressToolError
from core.types import (
    Jp2EncoderParams,
    MetadataSnapshot,
    SourceImage,
    TagTransfer,
    TranscodeOperation,
)

FIXED_NOW = datetime(2026, 10, 19, 8, 30, 0)


def fixed_clock() -> datetime:
    """Deterministic clock for pipeline tests."""
    return FIXED_NOW


@dataclass
class TagCopy:
    """One recorded copy_tags call."""

    source: Path
    target: Path
    transfers: tuple[TagTransfer, ...]
    assignments: dict[str, str]


@dataclass
class FakeToolkit:
    """Simulate tool side effects on disk and inject failures by key.

    Failure keys: ``probe``, ``strip_foreign_metadata``,
    ``transcode:<operation>``, ``encode_jp2``, ``recompress_g4``,
    ``copy_tags``, ``copy_tags:from:<source name>``, ``assign_tags``,
    ``set_tiff_tag:<tag number>``, ``copy_first_page``.
    """

    snapshots: dict[str, MetadataSnapshot] = field(default_factory=dict)
    failures: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    tag_copies: list[TagCopy] = field(default_factory=list)
    assignments: list[tuple[Path, dict[str, str]]] = field(default_factory=list)
    tiff_tags: list[tuple[Path, int, str]] = field(default_factory=list)
    encoder_params: list[Jp2EncoderParams] = field(default_factory=list)
    touched_paths: list[Path] = field(default_factory=list)

    def probe(self, image_path: Path) -> MetadataSnapshot:
        self._enter("probe")
        snapshot = self.snapshots.get(image_path.name)
        if snapshot is None:
            raise TiffpressProbeError("tiffinfo", f"no snapshot for {image_path.name}")
        return snapshot

    def strip_foreign_metadata(self, source_path: Path, output_path: Path) -> None:
        self._enter("strip_foreign_metadata")
        self._write(output_path, source_path.read_bytes() + b"|stripped")

    def transcode(
        self,
        source_path: Path,
        output_path: Path,
        operation: TranscodeOperation,
    ) -> None:
        self._enter(f"transcode:{operation}")
        self._write(output_path, source_path.read_bytes() + f"|{operation}".encode())

    def encode_jp2(
        self,
        source_path: Path,
        output_path: Path,
        params: Jp2EncoderParams,
    ) -> None:
        self._enter("encode_jp2")
        self.encoder_params.append(params)
        self._write(output_path, b"JP2:" + source_path.read_bytes())

    def recompress_g4(self, source_path: Path, output_path: Path) -> None:
        self._enter("recompress_g4")
        self._write(output_path, b"G4:" + source_path.read_bytes())

    def copy_tags(
        self,
        source_path: Path,
        target_path: Path,
        transfers: Sequence[TagTransfer],
        assignments: Mapping[str, str] | None = None,
    ) -> None:
        self._enter("copy_tags", f"copy_tags:from:{source_path.name}")
        if not source_path.exists() or not target_path.exists():
            raise TiffpressToolError("exiftool", "missing source or target")
        self.tag_copies.append(
            TagCopy(source_path, target_path, tuple(transfers), dict(assignments or {}))
        )

    def assign_tags(self, target_path: Path, assignments: Mapping[str, str]) -> None:
        self._enter("assign_tags")
        self.assignments.append((target_path, dict(assignments)))

    def set_tiff_tag(self, target_path: Path, tag_number: int, value: str) -> None:
        self._enter(f"set_tiff_tag:{tag_number}")
        self.tiff_tags.append((target_path, tag_number, value))

    def copy_first_page(self, source_path: Path, output_path: Path) -> None:
        self._enter("copy_first_page")
        self._write(output_path, source_path.read_bytes())

    def tag_values(self, tag_number: int) -> list[str]:
        """Return values written for one numeric TIFF tag."""
        return [value for _, number, value in self.tiff_tags if number == tag_number]

    def staged_paths(self) -> list[Path]:
        """Return every path the fake wrote that lives under a staging dir."""
        return [path for path in self.touched_paths if "tiffpress-" in str(path)]

    def _enter(self, *keys: str) -> None:
        self.calls.append(keys[0])
        for key in keys:
            if key in self.failures:
                raise TiffpressToolError(key, "simulated failure", returncode=1)

    def _write(self, output_path: Path, payload: bytes) -> None:
        self.touched_paths.append(output_path)
        output_path.write_bytes(payload)


def make_image(root: Path, relpath: str, payload: bytes = b"TIFF") -> SourceImage:
    """Create an image file under a shipment root."""
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return SourceImage(relpath=relpath, path=path)


def make_config(tmp_path: Path, **overrides: object) -> TiffpressConfig:
    """Build a config staging under the test's temp directory."""
    return TiffpressConfig(staging_root=tmp_path / "staging", **overrides)  # type: ignore[arg-type]


def contone_snapshot(**overrides: object) -> MetadataSnapshot:
    """Default 8-bit RGB snapshot."""
    fields: dict[str, object] = {
        "bits_per_sample": (8,),
        "samples_per_pixel": 3,
        "width": 4000,
        "height": 3000,
        "datetime": "2012:07:16 10:00:00",
        "software": "Scanner 1.0",
    }
    fields.update(overrides)
    return MetadataSnapshot(**fields)  # type: ignore[arg-type]


def bitonal_snapshot(**overrides: object) -> MetadataSnapshot:
    """Default 1-bit snapshot."""
    fields: dict[str, object] = {
        "bits_per_sample": (1,),
        "samples_per_pixel": 1,
        "width": 4000,
        "height": 3000,
        "datetime": "2012:07:16 10:00:00",
        "software": "Scanner 1.0",
    }
    fields.update(overrides)
    return MetadataSnapshot(**fields)  # type: ignore[arg-type]
