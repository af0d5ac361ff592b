"""External image tool capability contract.

Pipelines depend on this protocol rather than on process execution,
so conversion logic can run against fake toolkits in tests.
Every method raises ``TiffpressToolError`` when the operation fails.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, Sequence

from core.types import Jp2EncoderParams, MetadataSnapshot, TagTransfer, TranscodeOperation


class ImageToolkit(Protocol):
    """One method per distinct external tool operation."""

    def probe(self, image_path: Path) -> MetadataSnapshot: ...

    def strip_foreign_metadata(self, source_path: Path, output_path: Path) -> None: ...

    def transcode(
        self,
        source_path: Path,
        output_path: Path,
        operation: TranscodeOperation,
    ) -> None: ...

    def encode_jp2(
        self,
        source_path: Path,
        output_path: Path,
        params: Jp2EncoderParams,
    ) -> None: ...

    def recompress_g4(self, source_path: Path, output_path: Path) -> None: ...

    def copy_tags(
        self,
        source_path: Path,
        target_path: Path,
        transfers: Sequence[TagTransfer],
        assignments: Mapping[str, str] | None = None,
    ) -> None: ...

    def assign_tags(self, target_path: Path, assignments: Mapping[str, str]) -> None: ...

    def set_tiff_tag(self, target_path: Path, tag_number: int, value: str) -> None: ...

    def copy_first_page(self, source_path: Path, output_path: Path) -> None: ...
