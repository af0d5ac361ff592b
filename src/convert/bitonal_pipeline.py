"""Bitonal (1-bit) TIFF Group-4 recompression in place.

Once recompression succeeds the original is moved to its quarantine name
and stays there until every metadata correction on the installed
replacement succeeds. A failed correction never rolls the replacement
back; it only keeps the quarantine copy around for recovery.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from core.config import TiffpressConfig
from core.constants import (
    DATE_FORMAT_TIFF,
    TIFF_TAG_DATETIME,
    TIFF_TAG_DOCUMENT_NAME,
    TIFF_TAG_SOFTWARE,
)
from core.logging_config import get_logger
from core.types import ConversionResult, Converted, MetadataSnapshot, Quarantined, SourceImage
from convert.metadata_plan import (
    bitonal_assignments,
    bitonal_transfers,
    software_clear_assignment,
)
from convert.quarantine import QuarantineManager
from convert.staging import StagingArena
from convert.steps import attempt_step
from toolkit.base import ImageToolkit

_LOGGER = get_logger(__name__)

CAUSE_COMPRESS_FAILED = "could not compress image"
CAUSE_METADATA_FAILED = "could not copy metadata"
CAUSE_FIRST_PAGE_FAILED = "could not copy first page"
PROBLEM_DATE = "could not set date"
PROBLEM_DOCUMENT_NAME = "could not set document name"
PROBLEM_SOFTWARE = "could not set software"
PROBLEM_SOFTWARE_CLEAR = "could not remove injected software"
PROBLEM_RELEASE = "could not delete quarantine copy"
WARNING_NO_SOFTWARE = "could not extract software"
WARNING_PARTIAL_CLEANUP = "could not remove partial first page"


class BitonalPipeline:
    """Recompress one bitonal image with Group 4 at its original path."""

    def __init__(
        self,
        toolkit: ImageToolkit,
        config: TiffpressConfig,
        quarantine: QuarantineManager,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._toolkit = toolkit
        self._config = config
        self._quarantine = quarantine
        self._clock = clock

    def process(self, image: SourceImage, snapshot: MetadataSnapshot) -> ConversionResult:
        """Run the full bitonal pipeline for one image.

        Args:
            image: Original bitonal TIFF.
            snapshot: Metadata probed from the original.

        Returns:
            ``Converted`` at the original path, or ``Quarantined``.
        """
        with StagingArena(self._config.staging_root, "bitonal") as arena:
            compressed = arena.path("compressed.tif")
            recompressed = attempt_step(
                "recompress_g4",
                "fatal",
                lambda: self._toolkit.recompress_g4(image.path, compressed),
                image=image.relpath,
            )
            if not recompressed.ok:
                bad_path = self._quarantine.quarantine(image.path)
                return Quarantined(source=image, bad_path=bad_path, cause=CAUSE_COMPRESS_FAILED)

            bad_path = self._quarantine.quarantine(image.path)
            tagged = attempt_step(
                "copy_metadata",
                "fatal",
                lambda: self._toolkit.copy_tags(
                    bad_path, compressed, bitonal_transfers(), bitonal_assignments()
                ),
                image=image.relpath,
            )
            if not tagged.ok:
                return Quarantined(source=image, bad_path=bad_path, cause=CAUSE_METADATA_FAILED)

            installed = attempt_step(
                "copy_first_page",
                "fatal",
                lambda: self._toolkit.copy_first_page(compressed, image.path),
                image=image.relpath,
            )
            if not installed.ok:
                cleaned = attempt_step(
                    "remove_partial_first_page",
                    "recoverable",
                    lambda: image.path.unlink(missing_ok=True),
                    image=image.relpath,
                )
                return Quarantined(
                    source=image,
                    bad_path=bad_path,
                    cause=CAUSE_FIRST_PAGE_FAILED,
                    warnings=() if cleaned.ok else (WARNING_PARTIAL_CLEANUP,),
                )

        self._quarantine.mark_committed(image.path)
        warnings, problems = self._apply_corrections(image, snapshot)
        retained: Path | None = bad_path
        if not problems:
            released = attempt_step(
                "release_quarantine",
                "recoverable",
                lambda: self._quarantine.release(bad_path),
                image=image.relpath,
            )
            if released.ok:
                retained = None
            else:
                problems.append(PROBLEM_RELEASE)
        _LOGGER.info(
            "image_recompressed",
            image=image.relpath,
            problems=problems,
            retained_quarantine=str(retained) if retained else None,
        )
        return Converted(
            source=image,
            final_path=image.path,
            retained_quarantine=retained,
            warnings=tuple(warnings + problems),
        )

    def _apply_corrections(
        self,
        image: SourceImage,
        snapshot: MetadataSnapshot,
    ) -> tuple[list[str], list[str]]:
        """Run every post-install correction; return (warnings, problems)."""
        warnings: list[str] = []
        problems: list[str] = []
        target = image.path

        if snapshot.datetime is None:
            stamp = self._clock().strftime(DATE_FORMAT_TIFF)
            if not self._set_tag(image, "set_datetime", TIFF_TAG_DATETIME, stamp):
                problems.append(PROBLEM_DATE)

        if not self._set_tag(image, "set_document_name", TIFF_TAG_DOCUMENT_NAME, image.relpath):
            problems.append(PROBLEM_DOCUMENT_NAME)

        if snapshot.software is None:
            warnings.append(WARNING_NO_SOFTWARE)
            cleared = attempt_step(
                "clear_software",
                "recoverable",
                lambda: self._toolkit.assign_tags(target, software_clear_assignment()),
                image=image.relpath,
            )
            if not cleared.ok:
                problems.append(PROBLEM_SOFTWARE_CLEAR)
        elif not self._set_tag(image, "set_software", TIFF_TAG_SOFTWARE, snapshot.software):
            problems.append(PROBLEM_SOFTWARE)
        return warnings, problems

    def _set_tag(self, image: SourceImage, step: str, tag_number: int, value: str) -> bool:
        outcome = attempt_step(
            step,
            "recoverable",
            lambda: self._toolkit.set_tiff_tag(image.path, tag_number, value),
            image=image.relpath,
        )
        return outcome.ok
