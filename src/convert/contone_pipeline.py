"""Contone (8-bit) TIFF to JPEG 2000 conversion.

Stripping foreign metadata, encoding, copying whitelisted metadata, and
committing the output are hard-fail steps that quarantine the original.
Alpha flattening, ICC stripping, and the channel-tag correction are
soft-fail steps that only add warnings.
"""

from __future__ import annotations

from datetime import datetime
import os
from pathlib import Path
from typing import Callable

from core.config import TiffpressConfig
from core.constants import CONTONE_OUTPUT_SUFFIX
from core.logging_config import get_logger
from core.types import (
    ConversionResult,
    Converted,
    MetadataSnapshot,
    Quarantined,
    SourceImage,
    TranscodeOperation,
)
from convert.commit import commit_file
from convert.encoder_params import build_encoder_params
from convert.metadata_plan import (
    contone_assignments,
    contone_channel_transfers,
    contone_transfers,
)
from convert.quarantine import QuarantineManager
from convert.staging import StagingArena
from convert.steps import attempt_step
from toolkit.base import ImageToolkit

_LOGGER = get_logger(__name__)

CAUSE_STRIP_FAILED = "failed to extract metadata-stripped copy"
CAUSE_ENCODE_FAILED = "conversion to target format failed"
CAUSE_METADATA_FAILED = "failed to copy metadata"
CAUSE_COMMIT_FAILED = "failed to copy output to permanent storage"
WARNING_ALPHA = "couldn't remove alpha channel"
WARNING_ICC = "couldn't remove ICC profile"
WARNING_CHANNEL_TAGS = "couldn't correct channel tags after alpha removal"
WARNING_ORIGINAL_DELETE = "converted but could not delete original"


class ContonePipeline:
    """Convert one contone image to JP2, replacing the original on success."""

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
        """Run the full contone pipeline for one image.

        Args:
            image: Original contone TIFF.
            snapshot: Metadata probed from the original.

        Returns:
            ``Converted`` with the JP2 path, or ``Quarantined``.
        """
        final_path = image.path.with_suffix(CONTONE_OUTPUT_SUFFIX)
        warnings: list[str] = []
        with StagingArena(self._config.staging_root, "contone") as arena:
            sparse = arena.path("sparse.tif")
            scratch = arena.path("icc.tif")
            new_image = arena.path("new.jp2")

            stripped = attempt_step(
                "strip_foreign_metadata",
                "fatal",
                lambda: self._toolkit.strip_foreign_metadata(image.path, sparse),
                image=image.relpath,
            )
            if not stripped.ok:
                return self._fail(image, CAUSE_STRIP_FAILED, warnings)

            alpha_flattened = False
            if snapshot.has_unassociated_alpha:
                alpha_flattened = self._transcode_in_place(
                    image, sparse, scratch, "flatten_alpha"
                )
                if not alpha_flattened:
                    warnings.append(WARNING_ALPHA)
            if snapshot.has_icc_profile:
                if not self._transcode_in_place(image, sparse, scratch, "strip_profiles"):
                    warnings.append(WARNING_ICC)

            params = build_encoder_params(snapshot, alpha_flattened)
            encoded = attempt_step(
                "encode_jp2",
                "fatal",
                lambda: self._toolkit.encode_jp2(sparse, new_image, params),
                image=image.relpath,
                levels=params.levels,
                color_space=params.color_space,
            )
            if not encoded.ok:
                return self._fail(image, CAUSE_ENCODE_FAILED, warnings)

            tagged = attempt_step(
                "copy_metadata",
                "fatal",
                lambda: self._toolkit.copy_tags(
                    image.path,
                    new_image,
                    contone_transfers(snapshot),
                    contone_assignments(snapshot, final_path.name, self._clock()),
                ),
                image=image.relpath,
            )
            if not tagged.ok:
                return self._fail(image, CAUSE_METADATA_FAILED, warnings)

            if alpha_flattened:
                corrected = attempt_step(
                    "correct_channel_tags",
                    "recoverable",
                    lambda: self._toolkit.copy_tags(
                        sparse, new_image, contone_channel_transfers()
                    ),
                    image=image.relpath,
                )
                if not corrected.ok:
                    warnings.append(WARNING_CHANNEL_TAGS)

            committed = attempt_step(
                "commit_output",
                "fatal",
                lambda: commit_file(new_image, final_path),
                image=image.relpath,
                final_path=str(final_path),
            )
            if not committed.ok:
                return self._fail(image, CAUSE_COMMIT_FAILED, warnings)

        self._quarantine.mark_committed(image.path)
        removed = attempt_step(
            "delete_original",
            "recoverable",
            lambda: image.path.unlink(),
            image=image.relpath,
        )
        if not removed.ok:
            warnings.append(WARNING_ORIGINAL_DELETE)
        _LOGGER.info("image_converted", image=image.relpath, final_path=str(final_path))
        return Converted(source=image, final_path=final_path, warnings=tuple(warnings))

    def _transcode_in_place(
        self,
        image: SourceImage,
        working_path: Path,
        scratch_path: Path,
        operation: TranscodeOperation,
    ) -> bool:
        """Transcode into scratch and move it over the working copy."""

        def run() -> None:
            try:
                self._toolkit.transcode(working_path, scratch_path, operation)
                os.replace(scratch_path, working_path)
            finally:
                scratch_path.unlink(missing_ok=True)

        outcome = attempt_step(operation, "recoverable", run, image=image.relpath)
        return outcome.ok

    def _fail(self, image: SourceImage, cause: str, warnings: list[str]) -> Quarantined:
        bad_path = self._quarantine.quarantine(image.path)
        return Quarantined(
            source=image, bad_path=bad_path, cause=cause, warnings=tuple(warnings)
        )
