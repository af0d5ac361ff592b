"""Shipment-level orchestration.

This module discovers images, probes and classifies each one, and
dispatches it to the matching pipeline. Every image ends with exactly
one ``ConversionResult``; failures never leak into other images.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
import threading
from typing import Callable

from core.config import TiffpressConfig
from core.errors import TiffpressError, TiffpressQuarantineError
from core.logging_config import get_logger
from core.types import (
    ConversionResult,
    Ignored,
    MetadataSnapshot,
    Quarantined,
    RunSummary,
    SourceImage,
)
from convert.bitonal_pipeline import BitonalPipeline
from convert.classifier import classify_snapshot
from convert.contone_pipeline import ContonePipeline
from convert.discovery import discover_source_images
from convert.quarantine import QuarantineManager, quarantine_path_for
from toolkit.base import ImageToolkit

_LOGGER = get_logger(__name__)

ResultCallback = Callable[[ConversionResult], None]

CAUSE_INVALID = "invalid source image"
REASON_BITONALS_DISABLED = "bitonal processing disabled"
REASON_CONTONES_DISABLED = "contone processing disabled"


class PipelineDriver:
    """Run classification and conversion over one shipment tree."""

    def __init__(
        self,
        toolkit: ImageToolkit,
        config: TiffpressConfig,
        clock: Callable[[], datetime] = datetime.now,
        on_result: ResultCallback | None = None,
    ) -> None:
        self._toolkit = toolkit
        self._config = config
        self._quarantine = QuarantineManager()
        self._contone = ContonePipeline(toolkit, config, self._quarantine, clock)
        self._bitonal = BitonalPipeline(toolkit, config, self._quarantine, clock)
        self._on_result = on_result
        self._callback_lock = threading.Lock()

    def run(self, root: Path) -> RunSummary:
        """Process every candidate image under a root.

        Args:
            root: Shipment root directory.

        Returns:
            Summary with one result per discovered image, in discovery order.

        Raises:
            TiffpressConfigError: If the root is not a directory.
        """
        images = discover_source_images(root)
        _LOGGER.info("run_started", root=str(root), image_count=len(images), jobs=self._config.jobs)
        if self._config.jobs > 1 and len(images) > 1:
            with ThreadPoolExecutor(max_workers=self._config.jobs) as executor:
                results = list(executor.map(self.process_image, images))
        else:
            results = [self.process_image(image) for image in images]
        summary = RunSummary(root=root, results=tuple(results))
        _LOGGER.info(
            "run_completed",
            root=str(root),
            converted=summary.converted_count,
            ignored=summary.ignored_count,
            quarantined=summary.quarantined_count,
            warnings=summary.warning_count,
        )
        return summary

    def process_image(self, image: SourceImage) -> ConversionResult:
        """Process one image and report its result."""
        try:
            result = self._dispatch(image)
        except (TiffpressError, OSError) as error:
            result = self._recover(image, error)
        if self._on_result is not None:
            with self._callback_lock:
                self._on_result(result)
        return result

    def _dispatch(self, image: SourceImage) -> ConversionResult:
        snapshot = self._probe(image)
        kind = classify_snapshot(snapshot)
        _LOGGER.debug("image_classified", image=image.relpath, kind=kind)
        if kind == "contone" and snapshot is not None:
            if not self._config.process_contones:
                return Ignored(source=image, reason=REASON_CONTONES_DISABLED)
            return self._contone.process(image, snapshot)
        if kind == "bitonal" and snapshot is not None:
            if not self._config.process_bitonals:
                return Ignored(source=image, reason=REASON_BITONALS_DISABLED)
            return self._bitonal.process(image, snapshot)
        bad_path = self._quarantine.quarantine(image.path)
        return Quarantined(source=image, bad_path=bad_path, cause=CAUSE_INVALID)

    def _probe(self, image: SourceImage) -> MetadataSnapshot | None:
        try:
            return self._toolkit.probe(image.path)
        except (TiffpressError, OSError) as error:
            _LOGGER.warning("probe_failed", image=image.relpath, error=str(error))
            return None

    def _recover(self, image: SourceImage, error: TiffpressError | OSError) -> ConversionResult:
        """Turn an unexpected per-image error into a quarantine result."""
        _LOGGER.error("image_failed", image=image.relpath, error=str(error))
        bad_path = quarantine_path_for(image.path)
        if bad_path.exists() and not image.path.exists():
            return Quarantined(source=image, bad_path=bad_path, cause=str(error))
        try:
            bad_path = self._quarantine.quarantine(image.path)
        except TiffpressQuarantineError as quarantine_error:
            _LOGGER.error(
                "quarantine_failed", image=image.relpath, error=str(quarantine_error)
            )
            return Quarantined(
                source=image,
                bad_path=image.path,
                cause=f"{error}; original left in place",
            )
        return Quarantined(source=image, bad_path=bad_path, cause=str(error))
