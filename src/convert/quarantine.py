"""Quarantine originals that could not be processed.

A failed original is renamed to ``<stem>-error<suffix>`` next to itself
instead of being deleted. Quarantine names never match discovery, so
reruns leave them alone.
"""

from __future__ import annotations

import os
from pathlib import Path
import threading

from core.constants import QUARANTINE_MARKER
from core.errors import TiffpressQuarantineError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def quarantine_path_for(image_path: Path) -> Path:
    """Return the error-marked sibling path for an image."""
    return image_path.with_name(f"{image_path.stem}{QUARANTINE_MARKER}{image_path.suffix}")


def is_quarantine_name(image_path: Path) -> bool:
    """Return whether a path already carries the error marker."""
    return image_path.stem.endswith(QUARANTINE_MARKER)


class QuarantineManager:
    """Rename failed originals and track committed images."""

    def __init__(self) -> None:
        self._committed: set[Path] = set()
        self._lock = threading.Lock()

    def mark_committed(self, image_path: Path) -> None:
        """Record that an image's replacement is final."""
        with self._lock:
            self._committed.add(image_path)

    def is_committed(self, image_path: Path) -> bool:
        """Return whether an image was already committed."""
        with self._lock:
            return image_path in self._committed

    def quarantine(self, image_path: Path) -> Path:
        """Rename an original to its quarantine name.

        Args:
            image_path: Original image location.

        Returns:
            The quarantine path now holding the original.

        Raises:
            TiffpressQuarantineError: If the image was committed, is already a
                quarantine name, its quarantine name is taken, or the rename fails.
        """
        if self.is_committed(image_path):
            raise TiffpressQuarantineError(
                f"Refusing to quarantine committed image: {image_path}"
            )
        if is_quarantine_name(image_path):
            raise TiffpressQuarantineError(f"Image is already quarantined: {image_path}")
        bad_path = quarantine_path_for(image_path)
        if bad_path.exists():
            raise TiffpressQuarantineError(f"Quarantine copy already exists: {bad_path}")
        try:
            os.replace(image_path, bad_path)
        except OSError as error:
            raise TiffpressQuarantineError(
                f"Failed to rename {image_path} to {bad_path}: {error}"
            ) from error
        _LOGGER.info("image_quarantined", image=str(image_path), bad_path=str(bad_path))
        return bad_path

    def release(self, bad_path: Path) -> None:
        """Delete a quarantine copy once its replacement is committed.

        Raises:
            TiffpressQuarantineError: If the path is not a quarantine name or
                cannot be removed.
        """
        if not is_quarantine_name(bad_path):
            raise TiffpressQuarantineError(f"Not a quarantine path: {bad_path}")
        try:
            bad_path.unlink()
        except OSError as error:
            raise TiffpressQuarantineError(f"Failed to delete {bad_path}: {error}") from error
        _LOGGER.debug("quarantine_released", bad_path=str(bad_path))
