"""Atomic installation of finished artifacts into permanent storage."""

from __future__ import annotations

import os
from pathlib import Path
import shutil

from core.constants import PARTIAL_OUTPUT_SUFFIX


def commit_file(staged_path: Path, final_path: Path) -> None:
    """Copy a staged file to its final name without exposing partial data.

    The bytes land in a sibling ``.partial`` file, are flushed to disk, and
    are then renamed over the final name. A failed commit removes the
    partial file and re-raises.

    Raises:
        OSError: If copying, syncing, or renaming fails.
    """
    partial_path = final_path.with_name(final_path.name + PARTIAL_OUTPUT_SUFFIX)
    try:
        shutil.copyfile(staged_path, partial_path)
        _fsync_file(partial_path)
        os.replace(partial_path, final_path)
    except OSError:
        partial_path.unlink(missing_ok=True)
        raise


def _fsync_file(path: Path) -> None:
    descriptor = os.open(path, os.O_RDONLY)
    try:
        os.fsync(descriptor)
    finally:
        os.close(descriptor)
