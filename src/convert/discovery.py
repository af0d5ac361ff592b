"""Enumerate candidate images under a shipment root."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from core.constants import MIN_DISCOVERY_DEPTH, SOURCE_IMAGE_SUFFIX
from core.errors import TiffpressConfigError
from core.types import SourceImage
from convert.quarantine import is_quarantine_name


def discover_source_images(root: Path) -> list[SourceImage]:
    """Find regular ``.tif`` files at least two levels below the root.

    Quarantined ``-error.tif`` files are skipped so reruns never pick
    them up again. Results are unique and sorted by relative path.

    Args:
        root: Shipment root directory.

    Returns:
        Candidate images in lexicographic relpath order.

    Raises:
        TiffpressConfigError: If the root is not a directory.
    """
    resolved_root = root.expanduser().resolve()
    if not resolved_root.is_dir():
        raise TiffpressConfigError(
            f"Shipment root {root} is not a directory. Pass an existing directory with --root."
        )
    relpaths: set[str] = set()
    for file_path in _walk_files(resolved_root):
        if not _is_candidate(file_path):
            continue
        relative = file_path.relative_to(resolved_root)
        if len(relative.parts) < MIN_DISCOVERY_DEPTH:
            continue
        relpaths.add(relative.as_posix())
    return [SourceImage(relpath=relpath, path=resolved_root / relpath) for relpath in sorted(relpaths)]


def _walk_files(root: Path) -> Iterator[Path]:
    # Symlinked directories are listed but never entered.
    for directory, _, file_names in os.walk(root, followlinks=False):
        for file_name in file_names:
            yield Path(directory) / file_name


def _is_candidate(file_path: Path) -> bool:
    if file_path.suffix != SOURCE_IMAGE_SUFFIX:
        return False
    if file_path.is_symlink() or not file_path.is_file():
        return False
    return not is_quarantine_name(file_path)
