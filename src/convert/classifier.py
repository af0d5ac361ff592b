"""Route images to a pipeline by pixel sample depth."""

from __future__ import annotations

from core.constants import BITONAL_BITS_PER_SAMPLE, CONTONE_BITS_PER_SAMPLE
from core.types import ImageKind, MetadataSnapshot


def classify_snapshot(snapshot: MetadataSnapshot | None) -> ImageKind:
    """Decide which pipeline applies to one image.

    Contone is checked before bitonal. A snapshot reporting more than one
    distinct depth is malformed and classified invalid.

    Args:
        snapshot: Probe result, or ``None`` when the probe failed.

    Returns:
        ``"contone"``, ``"bitonal"``, or ``"invalid"``.
    """
    if snapshot is None or len(snapshot.bits_per_sample) != 1:
        return "invalid"
    depth = snapshot.bits_per_sample[0]
    if depth == CONTONE_BITS_PER_SAMPLE:
        return "contone"
    if depth == BITONAL_BITS_PER_SAMPLE:
        return "bitonal"
    return "invalid"
