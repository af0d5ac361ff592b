"""Whitelisted tag tables for metadata carried across conversions."""

from __future__ import annotations

from datetime import datetime

from core.constants import (
    BITONAL_CLEARED_TAGS,
    BITONAL_TAG_WHITELIST,
    CONTONE_CHANNEL_TAGS,
    CONTONE_TAG_WHITELIST,
    DATE_FORMAT_XMP,
)
from core.types import MetadataSnapshot, TagTransfer

_SOURCE_GROUP = "IFD0"
_JP2_GROUP = "XMP-tiff"


def contone_transfers(snapshot: MetadataSnapshot) -> tuple[TagTransfer, ...]:
    """IFD0 tags of the original mapped onto XMP-tiff tags of the JP2.

    The original's ModifyDate is carried as the JP2 DateTime when present.
    """
    transfers = [
        TagTransfer(f"{_SOURCE_GROUP}:{tag}", f"{_JP2_GROUP}:{tag}")
        for tag in CONTONE_TAG_WHITELIST
    ]
    if snapshot.datetime is not None:
        transfers.append(TagTransfer(f"{_SOURCE_GROUP}:ModifyDate", f"{_JP2_GROUP}:DateTime"))
    return tuple(transfers)


def contone_assignments(
    snapshot: MetadataSnapshot,
    final_name: str,
    now: datetime,
) -> dict[str, str]:
    """Literal tags written on the JP2: provenance, compression, fallback date."""
    assignments = {
        "XMP-dc:source": final_name,
        f"{_JP2_GROUP}:Compression": "JPEG 2000",
    }
    if snapshot.datetime is None:
        assignments[f"{_JP2_GROUP}:DateTime"] = now.strftime(DATE_FORMAT_XMP)
    return assignments


def contone_channel_transfers() -> tuple[TagTransfer, ...]:
    """Channel layout tags re-read from a flattened staging copy."""
    return tuple(
        TagTransfer(f"{_SOURCE_GROUP}:{tag}", f"{_JP2_GROUP}:{tag}")
        for tag in CONTONE_CHANNEL_TAGS
    )


def bitonal_transfers() -> tuple[TagTransfer, ...]:
    """IFD0 tags copied unchanged onto the recompressed TIFF."""
    return tuple(TagTransfer(f"{_SOURCE_GROUP}:{tag}") for tag in BITONAL_TAG_WHITELIST)


def bitonal_assignments() -> dict[str, str]:
    """Tags cleared on the recompressed TIFF."""
    return {f"{_SOURCE_GROUP}:{tag}": "" for tag in BITONAL_CLEARED_TAGS}


def software_clear_assignment() -> dict[str, str]:
    """Assignment removing a Software tag injected by the transcoders."""
    return {f"{_SOURCE_GROUP}:Software": ""}
