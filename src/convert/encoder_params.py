"""Derive JPEG 2000 encoder parameters from a metadata snapshot."""

from __future__ import annotations

import math

from core.constants import (
    JP2_LAYERS,
    JP2_LEVEL_MIN,
    JP2_LEVEL_SIZE_DIVISOR,
    JP2_MODES,
    JP2_ORDER,
    JP2_SLOPE,
    JP2_SPACE_LUMINANCE,
    JP2_SPACE_RGB,
    JP2_USE_EPH,
    JP2_USE_SOP,
    LUMINANCE_SAMPLES_PER_PIXEL,
    RGB_SAMPLES_PER_PIXEL,
)
from core.types import Jp2EncoderParams, MetadataSnapshot


def compute_decomposition_levels(width: int | None, height: int | None) -> int:
    """Return ``max(MIN, trunc(log2(max(width, height) / 100)))``.

    The logarithm is truncated toward zero, not rounded.
    Unknown or non-positive sizes fall back to the minimum.
    """
    size = max(width or 0, height or 0)
    if size <= 0:
        return JP2_LEVEL_MIN
    levels = int(math.log2(size / JP2_LEVEL_SIZE_DIVISOR))
    return max(JP2_LEVEL_MIN, levels)


def encoded_samples_per_pixel(
    snapshot: MetadataSnapshot, alpha_flattened: bool
) -> int | None:
    """Return the channel count of the staged copy handed to the encoder."""
    samples = snapshot.samples_per_pixel
    if samples is not None and alpha_flattened:
        return samples - 1
    return samples


def select_color_space(samples_per_pixel: int | None) -> str | None:
    """Map three channels to sRGB and one to luminance.

    Any other count returns None so the encoder infers the space itself.
    """
    if samples_per_pixel == RGB_SAMPLES_PER_PIXEL:
        return JP2_SPACE_RGB
    if samples_per_pixel == LUMINANCE_SAMPLES_PER_PIXEL:
        return JP2_SPACE_LUMINANCE
    return None


def build_encoder_params(
    snapshot: MetadataSnapshot, alpha_flattened: bool = False
) -> Jp2EncoderParams:
    """Build the full encoder parameter set for one staged image.

    Args:
        snapshot: Metadata probed from the original.
        alpha_flattened: Whether the staged copy lost its alpha channel.

    Returns:
        Encoder parameters for kdu_compress.
    """
    return Jp2EncoderParams(
        levels=compute_decomposition_levels(snapshot.width, snapshot.height),
        layers=JP2_LAYERS,
        order=JP2_ORDER,
        use_sop=JP2_USE_SOP,
        use_eph=JP2_USE_EPH,
        modes=JP2_MODES,
        slope=JP2_SLOPE,
        color_space=select_color_space(encoded_samples_per_pixel(snapshot, alpha_flattened)),
    )
