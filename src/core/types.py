"""Shared typed models.

This module defines immutable data models used by the toolkit,
the conversion pipelines, the driver, and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Mapping, Union

ImageKind = Literal["bitonal", "contone", "invalid"]
StepSeverity = Literal["fatal", "recoverable"]
TranscodeOperation = Literal["flatten_alpha", "strip_profiles"]
Disposition = Literal["converted", "ignored", "quarantined"]


@dataclass(frozen=True)
class SourceImage:
    """One candidate image discovered under a shipment root.

    Attributes:
        relpath: POSIX path relative to the shipment root.
        path: Absolute filesystem path.
    """

    relpath: str
    path: Path


@dataclass(frozen=True)
class MetadataSnapshot:
    """Probe fields needed for routing and parameter derivation.

    Attributes:
        bits_per_sample: Distinct depths reported, in order of appearance.
        samples_per_pixel: Channel count of the first directory.
        has_unassociated_alpha: Whether an unassociated alpha sample exists.
        has_icc_profile: Whether an ICC profile is embedded.
        width: Image width in pixels.
        height: Image height in pixels.
        datetime: Embedded DateTime tag value, when present.
        software: Embedded Software tag value, when present.
    """

    bits_per_sample: tuple[int, ...]
    samples_per_pixel: int | None = None
    has_unassociated_alpha: bool = False
    has_icc_profile: bool = False
    width: int | None = None
    height: int | None = None
    datetime: str | None = None
    software: str | None = None


@dataclass(frozen=True)
class Jp2EncoderParams:
    """Per-image JPEG 2000 encoder parameters."""

    levels: int
    layers: int
    order: str
    use_sop: bool
    use_eph: bool
    modes: str
    slope: int
    color_space: str | None = None


@dataclass(frozen=True)
class TagTransfer:
    """Copy one tag from a source file into a target file.

    Attributes:
        source_tag: Tag read from the source, e.g. ``IFD0:Artist``.
        target_tag: Tag written on the target; ``None`` keeps the same name.
    """

    source_tag: str
    target_tag: str | None = None


@dataclass(frozen=True)
class ToolPaths:
    """Resolved executable paths for every external tool."""

    executables: Mapping[str, str]

    def get(self, tool_name: str) -> str:
        """Return the executable path for one tool."""
        return self.executables[tool_name]


@dataclass(frozen=True)
class StepOutcome:
    """Result of one pipeline step.

    Attributes:
        step: Step identifier used in logs.
        ok: Whether the step succeeded.
        severity: Whether a failure stops the pipeline.
        detail: Error text for failed steps.
    """

    step: str
    ok: bool
    severity: StepSeverity
    detail: str = ""


@dataclass(frozen=True)
class Converted:
    """The image was replaced by its converted counterpart.

    Attributes:
        source: Image that was processed.
        final_path: Path holding the new file.
        retained_quarantine: Quarantine copy kept after correction problems.
        warnings: Non-fatal issues hit along the way.
    """

    source: SourceImage
    final_path: Path
    retained_quarantine: Path | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    disposition: Disposition = field(default="converted", init=False)


@dataclass(frozen=True)
class Ignored:
    """The image was left untouched on purpose."""

    source: SourceImage
    reason: str

    disposition: Disposition = field(default="ignored", init=False)

    @property
    def warnings(self) -> tuple[str, ...]:
        """Ignored images carry no warnings."""
        return ()


@dataclass(frozen=True)
class Quarantined:
    """The original was preserved under its error-marked name."""

    source: SourceImage
    bad_path: Path
    cause: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    disposition: Disposition = field(default="quarantined", init=False)


ConversionResult = Union[Converted, Ignored, Quarantined]


@dataclass(frozen=True)
class RunSummary:
    """Aggregated outcome of one driver run, in discovery order."""

    root: Path
    results: tuple[ConversionResult, ...]

    @property
    def converted_count(self) -> int:
        """Count converted images."""
        return sum(1 for result in self.results if isinstance(result, Converted))

    @property
    def ignored_count(self) -> int:
        """Count ignored images."""
        return sum(1 for result in self.results if isinstance(result, Ignored))

    @property
    def quarantined_count(self) -> int:
        """Count quarantined images."""
        return sum(1 for result in self.results if isinstance(result, Quarantined))

    @property
    def warning_count(self) -> int:
        """Count images that finished with at least one warning."""
        return sum(1 for result in self.results if result.warnings)
