"""Run summary rendering and persistence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from core.types import ConversionResult, Converted, Ignored, RunSummary

StatusLevel = Literal["good", "warn", "bad"]


def describe_result(result: ConversionResult) -> tuple[StatusLevel, str]:
    """Return the console level and message for one result."""
    relpath = result.source.relpath
    if isinstance(result, Converted):
        level: StatusLevel = "warn" if result.warnings else "good"
        message = f"Processed {relpath} -> {result.final_path.name}"
        if result.retained_quarantine is not None:
            message += f" (kept {result.retained_quarantine.name})"
        if result.warnings:
            message += f": {'; '.join(result.warnings)}"
        return level, message
    if isinstance(result, Ignored):
        return "good", f"Ignoring {relpath} ({result.reason})"
    return "bad", f"Failed {relpath}: {result.cause} (original kept as {result.bad_path.name})"


def render_summary_line(summary: RunSummary) -> str:
    """Render the closing counts line."""
    return (
        f"converted={summary.converted_count} "
        f"ignored={summary.ignored_count} "
        f"quarantined={summary.quarantined_count} "
        f"warnings={summary.warning_count}"
    )


def summary_to_payload(summary: RunSummary) -> dict[str, Any]:
    """Build a JSON-friendly mapping for one run."""
    return {
        "root": str(summary.root),
        "counts": {
            "converted": summary.converted_count,
            "ignored": summary.ignored_count,
            "quarantined": summary.quarantined_count,
            "warnings": summary.warning_count,
        },
        "images": [_result_to_payload(result) for result in summary.results],
    }


def save_run_summary(summary: RunSummary, report_path: Path) -> Path:
    """Persist the run summary as JSON and return its path."""
    report_path.parent.mkdir(parents=True, exist_ok=True)
    payload = summary_to_payload(summary)
    report_path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return report_path


def _result_to_payload(result: ConversionResult) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "relpath": result.source.relpath,
        "disposition": result.disposition,
        "warnings": list(result.warnings),
    }
    if isinstance(result, Converted):
        payload["final_path"] = str(result.final_path)
        payload["retained_quarantine"] = (
            str(result.retained_quarantine) if result.retained_quarantine else None
        )
    elif isinstance(result, Ignored):
        payload["reason"] = result.reason
    else:
        payload["bad_path"] = str(result.bad_path)
        payload["cause"] = result.cause
    return payload
