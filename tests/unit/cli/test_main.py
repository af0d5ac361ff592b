"""Unit tests for CLI command handling."""

from __future__ import annotations

import json

import pytest

from cli.main import build_parser, main
from core.errors import TiffpressEnvironmentError
from tests.fake_toolkit import FakeToolkit, bitonal_snapshot, contone_snapshot, make_image


@pytest.fixture
def fake_toolkit(monkeypatch: pytest.MonkeyPatch, tmp_path) -> FakeToolkit:
    """Route the CLI onto a fake toolkit with resolved tools."""
    toolkit = FakeToolkit()
    monkeypatch.setenv("TIFFPRESS_STAGING_ROOT", str(tmp_path / "staging"))
    monkeypatch.setattr("cli.main.resolve_tool_paths", lambda config: None)
    monkeypatch.setattr("cli.main.CommandLineToolkit", lambda paths, timeout: toolkit)
    return toolkit


def test_parser_last_flag_wins() -> None:
    """Later with/without flags should override earlier ones."""
    args = build_parser().parse_args(["--without-bitonals", "--with-bitonals", "--without-contones"])

    assert args.process_bitonals is True and args.process_contones is False


def test_cli_aborts_when_tool_missing(monkeypatch: pytest.MonkeyPatch, tmp_path, capsys) -> None:
    """A missing external tool should exit 1 before touching images."""
    image = make_image(tmp_path / "shipment", "0001/a.tif")

    def missing(config):
        raise TiffpressEnvironmentError("kdu_compress")

    monkeypatch.setattr("cli.main.resolve_tool_paths", missing)

    exit_code = main(["--root", str(tmp_path / "shipment")])
    output = capsys.readouterr().out

    assert exit_code == 1 and "kdu_compress" in output
    assert image.path.read_bytes() == b"TIFF"


def test_cli_warns_on_unknown_arguments(fake_toolkit: FakeToolkit, tmp_path, capsys) -> None:
    """Unknown arguments should be reported and ignored."""
    (tmp_path / "shipment").mkdir()

    exit_code = main(["--root", str(tmp_path / "shipment"), "--with-everything"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Ignoring unknown argument: --with-everything" in output
    assert "Finished processing images." in output


def test_cli_bitonal_only_scenario(fake_toolkit: FakeToolkit, tmp_path, capsys) -> None:
    """Bitonal-only runs should recompress in place and ignore contones."""
    root = tmp_path / "shipment"
    bitonal = make_image(root, "0001/a.tif")
    contone = make_image(root, "0001/b.tif")
    fake_toolkit.snapshots.update({"a.tif": bitonal_snapshot(), "b.tif": contone_snapshot()})

    exit_code = main(["--root", str(root), "--with-bitonals", "--without-contones"])

    assert exit_code == 0
    assert bitonal.path.read_bytes() == b"G4:TIFF" and contone.path.read_bytes() == b"TIFF"
    assert sorted(path.name for path in (root / "0001").iterdir()) == ["a.tif", "b.tif"]


def test_cli_writes_report(fake_toolkit: FakeToolkit, tmp_path) -> None:
    """--report should persist a JSON summary."""
    root = tmp_path / "shipment"
    make_image(root, "0001/a.tif")
    fake_toolkit.snapshots["a.tif"] = contone_snapshot()
    report_path = tmp_path / "summary.json"

    exit_code = main(["--root", str(root), "--report", str(report_path)])

    payload = json.loads(report_path.read_text(encoding="utf-8"))
    assert exit_code == 0 and payload["counts"]["converted"] == 1


def test_cli_unwritable_report_still_exits_zero(fake_toolkit: FakeToolkit, tmp_path, capsys) -> None:
    """A report that cannot be written should not fail a finished run."""
    root = tmp_path / "shipment"
    image = make_image(root, "0001/a.tif")
    fake_toolkit.snapshots["a.tif"] = bitonal_snapshot()
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    exit_code = main(["--root", str(root), "--report", str(blocker / "summary.json")])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Could not write run summary" in output
    assert "Finished processing images." in output
    assert image.path.read_bytes() == b"G4:TIFF"


def test_cli_rejects_invalid_jobs(fake_toolkit: FakeToolkit, tmp_path, capsys) -> None:
    """Invalid worker counts should fail with a usage exit code."""
    exit_code = main(["--root", str(tmp_path), "--jobs", "zero"])

    assert exit_code == 2 and "--jobs" in capsys.readouterr().out
