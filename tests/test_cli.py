from __future__ import annotations

import json

import pytest

from fitsummary import cli, parser
from fitsummary.records import Session, Sport


def _stub_decoder(monkeypatch, records):
    monkeypatch.setattr(parser, "decode_fit_file", lambda p: list(records))


def test_stdout_json(tmp_path, monkeypatch, capsys):
    fit = tmp_path / "ride.fit"
    fit.write_bytes(b"placeholder")
    _stub_decoder(monkeypatch, [Sport(sport=2, sub_sport=0, name="Ride"), Session(total_distance=2000000)])

    rc = cli.main([str(fit), "--stdout", "--format", "json", "--env-file", str(tmp_path / "none.env")])

    assert rc == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["name"] == "Ride"
    assert doc["activity_kind"] == "cycling"
    assert doc["summary"]["distance_meters"]["value"] == 20000.0


def test_writes_file_by_default(tmp_path, monkeypatch):
    fit = tmp_path / "ride.fit"
    fit.write_bytes(b"placeholder")
    _stub_decoder(monkeypatch, [Session(total_timer_time=60000)])

    rc = cli.main([str(fit), "--format", "yaml", "--env-file", str(tmp_path / "none.env")])

    assert rc == 0
    assert (tmp_path / "ride.yaml").exists()


def test_missing_file_fails(tmp_path, capsys):
    rc = cli.main([str(tmp_path / "nope.fit"), "--env-file", str(tmp_path / "none.env")])

    assert rc == 1
    assert "File not found" in capsys.readouterr().err


def test_file_without_session_fails(tmp_path, monkeypatch):
    fit = tmp_path / "empty.fit"
    fit.write_bytes(b"placeholder")
    _stub_decoder(monkeypatch, [])

    assert cli.main([str(fit), "--stdout", "--env-file", str(tmp_path / "none.env")]) == 1


def test_invalid_output_format_in_environment(tmp_path, monkeypatch, capsys):
    fit = tmp_path / "ride.fit"
    fit.write_bytes(b"placeholder")
    monkeypatch.setenv("FITSUMMARY_OUTPUT_FORMAT", "xml")

    with pytest.raises(SystemExit) as exc:
        cli.main([str(fit), "--env-file", str(tmp_path / "none.env")])

    assert exc.value.code == 2
    assert "Unsupported output format" in capsys.readouterr().err
