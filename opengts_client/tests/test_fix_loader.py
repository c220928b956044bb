"""Tests for opengts_client.fix_loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from opengts_client.fix_loader import load_fixes, parse_fixes


def test_json_array() -> None:
    fixes = parse_fixes(
        '[{"timestamp_ms": 0, "latitude": 1.5, "longitude": -2.5, "speed": 3}]'
    )
    assert len(fixes) == 1
    assert fixes[0].longitude == -2.5
    assert fixes[0].speed == 3.0


def test_json_lines_with_iso_time(tmp_path: Path) -> None:
    path = tmp_path / "fixes.jsonl"
    path.write_text(
        '{"time": "2021-01-01T00:00:00Z", "latitude": 45, "longitude": -73}\n'
        "\n"
        '{"time": "2021-01-01T00:00:05+00:00", "latitude": 45, "longitude": -73, "altitude": 12}\n',
        encoding="utf-8",
    )
    fixes = load_fixes(path)
    assert [f.timestamp_ms for f in fixes] == [1_609_459_200_000, 1_609_459_205_000]
    assert fixes[1].altitude == 12.0


def test_empty_text() -> None:
    assert parse_fixes("  \n") == []


def test_invalid_fix_rejected() -> None:
    with pytest.raises(ValidationError):
        parse_fixes('[{"timestamp_ms": 0, "latitude": 95, "longitude": 0}]')
