"""Tests for opengts_client.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from opengts_client.config import ClientSettings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENGTS_SERVER", "OPENGTS_PORT", "OPENGTS_PATH", "OPENGTS_DEVICE_ID"):
        monkeypatch.delenv(name, raising=False)
    settings = ClientSettings(_env_file=None)
    assert settings.queue_capacity == 128
    assert settings.stop_on_first_failure is True
    assert settings.endpoint().base_url == "http://127.0.0.1/gprmc/Data"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENGTS_SERVER", "gts.example.org")
    monkeypatch.setenv("OPENGTS_PORT", "8080")
    monkeypatch.setenv("OPENGTS_DEVICE_ID", "phone-1")
    monkeypatch.setenv("OPENGTS_ACCOUNT_NAME", "fleet")
    settings = ClientSettings(_env_file=None)

    assert settings.endpoint().base_url == "http://gts.example.org:8080/gprmc/Data"
    identity = settings.identity()
    assert identity.device_id == "phone-1"
    assert identity.effective_account == "fleet"


def test_empty_path_is_omitted() -> None:
    settings = ClientSettings(_env_file=None, server="gts", path="")
    assert settings.endpoint().base_url == "http://gts"


def test_identity_requires_device_id() -> None:
    settings = ClientSettings(_env_file=None, device_id="")
    with pytest.raises(ValidationError):
        settings.identity()
