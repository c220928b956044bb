"""Tests for opengts_client.url_builder."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlsplit

import pytest

from opengts_client.gprmc import encode_sentence
from opengts_client.schemas import Endpoint, Fix, Identity
from opengts_client.url_builder import build_request_url


def test_full_url(endpoint: Endpoint, identity: Identity, new_year_fix: Fix) -> None:
    sentence = encode_sentence(new_year_fix)
    url = build_request_url(endpoint, identity, sentence, new_year_fix.altitude)

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
        "http://collector.test:8080/gprmc/Data"
    )
    assert parse_qsl(parts.query) == [
        ("id", "dev1"),
        ("dev", "dev1"),
        ("acct", "dev1"),
        ("code", "0xF020"),
        ("gprmc", sentence),
        ("alt", "10.0"),
    ]


def test_sentence_is_percent_encoded(endpoint: Endpoint, identity: Identity, new_year_fix: Fix) -> None:
    url = build_request_url(endpoint, identity, encode_sentence(new_year_fix), 10.0)
    assert "gprmc=%24GPRMC%2C000000%2CA%2C4500.00000N%2C" in url
    assert url.endswith("%2C%2C%2C*25&alt=10.0")


def test_account_and_special_characters(endpoint: Endpoint) -> None:
    ident = Identity(device_id="my phone", account_name="acme&co")
    url = build_request_url(endpoint, ident, "$GPRMC", -12.5)
    assert "?id=my+phone&dev=my+phone&acct=acme%26co&code=0xF020" in url
    assert url.endswith("&alt=-12.5")


def test_bare_host() -> None:
    url = build_request_url(Endpoint(host="gts"), Identity(device_id="d"), "$GPRMC", 0)
    assert url.startswith("http://gts?id=d&")


@pytest.mark.parametrize(
    "altitude, expected",
    [
        (10.0, "10.0"),
        (-12.5, "-12.5"),
        (1e-05, "0.00001"),
        (1e16, "10000000000000000"),
        (-2.5e-07, "-0.00000025"),
    ],
)
def test_altitude_is_plain_decimal(endpoint: Endpoint, altitude: float, expected: str) -> None:
    url = build_request_url(endpoint, Identity(device_id="d"), "$GPRMC", altitude)
    alt = url.rsplit("&alt=", 1)[1]
    assert alt == expected
    assert "e" not in alt.lower()
