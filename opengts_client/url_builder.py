"""Builds the per-fix OpenGTS ``gprmc`` GET URL."""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import urlencode

from opengts_client.errors import SentenceEncodingError
from opengts_client.schemas import Endpoint, Identity

# OpenGTS status code for a plain location report.
STATUS_CODE = "0xF020"


def plain_decimal(value: float) -> str:
    """Render *value* without an exponent, e.g. ``1e-05`` -> ``0.00001``."""
    return format(Decimal(repr(float(value))), "f")


def build_request_url(
    endpoint: Endpoint,
    identity: Identity,
    sentence: str,
    altitude: float,
) -> str:
    """Return ``http://host[:port][path]?id=..&dev=..&acct=..&code=..&gprmc=..&alt=..``.

    Each value is percent-encoded on its own (form style, space as ``+``);
    ``*`` is left as is so the checksum separator reads ``*XX`` on the wire.
    Raises ``SentenceEncodingError`` if a value cannot be encoded as UTF-8.
    """
    params = [
        ("id", identity.device_id),
        ("dev", identity.device_id),
        ("acct", identity.effective_account),
        ("code", STATUS_CODE),
        ("gprmc", sentence),
        ("alt", plain_decimal(altitude)),
    ]
    try:
        query = urlencode(params, safe="*", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as exc:
        raise SentenceEncodingError(f"cannot percent-encode request field: {exc}") from exc
    return f"{endpoint.base_url}?{query}"
