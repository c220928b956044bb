"""GPRMC sentence encoding for the OpenGTS ``gprmc`` request format.

Produces::

    $GPRMC,HHMMSS,A,DDMM.MMMMMN,DDDMM.MMMMME,knots,bearing,DDMMYY,,,*XX

All numbers are rendered with Python format specs, which always use
``.`` as the decimal separator regardless of the process locale.
"""

from __future__ import annotations

from datetime import datetime

from opengts_client.schemas import Fix

SENTENCE_TAG = "$GPRMC"
VALID_FIX_FLAG = "A"

_KNOTS_PER_MPS = 1.94384449
_LAT_DEGREE_WIDTH = 2
_LON_DEGREE_WIDTH = 3


def mps_to_knots(mps: float) -> float:
    """Convert meters/second to knots."""
    return mps * _KNOTS_PER_MPS


def nmea_time(when: datetime) -> str:
    """``HHMMSS`` of an aware UTC datetime."""
    return when.strftime("%H%M%S")


def nmea_date(when: datetime) -> str:
    """``DDMMYY`` of an aware UTC datetime."""
    return when.strftime("%d%m%y")


def nmea_coord(value: float, degree_width: int = _LAT_DEGREE_WIDTH) -> str:
    """Render an unsigned coordinate as degrees followed by ``MM.MMMMM``.

    Minutes that round up to 60 carry into the degree part, so e.g.
    ``179.999999999`` gives ``18000.00000`` where the legacy Android
    encoder emitted ``17960.00000``.
    """
    value = abs(value)
    degrees = int(value)
    minutes = f"{(value - degrees) * 60:08.5f}"
    if minutes.startswith("60"):
        degrees += 1
        minutes = "00.00000"
    return f"{degrees:0{degree_width}d}{minutes}"


def nmea_checksum(body: str) -> str:
    """XOR of every character after the leading ``$``, as two hex digits."""
    chk = 0
    for ch in body[1:]:
        chk ^= ord(ch)
    return f"{chk:02X}"


def encode_sentence(fix: Fix) -> str:
    """Encode *fix* as a checksummed GPRMC sentence.

    The result depends only on the fix, so encoding the same fix twice
    always yields the same string.
    """
    when = fix.time
    body = ",".join(
        [
            SENTENCE_TAG,
            nmea_time(when),
            VALID_FIX_FLAG,
            nmea_coord(fix.latitude, _LAT_DEGREE_WIDTH)
            + ("N" if fix.latitude >= 0 else "S"),
            nmea_coord(fix.longitude, _LON_DEGREE_WIDTH)
            + ("E" if fix.longitude >= 0 else "W"),
            f"{mps_to_knots(fix.speed):.6f}",
            f"{fix.bearing:.6f}",
            nmea_date(when),
            "",
            "",
            "",
        ]
    )
    return f"{body}*{nmea_checksum(body)}"
