"""Error taxonomy for fix delivery.

Every error below is caught at the job boundary and collapsed into a
single ``on_failure()`` callback; none of them reaches the caller of
``send_locations``.
"""

from __future__ import annotations

from typing import Optional


class OpenGTSError(Exception):
    """Base class for all delivery failures."""


class SentenceEncodingError(OpenGTSError):
    """A field could not be encoded into the request URL."""


class TransportError(OpenGTSError):
    """Connection, DNS, timeout or malformed-URL failure."""


class ProtocolError(OpenGTSError):
    """The collector answered with a status other than 200."""

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"collector returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class AdmissionError(OpenGTSError):
    """The dispatcher refused the job (queue full or stopped)."""

    def __init__(self, reason: str, queue_size: Optional[int] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.queue_size = queue_size
