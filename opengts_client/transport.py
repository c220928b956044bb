"""HTTP transport: one GET per fix, success means HTTP 200."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from opengts_client.errors import ProtocolError, TransportError

logger = structlog.get_logger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 10.0
_LOG_BODY_LIMIT = 500


@dataclass(frozen=True)
class Outcome:
    """Status and body of one collector response."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class HttpTransport:
    """Sends fix URLs to the collector with a blocking ``httpx.Client``.

    Redirects are not followed: anything but a direct 200 is a failure.
    """

    def __init__(
        self,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout, follow_redirects=False
        )

    # -- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- public API ---------------------------------------------------------

    def send(self, url: str) -> Outcome:
        """GET *url* once and return the outcome, whatever its status.

        Raises ``TransportError`` on network-level failures.
        """
        try:
            response = self._client.get(url)
        except httpx.RequestError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise TransportError(f"invalid URL: {exc}") from exc
        return Outcome(status_code=response.status_code, body=response.text)

    def deliver(self, url: str) -> Outcome:
        """Like ``send`` but raises ``ProtocolError`` unless the status is 200."""
        outcome = self.send(url)
        if not outcome.ok:
            logger.error(
                "collector_error",
                status=outcome.status_code,
                body=outcome.body[:_LOG_BODY_LIMIT],
            )
            raise ProtocolError(outcome.status_code, outcome.body)
        logger.debug(
            "collector_ok",
            status=outcome.status_code,
            body=outcome.body[:_LOG_BODY_LIMIT],
        )
        return outcome
