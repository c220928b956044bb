"""Public entry point: ``OpenGTSClient.send_locations``."""

from __future__ import annotations

from typing import Optional, Sequence, Union

import structlog

from opengts_client.config import ClientSettings
from opengts_client.dispatcher import Dispatcher, default_dispatcher
from opengts_client.job import Callback, DispatchJob
from opengts_client.schemas import Endpoint, Fix, Identity
from opengts_client.transport import HttpTransport

logger = structlog.get_logger(__name__)


class OpenGTSClient:
    """Reports fixes to one OpenGTS collector.

    Sends never block: each call becomes a ``DispatchJob`` handed to the
    dispatcher.  The outcome arrives later through *callback*.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        callback: Callback,
        *,
        dispatcher: Optional[Dispatcher] = None,
        transport: Optional[HttpTransport] = None,
        stop_on_first_failure: bool = True,
    ) -> None:
        self._endpoint = endpoint
        self._callback = callback
        self._dispatcher = dispatcher if dispatcher is not None else default_dispatcher()
        self._transport = transport or HttpTransport()
        self._stop_on_first_failure = stop_on_first_failure

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        callback: Callback,
        *,
        dispatcher: Optional[Dispatcher] = None,
    ) -> "OpenGTSClient":
        return cls(
            settings.endpoint(),
            callback,
            dispatcher=dispatcher,
            transport=HttpTransport(timeout=settings.request_timeout_seconds),
            stop_on_first_failure=settings.stop_on_first_failure,
        )

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    # -- public API ---------------------------------------------------------

    def send_locations(
        self,
        device_id: str,
        account_name: Optional[str],
        fixes: Sequence[Fix],
    ) -> None:
        """Queue *fixes* for delivery as one job."""
        job = DispatchJob(
            self._endpoint,
            Identity(device_id=device_id, account_name=account_name),
            fixes,
            self._transport,
            self,
            stop_on_first_failure=self._stop_on_first_failure,
        )
        self._dispatcher.submit(job)

    def send_location(
        self, device_id: str, account_name: Optional[str], fix: Fix
    ) -> None:
        self.send_locations(device_id, account_name, [fix])

    def send_raw(self, device_id: str, fixes: Union[Fix, Sequence[Fix]]) -> None:
        """Raw (binary) OpenGTS transmission.  Not supported; does nothing."""
        logger.debug("send_raw_unsupported", device_id=device_id)

    def close(self) -> None:
        self._transport.close()

    # -- Callback ----------------------------------------------------------

    def on_complete(self) -> None:
        self._callback.on_complete()

    def on_failure(self) -> None:
        self._callback.on_failure()
