"""Client configuration via environment variables.

Uses pydantic-settings so every field can be overridden with an
``OPENGTS_``-prefixed env var (e.g. ``OPENGTS_SERVER``,
``OPENGTS_DEVICE_ID``) or a ``.env`` file.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from opengts_client.schemas import Endpoint, Identity


class ClientSettings(BaseSettings):
    """OpenGTS client runtime settings."""

    model_config = {"env_prefix": "OPENGTS_", "env_file": ".env", "extra": "ignore"}

    # -- collector ----------------------------------------------------------
    server: str = Field(
        default="127.0.0.1",
        description="Collector host name or address",
    )
    port: Optional[int] = Field(default=None, description="Collector port")
    path: Optional[str] = Field(
        default="/gprmc/Data",
        description="Collector path for the gprmc servlet",
    )

    # -- identity -----------------------------------------------------------
    device_id: str = Field(default="", description="OpenGTS device id")
    account_name: str = Field(
        default="",
        description="OpenGTS account; empty means use the device id",
    )

    # -- delivery -----------------------------------------------------------
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Per-request HTTP timeout",
    )
    queue_capacity: int = Field(
        default=128,
        description="Max pending send jobs before new ones are rejected",
    )
    stop_on_first_failure: bool = Field(
        default=True,
        description="Skip the rest of a batch once one fix has failed",
    )

    # -- logging ------------------------------------------------------------
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="console",
        description="Log output format: 'console' or 'json'",
    )

    # -- derived ------------------------------------------------------------
    def endpoint(self) -> Endpoint:
        return Endpoint(host=self.server, port=self.port, path=self.path or None)

    def identity(self) -> Identity:
        """Identity from settings; raises if ``device_id`` is unset."""
        return Identity(device_id=self.device_id, account_name=self.account_name or None)
