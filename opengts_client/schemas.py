"""Pydantic v2 models for fixes, device identity and collector endpoint.

All models are frozen: a ``Fix`` comes from the location subsystem and is
never mutated by the client.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Fix(BaseModel):
    """A single timestamped position/velocity/bearing reading."""

    model_config = ConfigDict(frozen=True)

    timestamp_ms: int = Field(..., description="Fix time, epoch millis (UTC)")
    latitude: float = Field(..., ge=-90.0, le=90.0, description="Degrees, signed")
    longitude: float = Field(
        ..., ge=-180.0, le=180.0, description="Degrees, signed"
    )
    altitude: float = Field(default=0.0, description="Meters")
    speed: float = Field(default=0.0, ge=0.0, description="Meters/second")
    bearing: float = Field(default=0.0, ge=0.0, le=360.0, description="Degrees")

    @classmethod
    def from_datetime(
        cls,
        when: datetime,
        latitude: float,
        longitude: float,
        altitude: float = 0.0,
        speed: float = 0.0,
        bearing: float = 0.0,
    ) -> "Fix":
        """Build a fix from a datetime.  Naive datetimes are taken as UTC."""
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        return cls(
            timestamp_ms=int(round(when.timestamp() * 1000)),
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            speed=speed,
            bearing=bearing,
        )

    @property
    def time(self) -> datetime:
        """Fix time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)


class Identity(BaseModel):
    """Device id plus optional OpenGTS account name."""

    model_config = ConfigDict(frozen=True)

    device_id: str = Field(..., description="OpenGTS device id")
    account_name: Optional[str] = Field(
        default=None, description="OpenGTS account; defaults to the device id"
    )

    @field_validator("device_id")
    @classmethod
    def reject_blank_device_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("device_id must not be empty")
        return v

    @property
    def effective_account(self) -> str:
        if self.account_name is None or not self.account_name.strip():
            return self.device_id
        return self.account_name


class Endpoint(BaseModel):
    """Collector host, optional port and optional path."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="Collector host name or address")
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    path: Optional[str] = Field(default=None, description="e.g. /gprmc/Data")

    @field_validator("host")
    @classmethod
    def strip_scheme(cls, v: str) -> str:
        v = v.strip()
        if v.lower().startswith("http://"):
            v = v[len("http://"):]
        if not v:
            raise ValueError("host must not be empty")
        return v

    @property
    def base_url(self) -> str:
        """``http://host[:port][path]`` with absent parts omitted."""
        url = f"http://{self.host}"
        if self.port is not None:
            url += f":{self.port}"
        if self.path is not None:
            url += self.path
        return url
