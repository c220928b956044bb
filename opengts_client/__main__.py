"""CLI entry point: ``python -m opengts_client [--fixes FILE | --lat .. --lon ..]``."""

from __future__ import annotations

import argparse
import sys
import threading
from datetime import datetime, timezone
from typing import List, Optional

import structlog


def _configure_logging(level: str, fmt: str) -> None:
    """Set up structlog with console or JSON rendering."""
    import logging

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
    )

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class _WaitingCallback:
    """Records the job outcome and wakes the main thread."""

    def __init__(self) -> None:
        self.completed: Optional[bool] = None
        self.done = threading.Event()

    def on_complete(self) -> None:
        self.completed = True
        self.done.set()

    def on_failure(self) -> None:
        self.completed = False
        self.done.set()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opengts_client",
        description="Send location fixes to an OpenGTS collector",
    )
    parser.add_argument("--server", help="Collector host (overrides OPENGTS_SERVER)")
    parser.add_argument("--port", type=int, help="Collector port")
    parser.add_argument("--path", help="Collector path, e.g. /gprmc/Data")
    parser.add_argument("--device-id", help="OpenGTS device id")
    parser.add_argument("--account", help="OpenGTS account name")
    parser.add_argument("--fixes", help="JSON array or JSON-lines file of fixes")
    parser.add_argument("--lat", type=float, help="Latitude in degrees")
    parser.add_argument("--lon", type=float, help="Longitude in degrees")
    parser.add_argument("--alt", type=float, default=0.0, help="Altitude in meters")
    parser.add_argument("--speed", type=float, default=0.0, help="Speed in m/s")
    parser.add_argument("--bearing", type=float, default=0.0, help="Bearing in degrees")
    parser.add_argument(
        "--time",
        help="ISO-8601 fix time (default: now, UTC)",
    )
    parser.add_argument(
        "--print-sentence",
        action="store_true",
        default=False,
        help="Print the GPRMC sentences and exit without sending",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Load settings from env / .env file first, then override with CLI flags.
    from opengts_client.config import ClientSettings
    from opengts_client.fix_loader import load_fixes
    from opengts_client.schemas import Fix

    settings = ClientSettings()
    for field, value in (
        ("server", args.server),
        ("port", args.port),
        ("path", args.path),
        ("device_id", args.device_id),
        ("account_name", args.account),
    ):
        if value is not None:
            setattr(settings, field, value)

    _configure_logging(settings.log_level, settings.log_format)
    logger = structlog.get_logger("opengts_client")

    if args.fixes:
        fixes = load_fixes(args.fixes)
    elif args.lat is not None and args.lon is not None:
        when = (
            datetime.fromisoformat(args.time.replace("Z", "+00:00"))
            if args.time
            else datetime.now(timezone.utc)
        )
        fixes = [
            Fix.from_datetime(
                when, args.lat, args.lon, args.alt, args.speed, args.bearing
            )
        ]
    else:
        parser.error("either --fixes or both --lat and --lon are required")

    if args.print_sentence:
        from opengts_client.gprmc import encode_sentence

        for fix in fixes:
            print(encode_sentence(fix))
        return 0

    if not settings.device_id.strip():
        parser.error("a device id is required (--device-id or OPENGTS_DEVICE_ID)")

    from opengts_client.client import OpenGTSClient
    from opengts_client.dispatcher import BoundedDispatcher

    logger.info(
        "client_starting",
        version=__import__("opengts_client").__version__,
        endpoint=settings.endpoint().base_url,
        device_id=settings.device_id,
        fixes=len(fixes),
    )

    callback = _WaitingCallback()
    dispatcher = BoundedDispatcher(capacity=settings.queue_capacity)
    client = OpenGTSClient.from_settings(settings, callback, dispatcher=dispatcher)
    try:
        with dispatcher:
            client.send_locations(settings.device_id, settings.account_name, fixes)
            callback.done.wait()
    except KeyboardInterrupt:
        logger.info("client_interrupted")
        return 130
    finally:
        client.close()

    if callback.completed:
        logger.info("fixes_delivered", count=len(fixes))
        return 0
    logger.error("fixes_not_delivered", count=len(fixes))
    return 1


if __name__ == "__main__":
    sys.exit(main())
