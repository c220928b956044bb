"""Loads fixes for the CLI from a JSON array or a JSON-lines file."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

from opengts_client.schemas import Fix


def parse_fixes(text: str) -> List[Fix]:
    """Parse *text* as a JSON array of fix objects, or one object per line.

    Objects carry ``timestamp_ms`` or an ISO-8601 ``time`` plus the
    ``Fix`` fields.  Blank lines are ignored.
    """
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        records = json.loads(stripped)
    else:
        records = [json.loads(line) for line in stripped.splitlines() if line.strip()]
    return [_to_fix(record) for record in records]


def load_fixes(path: Union[str, Path]) -> List[Fix]:
    with open(path, encoding="utf-8") as fh:
        return parse_fixes(fh.read())


def _to_fix(record: Dict[str, Any]) -> Fix:
    if "timestamp_ms" not in record and "time" in record:
        record = dict(record)
        when = datetime.fromisoformat(str(record.pop("time")).replace("Z", "+00:00"))
        return Fix.from_datetime(when, **record)
    return Fix.model_validate(record)
