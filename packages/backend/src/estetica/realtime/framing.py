"""Event-stream wire framing.

Every message on the wire is one block:

    event: <name>
    data: <compact json>
    <blank line>

JSON is compact and timestamps are UTC with millisecond precision and a
trailing "Z", matching what browser clients already parse.
"""

import json
from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel


def iso_timestamp(moment: datetime) -> str:
    """Format a datetime as e.g. 2025-03-01T14:05:09.120Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, datetime):
        return iso_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(data: Any) -> str:
    """Serialize a frame body.

    NaN and infinities raise ValueError: they are not valid JSON and
    browsers would fail to parse the frame.
    """
    return json.dumps(
        data,
        default=_default,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def format_frame(name: str, data: Any) -> str:
    """Build one complete frame for ``name`` carrying ``data``."""
    if "\n" in name or "\r" in name:
        raise ValueError(f"Event name must be a single line: {name!r}")
    return f"event: {name}\ndata: {to_json(data)}\n\n"
