"""
Timestamp types shared by the response schemas.

Columns are stored as naive UTC, so a naive value is taken to be UTC already.
Aware values are converted first. Either way the wire form is
second-precision ISO 8601 with a trailing Z.
"""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import PlainSerializer

WIRE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_utc(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.strftime(WIRE_FORMAT)


UTCDatetime = Annotated[datetime, PlainSerializer(format_utc, return_type=str)]
UTCDatetimeOptional = Annotated[datetime | None, PlainSerializer(format_utc, return_type=str | None)]
