"""Clock access and timestamp arithmetic.

All timestamps are Unix epoch seconds interpreted in UTC.
"""
from __future__ import annotations

import datetime as _dt
import time
from typing import Any

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..filters.datetime import timestamp_to_datetime
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs

SECONDS_PER_DAY = 86400


class Now(Function):
    NAME = "now"
    METADATA = FunctionMetadata(
        name="now",
        category="datetime",
        description="Current time as a Unix timestamp, or formatted (UTC) when a format is given",
        arguments=(arg("format", "string", "strftime format string", required=False),),
        return_type="integer|string",
        examples=("{{ now() }}", '{{ now(format="%Y-%m-%d") }}'),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        if not kwargs.has("format"):
            return int(time.time())
        return _dt.datetime.now(_dt.timezone.utc).strftime(kwargs.get_str("format"))


class ParseDate(Function):
    NAME = "parse_date"
    METADATA = FunctionMetadata(
        name="parse_date",
        category="datetime",
        description="Parse a date string into a Unix timestamp (UTC); date-only formats give midnight",
        arguments=(
            arg("string", "string", "The date string"),
            arg("format", "string", "strftime format of the input"),
        ),
        return_type="integer",
        examples=('{{ parse_date(string="2024-01-15", format="%Y-%m-%d") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        text = kwargs.get_str("string")
        fmt = kwargs.get_str("format")
        try:
            parsed = _dt.datetime.strptime(text, fmt)
        except ValueError as exc:
            raise TemplateFunctionError(
                f"Failed to parse date '{text}' with format '{fmt}': {exc}",
                kind=ErrorKind.DECODE_FAILURE,
                function=cls.NAME,
            ) from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=_dt.timezone.utc)
        return int(parsed.timestamp())


class DateAdd(Function):
    NAME = "date_add"
    METADATA = FunctionMetadata(
        name="date_add",
        category="datetime",
        description="Add (or subtract) whole days to a timestamp",
        arguments=(
            arg("timestamp", "integer", "Unix timestamp in seconds"),
            arg("days", "integer", "Days to add; negative values subtract"),
        ),
        return_type="integer",
        examples=("{{ date_add(timestamp=now(), days=7) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        timestamp = kwargs.get_int("timestamp")
        days = kwargs.get_int("days")
        timestamp_to_datetime(timestamp, cls.NAME)
        return timestamp + days * SECONDS_PER_DAY


class DateDiff(Function):
    NAME = "date_diff"
    METADATA = FunctionMetadata(
        name="date_diff",
        category="datetime",
        description="Whole days between two timestamps (timestamp1 - timestamp2, truncated toward zero)",
        arguments=(
            arg("timestamp1", "integer", "First Unix timestamp"),
            arg("timestamp2", "integer", "Second Unix timestamp"),
        ),
        return_type="integer",
        examples=("{{ date_diff(timestamp1=1704153600, timestamp2=1704067200) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        first = kwargs.get_int("timestamp1")
        second = kwargs.get_int("timestamp2")
        timestamp_to_datetime(first, cls.NAME)
        timestamp_to_datetime(second, cls.NAME)
        delta = first - second
        days = abs(delta) // SECONDS_PER_DAY
        return days if delta >= 0 else -days


ENTRIES = (Now, ParseDate, DateAdd, DateDiff)

__all__ = ["Now", "ParseDate", "DateAdd", "DateDiff", "ENTRIES"]
