"""Calendar field extraction and formatting for Unix timestamps (UTC)."""
from __future__ import annotations

import datetime as _dt
from typing import Any

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, describe, kind_of

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_TIMESTAMP_ARG = arg("timestamp", "integer", "Unix timestamp in seconds")


def extract_timestamp(value: Any, fn_name: str) -> int:
    """Return ``value`` as whole epoch seconds.

    Integers pass through; floats are accepted only when integral.
    """
    kind = kind_of(value)
    if kind is ValueKind.INT:
        return value
    if kind is ValueKind.FLOAT and float(value).is_integer():
        return int(value)
    raise TemplateFunctionError(
        f"{fn_name} requires a numeric timestamp, found: {describe(value)}",
        kind=ErrorKind.TYPE_MISMATCH,
        function=fn_name,
    )


def timestamp_to_datetime(timestamp: int, fn_name: str = "") -> _dt.datetime:
    try:
        return _dt.datetime.fromtimestamp(timestamp, tz=_dt.timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise TemplateFunctionError(
            f"Invalid timestamp: {timestamp}",
            kind=ErrorKind.DOMAIN_VIOLATION,
            function=fn_name or None,
        ) from exc


class _TimestampFilter(UnaryFilterFunction):
    ARGUMENT = "timestamp"

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Any:
        moment = timestamp_to_datetime(extract_timestamp(value, cls.NAME), cls.NAME)
        return cls.compute(moment, kwargs)

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> Any:
        raise NotImplementedError


class FormatDate(_TimestampFilter):
    NAME = "format_date"
    METADATA = FunctionMetadata(
        name="format_date",
        category="datetime",
        description="Format a Unix timestamp (UTC) with a strftime pattern",
        arguments=(
            _TIMESTAMP_ARG,
            arg("format", "string", "strftime format string", required=False, default=f'"{DEFAULT_DATE_FORMAT}"'),
        ),
        return_type="string",
        examples=(
            '{{ format_date(timestamp=1704067200, format="%Y-%m-%d") }}',
            '{{ 1704067200 | format_date(format="%d/%m/%Y") }}',
        ),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> str:
        fmt = kwargs.get_str("format", DEFAULT_DATE_FORMAT)
        try:
            return moment.strftime(fmt)
        except ValueError as exc:
            raise TemplateFunctionError(
                f"Invalid date format '{fmt}': {exc}",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            ) from exc


def _field_metadata(name: str, field: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=name,
        category="datetime",
        description=f"Extract the {field} from a Unix timestamp (UTC)",
        arguments=(_TIMESTAMP_ARG,),
        return_type="integer",
        examples=(f"{{{{ {name}(timestamp=1704067200) }}}}", f"{{{{ 1704067200 | {name} }}}}"),
        syntax=FUNCTION_AND_FILTER,
    )


class GetYear(_TimestampFilter):
    NAME = "get_year"
    METADATA = _field_metadata("get_year", "year")

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> int:
        return moment.year


class GetMonth(_TimestampFilter):
    NAME = "get_month"
    METADATA = _field_metadata("get_month", "month (1-12)")

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> int:
        return moment.month


class GetDay(_TimestampFilter):
    NAME = "get_day"
    METADATA = _field_metadata("get_day", "day of the month (1-31)")

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> int:
        return moment.day


class GetHour(_TimestampFilter):
    NAME = "get_hour"
    METADATA = _field_metadata("get_hour", "hour (0-23)")

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> int:
        return moment.hour


class GetMinute(_TimestampFilter):
    NAME = "get_minute"
    METADATA = _field_metadata("get_minute", "minute (0-59)")

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> int:
        return moment.minute


class GetSecond(_TimestampFilter):
    NAME = "get_second"
    METADATA = _field_metadata("get_second", "second (0-59)")

    @classmethod
    def compute(cls, moment: _dt.datetime, kwargs: Kwargs) -> int:
        return moment.second


ENTRIES = (FormatDate, GetYear, GetMonth, GetDay, GetHour, GetMinute, GetSecond)

__all__ = [
    "FormatDate",
    "GetYear",
    "GetMonth",
    "GetDay",
    "GetHour",
    "GetMinute",
    "GetSecond",
    "DEFAULT_DATE_FORMAT",
    "extract_timestamp",
    "timestamp_to_datetime",
    "ENTRIES",
]
