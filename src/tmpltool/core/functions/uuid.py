"""UUID generation (v4 random, v7 time-ordered)."""
from __future__ import annotations

import os
import time
import uuid

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs

SUPPORTED_VERSIONS = ("v4", "v7")


def uuid7() -> uuid.UUID:
    """Time-ordered UUID: 48-bit Unix milliseconds followed by random bits."""
    millis = time.time_ns() // 1_000_000
    value = bytearray(millis.to_bytes(6, "big") + os.urandom(10))
    value[6] = 0x70 | (value[6] & 0x0F)
    value[8] = 0x80 | (value[8] & 0x3F)
    return uuid.UUID(bytes=bytes(value))


class Uuid(Function):
    NAME = "uuid"
    METADATA = FunctionMetadata(
        name="uuid",
        category="random",
        description="Generate a UUID (v4 random or v7 time-ordered)",
        arguments=(arg("version", "string", "UUID version: v4 or v7", required=False, default='"v4"'),),
        return_type="string",
        examples=("{{ uuid() }}", '{{ uuid(version="v7") }}'),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        version = kwargs.get_str("version", "v4")
        if version == "v4":
            return str(uuid.uuid4())
        if version == "v7":
            return str(uuid7())
        raise TemplateFunctionError(
            f"Invalid UUID version '{version}'. Supported versions: {', '.join(SUPPORTED_VERSIONS)}",
            kind=ErrorKind.DOMAIN_VIOLATION,
            function=cls.NAME,
        )


ENTRIES = (Uuid,)

__all__ = ["Uuid", "uuid7", "SUPPORTED_VERSIONS", "ENTRIES"]
