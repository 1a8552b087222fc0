"""Content digests usable as functions or filters.

Syntax:
    {{ md5(string="hello") }}
    {{ "hello" | sha256 }}
    {{ "hello" | sha256 | md5 }}
"""
from __future__ import annotations

import hashlib
from typing import Any, ClassVar

from ..contracts import UnaryFilterFunction
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, extract_string


def _digest_metadata(name: str, label: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=name,
        category="hash",
        description=f"Calculate {label} hash of a string",
        arguments=(arg("string", "string", "The string to hash"),),
        return_type="string",
        examples=(f'{{{{ {name}(string="hello") }}}}', f'{{{{ "hello" | {name} }}}}'),
        syntax=FUNCTION_AND_FILTER,
    )


class _Digest(UnaryFilterFunction):
    ALGORITHM: ClassVar[str]

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        text = extract_string(value, cls.NAME)
        return hashlib.new(cls.ALGORITHM, text.encode("utf-8")).hexdigest()


class Md5(_Digest):
    NAME = "md5"
    ALGORITHM = "md5"
    METADATA = _digest_metadata("md5", "MD5")


class Sha1(_Digest):
    NAME = "sha1"
    ALGORITHM = "sha1"
    METADATA = _digest_metadata("sha1", "SHA1")


class Sha256(_Digest):
    NAME = "sha256"
    ALGORITHM = "sha256"
    METADATA = _digest_metadata("sha256", "SHA256")


class Sha512(_Digest):
    NAME = "sha512"
    ALGORITHM = "sha512"
    METADATA = _digest_metadata("sha512", "SHA512")


ENTRIES = (Md5, Sha1, Sha256, Sha512)

__all__ = ["Md5", "Sha1", "Sha256", "Sha512", "ENTRIES"]
