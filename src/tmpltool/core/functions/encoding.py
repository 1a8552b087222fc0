"""Keyed hashing and secret generation."""
from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import string

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs

MAX_SECRET_LENGTH = 1024

_ALPHANUMERIC = string.ascii_letters + string.digits


def generate_secret(length: int, charset: str = "alphanumeric") -> str:
    """Cryptographically secure random string.

    Raises:
        ValueError: on an out-of-range length or unknown charset.
    """
    if not 1 <= length <= MAX_SECRET_LENGTH:
        raise ValueError(f"Length must be between 1 and {MAX_SECRET_LENGTH}, got {length}")
    if charset == "hex":
        return secrets.token_bytes((length + 1) // 2).hex()[:length]
    if charset == "base64":
        raw = secrets.token_bytes((length * 3 + 3) // 4)
        return base64.b64encode(raw).decode("ascii")[:length]
    if charset == "alphanumeric":
        return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))
    raise ValueError(f"Invalid charset: '{charset}'. Must be 'alphanumeric', 'hex', or 'base64'")


class HmacSha256(Function):
    NAME = "hmac_sha256"
    METADATA = FunctionMetadata(
        name="hmac_sha256",
        category="encoding",
        description="HMAC-SHA256 of a message, as lowercase hex",
        arguments=(
            arg("key", "string", "Secret key"),
            arg("message", "string", "Message to sign"),
        ),
        return_type="string",
        examples=('{{ hmac_sha256(key="secret", message="payload") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        key = kwargs.get_str("key").encode("utf-8")
        message = kwargs.get_str("message").encode("utf-8")
        return hmac.new(key, message, hashlib.sha256).hexdigest()


class GenerateSecret(Function):
    NAME = "generate_secret"
    METADATA = FunctionMetadata(
        name="generate_secret",
        category="encoding",
        description="Cryptographically secure random secret",
        arguments=(
            arg("length", "integer", "Length in characters (1-1024)"),
            arg(
                "charset",
                "string",
                "One of alphanumeric, hex, base64",
                required=False,
                default='"alphanumeric"',
            ),
        ),
        return_type="string",
        examples=('{{ generate_secret(length=32, charset="hex") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        length = kwargs.get_int("length")
        charset = kwargs.get_str("charset", "alphanumeric")
        try:
            return generate_secret(length, charset)
        except ValueError as exc:
            raise TemplateFunctionError(
                str(exc),
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            ) from exc


ENTRIES = (HmacSha256, GenerateSecret)

__all__ = ["HmacSha256", "GenerateSecret", "generate_secret", "MAX_SECRET_LENGTH", "ENTRIES"]
