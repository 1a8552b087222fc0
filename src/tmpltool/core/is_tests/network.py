"""Network predicates.

The port probe binds and immediately releases a socket; the answer can be
stale by the time the caller uses the port.
"""
from __future__ import annotations

import logging
import socket
from typing import Any

from ..contracts import IsTestFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_TEST, FunctionMetadata, arg
from ..values import Kwargs
from .datetime import lenient_int

logger = logging.getLogger(__name__)


def port_in_range(port: int) -> bool:
    return 1 <= port <= 65535


def is_port_available(port: int, host: str = "0.0.0.0") -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError as exc:
            logger.debug("Port %d not available: %s", port, exc)
            return False
    return True


class PortAvailable(IsTestFunction):
    FUNCTION_NAME = "is_port_available"
    IS_NAME = "port_available"
    NAME = FUNCTION_NAME
    METADATA = FunctionMetadata(
        name="is_port_available",
        category="network",
        description="Check whether a TCP port can be bound on all interfaces",
        arguments=(arg("port", "integer", "Port number (1-65535)"),),
        return_type="boolean",
        examples=("{{ is_port_available(port=8080) }}", "{% if 8080 is port_available %}free{% endif %}"),
        syntax=FUNCTION_AND_TEST,
    )

    @classmethod
    def call_as_function(cls, kwargs: Kwargs) -> bool:
        port = kwargs.get_int("port")
        if not port_in_range(port):
            raise TemplateFunctionError(
                f"Port must be between 1 and 65535, got {port}",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.FUNCTION_NAME,
            )
        return is_port_available(port)

    @classmethod
    def call_as_is(cls, value: Any) -> bool:
        port = lenient_int(value)
        if port is None or not port_in_range(port):
            return False
        return is_port_available(port)


ENTRIES = (PortAvailable,)

__all__ = ["PortAvailable", "is_port_available", "port_in_range", "ENTRIES"]
