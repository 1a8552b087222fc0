from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping


class TmplToolError(Exception):
    """Base exception for tmpltool."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ErrorKind(str, Enum):
    """Kinds of failure a template function call can produce."""

    TYPE_MISMATCH = "type_mismatch"
    MISSING_ARGUMENT = "missing_argument"
    DOMAIN_VIOLATION = "domain_violation"
    DECODE_FAILURE = "decode_failure"
    FORMAT_INCOMPATIBLE = "format_incompatible"
    ENVIRONMENT_ABSENT = "environment_absent"


class TemplateFunctionError(TmplToolError, ValueError):
    """Raised by a catalog function when a single call fails.

    The failure is scoped to the one call; the template engine surfaces it
    as a render error with the same single-line message.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind = ErrorKind.DOMAIN_VIOLATION,
        function: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["kind"] = kind.value
        if function:
            ctx["function"] = function
        TmplToolError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.kind = kind
        self.function = function


class RegistrationError(TmplToolError, RuntimeError):
    """Raised when the catalog cannot be attached to a template environment."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TmplToolError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class RenderError(TmplToolError):
    """Raised when a template fails to parse or render."""


class OutputValidationError(TmplToolError, ValueError):
    """Raised when rendered output is not valid in the requested format."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TmplToolError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigError(TmplToolError):
    """Raised when configuration cannot be loaded or fails validation."""


__all__ = [
    "TmplToolError",
    "ErrorKind",
    "TemplateFunctionError",
    "RegistrationError",
    "RenderError",
    "OutputValidationError",
    "ConfigError",
]
