"""Descriptive metadata for catalog entries.

Metadata is used for documentation and IDE tooling (``tmpltool --ide``).
It never drives runtime dispatch: the registration driver only reads the
``syntax`` capabilities to decide which namespaces an entry is attached to.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ArgumentMetadata:
    """One named argument of a catalog entry.

    ``default`` is the literal shown to template authors (``"\\"...\\""`` for
    strings, ``"0"`` for numbers) or None when there is no default.
    """

    name: str
    arg_type: str
    required: bool
    description: str
    default: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "arg_type": self.arg_type,
            "required": self.required,
            "default": self.default,
            "description": self.description,
        }


@dataclass(frozen=True)
class SyntaxVariants:
    """Which call conventions an entry supports."""

    function: bool = True
    filter: bool = False
    is_test: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {"function": self.function, "filter": self.filter, "is_test": self.is_test}


FUNCTION_ONLY = SyntaxVariants(function=True, filter=False, is_test=False)
FUNCTION_AND_FILTER = SyntaxVariants(function=True, filter=True, is_test=False)
FUNCTION_AND_TEST = SyntaxVariants(function=True, filter=False, is_test=True)


@dataclass(frozen=True)
class FunctionMetadata:
    name: str
    category: str
    description: str
    arguments: Tuple[ArgumentMetadata, ...] = ()
    return_type: str = "string"
    examples: Tuple[str, ...] = ()
    syntax: SyntaxVariants = field(default=FUNCTION_ONLY)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "arguments": [a.to_dict() for a in self.arguments],
            "return_type": self.return_type,
            "examples": list(self.examples),
            "syntax": self.syntax.to_dict(),
        }

    def argument_names(self) -> List[str]:
        return [a.name for a in self.arguments]


def arg(
    name: str,
    arg_type: str,
    description: str,
    *,
    required: bool = True,
    default: Optional[str] = None,
) -> ArgumentMetadata:
    """Shorthand used by catalog modules to declare arguments."""
    return ArgumentMetadata(
        name=name,
        arg_type=arg_type,
        required=required,
        description=description,
        default=default,
    )


def check_metadata(meta: FunctionMetadata) -> List[str]:
    """Return a list of problems with ``meta`` (empty when it is well formed)."""
    problems: List[str] = []
    if not meta.name:
        problems.append("empty name")
    if not meta.description:
        problems.append(f"{meta.name}: empty description")
    if not meta.return_type:
        problems.append(f"{meta.name}: empty return_type")
    if not meta.examples:
        problems.append(f"{meta.name}: no examples")
    seen = set()
    for argument in meta.arguments:
        if argument.name in seen:
            problems.append(f"{meta.name}: duplicate argument '{argument.name}'")
        seen.add(argument.name)
        if argument.required and argument.default is not None and not argument.default:
            problems.append(f"{meta.name}: required argument '{argument.name}' has an empty default")
    return problems


__all__ = [
    "ArgumentMetadata",
    "SyntaxVariants",
    "FunctionMetadata",
    "FUNCTION_ONLY",
    "FUNCTION_AND_FILTER",
    "FUNCTION_AND_TEST",
    "arg",
    "check_metadata",
]
