"""Pattern validation."""
from __future__ import annotations

from ..contracts import Function
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs
from .string import compile_pattern


class MatchesRegex(Function):
    NAME = "matches_regex"
    METADATA = FunctionMetadata(
        name="matches_regex",
        category="validation",
        description="True when the pattern matches anywhere in the string",
        arguments=(
            arg("pattern", "string", "Regular expression"),
            arg("string", "string", "String to test"),
        ),
        return_type="boolean",
        examples=('{% if matches_regex(pattern="^[a-z0-9-]+$", string=name) %}ok{% endif %}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        compiled = compile_pattern(kwargs.get_str("pattern"), cls.NAME)
        return compiled.search(kwargs.get_str("string")) is not None


ENTRIES = (MatchesRegex,)

__all__ = ["MatchesRegex", "ENTRIES"]
