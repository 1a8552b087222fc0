"""Filesystem predicates resolved against the template's base directory.

Relative paths are joined onto ``TemplateContext.base_dir``; absolute paths
are used as-is.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from ..context import TemplateContext
from ..contracts import ContextIsTestFunction
from ..metadata import FUNCTION_AND_TEST, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, extract_string, kind_of


def _path_metadata(function_name: str, is_name: str, label: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=function_name,
        category="filesystem",
        description=f"Check whether a path exists and is a {label}",
        arguments=(arg("path", "string", "Path to check (relative to the template directory)"),),
        return_type="boolean",
        examples=(
            f'{{{{ {function_name}(path="config.yaml") }}}}',
            f'{{% if "config.yaml" is {is_name} %}}found{{% endif %}}',
        ),
        syntax=FUNCTION_AND_TEST,
    )


class _PathPredicate(ContextIsTestFunction):
    @classmethod
    def check(cls, path: Path) -> bool:
        raise NotImplementedError

    @classmethod
    def call_as_function(cls, context: TemplateContext, kwargs: Kwargs) -> bool:
        path = extract_string(kwargs.get_required("path"), cls.FUNCTION_NAME)
        return cls.check(context.resolve_path(path))

    @classmethod
    def call_as_is(cls, context: TemplateContext, value: Any) -> bool:
        if kind_of(value) is not ValueKind.STRING:
            return False
        return cls.check(context.resolve_path(value))


class File(_PathPredicate):
    FUNCTION_NAME = "is_file"
    IS_NAME = "file"
    NAME = FUNCTION_NAME
    METADATA = _path_metadata("is_file", "file", "regular file")

    @classmethod
    def check(cls, path: Path) -> bool:
        return path.is_file()


class Dir(_PathPredicate):
    FUNCTION_NAME = "is_dir"
    IS_NAME = "dir"
    NAME = FUNCTION_NAME
    METADATA = _path_metadata("is_dir", "dir", "directory")

    @classmethod
    def check(cls, path: Path) -> bool:
        return path.is_dir()


class Symlink(_PathPredicate):
    FUNCTION_NAME = "is_symlink"
    IS_NAME = "symlink"
    NAME = FUNCTION_NAME
    METADATA = _path_metadata("is_symlink", "symlink", "symbolic link")

    @classmethod
    def check(cls, path: Path) -> bool:
        return path.is_symlink()


ENTRIES = (File, Dir, Symlink)

__all__ = ["File", "Dir", "Symlink", "ENTRIES"]
