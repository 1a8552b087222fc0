"""Pure path-string manipulation.

Nothing here touches the filesystem. Paths use ``/`` as separator and
backslashes in results are rewritten to ``/``.
"""
from __future__ import annotations

import posixpath
from typing import Any, List

from ..contracts import UnaryFilterFunction
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, ValueKind, describe, kind_of

_PATH_ARG = arg("path", "string", "The file path")


def extract_path(value: Any, fn_name: str) -> str:
    if kind_of(value) is ValueKind.STRING:
        return value
    raise TemplateFunctionError(
        f"{fn_name} requires a string path, found: {describe(value)}",
        kind=ErrorKind.TYPE_MISMATCH,
        function=fn_name,
    )


def _components(path: str) -> List[str]:
    return [part for part in path.split("/") if part and part != "."]


def basename(path: str) -> str:
    parts = _components(path)
    if not parts or parts[-1] == "..":
        return ""
    return parts[-1]


def dirname(path: str) -> str:
    parts = _components(path)
    if not parts:
        return ""
    root = "/" if path.startswith("/") else ""
    return root + "/".join(parts[:-1]) if (root or len(parts) > 1) else ""


def extension(path: str) -> str:
    name = basename(path)
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext


def normalize(path: str) -> str:
    parts: List[str] = []
    for component in _components(path):
        if component == "..":
            if parts:
                parts.pop()
        else:
            parts.append(component)
    root = "/" if path.startswith("/") else ""
    return (root + "/".join(parts)).replace("\\", "/")


def _path_metadata(name: str, description: str, example: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=name,
        category="path",
        description=description,
        arguments=(_PATH_ARG,),
        return_type="string",
        examples=(f'{{{{ {name}(path="{example}") }}}}', f'{{{{ "{example}" | {name} }}}}'),
        syntax=FUNCTION_AND_FILTER,
    )


class Basename(UnaryFilterFunction):
    NAME = "basename"
    ARGUMENT = "path"
    METADATA = _path_metadata("basename", "Get the last component of a path", "/var/log/app.log")

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return basename(extract_path(value, cls.NAME))


class Dirname(UnaryFilterFunction):
    NAME = "dirname"
    ARGUMENT = "path"
    METADATA = _path_metadata("dirname", "Get the parent directory of a path", "/var/log/app.log")

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return dirname(extract_path(value, cls.NAME))


class FileExtension(UnaryFilterFunction):
    NAME = "file_extension"
    ARGUMENT = "path"
    METADATA = _path_metadata("file_extension", "Get the extension of a path without the dot", "archive.tar.gz")

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return extension(extract_path(value, cls.NAME))


class JoinPath(UnaryFilterFunction):
    NAME = "join_path"
    ARGUMENT = "parts"
    METADATA = FunctionMetadata(
        name="join_path",
        category="path",
        description="Join path components (an absolute component restarts the path)",
        arguments=(arg("parts", "array", "Path components to join"),),
        return_type="string",
        examples=('{{ join_path(parts=["etc", "app", "config.yaml"]) }}', '{{ ["a", "b"] | join_path }}'),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        if kind_of(value) is not ValueKind.SEQUENCE:
            raise TemplateFunctionError(
                f"join_path requires an array, found: {describe(value)}",
                kind=ErrorKind.TYPE_MISMATCH,
                function=cls.NAME,
            )
        parts: List[str] = []
        for item in value:
            if kind_of(item) is not ValueKind.STRING:
                raise TemplateFunctionError(
                    f"join_path requires an array of strings, found: {describe(item)}",
                    kind=ErrorKind.TYPE_MISMATCH,
                    function=cls.NAME,
                )
            parts.append(item)
        if not parts:
            return ""
        return posixpath.join(*parts).replace("\\", "/")


class NormalizePath(UnaryFilterFunction):
    NAME = "normalize_path"
    ARGUMENT = "path"
    METADATA = _path_metadata("normalize_path", "Resolve '.' and '..' components lexically", "a/./b/../c")

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return normalize(extract_path(value, cls.NAME))


ENTRIES = (Basename, Dirname, FileExtension, JoinPath, NormalizePath)

__all__ = [
    "Basename",
    "Dirname",
    "FileExtension",
    "JoinPath",
    "NormalizePath",
    "extract_path",
    "ENTRIES",
]
