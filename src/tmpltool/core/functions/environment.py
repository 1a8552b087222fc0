"""Environment-variable lookup through the injected provider."""
from __future__ import annotations

from typing import Any, Dict, List

from ..contracts import EnvironmentFunction
from ..environment import EnvironmentProvider, filter_environment
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs


class GetEnv(EnvironmentFunction):
    NAME = "get_env"
    METADATA = FunctionMetadata(
        name="get_env",
        category="environment",
        description="Read an environment variable, falling back to a default",
        arguments=(
            arg("name", "string", "Environment variable name"),
            arg("default", "string", "Value used when the variable is not set", required=False),
        ),
        return_type="string",
        examples=('{{ get_env(name="HOME") }}', '{{ get_env(name="PORT", default="8080") }}'),
    )

    @classmethod
    def call(cls, environ: EnvironmentProvider, kwargs: Kwargs) -> Any:
        name = kwargs.get_str("name")
        value = environ.get(name)
        if value is not None:
            return value
        if "default" in kwargs:
            return kwargs["default"]
        raise TemplateFunctionError(
            f"Environment variable '{name}' is not set and no default provided",
            kind=ErrorKind.ENVIRONMENT_ABSENT,
            function=cls.NAME,
        )


class FilterEnv(EnvironmentFunction):
    NAME = "filter_env"
    METADATA = FunctionMetadata(
        name="filter_env",
        category="environment",
        description="List environment variables whose name matches a glob pattern, sorted by name",
        arguments=(arg("pattern", "string", "Glob pattern (* and ? wildcards)"),),
        return_type="array",
        examples=(
            '{% for var in filter_env(pattern="SERVER_*") %}{{ var.key }}={{ var.value }}{% endfor %}',
        ),
    )

    @classmethod
    def call(cls, environ: EnvironmentProvider, kwargs: Kwargs) -> List[Dict[str, str]]:
        return filter_environment(environ, kwargs.get_str("pattern"))


ENTRIES = (GetEnv, FilterEnv)

__all__ = ["GetEnv", "FilterEnv", "ENTRIES"]
