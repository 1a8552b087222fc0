"""Call-convention contracts for catalog entries.

Every catalog entry is a class carrying a unique name, a ``FunctionMetadata``
record and one semantic implementation. The contract decides which template
namespaces the implementation is exposed through:

- ``FilterFunction``: ``f(arg=x)`` and ``x | f`` (function + filter).
- ``IsTestFunction``: ``is_f(arg=x)`` and ``x is f`` (function + test).
- ``Function``: ``f(arg=x)`` only.

Context-aware variants receive the render's ``TemplateContext`` (or the
environment provider) captured by closure at registration time.

Example:
    class Shout(UnaryFilterFunction):
        NAME = "shout"
        ARGUMENT = "string"
        METADATA = FunctionMetadata(...)

        @classmethod
        def apply(cls, value, kwargs):
            return extract_string(value, cls.NAME).upper()
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, Sequence

from .context import TemplateContext
from .environment import EnvironmentProvider, OsEnvironment
from .exceptions import ErrorKind, TemplateFunctionError
from .metadata import FunctionMetadata
from .values import Kwargs

if TYPE_CHECKING:
    from .registry import Namespaces


@dataclass(frozen=True)
class Bindings:
    """Shared, read-only collaborators handed to context-aware entries."""

    context: TemplateContext
    environ: EnvironmentProvider = field(default_factory=OsEnvironment)


def _reject_positional(name: str, args: Sequence[Any]) -> None:
    if args:
        raise TemplateFunctionError(
            f"{name} only accepts keyword arguments, got {len(args)} positional",
            kind=ErrorKind.TYPE_MISMATCH,
            function=name,
        )


class CatalogEntry:
    """Common base: a name, its metadata and a registration hook."""

    NAME: ClassVar[str]
    METADATA: ClassVar[FunctionMetadata]

    @classmethod
    def metadata_name(cls) -> str:
        return cls.METADATA.name

    @classmethod
    def register(cls, namespaces: "Namespaces", bindings: Bindings) -> None:
        raise NotImplementedError

    @classmethod
    def _kwargs(cls, name: str, values: Dict[str, Any]) -> Kwargs:
        kwargs = Kwargs(values, fn_name=name)
        kwargs.warn_unknown(cls.METADATA.argument_names())
        return kwargs


class FilterFunction(CatalogEntry):
    """Entry callable both as a function and as a filter."""

    @classmethod
    def call_as_function(cls, kwargs: Kwargs) -> Any:
        raise NotImplementedError

    @classmethod
    def call_as_filter(cls, value: Any, kwargs: Kwargs) -> Any:
        raise NotImplementedError

    @classmethod
    def function_callable(cls) -> Callable[..., Any]:
        name = cls.NAME

        def _function(*args: Any, **kwargs: Any) -> Any:
            _reject_positional(name, args)
            return cls.call_as_function(cls._kwargs(name, kwargs))

        _function.__name__ = name
        return _function

    @classmethod
    def filter_callable(cls) -> Callable[..., Any]:
        name = cls.NAME

        def _filter(value: Any, *args: Any, **kwargs: Any) -> Any:
            _reject_positional(name, args)
            return cls.call_as_filter(value, cls._kwargs(name, kwargs))

        _filter.__name__ = name
        return _filter

    @classmethod
    def register(cls, namespaces: "Namespaces", bindings: Bindings) -> None:
        namespaces.add_function(cls.NAME, cls.function_callable(), owner=cls.__name__)
        namespaces.add_filter(cls.NAME, cls.filter_callable(), owner=cls.__name__)


class UnaryFilterFunction(FilterFunction):
    """Filter whose piped value maps onto one named function argument.

    ``f(ARGUMENT=x, **rest)`` and ``x | f(**rest)`` both end up in ``apply``.
    """

    ARGUMENT: ClassVar[str] = "string"

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> Any:
        raise NotImplementedError

    @classmethod
    def call_as_function(cls, kwargs: Kwargs) -> Any:
        return cls.apply(kwargs.get_required(cls.ARGUMENT), kwargs)

    @classmethod
    def call_as_filter(cls, value: Any, kwargs: Kwargs) -> Any:
        return cls.apply(value, kwargs)


def positional_filter(cls: type[FilterFunction], positional: Sequence[str]) -> Callable[..., Any]:
    """Build a filter accepting ``positional`` argument names in order.

    Positional values are mapped onto the same named fields the function
    path reads, so ``x | f(4)`` equals ``x | f(name=4)``.
    """
    name = cls.NAME

    def _filter(value: Any, *args: Any, **kwargs: Any) -> Any:
        if len(args) > len(positional):
            raise TemplateFunctionError(
                f"{name} accepts at most {len(positional)} positional argument(s)",
                kind=ErrorKind.TYPE_MISMATCH,
                function=name,
            )
        merged = dict(kwargs)
        for arg_name, arg_value in zip(positional, args):
            if arg_name in merged:
                raise TemplateFunctionError(
                    f"{name}: argument '{arg_name}' given both positionally and by name",
                    kind=ErrorKind.TYPE_MISMATCH,
                    function=name,
                )
            merged[arg_name] = arg_value
        return cls.call_as_filter(value, cls._kwargs(name, merged))

    _filter.__name__ = name
    return _filter


class IsTestFunction(CatalogEntry):
    """Boolean predicate usable as ``FUNCTION_NAME(...)`` and ``value is IS_NAME``.

    The function path is strict and raises on wrongly typed input. The test
    path is permissive and answers False instead of raising.
    """

    FUNCTION_NAME: ClassVar[str]
    IS_NAME: ClassVar[str]

    @classmethod
    def metadata_name(cls) -> str:
        return cls.FUNCTION_NAME

    @classmethod
    def call_as_function(cls, kwargs: Kwargs) -> bool:
        raise NotImplementedError

    @classmethod
    def call_as_is(cls, value: Any) -> bool:
        raise NotImplementedError

    @classmethod
    def register(cls, namespaces: "Namespaces", bindings: Bindings) -> None:
        fn_name = cls.FUNCTION_NAME

        def _function(*args: Any, **kwargs: Any) -> bool:
            _reject_positional(fn_name, args)
            return cls.call_as_function(cls._kwargs(fn_name, kwargs))

        def _test(value: Any, *args: Any, **kwargs: Any) -> bool:
            return cls.call_as_is(value)

        namespaces.add_function(fn_name, _function, owner=cls.__name__)
        namespaces.add_test(cls.IS_NAME, _test, owner=cls.__name__)


class ContextIsTestFunction(IsTestFunction):
    """Is-test that needs the render's ``TemplateContext``."""

    @classmethod
    def call_as_function(cls, context: TemplateContext, kwargs: Kwargs) -> bool:  # type: ignore[override]
        raise NotImplementedError

    @classmethod
    def call_as_is(cls, context: TemplateContext, value: Any) -> bool:  # type: ignore[override]
        raise NotImplementedError

    @classmethod
    def register(cls, namespaces: "Namespaces", bindings: Bindings) -> None:
        fn_name = cls.FUNCTION_NAME
        context = bindings.context

        def _function(*args: Any, **kwargs: Any) -> bool:
            _reject_positional(fn_name, args)
            return cls.call_as_function(context, cls._kwargs(fn_name, kwargs))

        def _test(value: Any, *args: Any, **kwargs: Any) -> bool:
            return cls.call_as_is(context, value)

        namespaces.add_function(fn_name, _function, owner=cls.__name__)
        namespaces.add_test(cls.IS_NAME, _test, owner=cls.__name__)


class Function(CatalogEntry):
    """Entry callable only as ``NAME(...)``."""

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        raise NotImplementedError

    @classmethod
    def register(cls, namespaces: "Namespaces", bindings: Bindings) -> None:
        name = cls.NAME

        def _function(*args: Any, **kwargs: Any) -> Any:
            _reject_positional(name, args)
            return cls.call(cls._kwargs(name, kwargs))

        _function.__name__ = name
        namespaces.add_function(name, _function, owner=cls.__name__)


class EnvironmentFunction(Function):
    """Function-only entry that reads environment variables through a provider."""

    @classmethod
    def call(cls, environ: EnvironmentProvider, kwargs: Kwargs) -> Any:  # type: ignore[override]
        raise NotImplementedError

    @classmethod
    def register(cls, namespaces: "Namespaces", bindings: Bindings) -> None:
        name = cls.NAME
        environ = bindings.environ

        def _function(*args: Any, **kwargs: Any) -> Any:
            _reject_positional(name, args)
            return cls.call(environ, cls._kwargs(name, kwargs))

        _function.__name__ = name
        namespaces.add_function(name, _function, owner=cls.__name__)


__all__ = [
    "Bindings",
    "CatalogEntry",
    "FilterFunction",
    "UnaryFilterFunction",
    "positional_filter",
    "IsTestFunction",
    "ContextIsTestFunction",
    "Function",
    "EnvironmentFunction",
]
