"""Kubernetes and Helm manifest helpers.

The YAML fragments returned here are meant to be dropped into a manifest
with the ``indent`` filter. ``indent`` also indents the first line, so the
call starts at column 0::

    env:
      - name: DB_HOST
    {{ k8s_env_var_ref(var_name="DB_HOST") | indent(8) }}
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Tuple

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs, Number, ValueKind, as_number, describe, format_number, kind_of, to_plain

BINARY_UNITS: Dict[str, int] = {
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "Pi": 1024**5,
    "Ei": 1024**6,
}
DECIMAL_UNITS: Dict[str, int] = {
    "K": 1000,
    "M": 1000**2,
    "G": 1000**3,
    "T": 1000**4,
    "P": 1000**5,
    "E": 1000**6,
}
# Largest first; used when choosing a unit automatically
_AUTO_BINARY: Tuple[str, ...] = ("Ti", "Gi", "Mi", "Ki")
_AUTO_DECIMAL: Tuple[str, ...] = ("T", "G", "M", "K")

_HELM_PLACEHOLDER = re.compile(r"\{\{\s*\.([a-zA-Z0-9_.]+)\s*\}\}")


def _fmt_amount(amount: float) -> str:
    """Whole amounts print without decimals, others with two."""
    if amount == int(amount):
        return str(int(amount))
    return f"{amount:.2f}"


def _error(fn_name: str, message: str, kind: ErrorKind = ErrorKind.DOMAIN_VIOLATION) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=kind, function=fn_name)


def quantity_to_bytes(quantity: str) -> int:
    """Parse a Kubernetes resource quantity (``"1Gi"``, ``"500M"``, ``"250m"``).

    Raises:
        ValueError: when the quantity cannot be parsed.
    """
    text = quantity.strip()
    split = 0
    while split < len(text) and (text[split].isdigit() or text[split] in ".-"):
        split += 1
    number_part, suffix = text[:split], text[split:]
    if not number_part:
        raise ValueError(f"Invalid quantity format: '{quantity}'")
    try:
        number = float(number_part)
    except ValueError as exc:
        raise ValueError(f"Invalid number in quantity: '{quantity}'") from exc

    if suffix == "m":
        # millicores: the numeric part is returned as-is
        return int(number)
    if suffix == "":
        multiplier = 1
    elif suffix in BINARY_UNITS:
        multiplier = BINARY_UNITS[suffix]
    elif suffix in DECIMAL_UNITS or suffix == "k":
        multiplier = DECIMAL_UNITS[suffix.upper()]
    else:
        raise ValueError(f"Unknown quantity suffix: '{suffix}'")
    return int(number * multiplier)


def bytes_to_quantity(size: Number, unit: str | None = None, binary: bool = True) -> Any:
    """Render a byte count as a Kubernetes quantity string."""
    if size < 0:
        raise ValueError("Bytes cannot be negative")
    if unit is not None:
        divisor = BINARY_UNITS.get(unit) or DECIMAL_UNITS.get(unit)
        if divisor is None:
            raise ValueError(f"Unknown unit: '{unit}'")
        return f"{int(size) // divisor}{unit}"

    units = BINARY_UNITS if binary else DECIMAL_UNITS
    for name in _AUTO_BINARY if binary else _AUTO_DECIMAL:
        if size >= units[name]:
            return f"{_fmt_amount(size / units[name])}{name}"
    return format_number(size)


def _helm_lookup(values: Any, path: str) -> Any:
    current = values
    for part in path.split("."):
        if kind_of(current) is not ValueKind.MAPPING or part not in current:
            return None
        current = current[part]
    return current


def _helm_text(value: Any) -> str:
    kind = kind_of(value)
    if kind is ValueKind.UNDEFINED:
        return ""
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind in (ValueKind.INT, ValueKind.FLOAT):
        return str(value)
    return json.dumps(to_plain(value), separators=(",", ":"), ensure_ascii=False)


class K8sResourceRequest(Function):
    NAME = "k8s_resource_request"
    METADATA = FunctionMetadata(
        name="k8s_resource_request",
        category="kubernetes",
        description="Container resource requests block (cpu and memory)",
        arguments=(
            arg("cpu", "string|number", "CPU as a quantity string or a number of cores"),
            arg("memory", "string|number", "Memory as a quantity string or a number of MiB"),
        ),
        return_type="string",
        examples=("resources:\n{{ k8s_resource_request(cpu=0.5, memory=512) | indent(2) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        cpu_raw = kwargs.get_required("cpu")
        memory_raw = kwargs.get_required("memory")
        return (
            "requests:\n"
            f'  cpu: "{cls._cpu(cpu_raw)}"\n'
            f'  memory: "{cls._memory(memory_raw)}"'
        )

    @classmethod
    def _cpu(cls, value: Any) -> str:
        if kind_of(value) is ValueKind.STRING:
            return value
        number = as_number(value)
        if number is None:
            raise _error(
                cls.NAME,
                f"cpu must be a string or number, found: {describe(value)}",
                ErrorKind.TYPE_MISMATCH,
            )
        return f"{round(number * 1000)}m"

    @classmethod
    def _memory(cls, value: Any) -> str:
        if kind_of(value) is ValueKind.STRING:
            return value
        number = as_number(value)
        if number is None:
            raise _error(
                cls.NAME,
                f"memory must be a string or number, found: {describe(value)}",
                ErrorKind.TYPE_MISMATCH,
            )
        if number >= 1024:
            return f"{_fmt_amount(number / 1024)}Gi"
        return f"{_fmt_amount(number)}Mi"


class K8sEnvVarRef(Function):
    NAME = "k8s_env_var_ref"
    METADATA = FunctionMetadata(
        name="k8s_env_var_ref",
        category="kubernetes",
        description="valueFrom block reading an env var from a ConfigMap or Secret",
        arguments=(
            arg("var_name", "string", "Key inside the ConfigMap or Secret"),
            arg("source", "string", "configmap or secret", required=False, default='"configmap"'),
            arg(
                "name",
                "string",
                "Resource name; defaults to var_name lowercased with '_' replaced by '-'",
                required=False,
            ),
        ),
        return_type="string",
        examples=('{{ k8s_env_var_ref(var_name="DB_PASSWORD", source="secret", name="db-creds") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        var_name = kwargs.get_str("var_name")
        source = kwargs.get_str("source", "configmap")
        name = kwargs.get_str("name", var_name.lower().replace("_", "-"))
        if source == "configmap":
            ref = "configMapKeyRef"
        elif source == "secret":
            ref = "secretKeyRef"
        else:
            raise _error(cls.NAME, f"Invalid source '{source}', must be 'configmap' or 'secret'")
        return f"valueFrom:\n  {ref}:\n    name: {name}\n    key: {var_name}"


class _KeyRef(Function):
    REF: str
    RESOURCE_ARG: str

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        resource = kwargs.get_str(cls.RESOURCE_ARG)
        key = kwargs.get_str("key")
        optional = kwargs.get_bool("optional", False)
        text = f"valueFrom:\n  {cls.REF}:\n    name: {resource}\n    key: {key}"
        if optional:
            text += "\n    optional: true"
        return text


class K8sSecretRef(_KeyRef):
    NAME = "k8s_secret_ref"
    REF = "secretKeyRef"
    RESOURCE_ARG = "secret_name"
    METADATA = FunctionMetadata(
        name="k8s_secret_ref",
        category="kubernetes",
        description="valueFrom block reading a key from a Secret",
        arguments=(
            arg("secret_name", "string", "Secret name"),
            arg("key", "string", "Key inside the Secret"),
            arg("optional", "boolean", "Mark the reference optional", required=False, default="false"),
        ),
        return_type="string",
        examples=('{{ k8s_secret_ref(secret_name="db-creds", key="password") }}',),
    )


class K8sConfigmapRef(_KeyRef):
    NAME = "k8s_configmap_ref"
    REF = "configMapKeyRef"
    RESOURCE_ARG = "configmap_name"
    METADATA = FunctionMetadata(
        name="k8s_configmap_ref",
        category="kubernetes",
        description="valueFrom block reading a key from a ConfigMap",
        arguments=(
            arg("configmap_name", "string", "ConfigMap name"),
            arg("key", "string", "Key inside the ConfigMap"),
            arg("optional", "boolean", "Mark the reference optional", required=False, default="false"),
        ),
        return_type="string",
        examples=('{{ k8s_configmap_ref(configmap_name="app-config", key="log_level", optional=true) }}',),
    )


class HelmTpl(Function):
    NAME = "helm_tpl"
    METADATA = FunctionMetadata(
        name="helm_tpl",
        category="kubernetes",
        description="Substitute Helm-style {{ .path }} placeholders from a values object",
        arguments=(
            arg("template", "string", "Text containing {{ .path }} placeholders"),
            arg("values", "object", "Values looked up by dotted path"),
        ),
        return_type="string",
        examples=('{{ helm_tpl(template="image: {{ .image.repo }}", values=chart_values) }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        template = kwargs.get_str("template")
        values = to_plain(kwargs.get_required("values"))
        return _HELM_PLACEHOLDER.sub(
            lambda match: _helm_text(_helm_lookup(values, match.group(1))), template
        )


class K8sQuantityToBytes(Function):
    NAME = "k8s_quantity_to_bytes"
    METADATA = FunctionMetadata(
        name="k8s_quantity_to_bytes",
        category="kubernetes",
        description="Convert a Kubernetes quantity (1Gi, 500M, 250m) to a number",
        arguments=(arg("quantity", "string", "Quantity string"),),
        return_type="integer",
        examples=('{{ k8s_quantity_to_bytes(quantity="1Gi") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        try:
            return quantity_to_bytes(kwargs.get_str("quantity"))
        except ValueError as exc:
            raise _error(cls.NAME, str(exc), ErrorKind.DECODE_FAILURE) from exc


class K8sBytesToQuantity(Function):
    NAME = "k8s_bytes_to_quantity"
    METADATA = FunctionMetadata(
        name="k8s_bytes_to_quantity",
        category="kubernetes",
        description="Convert a byte count to a Kubernetes quantity string",
        arguments=(
            arg("bytes", "integer", "Byte count (>= 0)"),
            arg("unit", "string", "Force a unit (Ki..Ei or K..E)", required=False),
            arg("binary", "boolean", "Use binary units when choosing automatically", required=False, default="true"),
        ),
        return_type="string",
        examples=("{{ k8s_bytes_to_quantity(bytes=1073741824) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> Any:
        size = kwargs.get_number("bytes")
        unit = kwargs.get_str("unit", None)
        binary = kwargs.get_bool("binary", True)
        try:
            return bytes_to_quantity(size, unit, binary)
        except ValueError as exc:
            raise _error(cls.NAME, str(exc)) from exc


class K8sSelector(Function):
    NAME = "k8s_selector"
    METADATA = FunctionMetadata(
        name="k8s_selector",
        category="kubernetes",
        description="Label selector string (k=v,...) sorted by key",
        arguments=(arg("labels", "object", "Labels to select on"),),
        return_type="string",
        examples=('{{ k8s_selector(labels={"app": "web", "tier": "frontend"}) }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        labels = kwargs.get_required("labels")
        if kind_of(labels) is not ValueKind.MAPPING:
            raise _error(cls.NAME, "labels must be an object", ErrorKind.TYPE_MISMATCH)
        pairs: List[str] = []
        for key, value in sorted(((str(k), v) for k, v in labels.items()), key=lambda pair: pair[0]):
            if kind_of(value) is ValueKind.STRING:
                text = value
            else:
                text = json.dumps(to_plain(value), ensure_ascii=False).strip('"')
            pairs.append(f"{key}={text}")
        return ",".join(pairs)


ENTRIES = (
    K8sResourceRequest,
    K8sEnvVarRef,
    K8sSecretRef,
    K8sConfigmapRef,
    HelmTpl,
    K8sQuantityToBytes,
    K8sBytesToQuantity,
    K8sSelector,
)

__all__ = [
    "K8sResourceRequest",
    "K8sEnvVarRef",
    "K8sSecretRef",
    "K8sConfigmapRef",
    "HelmTpl",
    "K8sQuantityToBytes",
    "K8sBytesToQuantity",
    "K8sSelector",
    "quantity_to_bytes",
    "bytes_to_quantity",
    "ENTRIES",
]
