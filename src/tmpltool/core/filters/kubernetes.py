"""Sanitizers for Kubernetes identifier grammars.

- label values: ``[a-z0-9-_.]``, alphanumeric at both ends, at most 63 chars
- DNS labels (RFC 1123): ``[a-z0-9-]``, no leading or trailing dash, at most 63 chars
- annotation values: no control characters, at most 64 KiB

Label sanitizers never return an empty string; they fall back to ``default``.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Any

from ..contracts import UnaryFilterFunction
from ..metadata import FUNCTION_AND_FILTER, FunctionMetadata, arg
from ..values import Kwargs, extract_string

LABEL_MAX_LENGTH = 63
ANNOTATION_MAX_BYTES = 65536

_VALUE_ARG = arg("value", "string", "The value to sanitize")
_DASH_RUN = re.compile(r"-{2,}")
_LABEL_INVALID = re.compile(r"[^a-z0-9\-_.]")
_DNS_INVALID = re.compile(r"[^a-z0-9\-]")
_NON_ALNUM_EDGES = re.compile(r"^[^a-z0-9]+|[^a-z0-9]+$")
_NON_ALNUM_TAIL = re.compile(r"[^a-z0-9]+$")


def label_safe(value: str) -> str:
    result = _LABEL_INVALID.sub("-", value.lower())
    result = _DASH_RUN.sub("-", result)
    result = _NON_ALNUM_EDGES.sub("", result)
    if len(result) > LABEL_MAX_LENGTH:
        result = _NON_ALNUM_TAIL.sub("", result[:LABEL_MAX_LENGTH])
    return result or "default"


def dns_label_safe(value: str) -> str:
    result = _DNS_INVALID.sub("-", value.lower()).strip("-")
    result = _DASH_RUN.sub("-", result)
    if len(result) > LABEL_MAX_LENGTH:
        result = result[:LABEL_MAX_LENGTH].rstrip("-")
    return result or "default"


def annotation_safe(value: str) -> str:
    result = "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in value)
    encoded = result.encode("utf-8")
    if len(encoded) > ANNOTATION_MAX_BYTES:
        result = encoded[:ANNOTATION_MAX_BYTES].decode("utf-8", errors="ignore")
    return result


class K8sLabelSafe(UnaryFilterFunction):
    NAME = "k8s_label_safe"
    ARGUMENT = "value"
    METADATA = FunctionMetadata(
        name="k8s_label_safe",
        category="kubernetes",
        description="Sanitize a string into a valid Kubernetes label value",
        arguments=(_VALUE_ARG,),
        return_type="string",
        examples=('{{ k8s_label_safe(value="My App (v2)") }}', "{{ branch | k8s_label_safe }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return label_safe(extract_string(value, cls.NAME))


class K8sDnsLabelSafe(UnaryFilterFunction):
    NAME = "k8s_dns_label_safe"
    ARGUMENT = "value"
    METADATA = FunctionMetadata(
        name="k8s_dns_label_safe",
        category="kubernetes",
        description="Sanitize a string into a valid RFC 1123 DNS label",
        arguments=(_VALUE_ARG,),
        return_type="string",
        examples=('{{ k8s_dns_label_safe(value="My_Service.v2") }}', "{{ name | k8s_dns_label_safe }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return dns_label_safe(extract_string(value, cls.NAME))


class K8sAnnotationSafe(UnaryFilterFunction):
    NAME = "k8s_annotation_safe"
    ARGUMENT = "value"
    METADATA = FunctionMetadata(
        name="k8s_annotation_safe",
        category="kubernetes",
        description="Replace control characters with spaces and cap an annotation value at 64 KiB",
        arguments=(_VALUE_ARG,),
        return_type="string",
        examples=('{{ k8s_annotation_safe(value="line1\\nline2") }}', "{{ description | k8s_annotation_safe }}"),
        syntax=FUNCTION_AND_FILTER,
    )

    @classmethod
    def apply(cls, value: Any, kwargs: Kwargs) -> str:
        return annotation_safe(extract_string(value, cls.NAME))


ENTRIES = (K8sLabelSafe, K8sDnsLabelSafe, K8sAnnotationSafe)

__all__ = [
    "K8sLabelSafe",
    "K8sDnsLabelSafe",
    "K8sAnnotationSafe",
    "label_safe",
    "dns_label_safe",
    "annotation_safe",
    "ENTRIES",
]
