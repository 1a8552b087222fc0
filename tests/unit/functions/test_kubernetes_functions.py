from __future__ import annotations

import pytest

from tmpltool.core.exceptions import ErrorKind, TemplateFunctionError
from tmpltool.core.functions.kubernetes import bytes_to_quantity, quantity_to_bytes


@pytest.mark.parametrize(
    "quantity, expected",
    [
        ("1Gi", 1073741824),
        ("1.5Gi", 1610612736),
        ("500M", 500000000),
        ("2k", 2000),
        ("250m", 250),
        ("42", 42),
    ],
)
def test_quantity_to_bytes(quantity: str, expected: int) -> None:
    assert quantity_to_bytes(quantity) == expected


@pytest.mark.parametrize(
    "quantity, message",
    [
        ("Gi", "Invalid quantity format: 'Gi'"),
        ("1.2.3Mi", "Invalid number in quantity: '1.2.3Mi'"),
        ("10Xi", "Unknown quantity suffix: 'Xi'"),
    ],
)
def test_quantity_to_bytes_errors(quantity: str, message: str) -> None:
    with pytest.raises(ValueError) as excinfo:
        quantity_to_bytes(quantity)
    assert str(excinfo.value) == message


def test_bytes_to_quantity_auto_units() -> None:
    assert bytes_to_quantity(1073741824) == "1Gi"
    assert bytes_to_quantity(1536) == "1.50Ki"
    assert bytes_to_quantity(500) == 500
    assert bytes_to_quantity(2_000_000, binary=False) == "2M"


def test_bytes_to_quantity_explicit_unit() -> None:
    assert bytes_to_quantity(1073741824, unit="Mi") == "1024Mi"
    with pytest.raises(ValueError, match="Unknown unit: 'Zi'"):
        bytes_to_quantity(1, unit="Zi")
    with pytest.raises(ValueError, match="Bytes cannot be negative"):
        bytes_to_quantity(-1)


def test_quantity_functions_in_templates(render) -> None:
    assert render("{{ k8s_quantity_to_bytes(quantity='1Mi') }}") == "1048576"
    assert render("{{ k8s_bytes_to_quantity(bytes=1048576) }}") == "1Mi"
    assert render("{{ k8s_bytes_to_quantity(bytes=1000, binary=false) }}") == "1K"


def test_quantity_function_reports_decode_failure(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Unknown quantity suffix") as excinfo:
        render("{{ k8s_quantity_to_bytes(quantity='5Q') }}")
    assert excinfo.value.kind is ErrorKind.DECODE_FAILURE


def test_k8s_resource_request_from_numbers(render) -> None:
    out = render("{{ k8s_resource_request(cpu=0.5, memory=512) }}")
    assert out == 'requests:\n  cpu: "500m"\n  memory: "512Mi"'


def test_k8s_resource_request_memory_in_gib(render) -> None:
    out = render("{{ k8s_resource_request(cpu='2', memory=1536) }}")
    assert out == 'requests:\n  cpu: "2"\n  memory: "1.50Gi"'


def test_k8s_resource_request_rejects_other_types(render) -> None:
    with pytest.raises(TemplateFunctionError, match="cpu must be a string or number"):
        render("{{ k8s_resource_request(cpu=[1], memory=512) }}")


def test_k8s_env_var_ref(render) -> None:
    out = render("{{ k8s_env_var_ref(var_name='DB_HOST') }}")
    assert out == "valueFrom:\n  configMapKeyRef:\n    name: db-host\n    key: DB_HOST"
    out = render("{{ k8s_env_var_ref(var_name='DB_PASSWORD', source='secret', name='db-creds') }}")
    assert out == "valueFrom:\n  secretKeyRef:\n    name: db-creds\n    key: DB_PASSWORD"


def test_k8s_env_var_ref_rejects_unknown_source(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid source 'vault'"):
        render("{{ k8s_env_var_ref(var_name='X', source='vault') }}")


def test_k8s_secret_and_configmap_refs(render) -> None:
    out = render("{{ k8s_secret_ref(secret_name='db', key='password', optional=true) }}")
    assert out == "valueFrom:\n  secretKeyRef:\n    name: db\n    key: password\n    optional: true"
    out = render("{{ k8s_configmap_ref(configmap_name='app', key='mode') }}")
    assert out == "valueFrom:\n  configMapKeyRef:\n    name: app\n    key: mode"


def test_k8s_ref_output_indents_into_manifest(render) -> None:
    out = render("env:\n  - name: MODE\n{{ k8s_configmap_ref(configmap_name='app', key='mode') | indent(4) }}")
    assert out == "env:\n  - name: MODE\n    valueFrom:\n      configMapKeyRef:\n        name: app\n        key: mode"


def test_helm_tpl_substitutes_dotted_paths(render) -> None:
    values = {"image": {"repo": "nginx", "tag": 1.25}, "debug": True}
    out = render(
        "{{ helm_tpl(template=t, values=v) }}",
        t="{{ .image.repo }}:{{.image.tag}} debug={{ .debug }} missing=[{{ .nope.x }}]",
        v=values,
    )
    assert out == "nginx:1.25 debug=true missing=[]"


def test_k8s_selector_sorts_labels(render) -> None:
    out = render("{{ k8s_selector(labels={'tier': 'frontend', 'app': 'web', 'replicas': 3}) }}")
    assert out == "app=web,replicas=3,tier=frontend"


def test_k8s_selector_requires_object(render) -> None:
    with pytest.raises(TemplateFunctionError, match="labels must be an object") as excinfo:
        render("{{ k8s_selector(labels='app=web') }}")
    assert excinfo.value.kind is ErrorKind.TYPE_MISMATCH
