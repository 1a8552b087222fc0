from __future__ import annotations

import pytest

from tmpltool.core.exceptions import ErrorKind, TemplateFunctionError
from tmpltool.core.functions.network import parse_cidr


@pytest.mark.parametrize(
    "cidr, ip, expected",
    [
        ("192.168.1.0/24", "192.168.1.100", "True"),
        ("192.168.1.0/24", "192.168.2.1", "False"),
        ("10.0.0.0/8", "10.255.255.255", "True"),
        ("192.168.1.0/24", "192.168.1.255", "True"),
        ("10.0.0.1/32", "10.0.0.2", "False"),
        ("0.0.0.0/0", "203.0.113.7", "True"),
    ],
)
def test_cidr_contains(render, cidr: str, ip: str, expected: str) -> None:
    assert render("{{ cidr_contains(cidr=cidr, ip=ip) }}", cidr=cidr, ip=ip) == expected


def test_cidr_properties(render) -> None:
    assert render("{{ cidr_network(cidr='192.168.1.100/24') }}") == "192.168.1.0"
    assert render("{{ cidr_network(cidr='172.16.50.100/16') }}") == "172.16.0.0"
    assert render("{{ cidr_network(cidr='192.168.1.100/0') }}") == "0.0.0.0"
    assert render("{{ cidr_broadcast(cidr='10.0.0.0/8') }}") == "10.255.255.255"
    assert render("{{ cidr_broadcast(cidr='10.1.2.3/32') }}") == "10.1.2.3"


@pytest.mark.parametrize(
    "prefix, mask",
    [(0, "0.0.0.0"), (1, "128.0.0.0"), (8, "255.0.0.0"), (12, "255.240.0.0"), (31, "255.255.255.254"), (32, "255.255.255.255")],
)
def test_cidr_netmask(render, prefix: int, mask: str) -> None:
    assert render("{{ cidr_netmask(cidr=cidr) }}", cidr=f"10.0.0.0/{prefix}") == mask


@pytest.mark.parametrize(
    "cidr, message",
    [
        ("192.168.1.0", "expected IP/prefix"),
        ("192.168.1.0/24/16", "expected IP/prefix"),
        ("999.999.999.999/24", "Invalid IP address in CIDR"),
        ("192.168.1.0/33", "must be 0-32"),
        ("192.168.1.0/-1", "must be 0-32"),
        ("192.168.1.0/abc", "Invalid prefix length"),
    ],
)
def test_parse_cidr_rejects_malformed_input(cidr: str, message: str) -> None:
    with pytest.raises(TemplateFunctionError, match=message) as excinfo:
        parse_cidr(cidr, "cidr_network")
    assert excinfo.value.kind is ErrorKind.DECODE_FAILURE
    assert excinfo.value.function == "cidr_network"


def test_cidr_contains_rejects_bad_address(render) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid IP address 'not-an-ip'"):
        render("{{ cidr_contains(cidr='10.0.0.0/8', ip='not-an-ip') }}")


def test_ip_int_conversions(render) -> None:
    assert render("{{ ip_to_int(ip='192.168.1.1') }}") == "3232235777"
    assert render("{{ ip_to_int(ip='0.0.0.0') }}") == "0"
    assert render("{{ int_to_ip(int=4294967295) }}") == "255.255.255.255"
    assert render("{{ int_to_ip(int=ip_to_int(ip='10.20.30.40')) }}") == "10.20.30.40"


@pytest.mark.parametrize("ip", ["256.1.1.1", "192.168.1", "192.168.1.1.1", "::1"])
def test_ip_to_int_rejects_non_ipv4(render, ip: str) -> None:
    with pytest.raises(TemplateFunctionError, match="Invalid IP address"):
        render("{{ ip_to_int(ip=ip) }}", ip=ip)


@pytest.mark.parametrize("value", [-1, 4294967296, 9999999999999])
def test_int_to_ip_range(render, value: int) -> None:
    with pytest.raises(TemplateFunctionError, match="between 0 and 4294967295") as excinfo:
        render("{{ int_to_ip(int=value) }}", value=value)
    assert excinfo.value.kind is ErrorKind.DOMAIN_VIOLATION


def test_missing_cidr_argument(render) -> None:
    with pytest.raises(TemplateFunctionError, match="cidr_netmask: missing keyword argument 'cidr'") as excinfo:
        render("{{ cidr_netmask() }}")
    assert excinfo.value.kind is ErrorKind.MISSING_ARGUMENT
