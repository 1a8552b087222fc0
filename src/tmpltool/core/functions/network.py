"""IPv4 address arithmetic: CIDR ranges and integer conversion.

These are pure computations; nothing here touches the network.
"""
from __future__ import annotations

import ipaddress
from typing import ClassVar

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata, arg
from ..values import Kwargs

MAX_IPV4 = 2**32 - 1


def _invalid(message: str, fn_name: str) -> TemplateFunctionError:
    return TemplateFunctionError(message, kind=ErrorKind.DECODE_FAILURE, function=fn_name)


def parse_ipv4(text: str, fn_name: str) -> ipaddress.IPv4Address:
    try:
        return ipaddress.IPv4Address(text)
    except ValueError as exc:
        raise _invalid(f"Invalid IP address '{text}'", fn_name) from exc


def parse_cidr(cidr: str, fn_name: str) -> ipaddress.IPv4Network:
    """Parse ``a.b.c.d/prefix``; host bits may be set (``192.168.1.100/24``)."""
    parts = cidr.split("/")
    if len(parts) != 2:
        raise _invalid(f"Invalid CIDR notation '{cidr}': expected IP/prefix", fn_name)
    address, prefix = parts
    try:
        ip = ipaddress.IPv4Address(address)
    except ValueError as exc:
        raise _invalid(f"Invalid IP address in CIDR '{cidr}'", fn_name) from exc
    if not prefix.isascii() or not prefix.isdigit() or int(prefix) > 32:
        raise _invalid(f"Invalid prefix length in CIDR '{cidr}': must be 0-32", fn_name)
    return ipaddress.IPv4Network((ip, int(prefix)), strict=False)


def _cidr_metadata(name: str, description: str, example: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=name,
        category="network",
        description=description,
        arguments=(arg("cidr", "string", "Network in CIDR notation, e.g. '192.168.1.0/24'"),),
        return_type="string",
        examples=(f'{{{{ {name}(cidr="{example}") }}}}',),
    )


class CidrContains(Function):
    NAME = "cidr_contains"
    METADATA = FunctionMetadata(
        name="cidr_contains",
        category="network",
        description="Check whether an IPv4 address lies inside a CIDR range",
        arguments=(
            arg("cidr", "string", "Network in CIDR notation"),
            arg("ip", "string", "IPv4 address to test"),
        ),
        return_type="boolean",
        examples=('{% if cidr_contains(cidr="10.0.0.0/8", ip=client_ip) %}internal{% endif %}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> bool:
        network = parse_cidr(kwargs.get_str("cidr"), cls.NAME)
        return parse_ipv4(kwargs.get_str("ip"), cls.NAME) in network


class _CidrProperty(Function):
    ATTRIBUTE: ClassVar[str]

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        network = parse_cidr(kwargs.get_str("cidr"), cls.NAME)
        return str(getattr(network, cls.ATTRIBUTE))


class CidrNetwork(_CidrProperty):
    NAME = "cidr_network"
    ATTRIBUTE = "network_address"
    METADATA = _cidr_metadata("cidr_network", "Network address of a CIDR range", "192.168.1.100/24")


class CidrBroadcast(_CidrProperty):
    NAME = "cidr_broadcast"
    ATTRIBUTE = "broadcast_address"
    METADATA = _cidr_metadata("cidr_broadcast", "Broadcast address of a CIDR range", "192.168.1.0/24")


class CidrNetmask(_CidrProperty):
    NAME = "cidr_netmask"
    ATTRIBUTE = "netmask"
    METADATA = _cidr_metadata("cidr_netmask", "Dotted netmask of a CIDR prefix", "172.16.0.0/12")


class IpToInt(Function):
    NAME = "ip_to_int"
    METADATA = FunctionMetadata(
        name="ip_to_int",
        category="network",
        description="IPv4 address as an unsigned 32-bit integer",
        arguments=(arg("ip", "string", "IPv4 address"),),
        return_type="integer",
        examples=('{{ ip_to_int(ip="192.168.1.1") }}',),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> int:
        return int(parse_ipv4(kwargs.get_str("ip"), cls.NAME))


class IntToIp(Function):
    NAME = "int_to_ip"
    METADATA = FunctionMetadata(
        name="int_to_ip",
        category="network",
        description="Unsigned 32-bit integer as a dotted IPv4 address",
        arguments=(arg("int", "integer", f"Value between 0 and {MAX_IPV4}"),),
        return_type="string",
        examples=("{{ int_to_ip(int=3232235777) }}",),
    )

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        value = kwargs.get_int("int")
        if not 0 <= value <= MAX_IPV4:
            raise TemplateFunctionError(
                f"int_to_ip requires a value between 0 and {MAX_IPV4}, found: {value}",
                kind=ErrorKind.DOMAIN_VIOLATION,
                function=cls.NAME,
            )
        return str(ipaddress.IPv4Address(value))


ENTRIES = (CidrContains, CidrNetwork, CidrBroadcast, CidrNetmask, IpToInt, IntToIp)

__all__ = [
    "CidrContains",
    "CidrNetwork",
    "CidrBroadcast",
    "CidrNetmask",
    "IpToInt",
    "IntToIp",
    "parse_cidr",
    "parse_ipv4",
    "ENTRIES",
]
