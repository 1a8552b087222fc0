"""Host information: hostname, user, OS, architecture and well-known directories."""
from __future__ import annotations

import getpass
import os
import platform
import socket
import sys
import tempfile
from pathlib import Path
from typing import Callable, ClassVar, Dict

from ..contracts import Function
from ..exceptions import ErrorKind, TemplateFunctionError
from ..metadata import FunctionMetadata
from ..values import Kwargs

_OS_NAMES: Dict[str, str] = {"darwin": "macos", "win32": "windows", "cygwin": "windows"}
_ARCH_NAMES: Dict[str, str] = {"amd64": "x86_64", "x64": "x86_64", "arm64": "aarch64", "i686": "x86", "i386": "x86"}


def os_name() -> str:
    """Short OS family name (``linux``, ``macos``, ``windows``, ``freebsd``...)."""
    platform_name = sys.platform
    if platform_name.startswith("linux"):
        return "linux"
    if platform_name.startswith("freebsd"):
        return "freebsd"
    return _OS_NAMES.get(platform_name, platform_name)


def arch_name() -> str:
    machine = platform.machine().lower()
    return _ARCH_NAMES.get(machine, machine)


def username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.environ.get("USER") or os.environ.get("USERNAME") or "unknown"


def home_dir() -> str:
    return str(Path.home())


def _system_metadata(name: str, description: str) -> FunctionMetadata:
    return FunctionMetadata(
        name=name,
        category="system",
        description=description,
        return_type="string",
        examples=(f"{{{{ {name}() }}}}",),
    )


class _SystemFunction(Function):
    PROVIDER: ClassVar[Callable[[], str]]

    @classmethod
    def call(cls, kwargs: Kwargs) -> str:
        try:
            return cls.PROVIDER()
        except (OSError, RuntimeError) as exc:
            raise TemplateFunctionError(
                f"Failed to get {cls.NAME[len('get_'):].replace('_', ' ')}: {exc}",
                kind=ErrorKind.ENVIRONMENT_ABSENT,
                function=cls.NAME,
            ) from exc


class GetHostname(_SystemFunction):
    NAME = "get_hostname"
    PROVIDER = staticmethod(socket.gethostname)
    METADATA = _system_metadata("get_hostname", "Name of the current host")


class GetUsername(_SystemFunction):
    NAME = "get_username"
    PROVIDER = staticmethod(username)
    METADATA = _system_metadata("get_username", "Name of the current user")


class GetOs(_SystemFunction):
    NAME = "get_os"
    PROVIDER = staticmethod(os_name)
    METADATA = _system_metadata("get_os", "Operating system family (linux, macos, windows, ...)")


class GetArch(_SystemFunction):
    NAME = "get_arch"
    PROVIDER = staticmethod(arch_name)
    METADATA = _system_metadata("get_arch", "CPU architecture (x86_64, aarch64, ...)")


class GetCwd(_SystemFunction):
    NAME = "get_cwd"
    PROVIDER = staticmethod(os.getcwd)
    METADATA = _system_metadata("get_cwd", "Current working directory")


class GetHomeDir(_SystemFunction):
    NAME = "get_home_dir"
    PROVIDER = staticmethod(home_dir)
    METADATA = _system_metadata("get_home_dir", "Home directory of the current user")


class GetTempDir(_SystemFunction):
    NAME = "get_temp_dir"
    PROVIDER = staticmethod(tempfile.gettempdir)
    METADATA = _system_metadata("get_temp_dir", "System temporary directory")


ENTRIES = (GetHostname, GetUsername, GetOs, GetArch, GetCwd, GetHomeDir, GetTempDir)

__all__ = [
    "GetHostname",
    "GetUsername",
    "GetOs",
    "GetArch",
    "GetCwd",
    "GetHomeDir",
    "GetTempDir",
    "os_name",
    "arch_name",
    "ENTRIES",
]
