"""
Target platform tables

Maps toolchain target triples (``<cpu>-<vendor>-<os>[-<abi>]``) onto the
``os``/``cpu`` vocabulary npm uses to pick platform-conditional packages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import PlatformError

WINDOWS_PLATFORM = "win32"


class CpuAlias(str, Enum):
    """Toolchain CPU name -> npm ``cpu`` value."""

    x86_64 = "x64"
    aarch64 = "arm64"
    i686 = "ia32"
    armv7 = "arm"


class OsAlias(str, Enum):
    """Toolchain OS name -> npm ``os`` value."""

    linux = "linux"
    darwin = "darwin"
    freebsd = "freebsd"
    windows = WINDOWS_PLATFORM


# Triples built and published by default.
SUPPORTED_TRIPLES: tuple[str, ...] = (
    "x86_64-unknown-linux-gnu",
    "x86_64-unknown-linux-musl",
)

# Everything the release toolchain can produce for srdn.
KNOWN_TRIPLES: tuple[str, ...] = (
    "x86_64-apple-darwin",
    "aarch64-apple-darwin",
    "x86_64-unknown-linux-gnu",
    "x86_64-pc-windows-msvc",
    "aarch64-unknown-linux-gnu",
    "armv7-unknown-linux-gnueabihf",
    "aarch64-unknown-linux-musl",
    "x86_64-unknown-linux-musl",
)


def cpu_alias(cpu: str) -> str:
    member = CpuAlias.__members__.get(cpu)
    return member.value if member is not None else cpu


def os_alias(os_name: str) -> str:
    member = OsAlias.__members__.get(os_name)
    return member.value if member is not None else os_name


@dataclass(frozen=True)
class PlatformTarget:
    """A triple translated into npm terms."""

    triple: str
    cpu: str
    os: str
    abi: Optional[str]
    tag: str

    def binary_name(self, stem: str = "srdn") -> str:
        return binary_name(self.os, stem)


def translate_triple(triple: str) -> PlatformTarget:
    """Translate a target triple into npm ``cpu``/``os`` aliases and a tag.

    The vendor field is discarded. CPU and OS names missing from the alias
    tables are forwarded unchanged, so a new toolchain target still produces a
    package without a table update.
    """
    parts = triple.split("-")
    if len(parts) < 3 or not all(parts[:3]):
        raise PlatformError(f"Malformed target triple: {triple!r}")

    cpu, _vendor, os_name = parts[:3]
    abi = parts[3] if len(parts) > 3 and parts[3] else None

    cpu = cpu_alias(cpu)
    os_name = os_alias(os_name)

    tag = f"{os_name}-{cpu}"
    if abi:
        tag += f"-{abi}"

    return PlatformTarget(triple=triple, cpu=cpu, os=os_name, abi=abi, tag=tag)


def binary_name(os_name: str, stem: str = "srdn") -> str:
    """Executable file name for an npm platform (``.exe`` on Windows)."""
    return f"{stem}.exe" if os_name == WINDOWS_PLATFORM else stem
