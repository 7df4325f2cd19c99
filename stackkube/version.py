"""Build information and the version banner."""

from __future__ import annotations

import platform
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(\.\d+)?(Z|[+-]\d{2}:\d{2})$"
)

_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}

_OS_NAMES = {"win32": "windows", "cygwin": "windows"}


@dataclass(frozen=True)
class BuildInfo:
    """Version, commit and build time, normally stamped in at build time."""

    version: str = "unknown-version"
    git_commit: str = "unknown-commit"
    build_time: str = "unknown-buildtime"


def _parse_rfc3339(value: str) -> datetime | None:
    match = _RFC3339.match(value)
    if match is None:
        return None
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    micro = int((fraction[1:] + "000000")[:6]) if fraction else 0
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = timezone(sign * offset)
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), micro, tzinfo=tz,
        )
    except ValueError:
        return None


def _format_ansic(moment: datetime) -> str:
    return f"{moment:%a %b} {moment.day:>2} {moment:%H:%M:%S %Y}"


def _os_arch() -> str:
    os_name = _OS_NAMES.get(sys.platform, platform.system().lower() or sys.platform)
    machine = platform.machine().lower()
    return f"{os_name}/{_ARCH_NAMES.get(machine, machine)}"


def full_version(info: BuildInfo | None = None) -> str:
    """Return the multi-line version banner for ``info``."""
    info = info or BuildInfo()
    lines = [
        f"Version:    {info.version}",
        f"Git commit: {info.git_commit}",
        f"OS/Arch:    {_os_arch()}",
    ]
    built = _parse_rfc3339(info.build_time)
    if built is not None:
        lines.append(f"Built:      {_format_ansic(built)}")
    return "\n".join(lines)