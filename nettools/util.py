"""Small helpers shared by the networking tools."""

from __future__ import annotations

import os
import re

_RELEASE = re.compile(
    r"[ \t\n\r\f\v]*([+-]?[0-9]+)\.[ \t\n\r\f\v]*([+-]?[0-9]+)"
    r"(?:\.[ \t\n\r\f\v]*([+-]?[0-9]+))?"
)


def krelease(major: int, minor: int, patch: int) -> int:
    """Encode a kernel release triple as one comparable integer."""
    return major * 10000 + minor * 1000 + patch


def kernel_version() -> int:
    """Return the running kernel's release as encoded by krelease, or -1."""
    try:
        release = os.uname().release
    except (OSError, AttributeError):
        return -1
    match = _RELEASE.match(release)
    if match is None:
        return -1
    major, minor, patch = match.groups()
    return krelease(int(major), int(minor), int(patch) if patch else 0)


def ticks_per_second() -> int:
    """Return the number of clock ticks per second."""
    return os.sysconf("SC_CLK_TCK")


def safe_truncate(text: str, size: int) -> str:
    """Return text cut so that it fits a buffer of size characters with a terminator."""
    if size < 1:
        raise ValueError("size must be at least 1")
    return text[: size - 1]