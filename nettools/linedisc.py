"""Switching terminal lines to serial network line disciplines."""

from __future__ import annotations

import errno
import fcntl
import struct
import termios

N_SLIP = 1
SIOCSIFENCAP = 0x8926
_TIOCSETD = getattr(termios, "TIOCSETD", 0x5423)

ENCAP_SLIP = 0
ENCAP_CSLIP = 1
ENCAP_SLIP6 = 2
ENCAP_CSLIP6 = 3
ENCAP_ADAPTIVE = 8


class LineDisciplineError(OSError):
    """A line discipline or encapsulation could not be set."""


def _ioctl_int(fd: int, request: int, value: int, label: str) -> None:
    try:
        fcntl.ioctl(fd, request, struct.pack("i", value))
    except OSError as exc:
        raise LineDisciplineError(exc.errno, f"{label}({value}): {exc.strerror}") from exc


def _activate(fd: int, encap: int) -> None:
    _ioctl_int(fd, _TIOCSETD, N_SLIP, "SLIP_set_disc")
    _ioctl_int(fd, SIOCSIFENCAP, encap, "SLIP_set_encap")


def slip_activate(fd: int) -> None:
    """Start SLIP encapsulation on the terminal line fd."""
    _activate(fd, ENCAP_SLIP)


def cslip_activate(fd: int) -> None:
    """Start VJ-compressed SLIP encapsulation on fd."""
    _activate(fd, ENCAP_CSLIP)


def slip6_activate(fd: int) -> None:
    """Start 6-bit SLIP encapsulation on fd."""
    _activate(fd, ENCAP_SLIP6)


def cslip6_activate(fd: int) -> None:
    """Start VJ-compressed 6-bit SLIP encapsulation on fd."""
    _activate(fd, ENCAP_CSLIP6)


def adaptive_activate(fd: int) -> None:
    """Start adaptive SLIP encapsulation on fd."""
    _activate(fd, ENCAP_ADAPTIVE)


def ppp_activate(fd: int) -> None:
    """PPP lines are started by pppd; always raises."""
    raise LineDisciplineError(errno.EOPNOTSUPP, "Sorry, use pppd!")