"""Adding and deleting X.25 routes."""

from __future__ import annotations

import enum
import fcntl
import socket
import struct
from dataclasses import dataclass
from typing import Sequence

from .families import X25Family
from .util import safe_truncate

FLAG_CACHE = 64
AF_X25 = 9
SIOCADDRT = 0x890B
SIOCDELRT = 0x890C
_DEVICE_LEN = 200
_X25_ADDR_LEN = 16

USAGE = ("Usage: x25_route [-v] del Target[/mask] [dev] If\n"
         "       x25_route [-v] add Target[/mask] [dev] If\n")


class RouteAction(enum.IntEnum):
    """What a route command asks for."""

    ADD = 1
    DEL = 2
    HELP = 3
    FLUSH = 4


class RouteUsageError(Exception):
    """A route command was malformed; carries the usage text."""

    def __init__(self, message: str = "", usage: str = USAGE) -> None:
        super().__init__(message)
        self.message = message
        self.usage = usage

    def __str__(self) -> str:
        return f"{self.message}\n{self.usage}" if self.message else self.usage


@dataclass(frozen=True)
class X25Route:
    """An X.25 route: the stored address digits, significant digits and device."""

    address: str
    sigdigits: int
    device: str


def parse_x25_route(args: Sequence[str]) -> X25Route:
    """Parse 'Target[/mask] [dev] If' into a route."""
    if not args:
        raise RouteUsageError()
    target, rest = args[0], list(args[1:])
    parsed = X25Family().input_address(0, safe_truncate(target, 128))
    sigdigits = parsed.prefix
    address = parsed.data.split(b"\0", 1)[0].decode("latin-1")

    device = ""
    while rest:
        token = rest.pop(0)
        if token in ("device", "dev"):
            if not rest:
                raise RouteUsageError()
            token = rest.pop(0)
        elif rest:
            raise RouteUsageError()
        if device:
            raise RouteUsageError()
        device = safe_truncate(token, _DEVICE_LEN)
    if not device:
        raise RouteUsageError()

    if sigdigits > 15:
        raise RouteUsageError(f"route: bogus netmask {sigdigits}")
    if sigdigits > len(address):
        raise RouteUsageError("route: netmask doesn't match route address")
    return X25Route(address, sigdigits, device)


def _pack(route: X25Route) -> bytes:
    return struct.pack(f"{_X25_ADDR_LEN}sI{_DEVICE_LEN}s",
                       route.address.encode("latin-1"), route.sigdigits,
                       route.device.encode())


def x25_rinput(action: RouteAction, options: int, args: Sequence[str]) -> None:
    """Add or delete an X.25 route in the kernel."""
    if action == RouteAction.FLUSH:
        raise RouteUsageError("Flushing `x25' routing table not supported")
    if options & FLAG_CACHE:
        raise RouteUsageError("Modifying `x25' routing cache not supported")
    if action == RouteAction.HELP:
        raise RouteUsageError()

    route = parse_x25_route(args)
    family = getattr(socket, "AF_X25", AF_X25)
    request = SIOCDELRT if action == RouteAction.DEL else SIOCADDRT
    with socket.socket(family, socket.SOCK_SEQPACKET) as sock:
        fcntl.ioctl(sock.fileno(), request, _pack(route))