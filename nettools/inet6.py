"""The IPv6 address family: printing, resolving and parsing addresses."""

from __future__ import annotations

import socket

from .families import (
    NONE_SET,
    AddressError,
    AddressFamily,
    SockAddr,
    register_aftype,
)

AF_INET6 = socket.AF_INET6
UNKNOWN = "[UNKNOWN]"

_V4_MAPPED = bytes(10) + b"\xff\xff"
_NUMERIC_MASK = 0x7FFF
_DEFAULT_NAME = 0x8000


def fix_v4_address(text: str, packed: bytes) -> str:
    """For a v4-mapped address, return only the dotted IPv4 part of text."""
    if bytes(packed[:12]) == _V4_MAPPED:
        dot = text.find(".")
        if dot >= 0:
            colon = text.rfind(":", 0, dot)
            if colon >= 0:
                return text[colon + 1:]
    return text


def _packed(data: bytes) -> bytes:
    return bytes(data[:16]).ljust(16, b"\0")


class Inet6Family(AddressFamily):
    """IPv6 addresses; the socket address data is the 16-byte packed address."""

    name = "inet6"
    af = AF_INET6
    alen = 16
    flag_file = "/proc/net/if_inet6"

    def print_address(self, data: bytes) -> str:
        packed = _packed(data)
        return fix_v4_address(socket.inet_ntop(AF_INET6, packed), packed)

    @staticmethod
    def _rresolve(packed: bytes, numeric: int) -> str:
        text = socket.inet_ntop(AF_INET6, packed)
        if numeric & _NUMERIC_MASK:
            return text
        if packed == bytes(16):
            return "default" if numeric & _DEFAULT_NAME else "[::]"
        try:
            host, _ = socket.getnameinfo((text, 0, 0, 0), 0)
        except (socket.gaierror, OSError):
            return text
        return host

    def sprint(self, addr: SockAddr, numeric: int = 0) -> str:
        """Return the address as text, resolving a name unless numeric asks otherwise."""
        if addr.family in (0, 0xFFFF):
            return NONE_SET
        if addr.family != AF_INET6:
            return UNKNOWN
        packed = _packed(addr.data)
        return fix_v4_address(self._rresolve(packed, numeric), packed)

    def input_address(self, kind: int, text: str) -> SockAddr:
        """Parse a numeric address (kind 1) or resolve a host name (other kinds)."""
        if kind == 1:
            try:
                packed = socket.inet_pton(AF_INET6, text)
            except (OSError, ValueError) as exc:
                raise AddressError(f"{text}: invalid IPv6 address") from exc
            return SockAddr(AF_INET6, packed)
        try:
            infos = socket.getaddrinfo(text, None, AF_INET6)
        except (socket.gaierror, UnicodeError, ValueError) as exc:
            code = getattr(exc, "errno", None)
            raise AddressError(f"getaddrinfo: {text}: {code}") from exc
        if not infos:
            raise AddressError(f"getaddrinfo: {text}: no address")
        host = infos[0][4][0].split("%", 1)[0]
        try:
            packed = socket.inet_pton(AF_INET6, host)
        except (OSError, ValueError) as exc:
            raise AddressError(f"getaddrinfo: {text}: bad address") from exc
        return SockAddr(AF_INET6, packed)


inet6_aftype = register_aftype(Inet6Family())