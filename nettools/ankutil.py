"""Argument and address parsing helpers for the ip-style tools."""

from __future__ import annotations

import socket
from dataclasses import dataclass

UINT_MAX = 0xFFFFFFFF
INT_MAX = 0x7FFFFFFF
INT_MIN = -0x80000000
_ULONG_RANGE = 1 << 64
_WS = " \t\n\r\f\v"
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


class InvalidArgument(ValueError):
    """A command-line argument could not be parsed."""


@dataclass
class InetPrefix:
    """An address or prefix: family, byte length, prefix bits and raw bytes."""

    family: int
    bytelen: int
    bitlen: int
    data: bytes = b""


def _strtol(arg: str | None, base: int) -> int | None:
    """Parse arg completely as C strtol would, or return None."""
    if base != 0 and not 2 <= base <= 36:
        raise InvalidArgument(f"invalid base {base}")
    if not arg:
        return None
    text = arg.lstrip(_WS)
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if base in (0, 16) and text[:2] in ("0x", "0X") and len(text) > 2 \
            and 0 <= _DIGITS.find(text[2].lower()) < 16:
        text = text[2:]
        base = 16
    elif base == 0:
        base = 8 if text.startswith("0") else 10
    if not text:
        return None
    for ch in text:
        if not 0 <= _DIGITS.find(ch.lower()) < base:
            return None
    return sign * int(text, base)


def _unsigned(arg: str | None, base: int, limit: int) -> int:
    value = _strtol(arg, base)
    if value is None:
        raise InvalidArgument(f"invalid number {arg!r}")
    if value < 0:
        value = value + _ULONG_RANGE if value > -_ULONG_RANGE else _ULONG_RANGE - 1
    if value > limit:
        raise InvalidArgument(f"number out of range {arg!r}")
    return value


def _signed(arg: str | None, base: int, low: int, high: int) -> int:
    value = _strtol(arg, base)
    if value is None:
        raise InvalidArgument(f"invalid number {arg!r}")
    if not low <= value <= high:
        raise InvalidArgument(f"number out of range {arg!r}")
    return value


def scan_number(arg: str) -> int:
    """Parse an unsigned number with C base prefixes (0x, 0)."""
    return _unsigned(arg, 0, UINT_MAX)


def get_integer(arg: str, base: int) -> int:
    return _signed(arg, base, INT_MIN, INT_MAX)


def get_unsigned(arg: str, base: int) -> int:
    return _unsigned(arg, base, UINT_MAX)


def get_u32(arg: str, base: int) -> int:
    return _unsigned(arg, base, 0xFFFFFFFF)


def get_u16(arg: str, base: int) -> int:
    return _unsigned(arg, base, 0xFFFF)


def get_u8(arg: str, base: int) -> int:
    return _unsigned(arg, base, 0xFF)


def get_s16(arg: str, base: int) -> int:
    return _signed(arg, base, -0x8000, 0x7FFF)


def get_s8(arg: str, base: int) -> int:
    return _signed(arg, base, -0x80, 0x7F)


def get_addr_1(name: str, family: int) -> InetPrefix:
    """Parse an IPv4 or IPv6 address, or 'default'/'any'."""
    if name in ("default", "any"):
        size = 16 if family == socket.AF_INET6 else 4
        return InetPrefix(family, size, -1, bytes(size))

    if ":" in name:
        if family not in (socket.AF_UNSPEC, socket.AF_INET6):
            raise InvalidArgument(f"{name} is not an address of the requested family")
        try:
            data = socket.inet_pton(socket.AF_INET6, name)
        except OSError as exc:
            raise InvalidArgument(f"{name} is not a valid IPv6 address") from exc
        return InetPrefix(socket.AF_INET6, 16, -1, data)

    if family not in (socket.AF_UNSPEC, socket.AF_INET):
        raise InvalidArgument(f"{name} is not an address of the requested family")
    octets = [0, 0, 0, 0]
    index = 0
    for ch in name:
        if "0" <= ch <= "9":
            octets[index] = (octets[index] * 10 + ord(ch) - ord("0")) & 0xFF
            continue
        if ch == ".":
            index += 1
            if index <= 3:
                continue
        raise InvalidArgument(f"{name} is not a valid IPv4 address")
    return InetPrefix(socket.AF_INET, 4, -1, bytes(octets))


def get_prefix_1(arg: str, family: int) -> InetPrefix:
    """Parse 'address[/length]', or 'default'/'any' as a zero-length prefix."""
    if arg in ("default", "any"):
        return InetPrefix(family, 0, 0, b"")
    address, slash, length = arg.partition("/")
    prefix = get_addr_1(address, family)
    prefix.bitlen = 128 if prefix.family == socket.AF_INET6 else 32
    if slash:
        plen = scan_number(length)
        if plen > prefix.bitlen:
            raise InvalidArgument(f"prefix length {plen} too long")
        prefix.bitlen = plen
    return prefix


def get_addr(arg: str, family: int) -> InetPrefix:
    try:
        return get_addr_1(arg, family)
    except InvalidArgument as exc:
        raise InvalidArgument(f"ip: {arg} is invalid inet address") from exc


def get_prefix(arg: str, family: int) -> InetPrefix:
    try:
        return get_prefix_1(arg, family)
    except InvalidArgument as exc:
        raise InvalidArgument(f"ip: {arg} is invalid inet prefix") from exc


def get_addr32(name: str) -> int:
    """Parse an IPv4 address and return it as an integer in host order."""
    try:
        prefix = get_addr_1(name, socket.AF_INET)
    except InvalidArgument as exc:
        raise InvalidArgument(f"ip: {name} is invalid IPv4 address") from exc
    return int.from_bytes(prefix.data, "big")


def matches(cmd: str, pattern: str) -> bool:
    """Return True if cmd is an abbreviation (prefix) of pattern."""
    return pattern.startswith(cmd)


def inet_addr_match(a: InetPrefix, b: InetPrefix, bits: int) -> bool:
    """Return True if the first bits bits of both addresses agree."""
    if not 0 <= bits <= 128:
        raise InvalidArgument(f"invalid prefix length {bits}")
    left = int.from_bytes(a.data.ljust(16, b"\0")[:16], "big")
    right = int.from_bytes(b.data.ljust(16, b"\0")[:16], "big")
    shift = 128 - bits
    return (left >> shift) == (right >> shift)


def format_host(af: int, addr: bytes) -> str:
    """Return the numeric text form of a packed address."""
    try:
        return socket.inet_ntop(af, addr)
    except (OSError, ValueError) as exc:
        raise InvalidArgument(f"cannot format address for family {af}") from exc