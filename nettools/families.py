"""Address families: printing and parsing of socket addresses per protocol."""

from __future__ import annotations

import os
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

AF_UNSPEC = 0
AF_UNIX = 1
AF_IPX = 4
AF_NETROM = 6
AF_X25 = 9
AF_ROSE = 11

NONE_SET = "[NONE SET]"

_SOCKADDR_LEN = 16
_IPX_NODE_LEN = 6
_AX25_ADDR_LEN = 7
_ROSE_ADDR_LEN = 5
X25_ADDR_LEN = 16

_WS = " \t\n\r\f\v"
_HEX = "0123456789abcdefABCDEF"
_ULONG_MAX = (1 << 64) - 1


class AddressError(ValueError):
    """An address could not be parsed for its family."""


@dataclass(frozen=True)
class SockAddr:
    """A socket address: the family number and the bytes that follow it.

    prefix holds the number of significant digits or the prefix length when
    the text the address was parsed from carried one.
    """

    family: int
    data: bytes = b""
    prefix: Optional[int] = None


class AddressFamily(ABC):
    """Common behaviour of an address family."""

    name: str = ""
    title: Optional[str] = None
    af: int = AF_UNSPEC
    alen: int = 0
    flag_file: Optional[str] = None

    def __init__(self) -> None:
        self.fd = -1
        self.rprint: Optional[Callable[..., object]] = None
        self.rinput: Optional[Callable[..., object]] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, af={self.af})"

    @abstractmethod
    def print_address(self, data: bytes) -> str:
        """Return the text form of the raw address bytes."""

    def sprint(self, addr: SockAddr, numeric: int = 0) -> str:
        """Return the text form of a socket address, or '[NONE SET]'."""
        if addr.family in (0, 0xFFFF):
            return NONE_SET
        return self.print_address(addr.data)

    def input_address(self, kind: int, text: str) -> SockAddr:
        """Parse text into a socket address of this family."""
        raise AddressError(f"{self.name}: address input not supported")


def _cstring(data: bytes) -> bytes:
    return data.split(b"\0", 1)[0]


def _atoi(text: str) -> int:
    text = text.lstrip(_WS)
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for ch in text:
        if ch not in string.digits:
            break
        digits += ch
    return sign * int(digits) if digits else 0


def _strtoul16(text: str) -> tuple[int, str]:
    """Parse a hexadecimal number as strtoul does; return the value and the rest."""
    pos = len(text) - len(text.lstrip(_WS))
    negative = False
    if text[pos:pos + 1] in ("+", "-"):
        negative = text[pos] == "-"
        pos += 1
    if text[pos:pos + 2] in ("0x", "0X") and text[pos + 2:pos + 3] in tuple(_HEX):
        pos += 2
    end = pos
    while end < len(text) and text[end] in _HEX:
        end += 1
    if end == pos:
        return 0, text
    value = int(text[pos:end], 16)
    if value > _ULONG_MAX:
        value = _ULONG_MAX
    elif negative:
        value = (-value) & _ULONG_MAX
    return value, text[end:]


class UnspecFamily(AddressFamily):
    """Addresses of unknown kind, shown as raw bytes."""

    name = "unspec"
    af = AF_UNSPEC

    def print_address(self, data: bytes) -> str:
        raw = data[:_SOCKADDR_LEN].ljust(_SOCKADDR_LEN, b"\0")
        return "-".join(f"{byte:02X}" for byte in raw)


class UnixFamily(AddressFamily):
    """UNIX domain sockets: the address is a path."""

    name = "unix"
    af = AF_UNIX
    flag_file = "/proc/net/unix"

    def print_address(self, data: bytes) -> str:
        return os.fsdecode(_cstring(data))


class IpxFamily(AddressFamily):
    """IPX addresses: a 32-bit network number and a 6-byte node."""

    name = "ipx"
    af = AF_IPX
    flag_file = "/proc/net/ipx"

    def print_address(self, data: bytes) -> str:
        raw = data.ljust(2 + 4 + _IPX_NODE_LEN, b"\0")
        network = int.from_bytes(raw[2:6], "big")
        node = raw[6:6 + _IPX_NODE_LEN]
        node_text = "".join(f"{byte:02X}" for byte in node)
        has_node = any(node)
        if has_node and network:
            return f"{network:08X}:{node_text}"
        if network:
            return f"{network:08X}"
        if has_node:
            return node_text
        return ""

    def sprint(self, addr: SockAddr, numeric: int = 0) -> str:
        if addr.family != AF_IPX:
            return NONE_SET
        return self.print_address(addr.data)

    @staticmethod
    def _parse_node(text: str) -> bytes:
        node = bytearray()
        for i in range(_IPX_NODE_LEN):
            pair = text[2 * i:2 * i + 2]
            if len(pair) != 2 or any(ch not in _HEX for ch in pair):
                raise AddressError(f"ipx: invalid node address {text!r}")
            node.append(int(pair, 16))
        if node == bytes(_IPX_NODE_LEN) or node == b"\xff" * _IPX_NODE_LEN:
            raise AddressError(f"ipx: node address {text!r} is not usable")
        return bytes(node)

    def input_address(self, kind: int, text: str) -> SockAddr:
        """Parse 'net:node' (kind 0), 'net' (kind 1) or 'node' (kind 2)."""
        kind &= 3
        network = 0
        rest = text
        if kind <= 1:
            value, rest = _strtoul16(text)
            if value in (0, 0xFFFFFFFF):
                raise AddressError(f"ipx: invalid network number {text!r}")
            network = value & 0xFFFFFFFF
        node = bytes(_IPX_NODE_LEN)
        if kind == 1:
            if rest:
                raise AddressError(f"ipx: trailing characters in network {text!r}")
        else:
            if kind == 0:
                if not rest.startswith(":"):
                    raise AddressError(f"ipx: expected ':' in {text!r}")
                rest = rest[1:]
            node = self._parse_node(rest)
        data = bytes(2) + network.to_bytes(4, "big") + node + bytes(2)
        return SockAddr(AF_IPX, data)


class NetromFamily(AddressFamily):
    """NET/ROM addresses: an AX.25 callsign with optional SSID."""

    name = "netrom"
    af = AF_NETROM
    alen = _AX25_ADDR_LEN
    flag_file = "/proc/net/nr"

    def print_address(self, data: bytes) -> str:
        raw = data.ljust(_AX25_ADDR_LEN, b"\0")
        call = "".join(chr(byte >> 1) for byte in raw[:6]).replace(" ", "\0")
        text = call.split("\0", 1)[0]
        ssid = (raw[6] & 0x1E) >> 1
        if ssid:
            text += f"-{ssid}"
        return text

    def input_address(self, kind: int, text: str) -> SockAddr:
        call = bytearray()
        pos = 0
        while pos < len(text) and text[pos] != "-" and len(call) < 6:
            ch = text[pos]
            pos += 1
            if "a" <= ch <= "z":
                ch = ch.upper()
            if not ("A" <= ch <= "Z" or "0" <= ch <= "9"):
                raise AddressError(f"{text}: Invalid callsign")
            call.append((ord(ch) << 1) & 0xFE)
        if len(call) == 6 and pos < len(text) and text[pos] != "-":
            raise AddressError(f"{text}: Callsign too long")
        while len(call) < _AX25_ADDR_LEN - 1:
            call.append((ord(" ") << 1) & 0xFE)
        if pos < len(text) and text[pos] == "-":
            call.append((_atoi(text[pos + 1:]) << 1) & 0xFE)
        else:
            call.append(0)
        return SockAddr(AF_NETROM, bytes(call))


class RoseFamily(AddressFamily):
    """ROSE addresses: ten decimal digits packed into five bytes."""

    name = "rose"
    af = AF_ROSE
    alen = 10
    flag_file = "/proc/net/rose"

    def print_address(self, data: bytes) -> str:
        raw = data[:_ROSE_ADDR_LEN].ljust(_ROSE_ADDR_LEN, b"\0")
        return raw.hex()

    def input_address(self, kind: int, text: str) -> SockAddr:
        if len(text) != 10:
            raise AddressError(f"{text}: Node address must be ten digits")
        packed = bytes(
            (((ord(text[o]) - 48) << 4) | (ord(text[o + 1]) - 48)) & 0xFF
            for o in range(0, 10, 2)
        )
        return SockAddr(AF_ROSE, packed)


class X25Family(AddressFamily):
    """X.25 addresses: up to fifteen digits with an optional '/sigdigits'."""

    name = "x25"
    af = AF_X25
    alen = X25_ADDR_LEN
    flag_file = "/proc/net/x25"

    def print_address(self, data: bytes) -> str:
        return _cstring(data[:X25_ADDR_LEN]).decode("latin-1")

    def input_address(self, kind: int, text: str) -> SockAddr:
        """Parse the address; the result's prefix holds the significant digits."""
        if len(text) > 18:
            raise AddressError(
                f"{text}: Address can't exceed eighteen digits with sigdigits")
        address, slash, digits = text.partition("/")
        sigdigits = _atoi(digits) if slash else len(address)
        if not 1 <= len(address) <= 15 or not 0 <= sigdigits <= len(address):
            raise AddressError(f"{text}: Invalid address")
        stored = address[:sigdigits + 1].encode("latin-1", "replace")
        return SockAddr(AF_X25, stored.ljust(X25_ADDR_LEN, b"\0"), sigdigits)


_REGISTRY: list[AddressFamily] = []


def register_aftype(family: AddressFamily) -> AddressFamily:
    """Add a family to the registry, replacing one of the same name."""
    for index, known in enumerate(_REGISTRY):
        if known.name == family.name:
            _REGISTRY[index] = family
            return family
    _REGISTRY.append(family)
    return family


def get_aftype(name: str) -> Optional[AddressFamily]:
    """Return the registered family with this name, or None."""
    return next((family for family in _REGISTRY if family.name == name), None)


def get_afntype(af: int) -> Optional[AddressFamily]:
    """Return the registered family with this number, or None."""
    return next((family for family in _REGISTRY if family.af == af), None)


def all_aftypes() -> tuple[AddressFamily, ...]:
    """Return the registered families in registration order."""
    return tuple(_REGISTRY)


for _family in (UnspecFamily(), UnixFamily(), NetromFamily(), RoseFamily(),
                IpxFamily(), X25Family()):
    register_aftype(_family)