"""Hardware (link layer) types: printing and parsing of hardware addresses."""

from __future__ import annotations

import fcntl
import re
import struct
import termios
from typing import Optional

from .families import SockAddr
from .util import kernel_version, krelease

ARPHRD_IEEE802 = 6
ARPHRD_METRICOM = 23
ARPHRD_SLIP = 256
ARPHRD_CSLIP = 257
ARPHRD_SLIP6 = 258
ARPHRD_CSLIP6 = 259
ARPHRD_ADAPT = 264
ARPHRD_PPP = 512
ARPHRD_TUNNEL = 768
ARPHRD_LOOPBACK = 772
ARPHRD_SIT = 776
ARPHRD_IRDA = 783
ARPHRD_IEEE802_TR = 800

TR_ALEN = 6
METRICOM_ALEN = 6
N_STRIP = 4

_SOCKADDR_LEN = 16
_TIOCSETD = getattr(termios, "TIOCSETD", 0x5423)
_HEX = "0123456789abcdefABCDEF"
_STRTOL16 = re.compile(r"[ \t\n\r\f\v]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_LONG_MAX = (1 << 63) - 1


class HardwareError(Exception):
    """A hardware address or line operation failed."""


class HardwareType:
    """A hardware type; subclasses add address printing, parsing or activation."""

    def __init__(self, name: str, hwtype: int, alen: int = 0,
                 title: Optional[str] = None, suppress_null_addr: bool = False) -> None:
        self.name = name
        self.type = hwtype
        self.alen = alen
        self.title = title or name
        self.suppress_null_addr = suppress_null_addr

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, type={self.type})"

    @property
    def can_print(self) -> bool:
        """True if this type knows how to print its addresses."""
        return type(self).print_address is not HardwareType.print_address

    def print_address(self, data: bytes) -> str:
        """Return the text form of a raw hardware address."""
        raise HardwareError(f"{self.name}: no address printing")

    def input_address(self, text: str) -> SockAddr:
        """Parse a hardware address from text."""
        raise HardwareError(f"{self.name}: address input not supported")

    def activate(self, fd: int) -> None:
        """Start this encapsulation on the terminal line fd."""
        raise HardwareError(f"{self.name}: line activation not supported")


class _UnspecHardware(HardwareType):
    def print_address(self, data: bytes) -> str:
        raw = data[:_SOCKADDR_LEN].ljust(_SOCKADDR_LEN, b"\0")
        return "-".join(f"{byte:02X}" for byte in raw)


class _IrdaHardware(HardwareType):
    def print_address(self, data: bytes) -> str:
        raw = data[:4].ljust(4, b"\0")
        return ":".join(f"{byte:02x}" for byte in reversed(raw))


class _TokenRingHardware(HardwareType):
    def print_address(self, data: bytes) -> str:
        raw = data[:TR_ALEN].ljust(TR_ALEN, b"\0")
        return ":".join(f"{byte:02X}" for byte in raw)

    def input_address(self, text: str) -> SockAddr:
        if kernel_version() < krelease(2, 3, 30):
            family = ARPHRD_IEEE802
        else:
            family = ARPHRD_IEEE802_TR
        out = bytearray()
        pos = 0
        while pos < len(text) and len(out) < TR_ALEN:
            pair = text[pos:pos + 2]
            if len(pair) != 2 or any(ch not in _HEX for ch in pair):
                raise HardwareError(f"in_tr({text}): invalid token ring address!")
            out.append(int(pair, 16))
            pos += 2
            if text[pos:pos + 1] == ":":
                pos += 1
        return SockAddr(family, bytes(out).ljust(TR_ALEN, b"\0"))


def _strtol16(text: str) -> int:
    match = _STRTOL16.match(text)
    sign, digits = match.groups()
    if not digits:
        return 0
    value = min(int(digits, 16), _LONG_MAX)
    return -value if sign == "-" else value


class _StripHardware(HardwareType):
    def print_address(self, data: bytes) -> str:
        raw = data[:METRICOM_ALEN].ljust(METRICOM_ALEN, b"\0")
        if raw[1]:
            return f"{raw[1]:02x}-{raw[2]:02x}{raw[3]:02x}-{raw[4]:02x}{raw[5]:02x}"
        return f"{raw[2]:02x}{raw[3]:02x}-{raw[4]:02x}{raw[5]:02x}"

    def input_address(self, text: str) -> SockAddr:
        start = 1 if text.startswith("*") else 0
        dash = text.find("-", start)
        if dash < 0:
            raise HardwareError(f"{text}: invalid Metricom address")
        if dash - start == 2:
            first = _strtol16(text[start:]) & 0xFF
            pos = dash + 1
            if pos >= len(text):
                raise HardwareError(f"{text}: invalid Metricom address")
        else:
            first = 0
            pos = start
        middle = _strtol16(text[pos:])
        dash = text.find("-", pos)
        if dash < 0:
            raise HardwareError(f"{text}: invalid Metricom address")
        last = _strtol16(text[dash + 1:])
        data = bytes([0, first, (middle >> 8) & 0xFF, middle & 0xFF,
                      (last >> 8) & 0xFF, last & 0xFF])
        return SockAddr(self.type, data)

    def activate(self, fd: int) -> None:
        try:
            fcntl.ioctl(fd, _TIOCSETD, struct.pack("i", N_STRIP))
        except OSError as exc:
            raise HardwareError(f"STRIP_set_disc({N_STRIP}): {exc.strerror}") from exc


class _TunnelHardware(HardwareType):
    def print_address(self, data: bytes) -> str:
        return ""

    def input_address(self, text: str) -> SockAddr:
        raise HardwareError(f"{self.name}: tunnels have no hardware address")


class _PppHardware(HardwareType):
    def activate(self, fd: int) -> None:
        raise HardwareError("You cannot start PPP with this program.")


_REGISTRY: tuple[HardwareType, ...] = (
    _UnspecHardware("unspec", -1, 0, "UNSPEC"),
    HardwareType("loop", ARPHRD_LOOPBACK, 0, "Local Loopback"),
    HardwareType("slip", ARPHRD_SLIP, 0, "Serial Line IP"),
    HardwareType("cslip", ARPHRD_CSLIP, 0, "VJ Serial Line IP"),
    HardwareType("slip6", ARPHRD_SLIP6, 0, "6-bit Serial Line IP"),
    HardwareType("cslip6", ARPHRD_CSLIP6, 0, "VJ 6-bit Serial Line IP"),
    HardwareType("adaptive", ARPHRD_ADAPT, 0, "Adaptive Serial Line IP"),
    _StripHardware("strip", ARPHRD_METRICOM, METRICOM_ALEN, "Metricom Starmode IP"),
    _TokenRingHardware("tr", ARPHRD_IEEE802, TR_ALEN, "16/4 Mbps Token Ring"),
    _TokenRingHardware("tr", ARPHRD_IEEE802_TR, TR_ALEN, "16/4 Mbps Token Ring"),
    _IrdaHardware("irda", ARPHRD_IRDA, 2),
    _PppHardware("ppp", ARPHRD_PPP, 0, "Point-Point Protocol"),
    _TunnelHardware("tunnel", ARPHRD_TUNNEL, 0, "IPIP Tunnel"),
    HardwareType("sit", ARPHRD_SIT, 0, "IPv6-in-IPv4"),
)


def get_hwtype(name: str) -> Optional[HardwareType]:
    """Return the hardware type with this name, or None."""
    return next((hw for hw in _REGISTRY if hw.name == name), None)


def get_hwntype(hwtype: int) -> Optional[HardwareType]:
    """Return the hardware type with this ARPHRD number, or None."""
    return next((hw for hw in _REGISTRY if hw.type == hwtype), None)