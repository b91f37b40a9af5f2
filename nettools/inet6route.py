"""Listing and editing the kernel IPv6 routing table and neighbour cache."""

from __future__ import annotations

import fcntl
import re
import socket
import struct
from dataclasses import dataclass
from typing import Optional, Sequence

from .families import AddressError
from .inet6 import AF_INET6, inet6_aftype
from .routeprint import NotConfiguredError
from .util import safe_truncate, ticks_per_second
from .x25route import SIOCADDRT, SIOCDELRT, RouteAction, RouteUsageError

ROUTE6 = "/proc/net/ipv6_route"
NDISC = "/proc/net/ndisc"

FLAG_EXT = 3
FLAG_NUM_HOST = 4
FLAG_SYM = 32
FLAG_CACHE = 64
FLAG_FIB = 128

RTF_UP = 0x0001
RTF_GATEWAY = 0x0002
RTF_HOST = 0x0004
RTF_DYNAMIC = 0x0010
RTF_MODIFIED = 0x0020
RTF_REJECT = 0x0200
RTF_DEFAULT = 0x00010000
RTF_ALLONLINK = 0x00020000
RTF_ADDRCONF = 0x00040000
RTF_NONEXTHOP = 0x00200000
RTF_EXPIRES = 0x00400000
RTF_CACHE = 0x01000000
RTF_FLOW = 0x02000000

NUD_NONE = 0x00
NUD_INCOMPLETE = 0x01
NUD_REACHABLE = 0x02
NUD_STALE = 0x04
NUD_DELAY = 0x08
NUD_PROBE = 0x10
NUD_FAILED = 0x20
NUD_NOARP = 0x40
NUD_PERMANENT = 0x80

NTF_02 = 0x02
NTF_04 = 0x04
NTF_PROXY = 0x08
NTF_ROUTER = 0x80

USAGE = ("Usage: inet6_route [-vF] del Target\n"
         "       inet6_route [-vF] add Target [gw Gw] [metric M] [[dev] If]\n"
         "       inet6_route [-FC] flush      NOT supported\n")

_FIB6_FLAGS = (
    (RTF_UP, "U"), (RTF_REJECT, "!"), (RTF_GATEWAY, "G"), (RTF_HOST, "H"),
    (RTF_DEFAULT, "D"), (RTF_ADDRCONF, "A"), (RTF_CACHE, "C"),
    (RTF_ALLONLINK, "a"), (RTF_EXPIRES, "e"), (RTF_MODIFIED, "m"),
    (RTF_NONEXTHOP, "n"), (RTF_FLOW, "f"),
)
_ND_FLAGS = ((NTF_ROUTER, "R"), (NTF_04, "x"), (NTF_02, "h"), (NTF_PROXY, "P"))
_STATES = {
    NUD_NONE: "NONE", NUD_INCOMPLETE: "INCOMPLETE", NUD_REACHABLE: "REACHABLE",
    NUD_STALE: "STALE", NUD_DELAY: "DELAY", NUD_PROBE: "PROBE",
    NUD_FAILED: "FAILED", NUD_NOARP: "NOARP", NUD_PERMANENT: "PERM",
}
_ATOL = re.compile(r"[ \t\n\r\f\v]*([+-]?[0-9]+)")


def _s32(text: str) -> int:
    value = int(text, 16) & 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _atol(text: str) -> int:
    match = _ATOL.match(text)
    return int(match.group(1)) if match else 0


def _colon_groups(hex32: str) -> str:
    return ":".join(hex32[i:i + 4] for i in range(0, 32, 4))


def _decode(flags: int, table) -> str:
    return "".join(letter for bit, letter in table if flags & bit)


def rprint_fib6(ext: int, numeric: int, path: str = ROUTE6) -> str:
    """Return the IPv6 routing table (or cache, if numeric has RTF_CACHE) as text."""
    try:
        with open(path) as fh:
            lines = fh.readlines()
    except OSError as exc:
        raise NotConfiguredError("INET6 (IPv6) not configured in this system.") from exc

    cache = bool(numeric & RTF_CACHE)
    out = ["Kernel IPv6 routing cache\n" if cache else "Kernel IPv6 routing table\n",
           "Destination                    Next Hop                   "
           "Flag Met Ref  Use If\n"]
    for line in lines:
        fields = line.split()
        if len(fields) < 10:
            continue
        try:
            iflags = int(fields[8], 16) & 0xFFFFFFFF
            if bool(iflags & RTF_CACHE) != cache:
                continue
            prefix_len = int(fields[1], 16)
            metric, refcnt, use = (_s32(field) for field in fields[5:8])
            dest = inet6_aftype.input_address(1, _colon_groups(fields[0]))
            nexthop = inet6_aftype.input_address(1, _colon_groups(fields[4]))
        except ValueError:
            continue
        addr = f"{inet6_aftype.sprint(dest, numeric)}/{prefix_len}"
        naddr = inet6_aftype.sprint(nexthop, numeric)
        flags = _decode(iflags, _FIB6_FLAGS)
        iface = fields[9][:15]
        out.append(f"{addr:<30} {naddr:<26} {flags:<4} {metric:<3d} "
                   f"{refcnt:<1d} {use:6d} {iface}\n")
    return "".join(out)


def rprint_cache6(ext: int, numeric: int, path: str = NDISC,
                  route_path: str = ROUTE6) -> str:
    """Return the IPv6 neighbour cache as text, or the route cache if it is absent."""
    try:
        with open(path) as fh:
            lines = fh.readlines()
    except OSError:
        return rprint_fib6(ext, numeric | RTF_CACHE, route_path)

    clk_tck = ticks_per_second()
    out = ["Kernel IPv6 Neighbour Cache\n"]
    if ext == 2:
        out.append("Neighbour                                   HW Address        "
                   "Iface    Flags Ref State\n")
    else:
        out.append("Neighbour                                   HW Address        "
                   "Iface    Flags Ref State            Stale(sec) Delete(sec)\n")

    for line in lines:
        fields = line.split()
        if len(fields) < 13:
            continue
        try:
            prefix_len = int(fields[2], 16)
            state = int(fields[4], 16)
            tstamp = int(fields[6], 16)
            reachable = int(fields[7], 16)
            gc = int(fields[8], 16)
            refcnt = int(fields[9], 16)
            ndflags = int(fields[10], 16)
            target = inet6_aftype.input_address(1, _colon_groups(fields[0]))
        except ValueError:
            continue
        addr = f"{inet6_aftype.sprint(target, numeric)}/{prefix_len}"
        haddr = ":".join(fields[12][i:i + 2] for i in range(0, 12, 2))
        iface = fields[11][:8]
        flags = _decode(ndflags, _ND_FLAGS)
        statestr = _STATES.get(state, f"UNKNOWN({state:02x})")
        out.append(f"{addr:<43} {haddr:<17} {iface:<8} {flags:<5} "
                   f"{refcnt:<3d} {statestr:<16}")

        stale = 0
        if state == NUD_REACHABLE and reachable > tstamp:
            stale = reachable - tstamp
        delete = gc - tstamp if gc > tstamp else 0
        if ext != 2:
            out.append(f" {stale // clk_tck:<9d} ")
            out.append(" * " if refcnt else f" {delete // clk_tck:<7d} ")
        out.append("\n")
    return "".join(out)


def inet6_rprint(options: int) -> str:
    """Return the IPv6 tables selected by the FIB and CACHE option flags."""
    ext = options & FLAG_EXT
    numeric = options & (FLAG_NUM_HOST | FLAG_SYM)
    if not options & (FLAG_FIB | FLAG_CACHE):
        raise ValueError("no IPv6 routing table selected")
    parts = []
    if options & FLAG_FIB:
        parts.append(rprint_fib6(ext, numeric))
    if options & FLAG_CACHE:
        parts.append(rprint_cache6(ext, numeric))
    return "".join(parts)


@dataclass(frozen=True)
class Inet6Route:
    """An IPv6 route request: packed target, prefix length, gateway and options."""

    target: bytes
    prefix_len: int
    metric: int = 1
    flags: int = RTF_UP
    gateway: Optional[bytes] = None
    device: Optional[str] = None


def _usage(message: str = "") -> RouteUsageError:
    return RouteUsageError(message, USAGE)


def parse_inet6_route(args: Sequence[str]) -> Inet6Route:
    """Parse 'Target[/prefix] [gw Gw] [metric M] [mod] [dyn] [[dev] If]'."""
    if not args:
        raise _usage()
    target = safe_truncate(args[0], 128)
    rest = list(args[1:])

    if target == "default":
        prefix_len = 0
        packed = bytes(16)
    else:
        address, slash, length = target.partition("/")
        if slash:
            prefix_len = _atol(length)
            if not 0 <= prefix_len <= 128:
                raise _usage()
        else:
            prefix_len = 128
        try:
            packed = inet6_aftype.input_address(1, address).data
        except AddressError:
            packed = inet6_aftype.input_address(0, address).data

    flags = RTF_UP | (RTF_HOST if prefix_len == 128 else 0)
    metric = 1
    gateway: Optional[bytes] = None
    device: Optional[str] = None

    while rest:
        token = rest.pop(0)
        if token == "metric":
            if not rest or not rest[0][:1].isdigit():
                raise _usage()
            metric = _atol(rest.pop(0))
            continue
        if token in ("gw", "gateway"):
            if not rest or flags & RTF_GATEWAY:
                raise _usage()
            gateway = inet6_aftype.input_address(1, safe_truncate(rest.pop(0), 128)).data
            flags |= RTF_GATEWAY
            continue
        if token == "mod":
            flags |= RTF_MODIFIED
            continue
        if token == "dyn":
            flags |= RTF_DYNAMIC
            continue
        if token in ("device", "dev"):
            if not rest:
                raise _usage()
            token = rest.pop(0)
        elif rest:
            raise _usage()
        device = token

    return Inet6Route(packed, prefix_len, metric, flags, gateway, device)


def _pack(route: Inet6Route, ifindex: int) -> bytes:
    return struct.pack("@16s16s16sIHHILIi", route.target, bytes(16),
                       route.gateway or bytes(16), 0, route.prefix_len, 0,
                       route.metric & 0xFFFFFFFF, 0, route.flags, ifindex)


def inet6_rinput(action: RouteAction, options: int, args: Sequence[str]) -> None:
    """Add or delete an IPv6 route in the kernel."""
    if action == RouteAction.FLUSH:
        raise _usage("Flushing `inet6' routing table not supported")
    if action == RouteAction.HELP:
        raise _usage()

    route = parse_inet6_route(args)
    request = SIOCDELRT if action == RouteAction.DEL else SIOCADDRT
    with socket.socket(AF_INET6, socket.SOCK_DGRAM) as sock:
        ifindex = socket.if_nametoindex(route.device) if route.device else 0
        fcntl.ioctl(sock.fileno(), request, _pack(route, ifindex))