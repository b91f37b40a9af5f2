"""Listing of the kernel IPX routing table."""

from __future__ import annotations

import re
from typing import Iterable

from .families import AF_IPX, SockAddr, get_afntype
from .routeprint import NotConfiguredError

IPX_ROUTES = ("/proc/net/ipx/route", "/proc/net/ipx_route")
FLAG_NUM_HOST = 4

_IPX_NODE_LEN = 6
_ULONG_MAX = (1 << 64) - 1
_STRTOUL16 = re.compile(r"[ \t\n\r\f\v]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_HEX = "0123456789ABCDEF"


def _network(text: str) -> int:
    sign, digits = _STRTOUL16.match(text).groups()
    if not digits:
        return 0
    value = min(int(digits, 16), _ULONG_MAX)
    if sign == "-":
        value = (-value) & _ULONG_MAX
    if value in (0, 0xFFFFFFFF):
        return 0
    return value & 0xFFFFFFFF


def _node(text: str) -> bytes:
    """Decode hex pairs, keeping whatever was decoded before a bad character."""
    node = bytearray(_IPX_NODE_LEN)
    for i in range(_IPX_NODE_LEN):
        high = _HEX.find(text[2 * i:2 * i + 1].upper()) if 2 * i < len(text) else -1
        if high < 0:
            break
        node[i] = high << 4
        low = _HEX.find(text[2 * i + 1:2 * i + 2].upper()) if 2 * i + 1 < len(text) else -1
        if low < 0:
            break
        node[i] |= low
    return bytes(node)


def _address(kind: int, text: str) -> SockAddr:
    network = _network(text) if kind == 1 else 0
    node = _node(text) if kind == 2 else bytes(_IPX_NODE_LEN)
    data = bytes(2) + network.to_bytes(4, "big") + node + bytes(2)
    return SockAddr(AF_IPX, data)


def ipx_rprint(options: int = 0, paths: Iterable[str] = IPX_ROUTES) -> str:
    """Return the kernel IPX routing table as text, trying each path in turn."""
    paths = tuple(paths)
    rows = None
    for path in paths:
        try:
            with open(path) as fh:
                rows = fh.readlines()
            break
        except OSError:
            continue
    if rows is None:
        raise NotConfiguredError(
            f"IPX routing not in file {' or '.join(paths)} found.")

    family = get_afntype(AF_IPX)
    if family is None:
        raise RuntimeError("AF_IPX missing")
    numeric = options & FLAG_NUM_HOST

    out = ["Kernel IPX routing table\n",
           "Destination               Router Net                Router Node\n"]
    for row in rows[1:]:
        tokens = row.split()
        if len(tokens) < 3:
            continue
        net, router_net, router_node = tokens[:3]
        net = family.sprint(_address(1, net), numeric)
        router_net = family.sprint(_address(1, router_net), numeric)
        router_node = family.sprint(_address(2, router_node), numeric)
        out.append(f"{net:<25} {router_net:<25} {router_node:<25}\n")
    return "".join(out)