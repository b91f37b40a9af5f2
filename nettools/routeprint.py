"""Routing table listings for NET/ROM, ROSE and X.25."""

from __future__ import annotations

import re
from typing import Iterable

from .procfmt import proc_open

NETROM_NODES = "/proc/net/nr_nodes"
NETROM_NEIGH = "/proc/net/nr_neigh"
ROSE_NODES = "/proc/net/rose_nodes"
ROSE_NEIGH = "/proc/net/rose_neigh"
X25_ROUTES = ("/proc/net/x25/route", "/proc/net/x25_routes")

_ATOI = re.compile(r"[ \t\n\r\f\v]*([+-]?[0-9]+)")


class NotConfiguredError(Exception):
    """The kernel tables for a protocol are not available."""


def _atoi(text: str, start: int = 0) -> int:
    if start < 0 or start >= len(text):
        return 0
    match = _ATOI.match(text, start)
    return int(match.group(1)) if match else 0


def _cstr(text: str, start: int = 0) -> str:
    if start < 0 or start >= len(text):
        return ""
    return text[start:].split("\0", 1)[0]


def _terminate(line: str, *positions: int) -> str:
    chars = list(line)
    for pos in positions:
        if 0 <= pos < len(chars):
            chars[pos] = "\0"
    return "".join(chars)


def _read_rows(path: str) -> list[str]:
    with open(path) as fh:
        return fh.readlines()[1:]


def netrom_rprint(options: int = 0, nodes_path: str = NETROM_NODES,
                  neigh_path: str = NETROM_NEIGH) -> str:
    """Return the kernel NET/ROM routing table as text."""
    try:
        nodes = _read_rows(nodes_path)
        neighbours = _read_rows(neigh_path)
    except OSError as exc:
        raise NotConfiguredError("NET/ROM not configured in this system.") from exc

    out = ["Kernel NET/ROM routing table\n",
           "Destination  Mnemonic  Quality  Neighbour  Iface\n"]
    for raw in nodes:
        row = _terminate(raw, 9, 17)
        which = _atoi(row, 19) - 1
        out.append(f"{_cstr(row, 0):<9}    {_cstr(row, 10):<7}   ")
        quality = _atoi(row, 24 + 15 * which)
        number = _atoi(row, 32 + 15 * which)
        for neigh in neighbours:
            if _atoi(neigh) == number:
                neigh = _terminate(neigh, 15, 20)
                out.append(f"{quality:3d}      {_cstr(neigh, 6):<9}  {_cstr(neigh, 16)}")
                break
    return "".join(out)


def rose_rprint(options: int = 0, nodes_path: str = ROSE_NODES,
                neigh_path: str = ROSE_NEIGH) -> str:
    """Return the kernel ROSE routing table as text."""
    try:
        nodes = _read_rows(nodes_path)
    except OSError as exc:
        raise NotConfiguredError("ROSE not configured in this system.") from exc
    try:
        neighbours = _read_rows(neigh_path)
    except OSError:
        neighbours = []

    out = ["Kernel ROSE routing table\n",
           "Destination  neigh1 callsign  device  neigh2 callsign  device  "
           "neigh3 callsign  device\n"]
    for raw in nodes:
        row = _terminate(raw, 10, 15, 17, 23, 29, 35)
        use = _atoi(row, 16)
        out.append(f"{_cstr(row, 0):<10}   ")
        for i in range(use):
            neighbour = _atoi(row, 6 * (i + 3))
            out.append(f"{neighbour:05d}  ")
            for neigh in neighbours:
                neigh = _terminate(neigh, 15, 21)
                if _atoi(neigh) == neighbour:
                    out.append(f"{_cstr(neigh, 6):<10}   {_cstr(neigh, 16):<4}")
        out.append("\n")
    return "".join(out)


def x25_rprint(options: int = 0, paths: Iterable[str] = X25_ROUTES) -> str:
    """Return the kernel X.25 routing table as text, trying each path in turn."""
    rows = None
    for path in paths:
        try:
            with proc_open(path) as fh:
                rows = fh.readlines()[1:]
            break
        except OSError:
            continue
    if rows is None:
        raise NotConfiguredError("X.25 not configured in this system.")

    out = ["Kernel X.25 routing table\n", "Destination          Iface\n"]
    for raw in rows:
        row = raw.split("\n", 1)[0]
        row = _terminate(row, 24, 35)
        digits = _atoi(row, 17)
        if digits < 0 or digits > 15:
            digits = 15
        row = _terminate(row, digits)
        device = _cstr(row, 25)
        if digits == 0:
            out.append(f"*                    {device:<5}\n")
        else:
            out.append(f"{_cstr(row, 0)}/{digits:<{17 - digits}d}   {device:<5}\n")
    return "".join(out)