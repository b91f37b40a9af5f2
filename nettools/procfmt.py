"""Tolerant parser for the column headers of /proc tables."""

from __future__ import annotations

import mmap
import re
from dataclasses import dataclass
from typing import IO, Iterable

_SPEC = re.compile(r"%(\*?)([0-9]*)([sduxX])")
_HEAD_END = re.compile(r"[| \t\n]")
_WS = " \t\n\r\f\v"
_INT = {
    "d": (re.compile(r"[+-]?[0-9]+"), 10),
    "u": (re.compile(r"[+-]?[0-9]+"), 10),
    "x": (re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+"), 16),
    "X": (re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+"), 16),
}


class ProcFormatError(Exception):
    """A /proc header could not be matched against the requested fields."""


@dataclass(frozen=True)
class ProcFormat:
    """A scan format built from a /proc header: one conversion per column."""

    text: str
    specs: tuple[str, ...]

    def __post_init__(self) -> None:
        for spec in self.specs:
            if not _SPEC.fullmatch(spec):
                raise ValueError(f"unsupported conversion {spec!r}")

    def __str__(self) -> str:
        return self.text

    def parse(self, line: str) -> list:
        """Scan line and return the converted values, stopping at the first mismatch."""
        values: list = []
        pos = 0
        for spec in self.specs:
            skip, width, conv = _SPEC.fullmatch(spec).groups()
            while pos < len(line) and line[pos] in _WS:
                pos += 1
            if pos >= len(line):
                break
            limit = pos + int(width) if width else len(line)
            if conv == "s":
                end = pos
                while end < len(line) and end < limit and line[end] not in _WS:
                    end += 1
                token = line[pos:end]
                pos = end
                if not skip:
                    values.append(token)
                continue
            pattern, base = _INT[conv]
            match = pattern.match(line, pos, min(limit, len(line)))
            if match is None:
                break
            pos = match.end()
            if not skip:
                values.append(int(match.group(), base))
        return values


def proc_gen_fmt(name: str, more: bool, fh: IO[str], fields: Iterable[tuple[str, str]]) -> ProcFormat:
    """Read the header line of fh and build a format picking out the named fields.

    fields is a sequence of (title, conversion) pairs in column order. Unknown
    columns are skipped. Unless more is true, every title must be present.
    """
    wanted = list(fields)
    line = fh.readline()
    if not line:
        raise ProcFormatError(f"{name}: missing header line")

    rest: str | None = line + " "
    text = ""
    specs: list[str] = []
    index = 0
    while rest is not None and index < len(wanted):
        rest = rest.lstrip(_WS + "|")
        end = _HEAD_END.search(rest)
        if end:
            head, rest = rest[: end.start()], rest[end.start() + 1:]
        else:
            head, rest = rest, None
        title, conversion = wanted[index]
        if title == head:
            specs.append(conversion)
            text += conversion
            index += 1
            if index >= len(wanted):
                break
        else:
            specs.append("%*s")
            text += "%*s"
        text += " "

    if not more and index < len(wanted):
        raise ProcFormatError(
            f"warning: {name} does not contain required field {wanted[index][0]}"
        )
    return ProcFormat(text, tuple(specs))


def proc_guess_fmt(name: str, fh: IO[str], fields: Iterable[tuple[str, int]]) -> int:
    """Return the OR of the flags whose marker text occurs in the header line of fh."""
    line = fh.readline()
    if not line:
        raise ProcFormatError(f"{name}: missing header line")
    flags = 0
    for marker, flag in fields:
        if marker in line:
            flags |= flag
    return flags


def proc_open(name: str) -> IO[str]:
    """Open a /proc file for reading with a page-sized buffer."""
    return open(name, "r", buffering=mmap.PAGESIZE)