"""Dispatching route changes to the address family that handles them."""

from __future__ import annotations

import errno
from typing import Sequence

from .families import get_aftype
from .inet6route import inet6_rinput
from .x25route import RouteAction, x25_rinput


def ipx_rinput(action: RouteAction, options: int, args: Sequence[str]) -> None:
    """Editing IPX routes is not supported; always raises."""
    raise OSError(errno.EOPNOTSUPP, "IPX: changing routes is not supported")


def netrom_rinput(action: RouteAction, options: int, args: Sequence[str]) -> None:
    """Editing NET/ROM routes is not supported; always raises."""
    raise OSError(errno.EOPNOTSUPP, "NET/ROM: changing routes is not supported")


_HANDLERS = {
    "inet6": inet6_rinput,
    "netrom": netrom_rinput,
    "ipx": ipx_rinput,
    "x25": x25_rinput,
}


def _install_handlers() -> None:
    for name, handler in _HANDLERS.items():
        family = get_aftype(name)
        if family is not None:
            family.rinput = handler


def route_edit(action: RouteAction, afname: str, options: int, args: Sequence[str]):
    """Pass a route command to the handler of the named address family."""
    family = get_aftype(afname)
    if family is None:
        raise ValueError(f"Address family `{afname}' not supported.")
    if family.rinput is None:
        raise ValueError(f"No routing for address family `{family.name}'.")
    return family.rinput(action, options, args)


_install_handlers()