import socket

import pytest

from nettools.families import AddressError
from nettools.inet6route import (
    RTF_GATEWAY,
    RTF_HOST,
    RTF_UP,
    Inet6Route,
    inet6_rinput,
    inet6_rprint,
    parse_inet6_route,
    rprint_cache6,
    rprint_fib6,
)
from nettools.routeprint import NotConfiguredError
from nettools.x25route import RouteAction, RouteUsageError

ZERO = "0" * 32
LINK = "fe80" + "0" * 28


def _route_line(dst, plen, hop, metric, flags, iface="eth0"):
    return f"{dst} {plen} {ZERO} 00 {hop} {metric} 00000001 00000000 {flags} {iface}\n"


def _write(tmp_path, name, lines):
    path = tmp_path / name
    path.write_text("".join(lines))
    return str(path)


def test_fib6_table(tmp_path):
    path = _write(tmp_path, "route6", [_route_line(LINK, "40", ZERO, "00000001", "00000001")])
    text = rprint_fib6(1, 1, path)
    lines = text.splitlines()
    assert lines[0] == "Kernel IPv6 routing table"
    assert lines[1].startswith("Destination")
    assert lines[2].split() == ["fe80::/64", "::", "U", "1", "1", "0", "eth0"]


def test_fib6_gateway_and_negative_metric(tmp_path):
    hop = "fe80" + "0" * 27 + "1"
    path = _write(tmp_path, "route6", [_route_line(ZERO, "00", hop, "ffffffff", "00000003")])
    fields = rprint_fib6(1, 1, path).splitlines()[2].split()
    assert fields[1] == "fe80::1"
    assert fields[2] == "UG"
    assert fields[3] == "-1"


def test_fib6_cache_filter(tmp_path):
    path = _write(tmp_path, "route6", [
        _route_line(LINK, "40", ZERO, "00000001", "00000001"),
        _route_line(LINK, "80", ZERO, "00000001", "01000001"),
    ])
    table = rprint_fib6(1, 1, path).splitlines()
    assert len(table) == 3
    cache = rprint_fib6(1, 1 | 0x01000000, path).splitlines()
    assert cache[0] == "Kernel IPv6 routing cache"
    assert len(cache) == 3
    assert cache[2].split()[2] == "UC"


def test_fib6_skips_malformed(tmp_path):
    path = _write(tmp_path, "route6", ["garbage line\n"])
    assert len(rprint_fib6(1, 1, path).splitlines()) == 2


def test_fib6_missing(tmp_path):
    with pytest.raises(NotConfiguredError):
        rprint_fib6(1, 1, str(tmp_path / "absent"))


def _ndisc_line(state="02", refcnt="0001", flags="0080"):
    addr = "fe80" + "0" * 27 + "1"
    return (f"{addr} 02 40 00 {state} 00000000 00000000 00000000 0000 "
            f"{refcnt} {flags} eth0 020000000001\n")


def test_cache6_brief(tmp_path):
    path = _write(tmp_path, "ndisc", [_ndisc_line()])
    lines = rprint_cache6(2, 1, path, str(tmp_path / "none")).splitlines()
    assert lines[0] == "Kernel IPv6 Neighbour Cache"
    assert "Stale(sec)" not in lines[1]
    assert lines[2].split() == ["fe80::1/64", "02:00:00:00:00:01", "eth0", "R",
                                "1", "REACHABLE"]


def test_cache6_extended_with_reference(tmp_path):
    path = _write(tmp_path, "ndisc", [_ndisc_line()])
    lines = rprint_cache6(1, 1, path, str(tmp_path / "none")).splitlines()
    assert "Stale(sec) Delete(sec)" in lines[1]
    assert lines[2].rstrip().endswith("*")
    assert lines[2].split()[-2] == "0"


def test_cache6_extended_without_reference(tmp_path):
    path = _write(tmp_path, "ndisc", [_ndisc_line(refcnt="0000", flags="0000")])
    fields = rprint_cache6(1, 1, path, str(tmp_path / "none")).splitlines()[2].split()
    assert fields[-2:] == ["0", "0"]
    assert "*" not in fields


def test_cache6_unknown_state(tmp_path):
    path = _write(tmp_path, "ndisc", [_ndisc_line(state="03")])
    assert "UNKNOWN(03)" in rprint_cache6(2, 1, path, str(tmp_path / "none"))


def test_cache6_falls_back_to_route_cache(tmp_path):
    route = _write(tmp_path, "route6", [_route_line(LINK, "80", ZERO, "00000001", "01000001")])
    lines = rprint_cache6(1, 1, str(tmp_path / "absent"), route).splitlines()
    assert lines[0] == "Kernel IPv6 routing cache"
    assert len(lines) == 3


def test_rprint_requires_table():
    with pytest.raises(ValueError):
        inet6_rprint(0)


def test_parse_full_route():
    route = parse_inet6_route(["2001:db8::/32", "gw", "fe80::1", "metric", "5", "dev", "eth0"])
    assert route.target == socket.inet_pton(socket.AF_INET6, "2001:db8::")
    assert route.prefix_len == 32
    assert route.metric == 5
    assert route.gateway == socket.inet_pton(socket.AF_INET6, "fe80::1")
    assert route.flags == RTF_UP | RTF_GATEWAY
    assert route.device == "eth0"


def test_parse_default_and_host():
    default = parse_inet6_route(["default"])
    assert default == Inet6Route(bytes(16), 0)
    host = parse_inet6_route(["::1", "eth1"])
    assert host.prefix_len == 128
    assert host.flags == RTF_UP | RTF_HOST
    assert host.device == "eth1"


@pytest.mark.parametrize("args", [
    [],
    ["::1/129"],
    ["::1/-1"],
    ["::1", "metric"],
    ["::1", "metric", "x"],
    ["::1", "gw", "fe80::1", "gw", "fe80::2"],
    ["::1", "dev"],
    ["::1", "eth0", "extra"],
])
def test_parse_usage_errors(args):
    with pytest.raises(RouteUsageError):
        parse_inet6_route(args)


def test_parse_bad_gateway():
    with pytest.raises(AddressError):
        parse_inet6_route(["::1", "gw", "zz"])


def test_rinput_flush_and_help():
    with pytest.raises(RouteUsageError) as flush:
        inet6_rinput(RouteAction.FLUSH, 0, ["::1"])
    assert "not supported" in flush.value.message
    with pytest.raises(RouteUsageError) as helped:
        inet6_rinput(RouteAction.HELP, 0, [])
    assert "inet6_route" in helped.value.usage