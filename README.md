# nettools

A pure-Python library for the plumbing behind classic Linux network
tools: address-family and hardware-type codecs, a tolerant parser for
the column headers of `/proc/net` tables, routing-table printers and
the parsing and applying of route changes.

## Modules

| Module | Purpose |
| --- | --- |
| `nettools.util` | `krelease`, `kernel_version`, `ticks_per_second`, `safe_truncate` |
| `nettools.procfmt` | `proc_gen_fmt`, `proc_guess_fmt`, `proc_open`; `ProcFormat.parse` scans a row |
| `nettools.ankutil` | Number parsing (`get_u8` ... `get_integer`, `scan_number`) and addresses (`get_addr_1`, `get_prefix_1`, `InetPrefix`) |
| `nettools.families` | Address families `unspec`, `unix`, `ipx`, `netrom`, `rose`, `x25`; `get_aftype`, `get_afntype`, `all_aftypes`, `register_aftype` |
| `nettools.inet6` | The `inet6` family (`Inet6Family`), registered on import; `fix_v4_address` |
| `nettools.hwtypes` | Hardware types (loop, slip, cslip, strip, tr, irda, ppp, tunnel, sit, ...); `get_hwtype`, `get_hwntype` |
| `nettools.routeprint` | NET/ROM, ROSE and X.25 routing tables as text |
| `nettools.ipxroute` | `ipx_rprint`: the IPX routing table as text |
| `nettools.inet6route` | `rprint_fib6`, `rprint_cache6`, `inet6_rprint`; `parse_inet6_route`, `inet6_rinput` |
| `nettools.x25route` | `parse_x25_route`, `x25_rinput`, `RouteAction`, `RouteUsageError` |
| `nettools.setroute` | `route_edit`: hands a route command to the family's handler |
| `nettools.linedisc` | `slip_activate`, `cslip_activate`, `slip6_activate`, `cslip6_activate`, `adaptive_activate`, `ppp_activate` |

## Examples

Parse an address prefix given on a command line:

```python
from nettools.ankutil import get_prefix_1

prefix = get_prefix_1("10.0.0.0/8", 0)
print(prefix.bitlen, prefix.data)   # 8 b'\n\x00\x00\x00'
```

Look up an address family by name and format an address:

```python
from nettools.families import get_aftype

rose = get_aftype("rose")
addr = rose.input_address(0, "5050294760")
print(rose.sprint(addr, 1))         # 5050294760

ipx = get_aftype("ipx")
print(ipx.sprint(ipx.input_address(0, "DEADBEEF:0A0B0C0D0E0F")))
```

Build a scan format from a `/proc` header and read a row with it:

```python
import io
from nettools.procfmt import proc_gen_fmt

fh = io.StringIO("Iface\tDestination\tGateway\n")
fmt = proc_gen_fmt("route", False, fh, [("Iface", "%15s"), ("Gateway", "%127s")])
print(fmt.parse("eth0 00000000 0100000A"))   # ['eth0', '0100000A']
```

Print a hardware address:

```python
from nettools.hwtypes import get_hwtype

print(get_hwtype("tr").print_address(bytes([2, 0, 0, 0, 0, 1])))  # 02:00:00:00:00:01
```

Check a route command without touching the kernel:

```python
from nettools.x25route import parse_x25_route

route = parse_x25_route(["12345/3", "dev", "x25_0"])
print(route.sigdigits, route.device)   # 3 x25_0
```

The table printers (`netrom_rprint`, `rose_rprint`, `x25_rprint`,
`ipx_rprint`, `rprint_fib6`, `rprint_cache6`) return the table as a
string and take the paths of the files they read as arguments, so they
can be pointed at saved copies. When the files are missing they raise
`NotConfiguredError`.

Errors are raised as exceptions (`AddressError`, `HardwareError`,
`ProcFormatError`, `RouteUsageError`, `InvalidArgument`,
`LineDisciplineError`, `OSError`) rather than returned as status codes.
`x25_rinput` and `inet6_rinput` send the route to the kernel through an
ioctl and need the matching privileges; editing IPX and NET/ROM routes
is not supported and raises `OSError`.

## What the package does not do

- It installs no commands; it is a library only.
- It does not read or list network interfaces, their flags or their
  statistics, and has no ifconfig-style output.
- It has no ordering helper for interface names and does not open or
  keep per-family control sockets.
- There is no IPv4 (`inet`) address family and no IPv4 routing table
  printer or route editor; `route_edit` handles `inet6`, `x25`, `ipx`
  and `netrom` only.

## Requirements

Python 3.10 or later. No third-party libraries. The parsers and
formatters work anywhere; reading `/proc/net`, ioctls and line
disciplines need Linux.