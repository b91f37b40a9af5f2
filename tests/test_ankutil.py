import socket

import pytest

from nettools.ankutil import (
    InetPrefix,
    InvalidArgument,
    format_host,
    get_addr,
    get_addr32,
    get_addr_1,
    get_integer,
    get_prefix,
    get_prefix_1,
    get_s16,
    get_s8,
    get_u16,
    get_u32,
    get_u8,
    get_unsigned,
    inet_addr_match,
    matches,
    scan_number,
)


@pytest.mark.parametrize("n", [0, 1, 7, 255, 4096, 0xFFFFFFFF])
def test_scan_number_round_trips_bases(n):
    assert scan_number(str(n)) == n
    assert scan_number(hex(n)) == n
    assert scan_number("0" + format(n, "o")) == n


@pytest.mark.parametrize("bad", ["", "abc", "12x", "0x", "4294967296", "-1", "1_0"])
def test_scan_number_rejects(bad):
    with pytest.raises(InvalidArgument):
        scan_number(bad)


def test_unsigned_limits():
    assert get_u8("255", 10) == 255
    assert get_u16("65535", 10) == 65535
    assert get_u32("4294967295", 10) == 4294967295
    assert get_unsigned("ff", 16) == 0xFF
    with pytest.raises(InvalidArgument):
        get_u8("256", 10)
    with pytest.raises(InvalidArgument):
        get_u16("65536", 10)


def test_signed_limits():
    assert get_s8("-128", 10) == -128
    assert get_s8("127", 10) == 127
    assert get_s16("-32768", 10) == -32768
    assert get_integer("-2147483648", 10) == -2147483648
    with pytest.raises(InvalidArgument):
        get_s8("128", 10)
    with pytest.raises(InvalidArgument):
        get_integer("2147483648", 10)


def test_ipv4_address():
    prefix = get_addr_1("192.168.1.2", socket.AF_INET)
    assert prefix.family == socket.AF_INET
    assert prefix.data == socket.inet_aton("192.168.1.2")
    assert prefix.bitlen == -1


def test_short_ipv4_pads_with_zero():
    assert get_addr_1("1.2.3", socket.AF_UNSPEC).data == bytes([1, 2, 3, 0])


@pytest.mark.parametrize("bad", ["1.2.3.4.5", "1.a", "10.0.0.1/8"])
def test_ipv4_address_rejects(bad):
    with pytest.raises(InvalidArgument):
        get_addr_1(bad, socket.AF_INET)


def test_ipv6_address():
    prefix = get_addr_1("fe80::1", socket.AF_UNSPEC)
    assert prefix.family == socket.AF_INET6
    assert prefix.data == socket.inet_pton(socket.AF_INET6, "fe80::1")


def test_ipv6_wrong_family():
    with pytest.raises(InvalidArgument):
        get_addr_1("::1", socket.AF_INET)


def test_default_address():
    prefix = get_addr_1("default", socket.AF_INET6)
    assert (prefix.bytelen, prefix.bitlen) == (16, -1)


def test_prefix_parsing():
    prefix = get_prefix_1("10.0.0.0/8", socket.AF_INET)
    assert prefix.bitlen == 8
    assert get_prefix_1("10.0.0.0", socket.AF_INET).bitlen == 32
    assert get_prefix_1("::/0", socket.AF_UNSPEC).bitlen == 0
    assert get_prefix_1("any", socket.AF_INET).bytelen == 0


def test_prefix_too_long():
    with pytest.raises(InvalidArgument):
        get_prefix_1("10.0.0.0/33", socket.AF_INET)


def test_get_addr_message():
    with pytest.raises(InvalidArgument, match="ip: bogus is invalid inet address"):
        get_addr("bogus", socket.AF_INET)


def test_get_prefix_message():
    with pytest.raises(InvalidArgument, match="ip: 1.2.3.4/40 is invalid inet prefix"):
        get_prefix("1.2.3.4/40", socket.AF_INET)


def test_get_addr32():
    assert get_addr32("10.0.0.1") == int.from_bytes(socket.inet_aton("10.0.0.1"), "big")
    with pytest.raises(InvalidArgument):
        get_addr32("::1")


def test_matches():
    assert matches("add", "address")
    assert matches("", "address")
    assert not matches("adx", "address")
    assert not matches("addresses", "address")


def test_inet_addr_match():
    a = get_addr_1("10.1.2.3", socket.AF_INET)
    b = get_addr_1("10.1.9.9", socket.AF_INET)
    assert inet_addr_match(a, b, 16)
    assert not inet_addr_match(a, b, 24)
    assert inet_addr_match(a, b, 0)
    assert inet_addr_match(a, a, 32)


def test_inet_addr_match_bad_bits():
    a = InetPrefix(socket.AF_INET, 4, 32, bytes(4))
    with pytest.raises(InvalidArgument):
        inet_addr_match(a, a, 129)


def test_format_host_round_trip():
    packed = socket.inet_aton("10.0.0.1")
    assert format_host(socket.AF_INET, packed) == "10.0.0.1"
    packed6 = socket.inet_pton(socket.AF_INET6, "fe80::1")
    assert format_host(socket.AF_INET6, packed6) == "fe80::1"
    with pytest.raises(InvalidArgument):
        format_host(socket.AF_INET, b"\x01")