import pytest

from nettools.families import (
    AF_IPX,
    AF_NETROM,
    AF_ROSE,
    AF_UNIX,
    AF_X25,
    AddressError,
    AddressFamily,
    IpxFamily,
    NetromFamily,
    RoseFamily,
    SockAddr,
    UnixFamily,
    UnspecFamily,
    X25Family,
    all_aftypes,
    get_afntype,
    get_aftype,
    register_aftype,
)


@pytest.mark.parametrize("name", ["unspec", "unix", "netrom", "rose", "ipx", "x25"])
def test_registry_lookup_by_name_and_number(name):
    family = get_aftype(name)
    assert family.name == name
    assert get_afntype(family.af) is family
    assert family in all_aftypes()


def test_unknown_family_is_none():
    assert get_aftype("nosuchfamily") is None


def test_register_adds_and_replaces():
    class Custom(AddressFamily):
        name = "testfamily"
        af = 4242

        def print_address(self, data):
            return data.hex()

    first = register_aftype(Custom())
    second = register_aftype(Custom())
    assert get_aftype("testfamily") is second
    assert first not in all_aftypes()
    assert sum(f.name == "testfamily" for f in all_aftypes()) == 1


@pytest.mark.parametrize("family", [0, 0xFFFF])
def test_unspec_none_set(family):
    assert UnspecFamily().sprint(SockAddr(family, b"abc")) == "[NONE SET]"


def test_unspec_print_round_trip():
    data = bytes(range(0xF0, 0x100))
    text = UnspecFamily().print_address(data)
    parts = text.split("-")
    assert len(parts) == 16
    assert bytes(int(p, 16) for p in parts) == data
    assert text == text.upper()


def test_unix_prints_path_up_to_nul():
    unix = UnixFamily()
    assert unix.print_address(b"/tmp/sock\0junk") == "/tmp/sock"
    assert unix.sprint(SockAddr(AF_UNIX, b"/run/x")) == "/run/x"


def test_unix_has_no_input():
    with pytest.raises(AddressError):
        UnixFamily().input_address(0, "/tmp/sock")


def test_ipx_full_round_trip():
    ipx = IpxFamily()
    addr = ipx.input_address(0, "0000ABCD:0A1B2C3D4E5F")
    assert addr.family == AF_IPX
    assert ipx.sprint(addr) == "0000ABCD:0A1B2C3D4E5F"


def test_ipx_network_only():
    ipx = IpxFamily()
    assert ipx.sprint(ipx.input_address(1, "abcd")) == "0000ABCD"


def test_ipx_node_only():
    ipx = IpxFamily()
    assert ipx.sprint(ipx.input_address(2, "0a1b2c3d4e5f")) == "0A1B2C3D4E5F"


def test_ipx_empty_address_prints_empty():
    assert IpxFamily().print_address(bytes(14)) == ""


def test_ipx_wrong_family_is_none_set():
    assert IpxFamily().sprint(SockAddr(0, bytes(14))) == "[NONE SET]"


@pytest.mark.parametrize(
    "kind, text",
    [
        (1, "0"),
        (1, "FFFFFFFF"),
        (1, "ABCD:1"),
        (0, "ABCD"),
        (0, "1:000000000000"),
        (0, "1:FFFFFFFFFFFF"),
        (0, "1:GG0000000000"),
        (0, "1:0A1B"),
    ],
)
def test_ipx_invalid(kind, text):
    with pytest.raises(AddressError):
        IpxFamily().input_address(kind, text)


@pytest.mark.parametrize("call", ["G4ABC-7", "N0CALL", "AB"])
def test_netrom_round_trip(call):
    netrom = NetromFamily()
    addr = netrom.input_address(0, call)
    assert addr.family == AF_NETROM
    assert len(addr.data) == 7
    assert netrom.sprint(addr) == call


def test_netrom_lowercase_equals_uppercase():
    netrom = NetromFamily()
    assert netrom.input_address(0, "g4abc-3") == netrom.input_address(0, "G4ABC-3")


@pytest.mark.parametrize("text", ["ABCDEFG", "AB#C", "a b"])
def test_netrom_invalid(text):
    with pytest.raises(AddressError):
        NetromFamily().input_address(0, text)


def test_rose_round_trip():
    rose = RoseFamily()
    addr = rose.input_address(0, "1234567890")
    assert addr.family == AF_ROSE
    assert len(addr.data) == 5
    assert rose.sprint(addr) == "1234567890"


def test_rose_prints_lower_hex():
    assert RoseFamily().print_address(bytes.fromhex("abcdef0123")) == "abcdef0123"


@pytest.mark.parametrize("text", ["123", "12345678901", ""])
def test_rose_wrong_length(text):
    with pytest.raises(AddressError):
        RoseFamily().input_address(0, text)


def test_rose_none_set():
    assert RoseFamily().sprint(SockAddr(0xFFFF, bytes(5))) == "[NONE SET]"


def test_x25_full_address():
    x25 = X25Family()
    addr = x25.input_address(0, "1234567")
    assert addr.family == AF_X25
    assert addr.prefix == 7
    assert len(addr.data) == 16
    assert x25.sprint(addr) == "1234567"


def test_x25_sigdigits():
    x25 = X25Family()
    addr = x25.input_address(0, "12345/3")
    assert addr.prefix == 3
    assert x25.sprint(addr) == "1234"


@pytest.mark.parametrize(
    "text", ["1234567890123456789", "1234567890123456", "123/5", "", "/2"]
)
def test_x25_invalid(text):
    with pytest.raises(AddressError):
        X25Family().input_address(0, text)


def test_x25_none_set():
    assert X25Family().sprint(SockAddr(0, bytes(16))) == "[NONE SET]"