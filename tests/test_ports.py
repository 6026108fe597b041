import pytest

from portprobe.errors import EmptyPortSet, InvalidArgument, InvalidPortRange
from portprobe.ports import COMMON_PORTS, parse_ports


def test_single_port():
    assert parse_ports("80") == [80]


def test_multiple_ports_are_sorted():
    assert parse_ports("80,443,22") == [22, 80, 443]


def test_port_range():
    assert parse_ports("80-82") == [80, 81, 82]


def test_mixed_input():
    assert parse_ports("22,80-82,443") == [22, 80, 81, 82, 443]


def test_duplicate_removal():
    assert parse_ports("80,80,443,80") == [80, 443]


def test_whitespace_and_empty_pieces():
    assert parse_ports(" 22 , 80 - 81,,443, ") == [22, 80, 81, 443]


def test_multiple_specs_are_unioned():
    assert parse_ports(["443", "22,443", "21-22"]) == [21, 22, 443]


def test_common_ports_alias():
    ports = parse_ports("common_ports")
    assert len(ports) == len(COMMON_PORTS) == 55
    assert 80 in ports


def test_common_ports_table_is_valid():
    assert len(set(COMMON_PORTS)) == len(COMMON_PORTS)
    assert all(1 <= p <= 65535 for p in COMMON_PORTS)
    for p in (22, 80, 443):
        assert p in COMMON_PORTS


def test_all_alias_covers_full_range():
    ports = parse_ports("all")
    assert len(ports) == 65535
    assert ports[0] == 1
    assert ports[-1] == 65535
    assert ports == list(range(1, 65536))


def test_alias_overlap_absorbed():
    ports = parse_ports(["all", "common_ports", "65535"])
    assert len(ports) == 65535


def test_range_ending_at_max_port():
    assert parse_ports("65533-65535") == [65533, 65534, 65535]


def test_output_strictly_ascending():
    ports = parse_ports("9000-9005,22,8080,common_ports,1-10,22")
    assert all(a < b for a, b in zip(ports, ports[1:]))


def test_inverted_range():
    with pytest.raises(InvalidPortRange):
        parse_ports("100-50")


@pytest.mark.parametrize("spec", [
    "abc", "0", "65536", "-1", "+80", "8_0", "1-2-3", "80-", "-80", "0-10", "1-70000",
    "9" * 5000, "1-" + "9" * 5000, "000080",
])
def test_invalid_tokens(spec):
    with pytest.raises(InvalidArgument):
        parse_ports(spec)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_ports("http")


@pytest.mark.parametrize("spec", ["", "  ", ",,", []])
def test_empty_spec(spec):
    with pytest.raises(EmptyPortSet):
        parse_ports(spec)
