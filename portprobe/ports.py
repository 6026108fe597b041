from __future__ import annotations

import re
from typing import Iterable, List, Set, Union

from .errors import EmptyPortSet, InvalidArgument, InvalidPortRange

MIN_PORT = 1
MAX_PORT = 65535

COMMON_PORTS_ALIAS = "common_ports"
ALL_PORTS_ALIAS = "all"

COMMON_PORTS = (
    20, 21, 22, 23, 53, 67, 68, 69, 80, 88, 110, 123, 135, 137, 138, 139,
    143, 161, 162, 179, 194, 389, 443, 445, 464, 514, 515, 587, 636, 993, 995,
    1433, 1434, 1521, 1723, 2049, 2083, 3128, 3306, 3268, 3269, 3389, 5432,
    5900, 5985, 5986, 6379, 8080, 8443, 9090, 9200, 9389, 10000, 27017, 49443,
)

_DIGITS = re.compile(r"[0-9]+")


def _to_port(s: str, token: str) -> int:
    if not _DIGITS.fullmatch(s) or len(s) > 5:
        raise InvalidArgument(f"Invalid port '{s}' in '{token}'")
    p = int(s)
    if p < MIN_PORT or p > MAX_PORT:
        raise InvalidArgument(f"Port out of range (1-65535): {p}")
    return p


def _expand(token: str) -> Iterable[int]:
    if token == COMMON_PORTS_ALIAS:
        return COMMON_PORTS
    if token == ALL_PORTS_ALIAS:
        return range(MIN_PORT, MAX_PORT + 1)
    if "-" in token:
        start_s, end_s = token.split("-", 1)
        start = _to_port(start_s.strip(), token)
        end = _to_port(end_s.strip(), token)
        if start > end:
            raise InvalidPortRange(f"Invalid port range: {token}")
        return range(start, end + 1)
    return (_to_port(token, token),)


def parse_ports(specs: Union[str, Iterable[str]]) -> List[int]:
    """
    Parses port specifications into a sorted list of unique ports.
    Supports:
    - Single ports: "80"
    - Ranges: "1-1024"
    - Comma-separated: "22,80,443"
    - Aliases: "common_ports", "all"
    - Mixed: "1-1024,8080,common_ports"

    Accepts a single spec string or several (e.g. one per -p flag).
    """
    if isinstance(specs, str):
        specs = [specs]

    ports: Set[int] = set()
    for spec in specs:
        for part in spec.split(","):
            part = part.strip()
            if not part:
                continue
            ports.update(_expand(part))

    if not ports:
        raise EmptyPortSet("Empty port spec")

    # Ascending order drives scan sequencing
    return sorted(ports)
