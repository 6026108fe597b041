from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import List, Tuple, Union

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class ScanTask:
    address: Address
    port: int


@dataclass(frozen=True)
class ScanResult:
    address: Address
    port: int

    def sort_key(self) -> Tuple[int, bytes, str, int]:
        # family first (IPv4 before IPv6), then raw address bytes, scope, port
        scope = getattr(self.address, "scope_id", None) or ""
        return (self.address.version, self.address.packed, scope, self.port)

    def __str__(self) -> str:
        return f"{self.address} - Port {self.port} is OPEN"


@dataclass
class ScanReport:
    results: List[ScanResult] = field(default_factory=list)
    total: int = 0
    dropped: int = 0
    workers: int = 0
    elapsed_s: float = 0.0
