from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Iterable, List, Union

from .errors import InvalidArgument, NoTargets
from .models import Address

log = logging.getLogger(__name__)

# CIDR targets larger than this are refused before expansion
MAX_NETWORK_ADDRESSES = 65536


def _resolve_name(name: str) -> List[Address]:
    infos = socket.getaddrinfo(name, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    out: List[Address] = []
    for family, _, _, _, sockaddr in infos:
        if family not in (socket.AF_INET, socket.AF_INET6):
            continue
        host = sockaddr[0]
        # link-local scope comes back separately in sockaddr[3]
        if family == socket.AF_INET6 and sockaddr[3] and "%" not in host:
            host = f"{host}%{sockaddr[3]}"
        out.append(ipaddress.ip_address(host))
    return out


def expand_target(target: str) -> List[Address]:
    """
    Supports:
      - Single IP: "172.20.0.10", "::1"
      - CIDR: "172.20.0.0/24"
      - Hostname: "webapp" (every IPv4/IPv6 address it resolves to)
    """
    target = target.strip()
    if not target:
        raise InvalidArgument("Empty target")

    # Try IP or CIDR first
    try:
        return [ipaddress.ip_address(target)]
    except ValueError:
        pass

    try:
        net = ipaddress.ip_network(target, strict=False)
    except ValueError:
        net = None

    if net is not None:
        if net.num_addresses > MAX_NETWORK_ADDRESSES:
            raise InvalidArgument(
                f"Network {net} has {net.num_addresses} addresses (limit {MAX_NETWORK_ADDRESSES})"
            )
        # hosts() excludes network + broadcast (good for /24 style)
        hosts = list(net.hosts())
        if not hosts and net.num_addresses == 1:
            hosts = [net.network_address]
        return hosts

    return _resolve_name(target)


def resolve_targets(targets: Union[str, Iterable[str]]) -> List[Address]:
    """Resolve every target, skipping the ones that fail; raises NoTargets if none survive."""
    if isinstance(targets, str):
        targets = [targets]

    seen = set()
    addrs: List[Address] = []
    for t in targets:
        try:
            resolved = expand_target(t)
        except (socket.gaierror, UnicodeError) as e:
            log.warning("Failed to resolve host address '%s': %s", t, e)
            continue
        for a in resolved:
            if a not in seen:
                seen.add(a)
                addrs.append(a)

    if not addrs:
        raise NoTargets("No valid targets found")
    return addrs
