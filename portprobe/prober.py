from __future__ import annotations

import enum
import errno
import ipaddress
import logging
import select
import socket
from typing import Tuple, Union

from .models import Address

log = logging.getLogger(__name__)

# connect_ex() codes meaning "handshake still in flight"
_IN_PROGRESS = {
    errno.EINPROGRESS,
    errno.EWOULDBLOCK,
    errno.EAGAIN,
    errno.EALREADY,
    getattr(errno, "WSAEWOULDBLOCK", errno.EWOULDBLOCK),
}

_UNREACHABLE = {
    errno.ENETUNREACH,
    errno.EHOSTUNREACH,
    getattr(errno, "EHOSTDOWN", errno.EHOSTUNREACH),
    getattr(errno, "ENETDOWN", errno.ENETUNREACH),
}

# largest wait poll() accepts
_MAX_WAIT_MS = 2**31 - 1

_POLL_ERROR_FLAGS = (
    getattr(select, "POLLERR", 0)
    | getattr(select, "POLLHUP", 0)
    | getattr(select, "POLLNVAL", 0)
)


class ProbeOutcome(enum.Enum):
    OPEN = "open"
    REFUSED = "refused"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    ERROR = "error"

    @property
    def is_open(self) -> bool:
        return self is ProbeOutcome.OPEN


def classify_errno(code: int) -> ProbeOutcome:
    """Map a failed connect's errno to a non-open outcome."""
    if code == errno.ECONNREFUSED:
        return ProbeOutcome.REFUSED
    if code == errno.ETIMEDOUT:
        return ProbeOutcome.TIMEOUT
    if code in _UNREACHABLE:
        return ProbeOutcome.UNREACHABLE
    return ProbeOutcome.ERROR


def _as_address(address: Union[Address, str]) -> Address:
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return address
    return ipaddress.ip_address(address)


def _scope_index(address: ipaddress.IPv6Address) -> int:
    scope = getattr(address, "scope_id", None)
    if not scope:
        return 0
    if scope.isdigit():
        return int(scope)
    return socket.if_nametoindex(scope)


def _sockaddr(address: Address, port: int) -> Tuple:
    if address.version == 6:
        host = str(address).split("%", 1)[0]
        return (host, port, 0, _scope_index(address))
    return (str(address), port)


def _socket_error(sock: socket.socket) -> int:
    return sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)


def _wait_poll(sock: socket.socket, timeout_ms: int) -> ProbeOutcome:
    poller = select.poll()
    poller.register(sock, select.POLLOUT)
    events = poller.poll(timeout_ms)
    if not events:
        return ProbeOutcome.TIMEOUT

    revents = events[0][1]
    if revents & _POLL_ERROR_FLAGS or not revents & select.POLLOUT:
        # writable-with-error still counts as a failed handshake
        return classify_errno(_socket_error(sock))

    err = _socket_error(sock)
    if err:
        return classify_errno(err)
    return ProbeOutcome.OPEN


def _wait_select(sock: socket.socket, timeout_ms: int) -> ProbeOutcome:
    # Windows reports a failed async connect in the exceptional set
    _, writable, failed = select.select([], [sock], [sock], timeout_ms / 1000.0)
    if not writable and not failed:
        return ProbeOutcome.TIMEOUT
    err = _socket_error(sock)
    if failed or err:
        return classify_errno(err)
    return ProbeOutcome.OPEN


def _await_connect(sock: socket.socket, timeout_ms: int) -> ProbeOutcome:
    timeout_ms = min(timeout_ms, _MAX_WAIT_MS)
    if hasattr(select, "poll"):
        return _wait_poll(sock, timeout_ms)
    return _wait_select(sock, timeout_ms)


def probe_outcome(address: Union[Address, str], port: int, timeout_ms: int) -> ProbeOutcome:
    """
    Non-blocking TCP connect to (address, port), bounded by timeout_ms.

    immediate success -> OPEN
    immediate failure -> REFUSED / UNREACHABLE / ERROR
    pending           -> wait for writability:
                         ready clean -> OPEN, ready with error -> failure,
                         nothing within timeout_ms -> TIMEOUT

    A timeout of 0 only accepts an immediate success.
    """
    addr = _as_address(address)
    family = socket.AF_INET6 if addr.version == 6 else socket.AF_INET

    try:
        sock = socket.socket(family, socket.SOCK_STREAM, socket.IPPROTO_TCP)
    except OSError as e:
        log.debug("socket() failed for %s:%d: %s", addr, port, e)
        return ProbeOutcome.ERROR

    with sock:
        try:
            sock.setblocking(False)
            code = sock.connect_ex(_sockaddr(addr, port))
            if code == 0:
                return ProbeOutcome.OPEN
            if code not in _IN_PROGRESS:
                return classify_errno(code)
            if timeout_ms <= 0:
                return ProbeOutcome.TIMEOUT
            return _await_connect(sock, timeout_ms)
        except OSError as e:
            log.debug("connect to %s:%d failed: %s", addr, port, e)
            return ProbeOutcome.ERROR


def probe(address: Union[Address, str], port: int, timeout_ms: int) -> bool:
    """True when (address, port) accepted a TCP connection within timeout_ms."""
    outcome = probe_outcome(address, port, timeout_ms)
    log.debug("%s:%d -> %s", address, port, outcome.value)
    return outcome.is_open
