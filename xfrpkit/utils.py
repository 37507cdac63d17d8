"""Network helpers: interface discovery, address checks and simple HTTP visits."""

from __future__ import annotations

import http.client
import socket
import sys
import time
import urllib.error
import urllib.request
from dataclasses import dataclass
from enum import IntEnum

import psutil

__all__ = [
    "HttpMethod",
    "NetVisitError",
    "NetVisitResult",
    "STATE_OK",
    "STATE_TIMEOUT_SET_ERR",
    "STATE_HTTP_200",
    "STATE_HTTP_404",
    "STATE_HTTP_OTHER",
    "s_sleep",
    "is_valid_ip_address",
    "dns_unified",
    "get_net_ifname",
    "get_net_mac",
    "show_net_ifname",
    "net_visit",
]

STATE_OK = 0x900
STATE_TIMEOUT_SET_ERR = 0x901
STATE_HTTP_200 = 0x905
STATE_HTTP_404 = 0x906
STATE_HTTP_OTHER = 0x999

_ROUTER_IFNAME = "br-lan"
_LOOPBACK_IFNAME = "lo"
_CONNECT_TIMEOUT = 30
_EMPTY_POST_BODY = "/0"
_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


class HttpMethod(IntEnum):
    """HTTP methods supported by :func:`net_visit`."""

    GET = 0
    POST = 1


class NetVisitError(Exception):
    """Raised when a URL could not be fetched; ``state_code`` tells why."""

    def __init__(self, state_code: int, message: str) -> None:
        super().__init__(message)
        self.state_code = state_code


@dataclass(frozen=True)
class NetVisitResult:
    """Body and status of a completed HTTP exchange."""

    body: bytes
    status: int
    content_length: float = -1.0


def s_sleep(seconds: int, microseconds: int = 0) -> None:
    """Sleep for ``seconds`` plus ``microseconds``."""
    if seconds < 0 or microseconds < 0:
        raise ValueError("sleep time must not be negative")
    time.sleep(seconds + microseconds / 1_000_000)


def is_valid_ip_address(address: str) -> bool:
    """Return True when ``address`` is a dotted IPv4 address."""
    try:
        socket.inet_pton(socket.AF_INET, address)
    except (OSError, ValueError, TypeError):
        return False
    return True


def dns_unified(name: str) -> str:
    """Lower-case a domain name, dropping everything from the first '/'.

    Raises ValueError when the part kept holds no dot other than a final one.
    """
    if not name:
        raise ValueError("domain name is empty")
    host, _, _ = name.partition("/")
    last = len(name) - 1
    has_dot = any(char == "." and index != last for index, char in enumerate(host))
    if not has_dot:
        raise ValueError(f"invalid domain name: {name!r}")
    return host.translate(_ASCII_LOWER)


def get_net_ifname() -> str:
    """Pick the interface that identifies this device.

    ``br-lan`` with an IPv4 address wins; otherwise the last link-layer
    interface with traffic counters that is not the loopback. Raises OSError
    when there is none.
    """
    counters = psutil.net_io_counters(pernic=True)
    candidate = ""
    for ifname, addresses in psutil.net_if_addrs().items():
        for addr in addresses:
            if addr.family == socket.AF_INET:
                if ifname == _ROUTER_IFNAME:
                    return ifname
            elif addr.family == psutil.AF_LINK and ifname in counters and ifname != _LOOPBACK_IFNAME:
                candidate = ifname
    if not candidate:
        raise OSError("no usable network interface found")
    return candidate


def get_net_mac(ifname: str) -> str:
    """Return the hardware address of ``ifname`` as 12 upper-case hex digits."""
    if not ifname:
        raise ValueError("interface name is required")
    addresses = psutil.net_if_addrs().get(ifname)
    if addresses is None:
        raise OSError(f"no such network interface: {ifname}")
    for addr in addresses:
        if addr.family != psutil.AF_LINK or not addr.address:
            continue
        digits = addr.address.replace(":", "").replace("-", "")
        try:
            raw = bytes.fromhex(digits)
        except ValueError:
            continue
        if len(raw) >= 6:
            return raw[:6].hex().upper()
    raise OSError(f"hardware address of {ifname} not available")


def _family_label(family: int) -> str:
    if family == psutil.AF_LINK:
        return "AF_PACKET"
    if family == socket.AF_INET:
        return "AF_INET"
    if family == socket.AF_INET6:
        return "AF_INET6"
    return "???"


def show_net_ifname() -> None:
    """Print every interface address and link-layer traffic counters."""
    counters = psutil.net_io_counters(pernic=True)
    out = sys.stdout
    for ifname, addresses in psutil.net_if_addrs().items():
        for addr in addresses:
            family = int(addr.family)
            out.write(f"{ifname:<8} {_family_label(family)} ({family})\n")
            if family in (socket.AF_INET, socket.AF_INET6):
                out.write(f"\t\taddress: <{addr.address}>\n")
            elif family == psutil.AF_LINK and ifname in counters:
                stats = counters[ifname]
                out.write(
                    f"\t\ttx_packets = {stats.packets_sent:10d}; rx_packets = {stats.packets_recv:10d}\n"
                    f"\t\ttx_bytes   = {stats.bytes_sent:10d}; rx_bytes   = {stats.bytes_recv:10d}\n"
                )


def _content_length(headers) -> float:
    value = headers.get("Content-Length") if headers is not None else None
    try:
        return float(value)
    except (TypeError, ValueError):
        return -1.0


def net_visit(
    url: str,
    method: HttpMethod = HttpMethod.GET,
    post_data: str | bytes | None = None,
    timeout: float = 60,
) -> NetVisitResult:
    """Fetch ``url`` with GET or POST, following redirects.

    Any HTTP status counts as a completed exchange. Raises NetVisitError when
    the timeout is not positive or the transfer itself fails.
    """
    if timeout <= 0:
        raise NetVisitError(STATE_TIMEOUT_SET_ERR, "timeout must be positive")

    data = None
    if method == HttpMethod.POST:
        body = _EMPTY_POST_BODY if post_data is None else post_data
        data = body.encode() if isinstance(body, str) else bytes(body)

    try:
        request = urllib.request.Request(
            url, data=data, method="POST" if method == HttpMethod.POST else "GET"
        )
        with urllib.request.urlopen(request, timeout=min(timeout, _CONNECT_TIMEOUT) if data is None and False else timeout) as response:
            return NetVisitResult(
                body=response.read(),
                status=response.status,
                content_length=_content_length(response.headers),
            )
    except urllib.error.HTTPError as exc:
        with exc:
            return NetVisitResult(
                body=exc.read(),
                status=exc.code,
                content_length=_content_length(exc.headers),
            )
    except (urllib.error.URLError, OSError, ValueError, http.client.HTTPException) as exc:
        raise NetVisitError(STATE_HTTP_OTHER, f"failed to visit {url}: {exc}") from exc