"""TCP relaying and FTP passive-mode rewriting for proxied connections."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any

__all__ = [
    "IP_LEN",
    "Proxy",
    "FtpPasv",
    "DataProxyTarget",
    "pasv_unpack",
    "pasv_pack",
    "set_ftp_data_proxy_tunnel",
    "ftp_client_to_server",
    "tcp_relay",
]

IP_LEN = 16

_PASV_PACKET_LIMIT = 256
_PASV_PORT_BLOCK = 256
_PASV_CODE = 227
_RECOGNISED_CODES = (227, 211, 229)
_PORT_FIELD_LEN = 4
_RELAY_CHUNK = 65536
_C_SPACE = " \t\n\v\f\r"

log = logging.getLogger(__name__)


@dataclass
class Proxy:
    """One proxied connection: its partner's writer, name and FTP data port."""

    partner: Any = None
    proxy_name: str | None = None
    remote_data_port: int = -1


@dataclass
class FtpPasv:
    """The parts of an FTP passive-mode reply that the proxy rewrites."""

    code: int = -1
    server_ip: str = ""
    server_port: int = -1


@dataclass
class DataProxyTarget:
    """Where the data connection of an FTP proxy is forwarded."""

    name: str | None = None
    local_ip: str | None = None
    local_port: int = -1
    remote_port: int = -1


def _atoi(text: str) -> int:
    """Read a leading decimal integer the way the C library does; 0 if none."""
    stripped = text.lstrip(_C_SPACE)
    sign = 1
    if stripped[:1] in ("+", "-"):
        sign = -1 if stripped[0] == "-" else 1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if not "0" <= char <= "9":
            break
        digits += char
    return sign * int(digits) if digits else 0


def _as_text(data: bytes | bytearray | memoryview | str) -> str:
    text = data if isinstance(data, str) else bytes(data).decode("latin-1")
    return text.split("\0", 1)[0]


def pasv_unpack(data: bytes | str) -> FtpPasv | None:
    """Recognise a passive-mode reply.

    Returns None unless the reply code is 227, 211 or 229. Only a 227 reply
    has its address and port filled in.
    """
    text = _as_text(data)
    code = _atoi(text[:3])
    if code not in _RECOGNISED_CODES:
        return None

    pasv = FtpPasv(code=code)
    if code != _PASV_CODE:
        return pasv

    ip_chars: list[str] = []
    ports: tuple[list[str], list[str]] = ([], [])
    started = False
    commas = 0
    port_index = 0
    for char in text:
        if len(ip_chars) >= IP_LEN:
            break
        if char == "(":
            started = True
            continue
        if not started:
            continue
        if char == ")":
            break
        if char == ",":
            commas += 1
            port_index = 0
            if commas < 4:
                ip_chars.append(".")
            continue
        if commas >= 4 and port_index < _PORT_FIELD_LEN:
            if commas - 4 < len(ports):
                ports[commas - 4].append(char)
            port_index += 1
            continue
        ip_chars.append(char)

    pasv.server_ip = "".join(ip_chars)
    pasv.server_port = _atoi("".join(ports[0])) * _PASV_PORT_BLOCK + _atoi("".join(ports[1]))
    log.debug("ftp pasv unpack:[%s:%d]", pasv.server_ip, pasv.server_port)
    return pasv


def _c_divmod(value: int, divisor: int) -> tuple[int, int]:
    quotient = abs(value) // divisor
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * divisor


def pasv_pack(pasv: FtpPasv) -> bytes:
    """Build a 227 passive-mode reply; ValueError for any other code."""
    if pasv.code != _PASV_CODE:
        raise ValueError(f"ftp pasv reply code {pasv.code} is not supported")
    ip = pasv.server_ip[:IP_LEN].replace(".", ",")
    high, low = _c_divmod(pasv.server_port, _PASV_PORT_BLOCK)
    reply = f"227 Entering Passive Mode ({ip},{high},{low}).\n"
    return reply.encode("latin-1")[: _PASV_PACKET_LIMIT - 1]


def set_ftp_data_proxy_tunnel(
    services: MutableMapping[str, DataProxyTarget],
    ftp_proxy_name: str | None,
    local: FtpPasv,
    remote: FtpPasv,
) -> DataProxyTarget | None:
    """Point the data proxy belonging to ``ftp_proxy_name`` at the given ports.

    ``services`` maps each FTP proxy name to its data proxy. Returns the
    updated target, or None when there is none registered.
    """
    target = services.get(ftp_proxy_name) if ftp_proxy_name is not None else None
    if target is None:
        log.error("ftp data proxy for %r is not registered", ftp_proxy_name)
        return None
    target.local_port = local.server_port
    target.local_ip = local.server_ip
    target.remote_port = remote.server_port
    log.debug(
        "set ftp proxy DATA port [local:remote] = [%d:%d]",
        target.local_port,
        target.remote_port,
    )
    return target


def ftp_client_to_server(
    proxy: Proxy,
    data: bytes,
    server_ip: str | None,
    services: MutableMapping[str, DataProxyTarget],
) -> bytes:
    """Return what to forward to the server for ``data`` read from the FTP host.

    Passive-mode replies are rewritten to name the server and the proxy's
    remote data port, and the data tunnel is set up; other data passes
    unchanged. A reply that cannot be rewritten yields nothing. Raises
    ValueError when no server address is known.
    """
    raw = bytes(data)
    local = pasv_unpack(raw)
    if local is None:
        return raw

    if not server_ip:
        raise ValueError("FTP proxy without server ip")

    remote = FtpPasv(code=local.code, server_ip=server_ip[:IP_LEN], server_port=proxy.remote_data_port)
    if remote.server_port <= 0:
        log.error("remote ftp data port is not initialised")
        return b""

    try:
        reply = pasv_pack(remote)
    except ValueError as exc:
        log.error("ftp proxy replace failed: %s", exc)
        return b""

    set_ftp_data_proxy_tunnel(services, proxy.proxy_name, local, remote)
    return reply


async def tcp_relay(reader: Any, writer: Any) -> int:
    """Copy everything from ``reader`` to ``writer`` until end of stream.

    Returns the number of bytes relayed.
    """
    total = 0
    while True:
        chunk = await reader.read(_RELAY_CHUNK)
        if not chunk:
            return total
        writer.write(chunk)
        await writer.drain()
        total += len(chunk)