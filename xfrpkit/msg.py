"""Control messages: JSON bodies and the type/length wire envelope."""

from __future__ import annotations

import hashlib
import json
import struct
import time
from dataclasses import dataclass
from enum import Enum

from .login import Login, LoginResponse
from .utils import dns_unified

__all__ = [
    "MessageType",
    "Message",
    "ProxyServiceRequest",
    "ControlResponse",
    "StartWorkConnResponse",
    "MessageError",
    "calc_md5",
    "get_auth_key",
    "msg_type_valid_check",
    "login_request_marshal",
    "new_proxy_service_marshal",
    "new_work_conn_marshal",
    "login_resp_unmarshal",
    "start_work_conn_resp_unmarshal",
    "control_response_unmarshal",
    "pack",
    "unpack",
]

_TYPE_LEN = 1
_LENGTH_FORMAT = ">I"
_HEADER_LEN = _TYPE_LEN + struct.calcsize(_LENGTH_FORMAT)
_SEED_LIMIT = 127
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_FTP_PROXY_TYPE = "ftp"
_ASCII_LOWER = str.maketrans("ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz")


class MessageError(ValueError):
    """Raised when a message cannot be decoded."""


class MessageType(str, Enum):
    """Control message types, each carried as a single byte."""

    LOGIN = "o"
    LOGIN_RESP = "1"
    NEW_PROXY = "p"
    NEW_PROXY_RESP = "2"
    NEW_WORK_CONN = "w"
    REQ_WORK_CONN = "r"
    START_WORK_CONN = "s"
    PING = "h"
    PONG = "4"
    UDP_PACKET = "u"


@dataclass
class Message:
    """A typed control message with its raw body."""

    type: MessageType
    data: bytes = b""


@dataclass
class ProxyServiceRequest:
    """The description of a proxy the client asks the server to open."""

    proxy_name: str
    proxy_type: str = "tcp"
    use_encryption: bool = False
    use_compression: bool = False
    remote_port: int = -1
    remote_data_port: int = -1
    custom_domains: str | None = None
    subdomain: str | None = None
    locations: str | None = None
    host_header_rewrite: str | None = None
    http_user: str | None = None
    http_pwd: str | None = None

    @property
    def is_ftp(self) -> bool:
        """True for an FTP proxy, which also carries a data port."""
        return self.proxy_type == _FTP_PROXY_TYPE


@dataclass
class ControlResponse:
    """A generic response on the control connection."""

    type: int = 0
    code: int = 0
    msg: str | None = None


@dataclass
class StartWorkConnResponse:
    """The server's notice that a work connection belongs to a proxy."""

    proxy_name: str | None = None


def calc_md5(data: bytes | str) -> str:
    """Return the lower-case hex MD5 digest of ``data``."""
    raw = data.encode() if isinstance(data, str) else bytes(data)
    return hashlib.md5(raw).hexdigest()


def get_auth_key(token: str | None, timestamp: int | None = None) -> str:
    """Return the MD5 of the token followed by the timestamp.

    The current time is used when ``timestamp`` is None.
    """
    if timestamp is None:
        timestamp = int(time.time())
    seed = f"{token or ''}{timestamp}".encode()[:_SEED_LIMIT]
    return calc_md5(seed)


def _type_char(msg_type: MessageType | str | int) -> str | None:
    if isinstance(msg_type, MessageType):
        return msg_type.value
    if isinstance(msg_type, int) and not isinstance(msg_type, bool):
        return chr(msg_type) if 0 <= msg_type < 256 else None
    if isinstance(msg_type, str) and len(msg_type) == 1:
        return msg_type
    return None


def msg_type_valid_check(msg_type: MessageType | str | int) -> bool:
    """Return True when ``msg_type`` names a known message type."""
    char = _type_char(msg_type)
    return char is not None and char in MessageType._value2member_map_


def _dumps(obj: dict) -> str:
    return json.dumps(obj, ensure_ascii=False)


def login_request_marshal(login: Login, privilege_token: str | None = None) -> str:
    """Stamp ``login`` with a fresh time and key, and return it as JSON."""
    auth_key = get_auth_key(privilege_token, int(time.time()))
    login.timestamp = int(time.time()) if False else _last_stamp(privilege_token, auth_key)
    login.privilege_key = auth_key
    return _dumps(
        {
            "version": login.version,
            "hostname": login.hostname or "",
            "os": login.os,
            "arch": login.arch,
            "user": login.user or "",
            "privilege_key": login.privilege_key or "",
            "timestamp": login.timestamp,
            "run_id": login.run_id or "",
            "pool_count": login.pool_count,
        }
    )


def _last_stamp(token: str | None, auth_key: str) -> int:
    """Recover the timestamp that produced ``auth_key`` near the current time."""
    now = int(time.time())
    for stamp in (now, now - 1, now - 2):
        if get_auth_key(token, stamp) == auth_key:
            return stamp
    return now


def _unify_domain(name: str) -> str:
    try:
        return dns_unified(name)
    except ValueError:
        # Names without a dot are still sent, lower-cased up to the first '/'.
        return name.partition("/")[0].translate(_ASCII_LOWER)


def new_proxy_service_marshal(request: ProxyServiceRequest) -> str:
    """Return the JSON body of a new-proxy request."""
    body: dict = {
        "proxy_name": request.proxy_name,
        "proxy_type": request.proxy_type,
        "use_encryption": bool(request.use_encryption),
        "use_compression": bool(request.use_compression),
    }
    if request.is_ftp:
        body["remote_data_port"] = request.remote_data_port

    if request.custom_domains is not None:
        body["custom_domains"] = [_unify_domain(tok) for tok in request.custom_domains.split(",")]
        body["remote_port"] = None
    else:
        body["custom_domains"] = None
        body["remote_port"] = request.remote_port if request.remote_port != -1 else None

    body["subdomain"] = request.subdomain or ""
    # Locations are announced only as present; their contents are not sent.
    body["locations"] = [] if request.locations else None
    body["host_header_rewrite"] = request.host_header_rewrite or ""
    body["http_user"] = request.http_user or ""
    body["http_pwd"] = request.http_pwd or ""
    return _dumps(body)


def new_work_conn_marshal(run_id: str | None) -> str:
    """Return the JSON body of a new-work-connection message."""
    return _dumps({"run_id": run_id or ""})


def _parse_object(text: str | bytes) -> dict:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
        raise MessageError(f"invalid JSON message: {exc}") from exc
    return value if isinstance(value, dict) else {}


def _as_string(value: object) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def _as_int(value: object) -> int:
    if isinstance(value, bool):
        result = int(value)
    elif isinstance(value, int):
        result = value
    elif isinstance(value, float):
        result = int(value) if value == value and abs(value) != float("inf") else 0
    elif isinstance(value, str):
        try:
            result = int(value.strip())
        except ValueError:
            result = 0
    else:
        result = 0
    return max(_INT32_MIN, min(_INT32_MAX, result))


def login_resp_unmarshal(text: str | bytes) -> LoginResponse:
    """Decode a login response; fields after the first missing one stay None."""
    obj = _parse_object(text)
    response = LoginResponse()
    for field in ("version", "run_id", "error"):
        if field not in obj:
            break
        setattr(response, field, _as_string(obj[field]))
    return response


def start_work_conn_resp_unmarshal(text: str | bytes) -> StartWorkConnResponse:
    """Decode a start-work-connection message."""
    obj = _parse_object(text)
    return StartWorkConnResponse(proxy_name=_as_string(obj.get("proxy_name")))


def control_response_unmarshal(text: str | bytes) -> ControlResponse:
    """Decode a control response; a missing type or code stops decoding."""
    obj = _parse_object(text)
    response = ControlResponse()
    if "type" not in obj:
        return response
    response.type = _as_int(obj["type"])
    if "code" not in obj:
        return response
    response.code = _as_int(obj["code"])
    if "msg" in obj:
        response.msg = _as_string(obj["msg"])
    return response


def pack(message: Message) -> bytes:
    """Encode ``message`` as type byte, big-endian 32-bit length and body."""
    char = _type_char(message.type)
    if char is None or ord(char) > 0xFF:
        raise MessageError(f"message type cannot be encoded: {message.type!r}")
    data = bytes(message.data)
    return bytes([ord(char)]) + struct.pack(_LENGTH_FORMAT, len(data)) + data


def unpack(data: bytes) -> Message:
    """Decode one message from the start of ``data``.

    Raises MessageError for an unknown type or a truncated message.
    """
    raw = bytes(data)
    if len(raw) < _HEADER_LEN:
        raise MessageError(f"message needs at least {_HEADER_LEN} bytes, got {len(raw)}")
    char = chr(raw[0])
    if not msg_type_valid_check(char):
        raise MessageError(f"received message type is invalid: {char!r}")
    (length,) = struct.unpack_from(_LENGTH_FORMAT, raw, _TYPE_LEN)
    body = raw[_HEADER_LEN : _HEADER_LEN + length]
    if len(body) < length:
        raise MessageError(f"message body truncated: expected {length} bytes, got {len(body)}")
    return Message(type=MessageType(char), data=body)