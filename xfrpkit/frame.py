"""Stream multiplexing frames: an 8-byte header followed by payload."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

__all__ = ["Command", "Frame", "header_size"]

_SIZE_OF_VERSION = 1
_SIZE_OF_CMD = 1
_SIZE_OF_LENGTH = 2
_SIZE_OF_SID = 4

_VERSION_INDEX = 0
_CMD_INDEX = 1
_LENGTH_INDEX = 2
_SID_INDEX = 4

FRAME_VERSION = 1
CLIENT_VERSION = 1


class Command(IntEnum):
    """Frame commands."""

    SYN = 0  # stream open
    FIN = 1  # stream close, the EOF mark
    PSH = 2  # data push
    NOP = 3  # no operation


def header_size() -> int:
    """Return the size of a frame header in bytes."""
    return _SIZE_OF_VERSION + _SIZE_OF_CMD + _SIZE_OF_LENGTH + _SIZE_OF_SID


def _as_command(value: int) -> int:
    try:
        return Command(value)
    except ValueError:
        return value


@dataclass
class Frame:
    """A frame header together with the payload that follows it."""

    cmd: int
    sid: int
    version: int = FRAME_VERSION
    length: int = 0
    data: bytes | None = None

    @classmethod
    def parse(cls, buf: bytes) -> Frame:
        """Read a frame from ``buf``; the length field is taken as it stands.

        Raises ValueError when ``buf`` is shorter than a header.
        """
        raw = bytes(buf)
        size = header_size()
        if len(raw) < size:
            raise ValueError(f"frame needs at least {size} bytes, got {len(raw)}")
        (length,) = struct.unpack_from("<H", raw, _LENGTH_INDEX)
        (sid,) = struct.unpack_from(">I", raw, _SID_INDEX)
        return cls(
            cmd=_as_command(raw[_CMD_INDEX]),
            sid=sid,
            version=raw[_VERSION_INDEX],
            length=length,
            data=raw[size:] or None,
        )

    @classmethod
    def from_message(cls, data: bytes) -> Frame:
        """Wrap a bare message in a frame with command 0 and session 0."""
        payload = bytes(data)
        return cls(
            cmd=Command.SYN,
            sid=0,
            version=CLIENT_VERSION,
            length=len(payload) & 0xFFFF,
            data=payload,
        )