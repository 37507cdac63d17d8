"""Allocation of client stream session ids."""

from __future__ import annotations

__all__ = ["SessionIdAllocator"]

_CLIENT_BASE = 1
_STEP = 2
_MASK = 0xFFFFFFFF


class SessionIdAllocator:
    """Hands out odd session ids starting from 3, stepping by 2."""

    def __init__(self) -> None:
        self._index: int | None = None

    def _advance(self) -> int:
        if self._index is None:
            self._index = _CLIENT_BASE
        self._index = (self._index + _STEP) & _MASK
        return self._index

    def current(self) -> int:
        """Return the latest id, allocating the first one if none exists yet."""
        if self._index is None:
            return self._advance()
        return self._index

    def new_sid(self) -> int:
        """Allocate and return the next session id."""
        return self._advance()