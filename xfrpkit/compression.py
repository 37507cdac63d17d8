"""Whole-buffer zlib compression helpers."""

from __future__ import annotations

import zlib

__all__ = ["CompressionError", "deflate_write", "inflate_read"]

_WINDOW_BITS = 15
_GZIP_ENCODING = 16
_MEM_LEVEL = 8


class CompressionError(Exception):
    """Raised when data cannot be compressed or decompressed."""


def deflate_write(data: bytes, gzip: bool = False) -> bytes:
    """Compress ``data`` into a zlib stream, or a gzip stream when ``gzip``."""
    wbits = _WINDOW_BITS | _GZIP_ENCODING if gzip else _WINDOW_BITS
    try:
        compressor = zlib.compressobj(
            zlib.Z_DEFAULT_COMPRESSION,
            zlib.DEFLATED,
            wbits,
            _MEM_LEVEL,
            zlib.Z_DEFAULT_STRATEGY,
        )
        return compressor.compress(bytes(data)) + compressor.flush(zlib.Z_FINISH)
    except zlib.error as exc:
        raise CompressionError(str(exc)) from exc


def inflate_read(data: bytes, gzip: bool = False) -> bytes:
    """Decompress a zlib stream, or a raw deflate stream when ``gzip``.

    Raises CompressionError on corrupt or incomplete input.
    """
    wbits = -_WINDOW_BITS if gzip else _WINDOW_BITS
    decompressor = zlib.decompressobj(wbits)
    try:
        output = decompressor.decompress(bytes(data))
    except zlib.error as exc:
        raise CompressionError(str(exc)) from exc
    if not decompressor.eof:
        raise CompressionError("compressed stream is incomplete")
    return output