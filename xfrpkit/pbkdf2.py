"""PBKDF2-HMAC key derivation over SHA-1, SHA-256 and SHA-512."""

from __future__ import annotations

import hashlib

__all__ = ["pbkdf2_hmac_sha1", "pbkdf2_hmac_sha256", "pbkdf2_hmac_sha512"]

_MAX_ITERATIONS = 0xFFFFFFFF

_DIGEST_SIZES = {
    "sha1": hashlib.sha1().digest_size,
    "sha256": hashlib.sha256().digest_size,
    "sha512": hashlib.sha512().digest_size,
}


def _derive(hash_name: str, password: bytes, salt: bytes, iterations: int, length: int) -> bytes:
    if isinstance(password, str) or isinstance(salt, str):
        raise TypeError("password and salt must be bytes-like, not str")
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise TypeError("iterations must be an integer")
    if isinstance(length, bool) or not isinstance(length, int):
        raise TypeError("length must be an integer")
    if not 1 <= iterations <= _MAX_ITERATIONS:
        raise ValueError("iterations must be between 1 and 2**32 - 1")
    if length < 1:
        raise ValueError("length must be positive")
    blocks = -(-length // _DIGEST_SIZES[hash_name])
    if blocks > _MAX_ITERATIONS:
        raise ValueError("requested length is too large")
    return hashlib.pbkdf2_hmac(hash_name, bytes(password), bytes(salt), iterations, length)


def pbkdf2_hmac_sha1(password: bytes, salt: bytes, iterations: int, length: int) -> bytes:
    """Derive ``length`` bytes with PBKDF2-HMAC-SHA1."""
    return _derive("sha1", password, salt, iterations, length)


def pbkdf2_hmac_sha256(password: bytes, salt: bytes, iterations: int, length: int) -> bytes:
    """Derive ``length`` bytes with PBKDF2-HMAC-SHA256."""
    return _derive("sha256", password, salt, iterations, length)


def pbkdf2_hmac_sha512(password: bytes, salt: bytes, iterations: int, length: int) -> bytes:
    """Derive ``length`` bytes with PBKDF2-HMAC-SHA512."""
    return _derive("sha512", password, salt, iterations, length)