"""
Hashing Utilities
Digest primitives and canonical leaf hashing.

This module provides:
- SHA-256 and BLAKE2b hashing for raw bytes
- Canonical hashing for objects (via dumps_canonical)
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from typing import Any, Iterable

from cbmt.schemas.canonical import dumps_canonical


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def blake2b(data: bytes, digest_size: int = 32, person: bytes = b"") -> bytes:
    """Compute a BLAKE2b digest with optional personalization."""
    return hashlib.blake2b(data, digest_size=digest_size, person=person).digest()


def hash_bytes(data: bytes) -> bytes:
    """Alias for sha256()."""
    return sha256(data)


def hash_concat(left: bytes, right: bytes) -> bytes:
    """sha256(left + right), the parent rule of Sha256Merge."""
    return sha256(left + right)


def hash_canonical(obj: Any) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: leaf = sha256(dumps_canonical(obj).encode("utf-8"))

    Raises:
        CanonicalizationException: If the object cannot be canonically serialized
    """
    return sha256(dumps_canonical(obj).encode("utf-8"))


def leaf_hashes(objects: Iterable[Any]) -> list[bytes]:
    """Canonical leaf hash of every object, preserving order."""
    return [hash_canonical(obj) for obj in objects]


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a 0x-prefixed hexadecimal string to bytes.

    Raises:
        ValueError: If the prefix is missing, the length is odd,
                   or the string contains non-hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]
    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "sha256",
    "blake2b",
    "hash_bytes",
    "hash_concat",
    "hash_canonical",
    "leaf_hashes",
    "to_hex",
    "from_hex",
]
