"""
Core cryptographic utilities.

Digest primitives used by the ready-made merge strategies and
canonical leaf hashing for arbitrary objects.
"""
from .hashing import (
    blake2b,
    from_hex,
    hash_bytes,
    hash_canonical,
    hash_concat,
    leaf_hashes,
    sha256,
    to_hex,
)

__all__ = [
    "sha256",
    "blake2b",
    "hash_bytes",
    "hash_canonical",
    "hash_concat",
    "leaf_hashes",
    "to_hex",
    "from_hex",
]
