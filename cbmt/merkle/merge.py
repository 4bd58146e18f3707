"""
Merge Strategy Contract

The tree is generic over its node type. Everything it needs from that type
is supplied by a merge strategy:

- merge(left, right): derive a parent from its two children (order matters)
- default(): the root of a tree with no leaves
- sort_key(item): the total order used to arrange proof indices

Node equality is plain ``==``.

Ready-made strategies over byte digests (SHA-256, BLAKE2b) are provided,
selectable through runtime configuration.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from cbmt.config.runtime import RuntimeConfig
from cbmt.crypto.hashing import blake2b, hash_concat
from cbmt.schemas.errors import UnsupportedHashAlgorithm

T = TypeVar("T")


class Merge(ABC, Generic[T]):
    """
    Base class for merge strategies.

    Example:
        >>> class Concat(Merge[str]):
        ...     def merge(self, left, right):
        ...         return left + right
        ...     def default(self):
        ...         return ""
        >>> Concat().merge("a", "b")
        'ab'
    """

    @abstractmethod
    def merge(self, left: T, right: T) -> T:
        """Combine a left and a right child into their parent."""

    @abstractmethod
    def default(self) -> T:
        """Value used as the root of an empty tree."""

    def sort_key(self, item: T) -> Any:
        """Key ordering proof indices; the item's natural order by default."""
        return item

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Sha256Merge(Merge[bytes]):
    """parent = sha256(left || right); empty root is 32 zero bytes."""

    digest_size = 32

    def merge(self, left: bytes, right: bytes) -> bytes:
        return hash_concat(left, right)

    def default(self) -> bytes:
        return bytes(self.digest_size)


class Blake2bMerge(Merge[bytes]):
    """parent = blake2b(left || right) with optional personalization."""

    def __init__(self, digest_size: int = 32, person: bytes | str = b"") -> None:
        if isinstance(person, str):
            person = person.encode("utf-8")
        if not 1 <= digest_size <= 64:
            raise ValueError(f"blake2b digest size must be in [1, 64], got {digest_size}")
        if len(person) > 16:
            raise ValueError(f"blake2b personalization is at most 16 bytes, got {len(person)}")
        self.digest_size = digest_size
        self.person = person

    def merge(self, left: bytes, right: bytes) -> bytes:
        return blake2b(left + right, digest_size=self.digest_size, person=self.person)

    def default(self) -> bytes:
        return bytes(self.digest_size)

    def __repr__(self) -> str:
        return f"Blake2bMerge(digest_size={self.digest_size}, person={self.person!r})"


SUPPORTED_ALGORITHMS: tuple[str, ...] = ("sha256", "blake2b")


def get_merge(config: Optional[RuntimeConfig] = None) -> Merge[bytes]:
    """
    Digest merge strategy selected by runtime configuration.

    Args:
        config: Runtime configuration; loaded from the environment if omitted

    Raises:
        UnsupportedHashAlgorithm: If the configured algorithm is unknown
    """
    if config is None:
        config = RuntimeConfig.from_env()
    algorithm = config.hash.algorithm.lower()

    if algorithm == "sha256":
        return Sha256Merge()
    if algorithm == "blake2b":
        return Blake2bMerge(digest_size=config.hash.digest_size, person=config.hash.person)

    raise UnsupportedHashAlgorithm(algorithm, supported=list(SUPPORTED_ALGORITHMS))


__all__ = [
    "Merge",
    "Sha256Merge",
    "Blake2bMerge",
    "SUPPORTED_ALGORITHMS",
    "get_merge",
]
