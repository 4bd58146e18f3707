"""
Merkle Proofs Convenience Wrappers
Thin class-based wrappers around the tree functions.

This module provides:
- MerkleProver: Generate proofs and roots from digests or raw objects
- MerkleVerifier: Verify proofs against digests, raw objects or records

Raw objects are turned into leaves with canonical hashing, so the
default merge strategy here is always a digest strategy.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence

from cbmt.crypto.hashing import hash_canonical, leaf_hashes
from cbmt.merkle.merge import Merge, get_merge
from cbmt.merkle.merkle_proof import MerkleProof
from cbmt.merkle.merkle_tree import CBMT
from cbmt.schemas.errors import CanonicalizationException

if TYPE_CHECKING:
    from cbmt.schemas.proof import MerkleProofRecord


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> leaves = [sha256(b"a"), sha256(b"b"), sha256(b"c")]
        >>> proof = MerkleProver.prove(leaves, [1])
        >>> proof.indices
        (3,)
    """

    @staticmethod
    def prove(
        leaves: Sequence[bytes],
        indices: Iterable[int],
        merge: Optional[Merge[bytes]] = None,
    ) -> MerkleProof[bytes]:
        """
        Generate a proof for the leaves at the given positions.

        Raises:
            EmptyProofInput: If no positions are given
            EmptyTree: If leaves is empty
            IndexOutOfRange: If a position is out of range
        """
        return CBMT(merge or get_merge()).build_proof(leaves, indices)

    @staticmethod
    def prove_objects(
        objects: Sequence[Any],
        indices: Iterable[int],
        merge: Optional[Merge[bytes]] = None,
    ) -> MerkleProof[bytes]:
        """Canonically hash each object, then prove the given positions."""
        return MerkleProver.prove(leaf_hashes(objects), indices, merge)

    @staticmethod
    def compute_root(leaves: Sequence[bytes], merge: Optional[Merge[bytes]] = None) -> bytes:
        return CBMT(merge or get_merge()).build_root(leaves)

    @staticmethod
    def compute_root_from_objects(
        objects: Sequence[Any],
        merge: Optional[Merge[bytes]] = None,
    ) -> bytes:
        return MerkleProver.compute_root(leaf_hashes(objects), merge)


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove(leaves, [1, 2])
        >>> MerkleVerifier.verify(proof, [leaves[1], leaves[2]], root)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof[bytes], leaves: Sequence[bytes], root: bytes) -> bool:
        """
        Verify a proof.

        Args:
            proof: Proof to check
            leaves: Claimed leaf digests, in the order of proof.indices
            root: Claimed root

        Returns:
            True if the proof is valid, False otherwise
        """
        return proof.verify(leaves, root)

    @staticmethod
    def verify_objects(proof: MerkleProof[bytes], objects: Sequence[Any], root: bytes) -> bool:
        """Verify raw objects; each is canonically hashed to its leaf first."""
        try:
            leaves = [hash_canonical(obj) for obj in objects]
        except CanonicalizationException:
            return False
        return proof.verify(leaves, root)

    @staticmethod
    def verify_record(
        record: "MerkleProofRecord",
        leaves: Sequence[bytes],
        root: bytes,
        merge: Optional[Merge[bytes]] = None,
    ) -> bool:
        """Verify a serialized proof record against claimed leaves and root."""
        try:
            proof = record.to_proof(merge)
        except ValueError:
            return False
        return proof.verify(leaves, root)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
