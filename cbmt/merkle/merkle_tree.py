"""
Complete Binary Merkle Tree
Deterministic tree construction and multi-leaf proof generation.

This module provides:
- CBMT: tree operations bound to a merge strategy
- MerkleTree: the packed node array of a built tree
- build_merkle_root / build_merkle_tree / build_merkle_proof: function
  forms that fall back to the configured digest strategy

Canonical Layout Rules (Hard Contracts):
1. n leaves are stored in a node array of 2n - 1 slots, root at index 0
2. Leaf i lives at index i + n - 1, leaves keep their input order
3. Internal node i = merge(node[2i + 1], node[2i + 2])
4. Empty leaves: root is merge.default()
5. Single leaf: root = leaf, no merge is invoked

Determinism Notes:
- No padding or leaf duplication; odd counts fall out of the layout
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Generic, Iterable, Optional, Sequence

from cbmt.merkle.merge import Merge, T, get_merge
from cbmt.merkle.merkle_proof import MerkleProof
from cbmt.merkle.tree_index import (
    children,
    leaf_count_of,
    leaf_index,
    leaf_position,
    parent,
    sibling,
)
from cbmt.schemas.errors import EmptyProofInput, EmptyTree, IndexOutOfRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleTree(Generic[T]):
    """
    A fully built tree. Keep it around to issue many proofs without
    rebuilding; it is immutable once constructed.

    Attributes:
        nodes: Packed node array, root at index 0
        merge: Strategy the tree was built with; not part of equality
    """
    nodes: tuple[T, ...]
    merge: Merge[T] = field(compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))

    @property
    def root(self) -> T:
        if not self.nodes:
            return self.merge.default()
        return self.nodes[0]

    @property
    def leaf_count(self) -> int:
        return leaf_count_of(len(self.nodes))

    @property
    def leaves(self) -> tuple[T, ...]:
        return self.nodes[len(self.nodes) - self.leaf_count:]

    def __len__(self) -> int:
        return len(self.nodes)

    def build_proof(self, leaf_indices: Iterable[int]) -> MerkleProof[T]:
        """
        Generate a proof for the leaves at the given positions.

        Args:
            leaf_indices: 0-based positions in the original leaf list;
                          duplicates are ignored

        Returns:
            MerkleProof with lemmas in descending node order and indices
            ordered by leaf value

        Raises:
            EmptyProofInput: If no positions are given
            EmptyTree: If the tree has no leaves
            IndexOutOfRange: If a position does not address a leaf
            TypeError: If a position is not an integer
        """
        requested = list(leaf_indices)
        for position in requested:
            if not isinstance(position, int):
                raise TypeError(f"Leaf positions must be integers, got {position!r}")
        positions = sorted(set(requested))
        if not positions:
            raise EmptyProofInput()

        leaves_count = self.leaf_count
        if leaves_count == 0:
            raise EmptyTree()

        for position in (positions[0], positions[-1]):
            if position < 0 or position >= leaves_count:
                raise IndexOutOfRange(position, leaves_count)

        indices = [leaf_index(p, leaves_count) for p in reversed(positions)]

        lemmas: list[T] = []
        queue: deque[int] = deque(indices)
        while queue:
            index = queue.popleft()
            if index == 0:
                break

            if queue and queue[0] == sibling(index):
                queue.popleft()
            else:
                lemmas.append(self.nodes[sibling(index)])

            parent_index = parent(index)
            if parent_index != 0:
                queue.append(parent_index)

        sort_key = self.merge.sort_key
        indices.sort(key=lambda i: (sort_key(self.nodes[i]), i))

        logger.debug(
            f"Built proof for {len(indices)} of {leaves_count} leaves with {len(lemmas)} lemmas"
        )
        return MerkleProof(indices, lemmas, self.merge)

    def __repr__(self) -> str:
        return f"MerkleTree(leaf_count={self.leaf_count}, merge={self.merge!r})"


class CBMT(Generic[T]):
    """
    Complete Binary Merkle Tree operations for one merge strategy.

    Example:
        >>> cbmt = CBMT(Sha256Merge())
        >>> root = cbmt.build_root(leaves)
        >>> proof = cbmt.build_proof(leaves, [1, 4])
        >>> proof.verify(cbmt.retrieve_leaves(leaves, proof), root)
        True
    """

    def __init__(self, merge: Merge[T]) -> None:
        self.merge = merge

    def build_root(self, leaves: Sequence[T]) -> T:
        """
        Compute the root without keeping internal nodes.

        Leaves are paired from the right end; a lone leftmost leaf is moved
        to the front. The queue then always holds nodes in descending index
        order, so popping two yields a (right, left) pair of siblings.
        """
        if not leaves:
            return self.merge.default()

        merge = self.merge.merge
        queue: deque[T] = deque()

        for i in range(len(leaves) - 2, -1, -2):
            queue.append(merge(leaves[i], leaves[i + 1]))
        if len(leaves) % 2 == 1:
            queue.appendleft(leaves[0])

        while len(queue) > 1:
            right = queue.popleft()
            left = queue.popleft()
            queue.append(merge(left, right))

        return queue[0]

    def build_tree(self, leaves: Sequence[T]) -> MerkleTree[T]:
        """Build the full node array bottom-up."""
        count = len(leaves)
        if count == 0:
            return MerkleTree((), self.merge)

        merge = self.merge.merge
        nodes: list[Optional[T]] = [None] * (count - 1)
        nodes.extend(leaves)

        for i in range(count - 2, -1, -1):
            left, right = children(i)
            nodes[i] = merge(nodes[left], nodes[right])

        logger.debug(f"Built merkle tree with {count} leaves and {len(nodes)} nodes")
        return MerkleTree(nodes, self.merge)

    def build_proof(self, leaves: Sequence[T], leaf_indices: Iterable[int]) -> MerkleProof[T]:
        """
        Build the tree and a proof for the given leaf positions.

        Raises:
            EmptyProofInput, EmptyTree, IndexOutOfRange
        """
        leaf_indices = list(leaf_indices)
        if not leaf_indices:
            raise EmptyProofInput()
        if not leaves:
            raise EmptyTree()
        return self.build_tree(leaves).build_proof(leaf_indices)

    def retrieve_leaves(self, leaves: Sequence[T], proof: MerkleProof[T]) -> Optional[list[T]]:
        """
        Look up the leaves a proof points to, in proof order.

        Returns:
            The proved leaves, or None if leaves or proof indices are empty
            or any index falls outside the leaf range of the node array
        """
        if not leaves or not proof.indices:
            return None

        leaves_count = len(leaves)
        first_leaf = leaf_index(0, leaves_count)
        last_leaf = leaf_index(leaves_count - 1, leaves_count)
        if not all(first_leaf <= i <= last_leaf for i in proof.indices):
            return None

        return [leaves[leaf_position(i, leaves_count)] for i in proof.indices]


def build_merkle_root(leaves: Sequence[T], merge: Optional[Merge[T]] = None) -> T:
    """
    Compute the root of a sequence of leaves.

    Args:
        leaves: Leaf values; order matters and is preserved
        merge: Merge strategy; the configured digest strategy if omitted

    Example:
        >>> leaves = [sha256(b"a"), sha256(b"b"), sha256(b"c")]
        >>> len(build_merkle_root(leaves))
        32
    """
    return CBMT(merge or get_merge()).build_root(leaves)


def build_merkle_tree(leaves: Sequence[T], merge: Optional[Merge[T]] = None) -> MerkleTree[T]:
    """Build the packed node array for a sequence of leaves."""
    return CBMT(merge or get_merge()).build_tree(leaves)


def build_merkle_proof(
    leaves: Sequence[T],
    leaf_indices: Iterable[int],
    merge: Optional[Merge[T]] = None,
) -> MerkleProof[T]:
    """
    Generate a proof for the leaves at the given positions.

    Raises:
        EmptyProofInput: If no positions are given
        EmptyTree: If leaves is empty
        IndexOutOfRange: If a position is out of range
    """
    return CBMT(merge or get_merge()).build_proof(leaves, leaf_indices)


def verify_merkle_proof(proof: MerkleProof[T], leaves: Sequence[T], root: T) -> bool:
    """Verify a proof against claimed leaves and root."""
    return proof.verify(leaves, root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels from the deepest leaf to the root (inclusive).

    A single leaf has depth 1, two leaves depth 2, three leaves depth 3.
    """
    if num_leaves <= 0:
        return 0
    return (2 * num_leaves - 1).bit_length()


__all__ = [
    "CBMT",
    "MerkleTree",
    "build_merkle_root",
    "build_merkle_tree",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
