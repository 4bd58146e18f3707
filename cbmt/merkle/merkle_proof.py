"""
Merkle Proof
Multi-leaf membership proof and its self-contained verifier.

A proof carries two sequences:
- indices: node-array indices of the proved leaves, ordered by the
  corresponding leaf value (ascending sort_key, ties by position)
- lemmas: sibling node values needed to rebuild the root, ordered by
  descending node-array index

Claimed leaves must be supplied in the same order as ``indices``.
Verification never raises: any structural problem yields False.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Generic, Iterable, Optional

from cbmt.merkle.merge import Merge, T
from cbmt.merkle.tree_index import is_left, parent, sibling

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


@dataclass(frozen=True)
class MerkleProof(Generic[T]):
    """
    Proof that a set of leaves belongs to a tree with a given root.

    Example:
        >>> proof = tree.build_proof([1, 4])
        >>> proof.verify([tree.nodes[i] for i in proof.indices], tree.root)
        True

    Attributes:
        indices: Node-array indices of the proved leaves
        lemmas: Sibling nodes, descending node-array index
        merge: Strategy used to rebuild parents; not part of equality
    """
    indices: tuple[int, ...]
    lemmas: tuple[T, ...]
    merge: Merge[T] = field(compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "indices", tuple(self.indices))
        object.__setattr__(self, "lemmas", tuple(self.lemmas))

    def root(self, leaves: Iterable[T]) -> Optional[T]:
        """
        Rebuild the root from the claimed leaves and the lemmas.

        Args:
            leaves: Claimed leaf values, in the order of ``indices``

        Returns:
            The reconstructed root, or None if the proof does not
            collapse cleanly onto index 0
        """
        try:
            leaves = list(leaves)
        except TypeError:
            logger.debug(f"Claimed leaves are not iterable: {type(leaves).__name__}")
            return None

        if not leaves or len(leaves) != len(self.indices):
            logger.debug(
                f"Leaf count {len(leaves)} does not match proof index count {len(self.indices)}"
            )
            return None

        if any(type(i) is not int or i < 0 for i in self.indices):
            logger.debug(f"Proof contains invalid indices: {self.indices}")
            return None

        try:
            keys = [self.merge.sort_key(leaf) for leaf in leaves]
            if any(keys[k] > keys[k + 1] for k in range(len(keys) - 1)):
                logger.debug("Claimed leaves are not in ascending order")
                return None
            return self._rebuild(leaves)
        except (TypeError, ValueError) as e:
            logger.debug(f"Malformed leaf or lemma during proof rebuild: {e}")
            return None

    def _rebuild(self, leaves: list[T]) -> Optional[T]:
        pairs = sorted(zip(self.indices, leaves), key=lambda pair: pair[0], reverse=True)
        queue: deque[tuple[int, T]] = deque(pairs)
        lemmas = iter(self.lemmas)

        while queue:
            index, node = queue.popleft()

            if index == 0:
                if queue or next(lemmas, _EXHAUSTED) is not _EXHAUSTED:
                    logger.debug("Proof reached the root with unconsumed leaves or lemmas")
                    return None
                return node

            if queue and queue[0][0] == sibling(index):
                sibling_node = queue.popleft()[1]
            else:
                try:
                    sibling_node = next(lemmas)
                except StopIteration:
                    logger.debug(f"Ran out of lemmas at node {index}")
                    return None

            if is_left(index):
                parent_node = self.merge.merge(node, sibling_node)
            else:
                parent_node = self.merge.merge(sibling_node, node)

            queue.append((parent(index), parent_node))

        return None

    def verify(self, leaves: Iterable[T], root: T) -> bool:
        """
        Check that the claimed leaves hash up to the claimed root.

        Args:
            leaves: Claimed leaf values, in the order of ``indices``
            root: Claimed tree root

        Returns:
            True if the proof is valid, False otherwise
        """
        rebuilt = self.root(leaves)
        if rebuilt is None:
            return False
        try:
            return bool(rebuilt == root)
        except (TypeError, ValueError):
            return False


__all__ = ["MerkleProof"]
