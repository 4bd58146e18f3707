"""
Index arithmetic for the packed node array.

A tree over n leaves is stored breadth-first in 2n - 1 slots with the root
at index 0. Leaf i lives at index i + n - 1, and the children of node i sit
at 2i + 1 and 2i + 2. Left children always have odd indices.
"""
from __future__ import annotations


def parent(index: int) -> int:
    """Index of the parent node; the root is its own parent."""
    if index == 0:
        return 0
    return (index - 1) >> 1


def sibling(index: int) -> int:
    """Index of the other child of the same parent; the root is its own sibling."""
    if index == 0:
        return 0
    return ((index + 1) ^ 1) - 1


def children(index: int) -> tuple[int, int]:
    """Indices of the (left, right) children of an internal node."""
    return (index << 1) + 1, (index << 1) + 2


def is_left(index: int) -> bool:
    return index & 1 == 1


def node_count(leaf_count: int) -> int:
    """Size of the node array for the given number of leaves."""
    if leaf_count <= 0:
        return 0
    return (leaf_count << 1) - 1


def leaf_count_of(node_total: int) -> int:
    """Number of leaves stored in a node array of the given size."""
    if node_total <= 0:
        return 0
    return (node_total >> 1) + 1


def leaf_index(position: int, leaf_count: int) -> int:
    """Node-array index of the leaf at `position` in the original list."""
    return position + leaf_count - 1


def leaf_position(index: int, leaf_count: int) -> int:
    """Position in the original list of the leaf stored at node `index`."""
    return index + 1 - leaf_count


__all__ = [
    "parent",
    "sibling",
    "children",
    "is_left",
    "node_count",
    "leaf_count_of",
    "leaf_index",
    "leaf_position",
]
