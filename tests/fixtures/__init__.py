"""
Test fixtures package for cbmt tests.

- merges.py: merge strategies and leaf factories used across the suite

Usage:
    from fixtures import SubtractMerge, make_digest_leaves
"""

from .merges import (
    CountingMerge,
    DescendingMerge,
    SubtractMerge,
    make_digest_leaves,
)

__all__ = [
    "SubtractMerge",
    "CountingMerge",
    "DescendingMerge",
    "make_digest_leaves",
]
