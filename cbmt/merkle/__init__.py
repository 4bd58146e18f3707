"""
Complete Binary Merkle Tree and multi-leaf proofs.

This package provides:
- Merge: the capability contract a node type must supply
- CBMT / MerkleTree: deterministic tree construction over a packed array
- MerkleProof: multi-leaf proofs and their self-contained verifier
- MerkleProver / MerkleVerifier: digest-oriented convenience wrappers

Usage:
    from cbmt.merkle import CBMT, Sha256Merge

    cbmt = CBMT(Sha256Merge())
    root = cbmt.build_root(leaves)
    proof = cbmt.build_proof(leaves, [1, 4])
    assert proof.verify(cbmt.retrieve_leaves(leaves, proof), root)
"""
from .merge import (
    SUPPORTED_ALGORITHMS,
    Blake2bMerge,
    Merge,
    Sha256Merge,
    get_merge,
)
from .merkle_proof import MerkleProof
from .merkle_tree import (
    CBMT,
    MerkleTree,
    build_merkle_proof,
    build_merkle_root,
    build_merkle_tree,
    compute_tree_depth,
    verify_merkle_proof,
)
from .merkle_proofs import MerkleProver, MerkleVerifier
from .tree_index import children, is_left, parent, sibling


__all__ = [
    # Capability contract and strategies
    "Merge",
    "Sha256Merge",
    "Blake2bMerge",
    "SUPPORTED_ALGORITHMS",
    "get_merge",
    # Core types
    "CBMT",
    "MerkleTree",
    "MerkleProof",
    # Core functions
    "build_merkle_root",
    "build_merkle_tree",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Index arithmetic
    "parent",
    "sibling",
    "children",
    "is_left",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
