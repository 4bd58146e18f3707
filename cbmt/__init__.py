"""
cbmt - Complete Binary Merkle Tree.

Commit to an ordered list of items with a single root and prove
membership of any subset of them without revealing the rest.
"""

from cbmt.merkle import (
    CBMT,
    Blake2bMerge,
    Merge,
    MerkleProof,
    MerkleProver,
    MerkleTree,
    MerkleVerifier,
    Sha256Merge,
    build_merkle_proof,
    build_merkle_root,
    build_merkle_tree,
    get_merge,
    verify_merkle_proof,
)
from cbmt.schemas.errors import (
    CBMTException,
    EmptyProofInput,
    EmptyTree,
    IndexOutOfRange,
    ProofError,
)
from cbmt.schemas.proof import MerkleProofRecord

__version__ = "0.1.0"

__all__ = [
    "CBMT",
    "MerkleTree",
    "MerkleProof",
    "Merge",
    "Sha256Merge",
    "Blake2bMerge",
    "get_merge",
    "build_merkle_root",
    "build_merkle_tree",
    "build_merkle_proof",
    "verify_merkle_proof",
    "MerkleProver",
    "MerkleVerifier",
    "MerkleProofRecord",
    "CBMTException",
    "ProofError",
    "EmptyProofInput",
    "EmptyTree",
    "IndexOutOfRange",
]
