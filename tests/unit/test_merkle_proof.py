"""
Merkle Proof Unit Tests
Tests for proof generation (merkle_tree.py) and verification (merkle_proof.py)

Covers:
1. Lemma contents and order for known trees
2. Index ordering by leaf value
3. Verification of valid proofs, including single-leaf trees
4. Tamper detection - leaf, root, order, lemma changes fail
5. Proof generation errors
6. retrieve_leaves and rebuilding a proof from its parts
"""
import pytest

from cbmt.crypto.hashing import sha256
from cbmt.merkle import CBMT, MerkleProof, Sha256Merge, build_merkle_proof
from cbmt.schemas.errors import (
    EmptyProofInput,
    EmptyTree,
    ErrorCodes,
    IndexOutOfRange,
    ProofError,
)
from fixtures.merges import DescendingMerge, SubtractMerge


class TestProofGeneration:
    """Lemma and index contents."""

    def test_two_far_apart_leaves(self, int_cbmt, six_items):
        proof = int_cbmt.build_proof(six_items, [0, 5])

        assert proof.lemmas == (11, 3, 2)
        assert proof.indices == (5, 10)
        assert proof.root([2, 13]) == 1

    def test_scenario_proof(self, int_cbmt, six_items):
        proof = int_cbmt.build_proof(six_items, [1, 4])

        assert proof.lemmas == (13, 2, 2)
        assert proof.indices == (6, 9)

    def test_same_proof_from_tree_or_items(self, int_cbmt, six_items):
        tree = int_cbmt.build_tree(six_items)

        from_tree = tree.build_proof([1, 4])
        from_items = int_cbmt.build_proof(six_items, [4, 1])

        assert from_tree == from_items
        assert from_tree.lemmas == from_items.lemmas
        assert from_tree.indices == from_items.indices

    def test_single_leaf_proof(self, int_cbmt):
        proof = int_cbmt.build_proof([2], [0])

        assert proof.lemmas == ()
        assert proof.indices == (0,)
        assert proof.root([2]) == 2

    def test_all_leaves_need_no_lemmas(self, int_cbmt, six_items):
        assert int_cbmt.build_proof(six_items, range(6)).lemmas == ()
        assert int_cbmt.build_proof(list(range(8)), range(8)).lemmas == ()

    def test_sibling_leaves_share_path(self, int_cbmt, six_items):
        """Leaves 2 and 3 are siblings: only the uncles above them are needed."""
        both = int_cbmt.build_proof(six_items, [2, 3])
        single = int_cbmt.build_proof(six_items, [2])

        assert len(both.lemmas) == len(single.lemmas) - 1

    def test_duplicate_indices_collapse(self, int_cbmt, six_items):
        assert int_cbmt.build_proof(six_items, [1, 1, 4]) == int_cbmt.build_proof(six_items, [1, 4])

    def test_indices_sorted_by_value_not_position(self, int_cbmt):
        items = [50, 10, 40, 20, 30]
        proof = int_cbmt.build_proof(items, [0, 1, 2, 3])

        values = [items[i - 4] for i in proof.indices]
        assert values == [10, 20, 40, 50]

    def test_sort_key_controls_index_order(self, six_items):
        proof = CBMT(DescendingMerge()).build_proof(six_items, [1, 4])

        assert proof.indices == (9, 6)
        assert proof.verify([11, 3], 1)
        assert not proof.verify([3, 11], 1)

    def test_equal_values_ordered_by_position(self, int_cbmt):
        proof = int_cbmt.build_proof([5, 5, 5, 5], [3, 0, 2])

        assert proof.indices == (3, 5, 6)
        assert proof.lemmas == (5,)
        assert proof.verify([5, 5, 5], 0)

    def test_function_form_uses_digest_strategy(self, digest_leaves):
        proof = build_merkle_proof(digest_leaves, [2])

        assert isinstance(proof.merge, Sha256Merge)
        assert proof.verify([digest_leaves[2]], CBMT(Sha256Merge()).build_root(digest_leaves))


class TestProofVerification:
    """Valid proofs verify."""

    def test_scenario_verifies_in_sorted_order(self, int_cbmt, six_items):
        root = int_cbmt.build_root(six_items)
        proof = int_cbmt.build_proof(six_items, [1, 4])

        assert root == 1
        assert proof.verify([3, 11], root)

    def test_scenario_swapped_items_fail(self, int_cbmt, six_items):
        root = int_cbmt.build_root(six_items)
        proof = int_cbmt.build_proof(six_items, [1, 4])

        assert not proof.verify([11, 3], root)

    def test_every_single_index_verifies(self, sha_cbmt, digest_leaves):
        root = sha_cbmt.build_root(digest_leaves)

        for i, leaf in enumerate(digest_leaves):
            proof = sha_cbmt.build_proof(digest_leaves, [i])
            assert proof.verify([leaf], root), f"Proof failed for index {i}"

    def test_multi_index_verifies(self, sha_cbmt, digest_leaves):
        root = sha_cbmt.build_root(digest_leaves)
        proof = sha_cbmt.build_proof(digest_leaves, [0, 3, 6])

        assert proof.verify(sha_cbmt.retrieve_leaves(digest_leaves, proof), root)

    def test_single_leaf_tree_verifies(self, sha_cbmt):
        leaf = sha256(b"single")
        proof = sha_cbmt.build_proof([leaf], [0])

        assert proof.verify([leaf], leaf)
        assert not proof.verify([sha256(b"other")], leaf)


class TestTamperDetection:
    """Any change to leaves, root, order or lemmas fails verification."""

    @pytest.fixture
    def setup(self, sha_cbmt, digest_leaves):
        root = sha_cbmt.build_root(digest_leaves)
        proof = sha_cbmt.build_proof(digest_leaves, [1, 2, 5])
        leaves = sha_cbmt.retrieve_leaves(digest_leaves, proof)
        return proof, leaves, root

    def test_tampered_leaf_fails(self, setup):
        proof, leaves, root = setup

        for k in range(len(leaves)):
            tampered = list(leaves)
            tampered[k] = sha256(b"tampered" + leaves[k])
            assert not proof.verify(tampered, root)

    def test_tampered_root_byte_fails(self, setup):
        proof, leaves, root = setup

        for position in (0, 17, 31):
            flipped = bytearray(root)
            flipped[position] ^= 0x01
            assert not proof.verify(leaves, bytes(flipped))

    def test_reordered_indices_fail(self, setup):
        proof, leaves, root = setup
        reordered = MerkleProof(tuple(reversed(proof.indices)), proof.lemmas, proof.merge)

        assert not reordered.verify(leaves, root)
        assert not reordered.verify(list(reversed(leaves)), root)

    def test_tampered_lemma_fails(self, setup):
        proof, leaves, root = setup
        lemmas = list(proof.lemmas)
        lemmas[0] = sha256(b"tampered")

        assert not MerkleProof(proof.indices, lemmas, proof.merge).verify(leaves, root)

    def test_missing_lemma_fails(self, setup):
        proof, leaves, root = setup

        assert not MerkleProof(proof.indices, proof.lemmas[:-1], proof.merge).verify(leaves, root)

    def test_extra_lemma_fails(self, setup):
        proof, leaves, root = setup
        lemmas = proof.lemmas + (sha256(b"extra"),)

        assert not MerkleProof(proof.indices, lemmas, proof.merge).verify(leaves, root)

    def test_wrong_leaf_count_fails(self, setup):
        proof, leaves, root = setup

        assert not proof.verify(leaves[:-1], root)
        assert not proof.verify(leaves + [leaves[-1]], root)
        assert not proof.verify([], root)

    def test_wrong_index_fails(self, sha_cbmt, digest_leaves):
        root = sha_cbmt.build_root(digest_leaves)
        proof = sha_cbmt.build_proof(digest_leaves, [1])
        moved = MerkleProof([proof.indices[0] + 1], proof.lemmas, proof.merge)

        assert not moved.verify([digest_leaves[1]], root)


class TestMalformedProofs:
    """Verification never raises."""

    def test_empty_proof(self):
        proof = MerkleProof([], [], Sha256Merge())

        assert proof.root([]) is None
        assert not proof.verify([], bytes(32))

    def test_negative_index(self):
        proof = MerkleProof([-1], [], SubtractMerge())

        assert not proof.verify([1], 1)

    def test_non_integer_index(self):
        proof = MerkleProof(["3"], [], SubtractMerge())

        assert not proof.verify([1], 1)

    def test_root_index_with_other_leaves(self):
        proof = MerkleProof([0, 4], [], SubtractMerge())

        assert proof.root([1, 2]) is None

    def test_wrong_item_type(self, sha_cbmt, digest_leaves):
        root = sha_cbmt.build_root(digest_leaves)
        proof = sha_cbmt.build_proof(digest_leaves, [3])

        assert not proof.verify(["not bytes"], root)

    def test_incomparable_items(self, sha_cbmt, digest_leaves):
        root = sha_cbmt.build_root(digest_leaves)
        proof = sha_cbmt.build_proof(digest_leaves, [3, 4])

        assert not proof.verify([b"x", 1], root)

    def test_claimed_leaves_from_iterator(self, sha_cbmt, digest_leaves):
        root = sha_cbmt.build_root(digest_leaves)
        proof = sha_cbmt.build_proof(digest_leaves, [1, 4])
        claimed = sha_cbmt.retrieve_leaves(digest_leaves, proof)

        assert proof.verify(iter(claimed), root)
        assert proof.verify((leaf for leaf in claimed), root)

    @pytest.mark.parametrize("claimed", [None, 42])
    def test_non_iterable_leaves(self, sha_cbmt, digest_leaves, claimed):
        root = sha_cbmt.build_root(digest_leaves)
        proof = sha_cbmt.build_proof(digest_leaves, [1])

        assert proof.root(claimed) is None
        assert not proof.verify(claimed, root)


class TestProofErrors:
    """Proof generation failures."""

    def test_empty_indices(self, int_cbmt, six_items):
        with pytest.raises(EmptyProofInput):
            int_cbmt.build_proof(six_items, [])

    def test_empty_indices_checked_before_empty_tree(self, int_cbmt):
        with pytest.raises(EmptyProofInput):
            int_cbmt.build_proof([], [])

    def test_empty_tree(self, int_cbmt):
        with pytest.raises(EmptyTree) as exc_info:
            int_cbmt.build_proof([], [0])

        assert exc_info.value.code == ErrorCodes.EMPTY_TREE

    def test_empty_tree_from_built_tree(self, int_cbmt):
        with pytest.raises(EmptyTree):
            int_cbmt.build_tree([]).build_proof([0])

    @pytest.mark.parametrize("index", [6, 100, -1])
    def test_index_out_of_range(self, int_cbmt, six_items, index):
        with pytest.raises(IndexOutOfRange) as exc_info:
            int_cbmt.build_proof(six_items, [0, index])

        assert exc_info.value.details == {"index": index, "leaf_count": 6}

    @pytest.mark.parametrize("position", [1.5, "1", None])
    def test_non_integer_position(self, int_cbmt, six_items, position):
        with pytest.raises(TypeError, match="must be integers"):
            int_cbmt.build_proof(six_items, [0, position])

    def test_errors_share_base_and_builtin_types(self, int_cbmt, six_items):
        with pytest.raises(ProofError):
            int_cbmt.build_proof(six_items, [6])
        with pytest.raises(IndexError):
            int_cbmt.build_proof(six_items, [6])
        with pytest.raises(ValueError):
            int_cbmt.build_proof(six_items, [])


class TestRetrieveLeaves:
    """Mapping proof indices back to items."""

    def test_retrieve_leaves(self, int_cbmt, six_items):
        proof = int_cbmt.build_proof(six_items, [0, 3])
        retrieved = int_cbmt.retrieve_leaves(six_items, proof)

        assert retrieved == [2, 7]
        assert proof.root(retrieved) == int_cbmt.build_root(six_items)

    def test_retrieve_leaves_invalid(self, int_cbmt, six_items):
        merge = SubtractMerge()

        assert int_cbmt.retrieve_leaves(six_items, MerkleProof([], [], merge)) is None
        assert int_cbmt.retrieve_leaves(six_items, MerkleProof([4], [], merge)) is None
        assert int_cbmt.retrieve_leaves(six_items, MerkleProof([11], [], merge)) is None
        assert int_cbmt.retrieve_leaves([], MerkleProof([0], [], merge)) is None


class TestRebuildProof:
    """A proof reassembled from its parts behaves like the original."""

    def test_rebuild_proof(self, int_cbmt):
        items = [2, 3, 5, 7, 11]
        tree = int_cbmt.build_tree(items)
        proof = tree.build_proof([0, 3])

        needed = [tree.nodes[i] for i in proof.indices]
        rebuilt = MerkleProof(list(proof.indices), list(proof.lemmas), SubtractMerge())

        assert rebuilt == proof
        assert rebuilt.verify(needed, tree.root)
        assert rebuilt.root(needed) == tree.root

    def test_proof_is_immutable(self, int_cbmt, six_items):
        proof = int_cbmt.build_proof(six_items, [1])

        with pytest.raises(AttributeError):
            proof.indices = (1,)
        assert isinstance(proof.lemmas, tuple)

    def test_equality_ignores_merge_strategy(self):
        first = MerkleProof([5, 9], [1], SubtractMerge())
        second = MerkleProof((5, 9), (1,), DescendingMerge())

        assert first == second
        assert hash(first) == hash(second)
        assert first != MerkleProof([5, 9], [2], SubtractMerge())
