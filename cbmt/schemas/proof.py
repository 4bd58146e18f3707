"""
Schemas - Proof Record
File: proof.py

Purpose: Serializable form of a digest Merkle proof. Lemmas are stored as
0x-prefixed hex and indices keep the proof's value-sorted order. The record
names the digest together with its parameters, so a record converts back to
an identical MerkleProof with an equivalent merge strategy.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator, model_validator

from cbmt.config.runtime import HashConfig, RuntimeConfig
from cbmt.crypto.hashing import from_hex, to_hex
from cbmt.merkle.merge import SUPPORTED_ALGORITHMS, Blake2bMerge, Merge, Sha256Merge, get_merge
from cbmt.merkle.merkle_proof import MerkleProof

from .canonical import dumps_canonical
from .errors import InvalidProofRecord

SCHEMA_VERSION: str = "v1"


def _describe_merge(merge: Merge[bytes]) -> Optional[tuple[str, int, str]]:
    """(algorithm, digest_size, person) of a ready-made digest strategy."""
    if isinstance(merge, Blake2bMerge):
        try:
            person = merge.person.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidProofRecord(
                message="blake2b personalization must be valid UTF-8 to be recorded",
                details={"person": merge.person.hex()},
            ) from e
        return "blake2b", merge.digest_size, person
    if isinstance(merge, Sha256Merge):
        return "sha256", Sha256Merge.digest_size, ""
    return None


class MerkleProofRecord(BaseModel):
    """
    Canonical, JSON-friendly representation of a MerkleProof over bytes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: Literal["v1"] = Field(default=SCHEMA_VERSION)
    algorithm: str = Field(
        default="sha256",
        description="Digest used to merge nodes",
        examples=list(SUPPORTED_ALGORITHMS),
    )
    digest_size: int = Field(
        default=32,
        ge=1,
        le=64,
        description="Digest length in bytes; always 32 for sha256",
    )
    person: str = Field(
        default="",
        description="blake2b personalization, at most 16 bytes as UTF-8",
    )
    indices: list[NonNegativeInt] = Field(
        ...,
        min_length=1,
        description="Node-array indices of the proved leaves, ordered by leaf value",
    )
    lemmas: list[str] = Field(
        default_factory=list,
        description="0x-hex sibling nodes in descending node-index order",
    )

    @field_validator("algorithm")
    @classmethod
    def _normalize_algorithm(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"algorithm must be one of {list(SUPPORTED_ALGORITHMS)}")
        return value

    @field_validator("person")
    @classmethod
    def _validate_person(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 16:
            raise ValueError("person must be at most 16 bytes")
        return value

    @field_validator("lemmas")
    @classmethod
    def _validate_lemmas(cls, value: list[str]) -> list[str]:
        for lemma in value:
            from_hex(lemma)
        return [lemma.lower() for lemma in value]

    @model_validator(mode="after")
    def _check_digest_parameters(self) -> "MerkleProofRecord":
        if self.algorithm == "sha256" and (self.digest_size != 32 or self.person):
            raise ValueError("sha256 records use a 32-byte digest and no personalization")
        return self

    @classmethod
    def from_proof(
        cls,
        proof: MerkleProof[bytes],
        algorithm: Optional[str] = None,
    ) -> "MerkleProofRecord":
        """
        Record a proof built with one of the ready-made digest strategies.

        Args:
            proof: Proof to record
            algorithm: Only needed when the proof's strategy is not a
                       Sha256Merge or Blake2bMerge; must agree otherwise

        Raises:
            InvalidProofRecord: If the digest cannot be determined or
                disagrees with the proof's strategy
        """
        described = _describe_merge(proof.merge)
        if described is None:
            if algorithm is None:
                raise InvalidProofRecord(
                    message=f"Cannot determine digest algorithm of {proof.merge!r}",
                    details={"merge": repr(proof.merge)},
                )
            return cls(
                algorithm=algorithm,
                indices=list(proof.indices),
                lemmas=[to_hex(lemma) for lemma in proof.lemmas],
            )

        derived, digest_size, person = described
        if algorithm is not None and algorithm.lower() != derived:
            raise InvalidProofRecord(
                message=f"Proof was built with {derived}, not {algorithm}",
                details={"algorithm": algorithm, "merge": repr(proof.merge)},
            )
        return cls(
            algorithm=derived,
            digest_size=digest_size,
            person=person,
            indices=list(proof.indices),
            lemmas=[to_hex(lemma) for lemma in proof.lemmas],
        )

    def to_proof(self, merge: Optional[Merge[bytes]] = None) -> MerkleProof[bytes]:
        """
        Rebuild the MerkleProof.

        Args:
            merge: Strategy to attach; derived from the recorded digest
                   parameters if omitted

        Raises:
            InvalidProofRecord: If the strategy's digest size does not
                match the lemma lengths
        """
        if merge is None:
            hash_config = HashConfig(
                algorithm=self.algorithm,
                digest_size=self.digest_size,
                person=self.person,
            )
            merge = get_merge(RuntimeConfig(hash=hash_config))

        lemmas = [from_hex(lemma) for lemma in self.lemmas]
        digest_size = getattr(merge, "digest_size", None)
        if digest_size is not None and any(len(lemma) != digest_size for lemma in lemmas):
            raise InvalidProofRecord(
                message=f"Lemma length does not match {digest_size}-byte digests",
                details={"algorithm": self.algorithm, "digest_size": digest_size},
            )
        return MerkleProof(self.indices, lemmas, merge)

    def to_json(self) -> str:
        return dumps_canonical(self)

    @classmethod
    def from_json(cls, text: str) -> "MerkleProofRecord":
        return cls.model_validate_json(text)


__all__ = ["SCHEMA_VERSION", "MerkleProofRecord"]
