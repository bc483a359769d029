"""Allow-list membership proofs.

The allow-list is published off-ledger as a binary hash tree over account
addresses; only its root is kept by the collection. Pairs are hashed in
sorted order, so a proof is just the list of sibling hashes from the leaf
up to the root and carries no left/right markers.
"""

import hashlib
from typing import Iterable, Sequence

from nftledger.nanocontracts.collection.errors import ClaimCapExceeded, ProofInvalid
from nftledger.nanocontracts.exception import NCFail
from nftledger.nanocontracts.types import Address

HASH_SIZE = 32


def hash_leaf(account: bytes) -> bytes:
    return hashlib.sha256(account).digest()


def hash_pair(a: bytes, b: bytes) -> bytes:
    if b < a:
        a, b = b, a
    return hashlib.sha256(a + b).digest()


def process_proof(proof: Sequence[bytes], leaf: bytes) -> bytes:
    """Fold `proof` into `leaf` and return the resulting root."""
    computed = leaf
    for sibling in proof:
        computed = hash_pair(computed, sibling)
    return computed


def verify(proof: Sequence[bytes], root: bytes, account: bytes) -> bool:
    return process_proof(proof, hash_leaf(account)) == root


class MerkleTree:
    """Builds the published tree and hands out proofs.

    Leaves are sorted before building; a node without a sibling is promoted
    to the next level unchanged.
    """

    def __init__(self, accounts: Iterable[bytes]) -> None:
        leaves = sorted({hash_leaf(account) for account in accounts})
        if not leaves:
            raise ValueError("allow-list must not be empty")
        self.layers: list[list[bytes]] = [leaves]
        while len(self.layers[-1]) > 1:
            layer = self.layers[-1]
            parents = [hash_pair(layer[i], layer[i + 1]) for i in range(0, len(layer) - 1, 2)]
            if len(layer) % 2 == 1:
                parents.append(layer[-1])
            self.layers.append(parents)

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    def get_proof(self, account: bytes) -> list[bytes]:
        leaf = hash_leaf(account)
        try:
            index = self.layers[0].index(leaf)
        except ValueError:
            raise ValueError("account is not on the allow-list") from None

        proof = []
        for layer in self.layers[:-1]:
            sibling = index ^ 1
            if sibling < len(layer):
                proof.append(layer[sibling])
            index //= 2
        return proof


class AllowlistVerifier:
    """Checks proofs against the current root and tracks claims per account.

    Replacing the root starts a new allow-list epoch but keeps the claims
    already recorded.
    """

    def __init__(self, root: bytes, max_per_account: int) -> None:
        self.set_root(root)
        self.max_per_account = max_per_account
        self.claimed: dict[Address, int] = {}

    def set_root(self, root: bytes) -> None:
        if len(root) != HASH_SIZE:
            raise NCFail(f"root must be {HASH_SIZE} bytes")
        self.root = root

    def is_on_allowlist(self, proof: Sequence[bytes], account: Address) -> bool:
        return verify(proof, self.root, account)

    def claimed_by(self, account: Address) -> int:
        return self.claimed.get(account, 0)

    def check_claim(self, account: Address, amount: int) -> None:
        if self.claimed_by(account) + amount > self.max_per_account:
            raise ClaimCapExceeded(
                f"allow-list allows {self.max_per_account} per account, "
                f"{self.claimed_by(account)} already claimed"
            )

    def check_proof(self, proof: Sequence[bytes], account: Address) -> None:
        if not self.is_on_allowlist(proof, account):
            raise ProofInvalid("invalid allow-list proof")

    def record_claim(self, account: Address, amount: int) -> None:
        self.check_claim(account, amount)
        self.claimed[account] = self.claimed_by(account) + amount
