"""Reveal order and metadata resolution.

Before the reveal every token shows the same placeholder URI. After it,
token `i` resolves to metadata file `order[i]`, where `order` starts as
the identity and may be shuffled once from a seed. The shuffled order
covers every issued token and never fewer than two slots, so a lone
token is remapped too; tokens past its end keep their own index.
"""

import hashlib

from nftledger.nanocontracts.collection.errors import AlreadyShuffled, NonexistentToken, RevealNotActive
from nftledger.nanocontracts.collection.state import CollectionFlags
from nftledger.nanocontracts.exception import NCFail
from nftledger.nanocontracts.registry import AssetRegistry
from nftledger.nanocontracts.types import TokenId

SEED_BYTES = 32
MIN_SHUFFLE_SLOTS = 2


def swap_index(seed: int, position: int) -> int:
    """Pick a partner for `position` in [0, position)."""
    data = seed.to_bytes(SEED_BYTES, "big") + position.to_bytes(SEED_BYTES, "big")
    return int.from_bytes(hashlib.sha256(data).digest(), "big") % position


def derange(order: list[int], seed: int) -> list[int]:
    """Sattolo's shuffle: the result is one cycle, so no entry stays put."""
    shuffled = list(order)
    for i in range(len(shuffled) - 1, 0, -1):
        j = swap_index(seed, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


class RevealShuffler:
    def __init__(self, registry: AssetRegistry, flags: CollectionFlags, max_total_tokens: int) -> None:
        self.registry = registry
        self.flags = flags
        self.max_total_tokens = max_total_tokens
        self.order: list[int] = []
        self.shuffled = False

    def shuffle(self, seed: int) -> list[int]:
        if not self.flags.is_revealed:
            raise RevealNotActive("reveal is not active")
        if self.shuffled:
            raise AlreadyShuffled("reveal order has already been shuffled")
        if not 0 <= seed < 2 ** (8 * SEED_BYTES):
            raise NCFail("seed out of range")

        slots = min(max(self.registry.total_issued(), MIN_SHUFFLE_SLOTS), self.max_total_tokens)
        identity = list(range(slots))
        self.order = derange(identity, seed)
        self.shuffled = True
        return self.order

    def resolved_index(self, token_id: TokenId) -> int:
        if token_id < len(self.order):
            return self.order[token_id]
        return token_id

    def token_uri(self, token_id: TokenId) -> str:
        if not self.registry.exists(token_id):
            raise NonexistentToken("URI query for nonexistent token")
        if not self.flags.is_revealed:
            return self.flags.unrevealed_uri
        return f"{self.flags.base_uri}{self.resolved_index(token_id)}.json"
