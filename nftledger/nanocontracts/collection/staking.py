from typing import NamedTuple

from nftledger.nanocontracts.collection.errors import NotApprovedOrOwner, StakingClosed
from nftledger.nanocontracts.collection.state import CollectionFlags, StakeRecord
from nftledger.nanocontracts.registry import AssetRegistry
from nftledger.nanocontracts.types import Address, TokenId, Timestamp


class StakingPeriod(NamedTuple):
    """Staking statistics of a token at a given moment."""

    staked: bool
    current: int  # seconds since the running stake started, 0 when unstaked
    total: int  # every finished stake plus the running one


class StakingLifecycleManager:
    """Per-token staking records.

    Records belong to the token, not to its owner, so they survive
    transfers. `cumulative` grows only when a stake ends.
    """

    def __init__(self, registry: AssetRegistry, flags: CollectionFlags) -> None:
        self.registry = registry
        self.flags = flags
        self.records: dict[TokenId, StakeRecord] = {}

    def is_staked(self, token_id: TokenId) -> bool:
        record = self.records.get(token_id)
        return record is not None and record.staked

    def toggle(self, caller: Address, token_id: TokenId, now: Timestamp) -> bool:
        """Start or stop staking `token_id`; returns the new staked state."""
        if not self.registry.is_approved_or_owner(caller, token_id):
            raise NotApprovedOrOwner("caller is not owner nor approved")

        record = self.records.get(token_id)
        if record is not None and record.staked:
            record.cumulative += max(0, now - record.start)
            record.start = Timestamp(0)
            return False

        if not self.flags.staking_open:
            raise StakingClosed("staking is closed")
        if record is None:
            record = self.records[token_id] = StakeRecord()
        # 0 is reserved for "not staked"
        record.start = Timestamp(max(now, 1))
        return True

    def period(self, token_id: TokenId, now: Timestamp) -> StakingPeriod:
        self.registry.owner_of(token_id)
        record = self.records.get(token_id, StakeRecord())
        current = max(0, now - record.start) if record.staked else 0
        return StakingPeriod(staked=record.staked, current=current, total=record.cumulative + current)
