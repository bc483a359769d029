"""Rules applied to every token movement after mint.

Checks run in a fixed order and the first one that fails wins:

1. a staked token only moves with a staking exemption ticket;
2. while transfers are disabled only custodial moves go through;
3. no account other than the custodial one may hold two tokens.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from nftledger.nanocontracts.collection.errors import (
    InvalidExemption,
    OnlyOneTokenPerAccount,
    StakingActive,
    TransfersDisabled,
)
from nftledger.nanocontracts.collection.staking import StakingLifecycleManager
from nftledger.nanocontracts.collection.state import CollectionFlags
from nftledger.nanocontracts.registry import AssetRegistry
from nftledger.nanocontracts.types import Address, TokenId


class CustodialExemption(Enum):
    """Marks a move into the custodial account done by the collection itself."""

    CUSTODIAL = "custodial"


@dataclass(frozen=True, slots=True)
class StakingExemption:
    """Single-use permission to move one staked token."""

    token_id: TokenId
    nonce: int


class TransferPolicyGuard:
    def __init__(
        self,
        registry: AssetRegistry,
        flags: CollectionFlags,
        staking: StakingLifecycleManager,
    ) -> None:
        self.registry = registry
        self.flags = flags
        self.staking = staking
        self.outstanding: dict[int, TokenId] = {}
        self.next_nonce = 1

    def issue_staking_exemption(self, token_id: TokenId) -> StakingExemption:
        ticket = StakingExemption(token_id=token_id, nonce=self.next_nonce)
        self.next_nonce += 1
        self.outstanding[ticket.nonce] = token_id
        return ticket

    def revoke(self, ticket: StakingExemption) -> None:
        self.outstanding.pop(ticket.nonce, None)

    def _consume(self, ticket: StakingExemption, token_id: TokenId) -> None:
        bound_to = self.outstanding.pop(ticket.nonce, None)
        if bound_to is None or bound_to != ticket.token_id or ticket.token_id != token_id:
            raise InvalidExemption("staking exemption is not valid for this transfer")

    def before_transfer(self, from_: Address, to: Address, token_id: TokenId, exemption: Any) -> None:
        staking_exempt = False
        if isinstance(exemption, StakingExemption):
            self._consume(exemption, token_id)
            staking_exempt = True
        custodial_exempt = exemption is CustodialExemption.CUSTODIAL and to == self.flags.custodial_account

        if self.staking.is_staked(token_id) and not staking_exempt:
            raise StakingActive("token is staked")
        if self.flags.transfers_disabled and not custodial_exempt:
            raise TransfersDisabled("all transfers have been disabled")
        if to != self.flags.custodial_account and to != from_ and self.registry.balance_of(to) >= 1:
            raise OnlyOneTokenPerAccount("only one token per address")
