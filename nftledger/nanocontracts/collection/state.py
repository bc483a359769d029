from dataclasses import dataclass

from nftledger.nanocontracts.types import Address, Amount, MintSource, Timestamp


@dataclass(frozen=True, slots=True)
class SupplyLimits:
    """Limits fixed when the collection is created."""

    max_total_tokens: int
    allowlist_max_per_account: int
    public_max_per_tx: int


@dataclass(slots=True)
class CollectionFlags:
    """Owner-mutable configuration, shared by reference between components.

    Each component reads only the fields it needs.
    """

    allowlist_price: Amount
    public_price: Amount
    custodial_account: Address
    admin_percentage: int
    base_uri: str
    unrevealed_uri: str
    allowlist_active: bool = False
    public_active: bool = False
    is_revealed: bool = False
    transfers_disabled: bool = True
    staking_open: bool = False
    refund_active: bool = False


@dataclass(slots=True)
class TokenRecord:
    """What was paid for a token and whether it has been bought back."""

    mint_source: MintSource
    price_paid: Amount
    refunded: bool = False

    @property
    def is_free_mint(self) -> bool:
        return self.mint_source == MintSource.INTERNAL


@dataclass(slots=True)
class StakeRecord:
    # start == 0 means not staked
    start: Timestamp = Timestamp(0)
    cumulative: int = 0

    @property
    def staked(self) -> bool:
        return self.start != 0
