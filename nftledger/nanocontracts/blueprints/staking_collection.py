import logging
from typing import NamedTuple, Optional, Sequence

from nftledger.conf import CollectionSettings, get_settings
from nftledger.nanocontracts.access import OwnerGate
from nftledger.nanocontracts.blueprint import Blueprint
from nftledger.nanocontracts.collection.allowlist import AllowlistVerifier
from nftledger.nanocontracts.collection.errors import (
    InvalidPercentage,
    InvalidPrice,
    NotTokenOwner,
    NothingToWithdraw,
    SupplyExceeded,
)
from nftledger.nanocontracts.collection.refund import RefundEngine
from nftledger.nanocontracts.collection.reservations import ReservationLedger
from nftledger.nanocontracts.collection.reveal import RevealShuffler
from nftledger.nanocontracts.collection.sale import SaleController
from nftledger.nanocontracts.collection.staking import StakingLifecycleManager, StakingPeriod
from nftledger.nanocontracts.collection.state import CollectionFlags, SupplyLimits
from nftledger.nanocontracts.collection.transfer_policy import CustodialExemption, TransferPolicyGuard
from nftledger.nanocontracts.context import Context
from nftledger.nanocontracts.exception import NCFail
from nftledger.nanocontracts.guard import ReentrancyLatch, nonreentrant
from nftledger.nanocontracts.registry import NonFungibleRegistry
from nftledger.nanocontracts.types import Address, Amount, Timestamp, TokenId, public, view

logger = logging.getLogger(__name__)

PERCENT = 100


class StakingToggleResult(NamedTuple):
    """Outcome for one token of a batch staking toggle."""

    token_id: int
    staked: Optional[bool]  # new state, None when the toggle failed
    error: Optional[str]


class TokenInfo(NamedTuple):
    owner: str
    mint_source: int
    price_paid: int
    refunded: bool
    staked: bool


class CollectionInfo(NamedTuple):
    owner: str
    custodial_account: str
    max_total_tokens: int
    total_supply: int
    total_reserved: int
    allowlist_price: int
    public_price: int
    admin_percentage: int
    allowlist_active: bool
    public_active: bool
    is_revealed: bool
    transfers_disabled: bool
    staking_open: bool
    refund_active: bool


class StakingCollection(Blueprint):
    """Collectible collection with phased sale, staking and buy-back.

    The life cycle of contracts using this blueprint is the following:

    1. [Owner] Create the contract with the allow-list root and the reserved
       allowances.
    2. [Reserved] `internal_mint(...)` at any time, free of charge.
    3. [Owner] Open the allow-list phase, then the public phase.
    4. [User] `allowlist_mint(...)` or `public_mint(...)` paying the phase price.
    5. [User] `toggle_staking(...)` to lock a token and accrue staking time.
    6. [Owner] Open the refund window; [User] `refund(...)` a paid token.
    7. [Owner] Reveal, `shuffler(...)` the reveal order, `withdraw()` funds.
    """

    # Collaborators
    gate: OwnerGate
    latch: ReentrancyLatch
    registry: NonFungibleRegistry

    # Configuration
    flags: CollectionFlags
    limits: SupplyLimits
    payees: list[tuple[Address, int]]

    # Components
    reservations: ReservationLedger
    allowlist: AllowlistVerifier
    sale: SaleController
    staking: StakingLifecycleManager
    transfer_policy: TransferPolicyGuard
    refunds: RefundEngine
    reveal: RevealShuffler

    @public
    def initialize(
        self,
        ctx: Context,
        merkle_root: bytes,
        reservations: dict[Address, int],
        settings: Optional[CollectionSettings] = None,
    ) -> None:
        if settings is None:
            settings = get_settings()

        self.gate = OwnerGate(ctx.address)
        self.latch = ReentrancyLatch()
        self.registry = NonFungibleRegistry()

        custodial = settings.CUSTODIAL_ADDRESS or ctx.address
        self.flags = CollectionFlags(
            allowlist_price=Amount(settings.ITEM_PRICE_ALLOWLIST),
            public_price=Amount(settings.ITEM_PRICE_PUBLIC),
            custodial_account=Address(custodial),
            admin_percentage=settings.ADMIN_PERCENTAGE,
            base_uri=settings.BASE_URI,
            unrevealed_uri=settings.UNREVEALED_URI,
            transfers_disabled=settings.TRANSFERS_DISABLED,
        )
        self.limits = SupplyLimits(
            max_total_tokens=settings.MAX_TOTAL_TOKENS,
            allowlist_max_per_account=settings.ALLOWLIST_MAX_PER_ACCOUNT,
            public_max_per_tx=settings.PUBLIC_MAX_PER_TX,
        )
        self.payees = [(Address(payee.address), payee.percent) for payee in settings.PAYEES]

        self.reservations = ReservationLedger(reservations)
        if self.reservations.total_reserved > self.limits.max_total_tokens:
            raise SupplyExceeded("reserved tokens exceed the supply ceiling")

        self.allowlist = AllowlistVerifier(merkle_root, self.limits.allowlist_max_per_account)
        self.sale = SaleController(self.registry, self.flags, self.limits, self.reservations, self.allowlist)
        self.staking = StakingLifecycleManager(self.registry, self.flags)
        self.transfer_policy = TransferPolicyGuard(self.registry, self.flags, self.staking)
        self.registry.add_transfer_hook(self.transfer_policy)
        self.refunds = RefundEngine(self.registry, self.flags, self.sale, self.syscall)
        self.reveal = RevealShuffler(self.registry, self.flags, self.limits.max_total_tokens)

    # Minting

    @public
    @nonreentrant
    def internal_mint(self, ctx: Context, amount: int) -> list[TokenId]:
        token_ids = self.sale.internal_mint(ctx, amount)
        logger.info("internal mint of %d token(s) to %s", amount, ctx.address.hex())
        return token_ids

    @public(allow_deposit=True)
    @nonreentrant
    def allowlist_mint(self, ctx: Context, proof: Sequence[bytes], amount: int) -> list[TokenId]:
        token_ids = self.sale.allowlist_mint(ctx, proof, amount)
        logger.info("allow-list mint of %d token(s) to %s", amount, ctx.address.hex())
        return token_ids

    @public(allow_deposit=True)
    @nonreentrant
    def public_mint(self, ctx: Context, amount: int) -> list[TokenId]:
        token_ids = self.sale.public_mint(ctx, amount)
        logger.info("public mint of %d token(s) to %s", amount, ctx.address.hex())
        return token_ids

    # Staking

    @public
    def toggle_staking(self, ctx: Context, token_id: TokenId) -> bool:
        return self.staking.toggle(ctx.address, token_id, ctx.timestamp)

    @public
    def toggle_staking_batch(self, ctx: Context, token_ids: Sequence[TokenId]) -> list[StakingToggleResult]:
        """Toggle each token on its own; a failing token does not stop the others."""
        results = []
        for token_id in token_ids:
            try:
                staked = self.staking.toggle(ctx.address, token_id, ctx.timestamp)
            except NCFail as e:
                logger.debug("staking toggle of token %d failed: %r", token_id, e)
                results.append(StakingToggleResult(token_id, None, type(e).__name__))
            else:
                results.append(StakingToggleResult(token_id, staked, None))
        return results

    # Transfers

    @public
    def transfer_from(self, ctx: Context, from_: Address, to: Address, token_id: TokenId) -> None:
        self.registry.transfer(from_, to, token_id, operator=ctx.address)

    @public
    def authorized_staking_exempt_transfer(
        self, ctx: Context, from_: Address, to: Address, token_id: TokenId
    ) -> None:
        """Move a staked token without unstaking it; only its owner may do so."""
        if ctx.address != self.registry.owner_of(token_id):
            raise NotTokenOwner("caller is not owner")
        ticket = self.transfer_policy.issue_staking_exemption(token_id)
        try:
            self.registry.transfer(from_, to, token_id, exemption=ticket)
        finally:
            self.transfer_policy.revoke(ticket)

    @public
    def approve(self, ctx: Context, to: Optional[Address], token_id: TokenId) -> None:
        self.registry.approve(ctx.address, to, token_id)

    @public
    def set_approval_for_all(self, ctx: Context, operator: Address, approved: bool) -> None:
        self.registry.set_approval_for_all(ctx.address, operator, approved)

    @public
    def reclaim(self, ctx: Context, token_id: TokenId) -> None:
        """Owner takes any token back into the custodial account."""
        self.gate.check(ctx.address)
        holder = self.registry.owner_of(token_id)
        self.registry.transfer(
            holder,
            self.flags.custodial_account,
            token_id,
            exemption=CustodialExemption.CUSTODIAL,
        )
        logger.info("token %d reclaimed from %s", token_id, holder.hex())

    # Refund

    @public
    @nonreentrant
    def refund(self, ctx: Context, to: Address, token_id: TokenId) -> Amount:
        amount = self.refunds.refund(ctx.address, to, token_id)
        logger.info("token %d refunded, %d paid to %s", token_id, amount, to.hex())
        return amount

    # Reveal

    @public
    def shuffler(self, ctx: Context, seed: int) -> None:
        self.gate.check(ctx.address)
        self.reveal.shuffle(seed)
        logger.info("reveal order shuffled over %d token(s)", len(self.reveal.order))

    # Administration

    @public
    def transfer_ownership(self, ctx: Context, new_owner: Address) -> None:
        self.gate.transfer_ownership(ctx.address, new_owner)

    @public
    def set_allowlist_mint_active(self, ctx: Context, active: bool) -> None:
        self.gate.check(ctx.address)
        self.flags.allowlist_active = active

    @public
    def set_public_mint_active(self, ctx: Context, active: bool) -> None:
        self.gate.check(ctx.address)
        self.flags.public_active = active

    @public
    def set_is_revealed(self, ctx: Context, revealed: bool) -> None:
        self.gate.check(ctx.address)
        self.flags.is_revealed = revealed

    @public
    def set_merkle_root(self, ctx: Context, root: bytes) -> None:
        self.gate.check(ctx.address)
        self.allowlist.set_root(root)

    @public
    def set_prices(self, ctx: Context, allowlist_price: Amount, public_price: Amount) -> None:
        self.gate.check(ctx.address)
        if allowlist_price < 0 or public_price < 0:
            raise InvalidPrice("prices must not be negative")
        self.flags.allowlist_price = Amount(allowlist_price)
        self.flags.public_price = Amount(public_price)

    @public
    def set_base_uri(self, ctx: Context, base_uri: str) -> None:
        self.gate.check(ctx.address)
        self.flags.base_uri = base_uri

    @public
    def set_unrevealed_uri(self, ctx: Context, unrevealed_uri: str) -> None:
        self.gate.check(ctx.address)
        self.flags.unrevealed_uri = unrevealed_uri

    @public
    def set_staking_open(self, ctx: Context, open_: bool) -> None:
        self.gate.check(ctx.address)
        self.flags.staking_open = open_

    @public
    def set_all_transfers_disabled(self, ctx: Context, disabled: bool) -> None:
        self.gate.check(ctx.address)
        self.flags.transfers_disabled = disabled

    @public
    def set_refund_active(self, ctx: Context, active: bool) -> None:
        self.gate.check(ctx.address)
        self.flags.refund_active = active

    @public
    def set_custodial_account(self, ctx: Context, account: Address) -> None:
        self.gate.check(ctx.address)
        self.flags.custodial_account = Address(account)

    @public
    def set_admin_percentage(self, ctx: Context, percentage: int) -> None:
        self.gate.check(ctx.address)
        if not 0 <= percentage <= PERCENT:
            raise InvalidPercentage("admin percentage must be between 0 and 100")
        self.flags.admin_percentage = percentage

    @public
    @nonreentrant
    def withdraw(self, ctx: Context) -> None:
        """Split the whole balance between the payees; the last one takes the dust."""
        self.gate.check(ctx.address)
        balance = self.syscall.get_balance()
        if balance == 0:
            raise NothingToWithdraw("nothing to withdraw")

        payees = self.payees or [(self.gate.owner, PERCENT)]
        shares = [balance * percent // PERCENT for _, percent in payees[:-1]]
        shares.append(balance - sum(shares))
        for (address, _), share in zip(payees, shares):
            if share:
                self.syscall.transfer(address, Amount(share))
        logger.info("withdrew %d to %d payee(s)", balance, len(payees))

    # Views

    @view
    def token_uri(self, token_id: TokenId) -> str:
        return self.reveal.token_uri(token_id)

    @view
    def staking_period(self, token_id: TokenId, timestamp: Timestamp) -> StakingPeriod:
        return self.staking.period(token_id, timestamp)

    @view
    def is_on_allowlist(self, proof: Sequence[bytes], account: Address) -> bool:
        return self.allowlist.is_on_allowlist(proof, account)

    @view
    def owner_of(self, token_id: TokenId) -> Address:
        return self.registry.owner_of(token_id)

    @view
    def balance_of(self, account: Address) -> int:
        return self.registry.balance_of(account)

    @view
    def total_supply(self) -> int:
        return self.registry.total_issued()

    @view
    def get_random_numbers_array(self) -> list[int]:
        return list(self.reveal.order)

    @view
    def reserved_allowance(self, account: Address) -> int:
        return self.reservations.remaining(account)

    @view
    def allowlist_claimed(self, account: Address) -> int:
        return self.allowlist.claimed_by(account)

    @view
    def owner(self) -> Address:
        return self.gate.owner

    @view
    def custodial_account(self) -> Address:
        return self.flags.custodial_account

    @view
    def get_token_info(self, token_id: TokenId) -> TokenInfo:
        record = self.sale.get_record(token_id)
        return TokenInfo(
            owner=self.registry.owner_of(token_id).hex(),
            mint_source=int(record.mint_source),
            price_paid=record.price_paid,
            refunded=record.refunded,
            staked=self.staking.is_staked(token_id),
        )

    @view
    def get_collection_info(self) -> CollectionInfo:
        return CollectionInfo(
            owner=self.gate.owner.hex(),
            custodial_account=self.flags.custodial_account.hex(),
            max_total_tokens=self.limits.max_total_tokens,
            total_supply=self.registry.total_issued(),
            total_reserved=self.reservations.total_reserved,
            allowlist_price=self.flags.allowlist_price,
            public_price=self.flags.public_price,
            admin_percentage=self.flags.admin_percentage,
            allowlist_active=self.flags.allowlist_active,
            public_active=self.flags.public_active,
            is_revealed=self.flags.is_revealed,
            transfers_disabled=self.flags.transfers_disabled,
            staking_open=self.flags.staking_open,
            refund_active=self.flags.refund_active,
        )
