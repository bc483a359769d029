"""Mint admission for the three sale paths.

Every check raises its own error and all checks run before anything is
written, so a rejected mint leaves supply, claims and reservations as
they were. The check order of each path is part of its contract.
"""

from typing import Sequence

from nftledger.nanocontracts.collection.allowlist import AllowlistVerifier
from nftledger.nanocontracts.collection.errors import (
    AllowlistNotActive,
    InvalidQuantity,
    OriginMismatch,
    PaymentMismatch,
    PublicNotActive,
    QuantityLimitExceeded,
    SupplyExceeded,
)
from nftledger.nanocontracts.collection.reservations import ReservationLedger
from nftledger.nanocontracts.collection.state import CollectionFlags, SupplyLimits, TokenRecord
from nftledger.nanocontracts.context import Context
from nftledger.nanocontracts.registry import AssetRegistry
from nftledger.nanocontracts.types import NATIVE_TOKEN_UID, Amount, MintSource, TokenId


class SaleController:
    def __init__(
        self,
        registry: AssetRegistry,
        flags: CollectionFlags,
        limits: SupplyLimits,
        reservations: ReservationLedger,
        allowlist: AllowlistVerifier,
    ) -> None:
        self.registry = registry
        self.flags = flags
        self.limits = limits
        self.reservations = reservations
        self.allowlist = allowlist
        self.tokens: dict[TokenId, TokenRecord] = {}

    @property
    def issued(self) -> int:
        return self.registry.total_issued()

    @property
    def available_for_sale(self) -> int:
        """Tokens that paid mints may still take, reserved ones excluded."""
        return self.limits.max_total_tokens - self.reservations.total_reserved - self.issued

    def internal_mint(self, ctx: Context, amount: int) -> list[TokenId]:
        self._check_quantity(amount)
        self.reservations.check(ctx.address, amount)
        if self.issued + amount > self.limits.max_total_tokens:
            raise SupplyExceeded("not enough tokens left to mint")

        self.reservations.debit(ctx.address, amount)
        return self._issue(ctx, amount, MintSource.INTERNAL, Amount(0))

    def allowlist_mint(self, ctx: Context, proof: Sequence[bytes], amount: int) -> list[TokenId]:
        self._check_quantity(amount)
        if not self.flags.allowlist_active:
            raise AllowlistNotActive("allow-list mint is not active")
        self._check_origin(ctx)
        self._check_sale_supply(amount)
        self._check_payment(ctx, self.flags.allowlist_price, amount)
        self.allowlist.check_claim(ctx.address, amount)
        self.allowlist.check_proof(proof, ctx.address)

        self.allowlist.record_claim(ctx.address, amount)
        return self._issue(ctx, amount, MintSource.ALLOWLIST, self.flags.allowlist_price)

    def public_mint(self, ctx: Context, amount: int) -> list[TokenId]:
        self._check_quantity(amount)
        if not self.flags.public_active:
            raise PublicNotActive("public mint is not active")
        self._check_origin(ctx)
        if amount > self.limits.public_max_per_tx:
            raise QuantityLimitExceeded(
                f"at most {self.limits.public_max_per_tx} tokens per public mint"
            )
        self._check_sale_supply(amount)
        self._check_payment(ctx, self.flags.public_price, amount)

        return self._issue(ctx, amount, MintSource.PUBLIC, self.flags.public_price)

    def _check_quantity(self, amount: int) -> None:
        if amount < 1:
            raise InvalidQuantity("must mint at least one token")

    def _check_origin(self, ctx: Context) -> None:
        if not ctx.is_direct_call:
            raise OriginMismatch("mint must be called directly by the minting account")

    def _check_sale_supply(self, amount: int) -> None:
        if amount > self.available_for_sale:
            raise SupplyExceeded("not enough tokens left to mint")

    def _check_payment(self, ctx: Context, unit_price: Amount, amount: int) -> None:
        if any(token_uid != NATIVE_TOKEN_UID for token_uid in ctx.actions):
            raise PaymentMismatch("mints are paid in the native token only")
        paid = ctx.get_deposit(NATIVE_TOKEN_UID)
        if paid != unit_price * amount:
            raise PaymentMismatch(f"incorrect amount for transaction: expected {unit_price * amount}, got {paid}")

    def _issue(self, ctx: Context, amount: int, source: MintSource, unit_price: Amount) -> list[TokenId]:
        token_ids = self.registry.issue(ctx.address, amount)
        for token_id in token_ids:
            self.tokens[token_id] = TokenRecord(mint_source=source, price_paid=unit_price)
        return token_ids

    def get_record(self, token_id: TokenId) -> TokenRecord:
        self.registry.owner_of(token_id)
        return self.tokens[token_id]
