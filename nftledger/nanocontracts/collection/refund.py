from nftledger.nanocontracts.blueprint import BlueprintEnvironment
from nftledger.nanocontracts.collection.errors import (
    AlreadyRefunded,
    FreeMintNotRefundable,
    NotTokenOwner,
    RefundNotActive,
)
from nftledger.nanocontracts.collection.sale import SaleController
from nftledger.nanocontracts.collection.state import CollectionFlags
from nftledger.nanocontracts.collection.transfer_policy import CustodialExemption
from nftledger.nanocontracts.registry import AssetRegistry
from nftledger.nanocontracts.types import Address, Amount, TokenId

PERCENT = 100


def refund_amount(price_paid: int, admin_percentage: int) -> Amount:
    """What a refund pays back: the token's own price minus the admin fee."""
    return Amount(price_paid * (PERCENT - admin_percentage) // PERCENT)


class RefundEngine:
    """Buys paid tokens back into the custodial account.

    A token can be refunded once. The repayment depends on what was paid
    for that token, so allow-list and public mints are refunded in
    proportion to their own prices.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        flags: CollectionFlags,
        sale: SaleController,
        syscall: BlueprintEnvironment,
    ) -> None:
        self.registry = registry
        self.flags = flags
        self.sale = sale
        self.syscall = syscall

    def refund(self, caller: Address, to: Address, token_id: TokenId) -> Amount:
        if not self.flags.refund_active:
            raise RefundNotActive("refund period is not active")
        owner = self.registry.owner_of(token_id)
        if caller != owner:
            raise NotTokenOwner("refund caller is not owner")
        record = self.sale.get_record(token_id)
        if record.refunded:
            raise AlreadyRefunded("token has already been refunded")
        if record.is_free_mint:
            raise FreeMintNotRefundable("token was a free mint")

        record.refunded = True
        self.registry.transfer(
            owner,
            self.flags.custodial_account,
            token_id,
            exemption=CustodialExemption.CUSTODIAL,
        )
        amount = refund_amount(record.price_paid, self.flags.admin_percentage)
        if amount:
            self.syscall.transfer(to, amount)
        return amount
