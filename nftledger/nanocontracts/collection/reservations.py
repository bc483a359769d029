from typing import Mapping

from nftledger.nanocontracts.collection.errors import InsufficientReservation
from nftledger.nanocontracts.exception import NCFail
from nftledger.nanocontracts.types import Address


class ReservationLedger:
    """Free mint allowances handed out at creation.

    Allowances only go down; `total_reserved` is always the sum of what is
    left.
    """

    def __init__(self, allowances: Mapping[Address, int]) -> None:
        self.allowances: dict[Address, int] = {}
        for account, allowance in allowances.items():
            if allowance < 0:
                raise NCFail("reserved allowance must not be negative")
            if allowance:
                self.allowances[Address(account)] = allowance
        self.total_reserved = sum(self.allowances.values())

    def remaining(self, account: Address) -> int:
        return self.allowances.get(account, 0)

    def check(self, account: Address, amount: int) -> None:
        if self.remaining(account) < amount:
            raise InsufficientReservation(
                f"reserved allowance is {self.remaining(account)}, asked for {amount}"
            )

    def debit(self, account: Address, amount: int) -> None:
        self.check(account, amount)
        left = self.remaining(account) - amount
        if left:
            self.allowances[account] = left
        else:
            self.allowances.pop(account, None)
        self.total_reserved -= amount
