from nftledger.nanocontracts.exception import NCFail
from nftledger.nanocontracts.types import Address


class Unauthorized(NCFail):
    """Raised when an unauthorized address tries to perform an action."""

    pass


class OwnerGate:
    """Single privileged caller, checked explicitly by each admin entry point."""

    __slots__ = ("_owner",)

    def __init__(self, owner: Address) -> None:
        self._owner = Address(owner)

    @property
    def owner(self) -> Address:
        return self._owner

    def check(self, address: Address) -> None:
        if address != self._owner:
            raise Unauthorized("Only owner can perform this action")

    def transfer_ownership(self, caller: Address, new_owner: Address) -> None:
        self.check(caller)
        self._owner = Address(new_owner)
