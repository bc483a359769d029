"""Ownership storage for non-fungible tokens.

The registry knows who owns what and who may move it. It knows nothing
about sales, staking or refunds: policy is plugged in through transfer
hooks, which run before every transfer (never before an issue) and reject
it by raising.
"""

from typing import Any, Optional, Protocol

from nftledger.nanocontracts.exception import NCFail
from nftledger.nanocontracts.types import Address, TokenId


class NonexistentToken(NCFail):
    """Raised when a token id was never issued."""

    pass


class TransferFromIncorrectOwner(NCFail):
    """Raised when `from_` does not own the token being transferred."""

    pass


class NotApprovedOrOwner(NCFail):
    """Raised when the operator may not act on the token."""

    pass


class TransferHook(Protocol):
    def before_transfer(
        self,
        from_: Address,
        to: Address,
        token_id: TokenId,
        exemption: Any,
    ) -> None:
        ...


class AssetRegistry(Protocol):
    """Operations the collection needs from its token storage."""

    def issue(self, to: Address, quantity: int) -> list[TokenId]:
        ...

    def exists(self, token_id: TokenId) -> bool:
        ...

    def owner_of(self, token_id: TokenId) -> Address:
        ...

    def balance_of(self, owner: Address) -> int:
        ...

    def total_issued(self) -> int:
        ...

    def approve(self, operator: Address, to: Optional[Address], token_id: TokenId) -> None:
        ...

    def is_approved_or_owner(self, operator: Address, token_id: TokenId) -> bool:
        ...

    def transfer(
        self,
        from_: Address,
        to: Address,
        token_id: TokenId,
        *,
        operator: Optional[Address] = None,
        exemption: Any = None,
    ) -> None:
        ...

    def set_approval_for_all(self, owner: Address, operator: Address, approved: bool) -> None:
        ...

    def add_transfer_hook(self, hook: TransferHook) -> None:
        ...


class NonFungibleRegistry:
    """In-memory AssetRegistry issuing dense, zero-based identifiers."""

    def __init__(self) -> None:
        self.owners: dict[TokenId, Address] = {}
        self.balances: dict[Address, int] = {}
        self.token_approvals: dict[TokenId, Address] = {}
        self.operator_approvals: dict[Address, set[Address]] = {}
        self.hooks: list[TransferHook] = []
        self.next_token_id = 0

    def add_transfer_hook(self, hook: TransferHook) -> None:
        self.hooks.append(hook)

    def total_issued(self) -> int:
        return self.next_token_id

    def exists(self, token_id: TokenId) -> bool:
        return token_id in self.owners

    def owner_of(self, token_id: TokenId) -> Address:
        owner = self.owners.get(token_id)
        if owner is None:
            raise NonexistentToken(f"token {token_id} does not exist")
        return owner

    def balance_of(self, owner: Address) -> int:
        return self.balances.get(owner, 0)

    def issue(self, to: Address, quantity: int) -> list[TokenId]:
        """Create `quantity` new tokens owned by `to`."""
        if quantity < 1:
            raise NCFail("quantity must be positive")
        token_ids = [TokenId(self.next_token_id + i) for i in range(quantity)]
        for token_id in token_ids:
            self.owners[token_id] = to
        self.balances[to] = self.balances.get(to, 0) + quantity
        self.next_token_id += quantity
        return token_ids

    def is_approved_for_all(self, owner: Address, operator: Address) -> bool:
        return operator in self.operator_approvals.get(owner, set())

    def is_approved_or_owner(self, operator: Address, token_id: TokenId) -> bool:
        owner = self.owner_of(token_id)
        return (
            operator == owner
            or self.token_approvals.get(token_id) == operator
            or self.is_approved_for_all(owner, operator)
        )

    def approve(self, operator: Address, to: Optional[Address], token_id: TokenId) -> None:
        """Let `to` move `token_id`; `None` clears the approval."""
        owner = self.owner_of(token_id)
        if operator != owner and not self.is_approved_for_all(owner, operator):
            raise NotApprovedOrOwner("approve caller is not owner nor approved for all")
        if to is None:
            self.token_approvals.pop(token_id, None)
        else:
            self.token_approvals[token_id] = to

    def set_approval_for_all(self, owner: Address, operator: Address, approved: bool) -> None:
        if owner == operator:
            raise NCFail("cannot approve self as operator")
        operators = self.operator_approvals.setdefault(owner, set())
        if approved:
            operators.add(operator)
        else:
            operators.discard(operator)

    def transfer(
        self,
        from_: Address,
        to: Address,
        token_id: TokenId,
        *,
        operator: Optional[Address] = None,
        exemption: Any = None,
    ) -> None:
        """Move a token, running every transfer hook first.

        `operator` is the account asking for the move; when it is None the
        move was already authorized by the contract itself.
        """
        owner = self.owner_of(token_id)
        if owner != from_:
            raise TransferFromIncorrectOwner(f"token {token_id} is not owned by sender")
        if operator is not None and not self.is_approved_or_owner(operator, token_id):
            raise NotApprovedOrOwner("transfer caller is not owner nor approved")

        for hook in self.hooks:
            hook.before_transfer(from_, to, token_id, exemption)

        self.token_approvals.pop(token_id, None)
        self.balances[from_] -= 1
        if self.balances[from_] == 0:
            del self.balances[from_]
        self.balances[to] = self.balances.get(to, 0) + 1
        self.owners[token_id] = to
