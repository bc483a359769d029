import os
import unittest
from typing import Any, Optional

from twisted.internet.task import Clock

from nftledger.conf import CollectionSettings
from nftledger.nanocontracts.blueprint import Blueprint
from nftledger.nanocontracts.blueprints.staking_collection import StakingCollection
from nftledger.nanocontracts.collection.allowlist import MerkleTree
from nftledger.nanocontracts.context import Context
from nftledger.nanocontracts.runner import Runner
from nftledger.nanocontracts.types import (
    ADDRESS_LEN,
    NATIVE_TOKEN_UID,
    Address,
    Amount,
    BlueprintId,
    ContractId,
    NCDepositAction,
)

# 1 coin in base units
COIN = 10**18
INITIAL_CLOCK = 1_700_000_000


class BlueprintTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.clock = Clock()
        self.clock.advance(INITIAL_CLOCK)
        self.runner = Runner()

    def gen_random_contract_id(self) -> ContractId:
        return ContractId(os.urandom(32))

    def gen_random_blueprint_id(self) -> BlueprintId:
        return BlueprintId(os.urandom(32))

    def _register_blueprint_class(self, blueprint_class: type[Blueprint]) -> BlueprintId:
        blueprint_id = self.gen_random_blueprint_id()
        self.runner.register_blueprint_class(blueprint_id, blueprint_class)
        return blueprint_id

    def _get_any_address(self, funds: int = 10 * COIN) -> Address:
        """Generate a random funded address."""
        address = Address(b"\x28" + os.urandom(ADDRESS_LEN - 1))
        if funds:
            self.runner.fund(address, funds)
        return address

    def now(self) -> int:
        return int(self.clock.seconds())

    def create_context(
        self,
        caller: Address,
        value: int = 0,
        timestamp: Optional[int] = None,
        origin: Optional[Address] = None,
    ) -> Context:
        actions = []
        if value:
            actions.append(NCDepositAction(token_uid=NATIVE_TOKEN_UID, amount=Amount(value)))
        return Context(
            actions,
            address=caller,
            timestamp=self.now() if timestamp is None else timestamp,
            origin=origin,
        )

    def get_readonly_contract(self, contract_id: ContractId) -> Blueprint:
        return self.runner.get_readonly_contract(contract_id)


class CollectionTestCase(BlueprintTestCase):
    """Deploys a small collection: supply of 4, one token reserved for the owner.

    `owner`, `address1` and `address2` are on the allow-list, `address3` is not.
    """

    max_total_tokens = 4
    allowlist_price = 6 * COIN // 100
    public_price = 8 * COIN // 100
    admin_percentage = 10

    def setUp(self) -> None:
        super().setUp()
        self.blueprint_id = self._register_blueprint_class(StakingCollection)
        self.contract_id = self.gen_random_contract_id()

        self.owner = self._get_any_address()
        self.address1 = self._get_any_address()
        self.address2 = self._get_any_address()
        self.address3 = self._get_any_address()

        self.tree = MerkleTree([self.owner, self.address1, self.address2])
        self.settings = self.build_settings()
        self.reservations = {self.owner: 1}
        self.runner.create_contract(
            self.contract_id,
            self.blueprint_id,
            self.create_context(self.owner),
            self.tree.root,
            self.reservations,
            self.settings,
        )

    def build_settings(self, **overrides: Any) -> CollectionSettings:
        params: dict[str, Any] = dict(
            MAX_TOTAL_TOKENS=self.max_total_tokens,
            ITEM_PRICE_ALLOWLIST=self.allowlist_price,
            ITEM_PRICE_PUBLIC=self.public_price,
            ADMIN_PERCENTAGE=self.admin_percentage,
            BASE_URI="revealedURI.ipfs/",
            UNREVEALED_URI="ipfs://unrevealedURI",
        )
        params.update(overrides)
        return CollectionSettings(**params)

    @property
    def contract(self) -> StakingCollection:
        contract = self.get_readonly_contract(self.contract_id)
        assert isinstance(contract, StakingCollection)
        return contract

    def call(self, method: str, caller: Address, *args: Any, value: int = 0, **kwargs: Any) -> Any:
        ctx = self.create_context(caller, value=value)
        return self.runner.call_public_method(self.contract_id, method, ctx, *args, **kwargs)

    def view(self, method: str, *args: Any) -> Any:
        return self.runner.call_view_method(self.contract_id, method, *args)

    def admin(self, method: str, *args: Any) -> Any:
        return self.call(method, self.owner, *args)

    def public_mint(self, caller: Address, amount: int = 1) -> list[int]:
        return self.call("public_mint", caller, amount, value=self.public_price * amount)

    def allowlist_mint(self, caller: Address, amount: int = 1, proof: Optional[list[bytes]] = None) -> list[int]:
        if proof is None:
            proof = self.tree.get_proof(caller)
        return self.call("allowlist_mint", caller, proof, amount, value=self.allowlist_price * amount)
