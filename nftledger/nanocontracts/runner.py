# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from nftledger.nanocontracts.blueprint import Blueprint, BlueprintEnvironment
from nftledger.nanocontracts.context import Context
from nftledger.nanocontracts.exception import (
    NCBlueprintNotFound,
    NCContractExists,
    NCContractNotFound,
    NCFail,
    NCForbiddenAction,
    NCInsufficientFunds,
    NCMethodNotFound,
    NCPaymentRejected,
)
from nftledger.nanocontracts.types import (
    NATIVE_TOKEN_UID,
    Address,
    Amount,
    BlueprintId,
    ContractId,
    allows_deposit,
    is_public,
    is_view,
)

logger = logging.getLogger(__name__)

# Called after an account has been credited by a contract payout.
ReceiveHook = Callable[["Runner", ContractId, Amount], None]


class Runner:
    """Executes contract calls one at a time against in-memory state.

    Each top-level call is a transaction: it either commits all its effects
    (contract fields, contract balances and account balances) or none of
    them. Calls made from inside a running call, for instance by a payout
    receiver, are part of the same transaction and a failure in any of them
    reverts the whole transaction.
    """

    def __init__(self) -> None:
        self._blueprints: dict[BlueprintId, type[Blueprint]] = {}
        self._contracts: dict[ContractId, Blueprint] = {}
        self._contract_balances: dict[ContractId, Amount] = {}
        self._balances: dict[Address, Amount] = {}
        self._receivers: dict[Address, ReceiveHook] = {}
        self._depth = 0
        self._nested_failure: Optional[NCFail] = None

    # Registration

    def register_blueprint_class(self, blueprint_id: BlueprintId, blueprint_class: type[Blueprint]) -> None:
        self._blueprints[blueprint_id] = blueprint_class

    def register_receiver(self, address: Address, hook: ReceiveHook) -> None:
        """Install a callback run whenever `address` receives a contract payout."""
        self._receivers[address] = hook

    # Balances

    def fund(self, address: Address, amount: int) -> None:
        """Credit an external account, outside of any contract call."""
        self._balances[address] = Amount(self._balances.get(address, 0) + amount)

    def get_balance(self, address: Address) -> Amount:
        return self._balances.get(address, Amount(0))

    def get_contract_balance(self, contract_id: ContractId) -> Amount:
        self._get_contract(contract_id)
        return self._contract_balances.get(contract_id, Amount(0))

    def pay_from_contract(self, contract_id: ContractId, to: Address, amount: Amount) -> None:
        if amount < 0:
            raise NCFail("payment amount must not be negative")
        balance = self._contract_balances.get(contract_id, Amount(0))
        if amount > balance:
            raise NCInsufficientFunds(f"contract balance {balance} cannot cover {amount}")
        self._contract_balances[contract_id] = Amount(balance - amount)
        self._balances[to] = Amount(self._balances.get(to, 0) + amount)
        hook = self._receivers.get(to)
        if hook is not None:
            hook(self, contract_id, amount)

    def send_value(self, sender: Address, contract_id: ContractId, amount: int) -> None:
        """Plain value transfer to a contract; contracts only take value in payable calls."""
        self._get_contract(contract_id)
        raise NCPaymentRejected("contract does not allow receipt of tokens")

    # Execution

    def _get_contract(self, contract_id: ContractId) -> Blueprint:
        contract = self._contracts.get(contract_id)
        if contract is None:
            raise NCContractNotFound(contract_id.hex())
        return contract

    def get_readonly_contract(self, contract_id: ContractId) -> Blueprint:
        return self._get_contract(contract_id)

    def create_contract(
        self,
        contract_id: ContractId,
        blueprint_id: BlueprintId,
        ctx: Context,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        if contract_id in self._contracts:
            raise NCContractExists(contract_id.hex())
        blueprint_class = self._blueprints.get(blueprint_id)
        if blueprint_class is None:
            raise NCBlueprintNotFound(blueprint_id.hex())

        contract = blueprint_class(BlueprintEnvironment(self, contract_id))
        self._contracts[contract_id] = contract
        self._contract_balances[contract_id] = Amount(0)
        try:
            return self._execute(contract_id, contract, "initialize", ctx, args, kwargs)
        except BaseException:
            del self._contracts[contract_id]
            del self._contract_balances[contract_id]
            raise

    def call_public_method(
        self,
        contract_id: ContractId,
        method_name: str,
        ctx: Context,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        contract = self._get_contract(contract_id)
        if method_name == "initialize":
            raise NCMethodNotFound("initialize can only be called on creation")
        return self._execute(contract_id, contract, method_name, ctx, args, kwargs)

    def call_view_method(self, contract_id: ContractId, method_name: str, *args: Any, **kwargs: Any) -> Any:
        contract = self._get_contract(contract_id)
        method = getattr(type(contract), method_name, None)
        if method is None or not is_view(method):
            raise NCMethodNotFound(f"{type(contract).__name__}.{method_name}")
        return getattr(contract, method_name)(*args, **kwargs)

    def _execute(
        self,
        contract_id: ContractId,
        contract: Blueprint,
        method_name: str,
        ctx: Context,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        method = getattr(type(contract), method_name, None)
        if method is None or not is_public(method):
            raise NCMethodNotFound(f"{type(contract).__name__}.{method_name}")
        if ctx.actions and not allows_deposit(method):
            raise NCForbiddenAction(f"{method_name} does not accept deposits")

        top_level = self._depth == 0
        if top_level:
            self._nested_failure = None
            saved_contracts = {cid: c._snapshot_state() for cid, c in self._contracts.items()}
            saved_contract_balances = dict(self._contract_balances)
            saved_balances = dict(self._balances)

        self._depth += 1
        try:
            self._apply_deposits(contract_id, ctx)
            result = getattr(contract, method_name)(ctx, *args, **kwargs)
            if top_level and self._nested_failure is not None:
                raise self._nested_failure
            return result
        except BaseException as e:
            logger.debug("call %s.%s failed: %r", type(contract).__name__, method_name, e)
            if top_level:
                # Any error, not only NCFail, must leave no partial effects.

                for cid, state in saved_contracts.items():
                    self._contracts[cid]._restore_state(state)
                self._contract_balances = saved_contract_balances
                self._balances = saved_balances
            elif isinstance(e, NCFail) and self._nested_failure is None:
                self._nested_failure = e
            raise
        finally:
            self._depth -= 1

    def _apply_deposits(self, contract_id: ContractId, ctx: Context) -> None:
        for token_uid, action in ctx.actions.items():
            if token_uid != NATIVE_TOKEN_UID:
                # Foreign tokens are accounted by the contract itself.
                continue
            balance = self._balances.get(ctx.address, Amount(0))
            if action.amount > balance:
                raise NCInsufficientFunds(f"caller balance {balance} cannot cover {action.amount}")
            self._balances[ctx.address] = Amount(balance - action.amount)
            self._contract_balances[contract_id] = Amount(
                self._contract_balances.get(contract_id, 0) + action.amount
            )
