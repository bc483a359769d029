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

import copy
from typing import TYPE_CHECKING, Any

from nftledger.nanocontracts.types import Address, Amount, ContractId

if TYPE_CHECKING:
    from nftledger.nanocontracts.runner import Runner


class BlueprintEnvironment:
    """Operations a running contract may request from the host."""

    __slots__ = ("_runner", "contract_id")

    def __init__(self, runner: Runner, contract_id: ContractId) -> None:
        self._runner = runner
        self.contract_id = contract_id

    def get_balance(self) -> Amount:
        """Native balance currently held by the contract."""
        return self._runner.get_contract_balance(self.contract_id)

    def transfer(self, to: Address, amount: Amount) -> None:
        """Pay `amount` of native value from the contract to `to`."""
        self._runner.pay_from_contract(self.contract_id, to, amount)

    def __deepcopy__(self, memo: dict[int, Any]) -> BlueprintEnvironment:
        # The host is shared, never copied along with contract state.
        return self


class Blueprint:
    """Base class for contracts.

    Fields are declared as class annotations and assigned in `initialize`.
    Entry points are marked with `@public` or `@view`; every other method is
    unreachable from outside the contract.
    """

    syscall: BlueprintEnvironment

    def __init__(self, env: BlueprintEnvironment) -> None:
        self.syscall = env

    def _snapshot_state(self) -> dict[str, Any]:
        return copy.deepcopy(vars(self))

    def _restore_state(self, state: dict[str, Any]) -> None:
        vars(self).clear()
        vars(self).update(state)
