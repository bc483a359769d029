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

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from nftledger.nanocontracts.exception import NCInvalidContext
from nftledger.nanocontracts.types import Address, Amount, NCDepositAction, Timestamp, TokenUid


class Context:
    """Information about the call being executed.

    `address` is the immediate caller. `origin` is the account that signed
    the transaction; it differs from `address` when the call is relayed by
    another contract.
    """

    __slots__ = ("_actions", "address", "origin", "timestamp")

    def __init__(
        self,
        actions: Iterable[NCDepositAction],
        address: Address,
        timestamp: int | float,
        origin: Optional[Address] = None,
    ) -> None:
        actions_map: dict[TokenUid, NCDepositAction] = {}
        for action in actions:
            if action.token_uid in actions_map:
                raise NCInvalidContext(f"duplicate action for token {action.token_uid.hex()}")
            actions_map[action.token_uid] = action

        self._actions: Mapping[TokenUid, NCDepositAction] = MappingProxyType(actions_map)
        self.address = Address(address)
        self.origin = Address(origin) if origin is not None else Address(address)
        self.timestamp = Timestamp(int(timestamp))

    @property
    def actions(self) -> Mapping[TokenUid, NCDepositAction]:
        return self._actions

    @property
    def is_direct_call(self) -> bool:
        """True when the caller signed the transaction itself."""
        return self.address == self.origin

    def get_deposit(self, token_uid: TokenUid) -> Amount:
        """Amount of `token_uid` attached to this call, zero when absent."""
        action = self._actions.get(token_uid)
        if action is None:
            return Amount(0)
        return action.amount

    def __repr__(self) -> str:
        return (
            f"Context(actions={list(self._actions.values())!r}, address={self.address.hex()}, "
            f"origin={self.origin.hex()}, timestamp={self.timestamp})"
        )
