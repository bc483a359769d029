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

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, NewType, Optional, TypeVar

Address = NewType("Address", bytes)
Amount = NewType("Amount", int)
TokenUid = NewType("TokenUid", bytes)
TokenId = NewType("TokenId", int)
Timestamp = NewType("Timestamp", int)
BlueprintId = NewType("BlueprintId", bytes)
ContractId = NewType("ContractId", bytes)

# Uid of the ledger's native currency, the only token a mint can be paid with.
NATIVE_TOKEN_UID = TokenUid(b"\x00")

ADDRESS_LEN = 25

PUBLIC_METHOD_ATTR = "__nc_public__"
VIEW_METHOD_ATTR = "__nc_view__"
ALLOW_DEPOSIT_ATTR = "__nc_allow_deposit__"

T = TypeVar("T", bound=Callable[..., Any])


class MintSource(IntEnum):
    """How a token entered circulation."""

    INTERNAL = 0
    ALLOWLIST = 1
    PUBLIC = 2


@dataclass(frozen=True, slots=True)
class NCDepositAction:
    """Value attached to a call, moved from the caller into the contract."""

    token_uid: TokenUid
    amount: Amount

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("deposit amount must not be negative")


def public(fn: Optional[T] = None, *, allow_deposit: bool = False) -> Any:
    """Mark a blueprint method as a state-changing entry point.

    Only methods decorated with `allow_deposit=True` accept value attached
    to the call; the runner rejects deposits to any other method.
    """

    def decorator(method: T) -> T:
        setattr(method, PUBLIC_METHOD_ATTR, True)
        setattr(method, ALLOW_DEPOSIT_ATTR, allow_deposit)
        return method

    if fn is not None:
        return decorator(fn)
    return decorator


def view(fn: T) -> T:
    """Mark a blueprint method as a read-only entry point."""
    setattr(fn, VIEW_METHOD_ATTR, True)
    return fn


def is_public(method: Any) -> bool:
    return bool(getattr(method, PUBLIC_METHOD_ATTR, False))


def is_view(method: Any) -> bool:
    return bool(getattr(method, VIEW_METHOD_ATTR, False))


def allows_deposit(method: Any) -> bool:
    return bool(getattr(method, ALLOW_DEPOSIT_ATTR, False))
