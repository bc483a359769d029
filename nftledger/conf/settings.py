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

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# 1 native coin = 10**18 base units
COIN = 10**18


class PayeeShare(BaseModel):
    """A withdrawal recipient and its fixed share of the contract balance."""

    model_config = ConfigDict(frozen=True)

    address: bytes
    percent: int = Field(gt=0, le=100)

    @field_validator("address", mode="before")
    @classmethod
    def _parse_address(cls, value: object) -> object:
        if isinstance(value, str):
            return bytes.fromhex(value)
        return value


class CollectionSettings(BaseModel):
    """Parameters a collection is created with."""

    model_config = ConfigDict(frozen=True)

    MAX_TOTAL_TOKENS: int = Field(default=10_000, gt=0)
    ALLOWLIST_MAX_PER_ACCOUNT: int = Field(default=1, gt=0)
    PUBLIC_MAX_PER_TX: int = Field(default=2, gt=0)

    ITEM_PRICE_ALLOWLIST: int = Field(default=6 * COIN // 100, ge=0)
    ITEM_PRICE_PUBLIC: int = Field(default=8 * COIN // 100, ge=0)

    # Kept from every refund
    ADMIN_PERCENTAGE: int = Field(default=10, ge=0, le=100)

    BASE_URI: str = "ipfs://revealed/"
    UNREVEALED_URI: str = "ipfs://unrevealedURI"

    TRANSFERS_DISABLED: bool = True

    # None means the collection owner
    CUSTODIAL_ADDRESS: Optional[bytes] = None

    PAYEES: list[PayeeShare] = Field(default_factory=list)

    @field_validator("CUSTODIAL_ADDRESS", mode="before")
    @classmethod
    def _parse_custodial(cls, value: object) -> object:
        if isinstance(value, str):
            return bytes.fromhex(value)
        return value

    @field_validator("PAYEES")
    @classmethod
    def _validate_payees(cls, payees: list[PayeeShare]) -> list[PayeeShare]:
        if payees and sum(payee.percent for payee in payees) != 100:
            raise ValueError("payee shares must add up to 100")
        return payees

    @model_validator(mode="after")
    def _validate_supply(self) -> "CollectionSettings":
        if self.PUBLIC_MAX_PER_TX > self.MAX_TOTAL_TOKENS:
            raise ValueError("PUBLIC_MAX_PER_TX cannot exceed MAX_TOTAL_TOKENS")
        if self.ALLOWLIST_MAX_PER_ACCOUNT > self.MAX_TOTAL_TOKENS:
            raise ValueError("ALLOWLIST_MAX_PER_ACCOUNT cannot exceed MAX_TOTAL_TOKENS")
        return self
