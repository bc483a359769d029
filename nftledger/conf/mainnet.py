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

from nftledger.conf.settings import COIN, CollectionSettings, PayeeShare

SETTINGS = CollectionSettings(
    MAX_TOTAL_TOKENS=10_000,
    ALLOWLIST_MAX_PER_ACCOUNT=1,
    PUBLIC_MAX_PER_TX=2,
    ITEM_PRICE_ALLOWLIST=6 * COIN // 100,
    ITEM_PRICE_PUBLIC=8 * COIN // 100,
    ADMIN_PERCENTAGE=10,
    BASE_URI="ipfs://revealed/",
    UNREVEALED_URI="ipfs://unrevealedURI",
    TRANSFERS_DISABLED=True,
    PAYEES=[
        PayeeShare(address=bytes.fromhex("28" + "11" * 24), percent=30),
        PayeeShare(address=bytes.fromhex("28" + "22" * 24), percent=25),
        PayeeShare(address=bytes.fromhex("28" + "33" * 24), percent=20),
        PayeeShare(address=bytes.fromhex("28" + "44" * 24), percent=10),
        PayeeShare(address=bytes.fromhex("28" + "55" * 24), percent=10),
        PayeeShare(address=bytes.fromhex("28" + "66" * 24), percent=5),
    ],
)
