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


class NCFail(Exception):
    """Base class for every failure raised while executing a contract call.

    A call that raises NCFail is reverted by the runner: contract state and
    balances go back to what they were before the call.
    """


class NCContractNotFound(NCFail):
    """Raised when a call targets a contract id that was never created."""


class NCBlueprintNotFound(NCFail):
    """Raised when a contract is created from an unregistered blueprint."""


class NCContractExists(NCFail):
    """Raised when a contract id is reused."""


class NCMethodNotFound(NCFail):
    """Raised when the called entry point does not exist on the blueprint."""


class NCForbiddenAction(NCFail):
    """Raised when value is attached to an entry point that does not accept it."""


class NCPaymentRejected(NCFail):
    """Raised when value is sent to a contract outside of a payable call."""


class NCInsufficientFunds(NCFail):
    """Raised when an account or contract cannot cover a transfer."""


class NCReentrantCall(NCFail):
    """Raised when a guarded entry point is entered while already running."""


class NCInvalidContext(NCFail):
    """Raised when a call context carries malformed actions."""
