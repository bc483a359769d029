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

from functools import wraps
from typing import Any, Callable, TypeVar

from typing_extensions import Self

from nftledger.nanocontracts.exception import NCReentrantCall

T = TypeVar("T", bound=Callable[..., Any])


class ReentrancyLatch:
    """Set on entry, cleared on every exit; entering while set fails."""

    __slots__ = ("_entered",)

    def __init__(self) -> None:
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    def __enter__(self) -> Self:
        if self._entered:
            raise NCReentrantCall("reentrant call")
        self._entered = True
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._entered = False


def nonreentrant(method: T) -> T:
    """Run a blueprint method holding the blueprint's `latch`."""

    @wraps(method)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        with self.latch:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
