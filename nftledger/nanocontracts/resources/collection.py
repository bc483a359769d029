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

from typing import TYPE_CHECKING, Any, Optional

from pydantic import Field
from twisted.web.resource import Resource

from nftledger.nanocontracts.exception import NCContractNotFound, NCFail
from nftledger.nanocontracts.registry import NonexistentToken
from nftledger.nanocontracts.types import ContractId, Timestamp, TokenId
from nftledger.utils.api import ErrorResponse, QueryParams, Response, set_cors

if TYPE_CHECKING:
    from twisted.internet.interfaces import IReactorTime
    from twisted.web.http import Request

    from nftledger.nanocontracts.runner import Runner


class CollectionStateResource(Resource):
    """ Implements a web server GET API to read a collection's state.

    Without `token` it returns the collection summary; with it, it also
    returns the token's owner, metadata URI and staking statistics.
    """
    isLeaf = True

    def __init__(self, runner: 'Runner', clock: 'IReactorTime') -> None:
        super().__init__()
        self.runner = runner
        self.clock = clock

    def render_GET(self, request: 'Request') -> bytes:
        request.setHeader(b'content-type', b'application/json; charset=utf-8')
        set_cors(request, 'GET')

        params = CollectionStateParams.from_request(request)
        if isinstance(params, ErrorResponse):
            request.setResponseCode(400)
            return params.json_dumpb()

        try:
            contract_id = ContractId(bytes.fromhex(params.id))
        except ValueError:
            request.setResponseCode(400)
            return ErrorResponse(error=f'Invalid id: {params.id}').json_dumpb()

        try:
            info = self.runner.call_view_method(contract_id, 'get_collection_info')
        except NCContractNotFound:
            request.setResponseCode(404)
            return ErrorResponse(error=f'Collection {params.id} does not exist.').json_dumpb()

        token: Optional[TokenStateResponse] = None
        if params.token is not None:
            token_id = TokenId(params.token)
            now = Timestamp(int(self.clock.seconds()))
            try:
                token_info = self.runner.call_view_method(contract_id, 'get_token_info', token_id)
                uri = self.runner.call_view_method(contract_id, 'token_uri', token_id)
                period = self.runner.call_view_method(contract_id, 'staking_period', token_id, now)
            except NonexistentToken:
                request.setResponseCode(404)
                return ErrorResponse(error=f'Token {params.token} does not exist.').json_dumpb()
            except NCFail as e:
                request.setResponseCode(400)
                return ErrorResponse(error=repr(e)).json_dumpb()
            token = TokenStateResponse(
                token_id=token_id,
                uri=uri,
                staking_current=period.current,
                staking_total=period.total,
                **token_info._asdict(),
            )

        response = CollectionStateResponse(
            success=True,
            id=params.id,
            collection=info._asdict(),
            token=token,
        )
        return response.json_dumpb()


class CollectionStateParams(QueryParams):
    id: str
    token: Optional[int] = Field(default=None, ge=0)


class TokenStateResponse(Response):
    token_id: int
    owner: str
    uri: str
    mint_source: int
    price_paid: int
    refunded: bool
    staked: bool
    staking_current: int
    staking_total: int


class CollectionStateResponse(Response):
    success: bool
    id: str
    collection: dict[str, Any]
    token: Optional[TokenStateResponse] = None
