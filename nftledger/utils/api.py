#  Copyright 2023 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from typing_extensions import Self

if TYPE_CHECKING:
    from twisted.web.http import Request


def set_cors(request: Request, method: str) -> None:
    request.setHeader(b'access-control-allow-origin', b'*')
    request.setHeader(b'access-control-allow-methods', method.encode())
    request.setHeader(b'access-control-allow-headers', b'x-requested-with,content-type')


class Response(BaseModel):
    """Base class for JSON API responses."""

    def json_dumpb(self) -> bytes:
        return self.model_dump_json().encode('utf-8')


class ErrorResponse(Response):
    success: bool = False
    error: str


class QueryParams(BaseModel):
    """Query string parameters, parsed and validated from a twisted request.

    Repeated keys are kept as lists only for fields declared as lists.
    """

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_request(cls, request: Request) -> Union[Self, ErrorResponse]:
        raw: dict[str, Union[str, list[str]]] = {}
        for key, values in (request.args or {}).items():
            name = key.decode('utf-8')
            decoded = [value.decode('utf-8') for value in values]
            raw[name] = decoded if name.endswith('[]') else decoded[0]
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            return ErrorResponse(error=str(e))
