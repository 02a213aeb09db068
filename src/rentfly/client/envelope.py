# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""The ABP response envelope wrapping every platform payload."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

T = TypeVar("T")


class AbpEnvelope(BaseModel):
    """``{result, targetUrl, success, error, unAuthorizedRequest, __abp}``.

    Unknown top-level fields are kept so the envelope can be re-emitted
    exactly as received.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    result: Any = None
    target_url: str | None = Field(default=None, alias="targetUrl")
    success: bool = True
    error: Any = None
    un_authorized_request: bool = Field(default=False, alias="unAuthorizedRequest")
    abp: bool = Field(default=True, alias="__abp")

    def result_as(self, schema: type[T]) -> T:
        """Validate ``result`` against *schema* and return the typed value.

        Raises ``pydantic.ValidationError`` when the payload does not match.
        """
        return TypeAdapter(schema).validate_python(self.result)

    def to_wire(self) -> dict[str, Any]:
        """The envelope as the platform sends it, with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def of(cls, result: Any) -> AbpEnvelope:
        """A successful envelope carrying *result*."""
        return cls(result=result)
