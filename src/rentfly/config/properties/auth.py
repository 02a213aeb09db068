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
"""Authentication configuration properties."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr, model_validator

from rentfly.core.config import config_properties


@config_properties(prefix="rentfly.auth")
class AuthProperties(BaseModel):
    """Credentials and timing for the token authenticate call (rentfly.auth.*)."""

    base_url: str = "http://localhost:8080/webapigw"
    username: str = "admin"
    password: SecretStr = SecretStr("")
    remember_client: bool = False
    token_ttl_seconds: float = Field(default=300, gt=0)
    fetch_timeout_seconds: float = Field(default=300, gt=0)
    request_timeout_seconds: float = Field(default=30, gt=0)
    connect_timeout_seconds: float = Field(default=10, gt=0)
    # a timed-out fetch keeps its worker until the HTTP call gives up
    worker_pool_size: int = Field(default=2, ge=2, le=32)

    @model_validator(mode="after")
    def check_http_call_fits_fetch_timeout(self) -> AuthProperties:
        if self.connect_timeout_seconds + self.request_timeout_seconds > self.fetch_timeout_seconds:
            raise ValueError(
                "connect-timeout-seconds + request-timeout-seconds must not exceed fetch-timeout-seconds"
            )
        return self
