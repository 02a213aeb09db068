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
"""Client for the platform's ``/TokenAuth/Authenticate`` endpoint."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from rentfly.client.envelope import AbpEnvelope
from rentfly.config.properties.auth import AuthProperties
from rentfly.kernel.exceptions import TokenAcquisitionException

logger = structlog.get_logger("rentfly.auth")

AUTHENTICATE_PATH = "/api/TokenAuth/Authenticate"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthenticateRequest(_CamelModel):
    user_name_or_email_address: str
    password: str
    remember_client: bool = False
    two_factor_remember_client_token: str | None = None
    single_sign_in: bool = False
    return_url: str | None = None


class AuthenticateResult(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    access_token: str | None = None
    refresh_token: str | None = None
    encrypted_access_token: str | None = None
    expire_in_seconds: int | None = None
    refresh_token_expire_in_seconds: int | None = None
    user_id: int | None = None
    should_reset_password: bool = False
    requires_two_factor_verification: bool = False

    @property
    def bearer(self) -> str | None:
        """The refresh token when issued, else the access token."""
        return self.refresh_token or self.access_token


class TokenAuthClient:
    """Blocking authenticate call.

    It is meant to run on a worker thread (see ``TokenCache``) so the event
    loop never waits on the authentication service.
    """

    def __init__(self, properties: AuthProperties, transport: httpx.BaseTransport | None = None) -> None:
        self._properties = properties
        self._transport = transport

    def _request_body(self) -> dict[str, Any]:
        request = AuthenticateRequest(
            user_name_or_email_address=self._properties.username,
            password=self._properties.password.get_secret_value(),
            remember_client=self._properties.remember_client,
        )
        return request.model_dump(by_alias=True)

    def authenticate(self) -> str:
        """Authenticate and return the bearer token to use for platform calls."""
        props = self._properties
        timeout = httpx.Timeout(props.request_timeout_seconds, connect=props.connect_timeout_seconds)
        try:
            with httpx.Client(base_url=props.base_url, timeout=timeout, transport=self._transport) as client:
                response = client.post(AUTHENTICATE_PATH, json=self._request_body())
        except httpx.HTTPError as exc:
            raise TokenAcquisitionException(
                f"Authenticate call failed: {exc}",
                context={"base_url": props.base_url},
            ) from exc

        if not response.is_success:
            raise TokenAcquisitionException(
                f"Authenticate call returned HTTP {response.status_code}",
                context={"status": response.status_code, "body": response.text},
            )

        try:
            envelope = AbpEnvelope.model_validate(response.json())
            result = envelope.result_as(AuthenticateResult)
        except (ValueError, ValidationError) as exc:
            raise TokenAcquisitionException(
                "Authenticate call returned an unreadable body",
                context={"body": response.text},
            ) from exc

        token = result.bearer
        if not token:
            raise TokenAcquisitionException("Authenticate call returned no token", context={"body": response.text})

        logger.info("authenticated", user=props.username, expire_in_seconds=result.expire_in_seconds)
        return token
