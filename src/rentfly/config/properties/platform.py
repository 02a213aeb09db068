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
"""Platform endpoint configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from rentfly.core.config import config_properties


@config_properties(prefix="rentfly.platform")
@dataclass
class PlatformProperties:
    """Where the Rentey platform lives and how every request to it looks (rentfly.platform.*)."""

    base_url: str = "http://localhost:8080"
    api_base_path: str = "/webapigw/api/services/app"
    api_base_path_without_service: str = "/webapigw/api"
    loyalty_base_path: str = "/loyaltyapigw"
    tenant_id: str = "1"
    language: str = "en"
    headers: dict = field(default_factory=dict)

    def default_headers(self) -> dict[str, str]:
        """Headers sent with every platform call, tenant and culture included."""
        origin = self.base_url.rstrip("/")
        headers = {
            "Connection": "keep-alive",
            "Abp.TenantId": str(self.tenant_id),
            "Accept": "application/json, text/plain, */*",
            "Accept-Language": self.language,
            "Content-Type": "application/json",
            "Pragma": "no-cache",
            "Cache-Control": "no-cache",
            "Expires": "Sat, 01 Jan 2000 00:00:00 GMT",
            "X-Requested-With": "XMLHttpRequest",
            ".AspNetCore.Culture": f"c={self.language}|uic={self.language}",
            "Origin": origin,
            "Referer": f"{origin}/",
        }
        headers.update({str(k): str(v) for k, v in self.headers.items()})
        return headers
