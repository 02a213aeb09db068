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
"""Platform client: operations, envelope, HTTP client and resilience policies.

``RequestGateway`` lives in ``rentfly.client.gateway``.
"""

from rentfly.client.circuit_breaker import CircuitBreaker, CircuitState
from rentfly.client.envelope import AbpEnvelope
from rentfly.client.operations import NO_ARGS, BasePath, Operation, OperationArgs
from rentfly.client.retry import RetryPolicy
from rentfly.client.service_client import ServiceClient, ServiceClientBuilder

__all__ = [
    "AbpEnvelope",
    "BasePath",
    "CircuitBreaker",
    "CircuitState",
    "NO_ARGS",
    "Operation",
    "OperationArgs",
    "RetryPolicy",
    "ServiceClient",
    "ServiceClientBuilder",
]
