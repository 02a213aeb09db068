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
"""StepExecutor: runs one step against the gateway."""

from __future__ import annotations

import json
import time
from typing import Protocol

import structlog
from pydantic import ValidationError

from rentfly.client.envelope import AbpEnvelope
from rentfly.client.operations import Operation, OperationArgs
from rentfly.kernel.exceptions import MissingDependencyException, RequestBuildException, UpstreamHttpException
from rentfly.saga.context import OrchestrationContext
from rentfly.saga.result import StepOutcome, StepStatus
from rentfly.saga.step import Step

logger = structlog.get_logger("rentfly.saga.executor")

# Raised by builders and mappers on values of the wrong shape or type.
# pydantic ValidationError is a ValueError.
_MAPPING_ERRORS = (ValueError, TypeError, KeyError, IndexError, AttributeError)


class Gateway(Protocol):
    async def call(
        self,
        operation: Operation,
        args: OperationArgs | None = None,
        *,
        step: str | None = None,
    ) -> AbpEnvelope: ...


class StepExecutor:
    """Evaluates the guard, builds the request, calls out and maps outputs.

    Errors are raised, not recorded; the controller decides whether they
    abort the saga.
    """

    def __init__(self, gateway: Gateway) -> None:
        self._gateway = gateway

    async def execute(self, step: Step, context: OrchestrationContext) -> StepOutcome:
        """Run *step* and write its outputs into *context*.

        Returns a SKIPPED outcome when a best-effort step's guard fails.

        Raises:
            MissingDependencyException: a mandatory step's guard failed.
            RentflyException: the call or the output mapping failed.
        """
        missing = context.missing(sorted(step.requires))
        if missing:
            if step.mandatory:
                raise MissingDependencyException(step.name, missing[0])
            logger.info("saga_step_skipped", step=step.name, missing=missing)
            return StepOutcome(status=StepStatus.SKIPPED, missing=tuple(missing))

        started = time.perf_counter()
        try:
            args = step.request_for(context)
        except _MAPPING_ERRORS as exc:
            raise RequestBuildException(
                f"Could not build the request of '{step.name}': {_describe(exc)}",
                context={"operation": step.operation.name},
                step=step.name,
            ) from exc

        envelope = await self._gateway.call(step.operation, args, step=step.name)

        try:
            updates = step.outputs_for(envelope, context)
        except _MAPPING_ERRORS as exc:
            raise UpstreamHttpException(
                200,
                json.dumps(envelope.to_wire()),
                message=f"Response of '{step.operation.name}' does not match the expected schema: {_describe(exc)}",
                operation=step.operation.name,
                step=step.name,
            ) from exc

        context.update(updates)
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.debug("saga_step_done", step=step.name, latency_ms=latency_ms, wrote=sorted(updates))
        return StepOutcome(status=StepStatus.DONE, latency_ms=latency_ms, envelope=envelope)


def _describe(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return f"{exc.error_count()} error(s)"
    return f"{type(exc).__name__}: {exc}"
