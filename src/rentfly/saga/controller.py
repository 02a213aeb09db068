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
"""SagaController: drives a saga definition step by step."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from rentfly.client.envelope import AbpEnvelope
from rentfly.kernel.exceptions import RentflyException
from rentfly.saga.context import OrchestrationContext
from rentfly.saga.executor import StepExecutor
from rentfly.saga.result import SagaResult, StepOutcome, StepStatus
from rentfly.saga.step import SagaDefinition

logger = structlog.get_logger("rentfly.saga.controller")


class SagaController:
    """Executes the steps of a definition strictly in declared order.

    A failing mandatory step aborts the run with its original error. A
    failing best-effort step is logged and the run continues with the
    context gathered so far. There is no compensation and no retry.
    """

    def __init__(self, executor: StepExecutor) -> None:
        self._executor = executor

    async def run(
        self,
        definition: SagaDefinition,
        inputs: Mapping[str, Any] | None = None,
        *,
        correlation_id: str | None = None,
    ) -> SagaResult:
        context = OrchestrationContext(inputs, saga_name=definition.name, correlation_id=correlation_id)
        started_at = datetime.now(UTC)
        outcomes: dict[str, StepOutcome] = {}
        final_envelope: AbpEnvelope | None = None
        error: RentflyException | None = None

        with structlog.contextvars.bound_contextvars(saga=definition.name, correlation_id=context.correlation_id):
            logger.info("saga_started", steps=len(definition))
            for step in definition:
                try:
                    outcome = await self._executor.execute(step, context)
                except RentflyException as exc:
                    exc.with_step(step.name)
                    outcomes[step.name] = StepOutcome(status=StepStatus.FAILED, error=exc)
                    if step.mandatory:
                        logger.error(
                            "saga_aborted",
                            step=step.name,
                            code=exc.code,
                            error=exc.message,
                        )
                        error = exc
                        break
                    logger.warning(
                        "saga_step_failed",
                        step=step.name,
                        code=exc.code,
                        error=exc.message,
                    )
                    continue

                outcomes[step.name] = outcome
                if outcome.envelope is not None:
                    final_envelope = outcome.envelope

            if error is None:
                logger.info(
                    "saga_completed",
                    skipped=sum(o.status == StepStatus.SKIPPED for o in outcomes.values()),
                    failed=sum(o.status == StepStatus.FAILED for o in outcomes.values()),
                )

        return SagaResult(
            saga_name=definition.name,
            correlation_id=context.correlation_id,
            started_at=started_at,
            completed_at=datetime.now(UTC),
            success=error is None,
            error=error,
            final_envelope=final_envelope if error is None else None,
            context=context.snapshot(),
            steps=outcomes,
        )
