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
"""Immutable result types: StepOutcome and SagaResult."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from rentfly.client.envelope import AbpEnvelope
from rentfly.kernel.exceptions import RentflyException


class StepStatus(StrEnum):
    """How a step ended."""

    DONE = "DONE"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class StepOutcome:
    """How a single step ended.

    ``envelope`` is set for DONE steps, ``error`` for FAILED ones and
    ``missing`` lists the unmet guard keys of SKIPPED ones.
    """

    status: StepStatus
    latency_ms: float = 0.0
    envelope: AbpEnvelope | None = None
    error: RentflyException | None = None
    missing: tuple[str, ...] = ()


@dataclass(frozen=True)
class SagaResult:
    """Summary of a completed or aborted saga run."""

    saga_name: str
    correlation_id: str
    started_at: datetime
    completed_at: datetime
    success: bool
    error: RentflyException | None
    final_envelope: AbpEnvelope | None
    context: dict[str, Any] = field(default_factory=dict)
    steps: dict[str, StepOutcome] = field(default_factory=dict)

    # ── query helpers ─────────────────────────────────────────

    def outcome_of(self, step: str) -> StepOutcome | None:
        return self.steps.get(step)

    def steps_with(self, status: StepStatus) -> list[str]:
        """Names of the steps that ended with *status*, in run order."""
        return [name for name, outcome in self.steps.items() if outcome.status == status]

    def raise_for_error(self) -> AbpEnvelope | None:
        """Re-raise the aborting error, or return the final envelope."""
        if self.error is not None:
            raise self.error
        return self.final_envelope
