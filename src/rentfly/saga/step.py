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
"""Step descriptors and the fluent builder that assembles them into a saga.

Example::

    definition = (
        SagaBuilder("lookup-saga")
        .inputs("country_name")
        .step("GetCountries").invoke(GET_COUNTRIES)
            .outputs(map_country, provides=["country_id"]).add()
        .step("GetBranches").invoke(GET_BRANCHES)
            .requires("country_id").request(branches_request).best_effort().add()
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from rentfly.client.envelope import AbpEnvelope
from rentfly.client.operations import NO_ARGS, Operation, OperationArgs
from rentfly.saga.context import OrchestrationContext

RequestBuilder = Callable[[OrchestrationContext], OperationArgs]
OutputMapper = Callable[[AbpEnvelope, OrchestrationContext], Mapping[str, Any]]


class SagaDefinitionError(Exception):
    """Raised when a saga definition is inconsistent."""


@dataclass(frozen=True)
class Step:
    """One saga step: guard, request builder, invocation and output mapper.

    ``requires`` is the guard: every key must be present in the context for
    the step to run. ``provides`` lists the keys ``map_output`` may write.
    """

    name: str
    operation: Operation
    mandatory: bool = True
    requires: frozenset[str] = frozenset()
    provides: frozenset[str] = frozenset()
    build_request: RequestBuilder | None = None
    map_output: OutputMapper | None = None

    def request_for(self, context: OrchestrationContext) -> OperationArgs:
        if self.build_request is None:
            return NO_ARGS
        return self.build_request(context)

    def outputs_for(self, envelope: AbpEnvelope, context: OrchestrationContext) -> dict[str, Any]:
        """Context updates produced from *envelope*, restricted to ``provides``."""
        if self.map_output is None:
            return {}
        updates = dict(self.map_output(envelope, context))
        undeclared = set(updates) - self.provides
        if undeclared:
            raise ValueError(f"Step '{self.name}' wrote undeclared context keys: {sorted(undeclared)}")
        return updates


@dataclass(frozen=True)
class SagaDefinition:
    """An ordered, immutable list of steps plus the keys expected as inputs."""

    name: str
    steps: tuple[Step, ...]
    inputs: frozenset[str] = frozenset()

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def step(self, name: str) -> Step:
        for step in self.steps:
            if step.name == name:
                return step
        raise KeyError(name)

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]


class StepBuilder:
    """Builder for one step. Call :meth:`add` to return to the saga builder."""

    def __init__(self, name: str, parent: SagaBuilder) -> None:
        self._name = name
        self._parent = parent
        self._operation: Operation | None = None
        self._mandatory = True
        self._requires: set[str] = set()
        self._provides: set[str] = set()
        self._build_request: RequestBuilder | None = None
        self._map_output: OutputMapper | None = None

    # ── Fluent setters ────────────────────────────────────────

    def invoke(self, operation: Operation) -> StepBuilder:
        """Set the platform operation this step calls."""
        self._operation = operation
        return self

    def requires(self, *keys: str) -> StepBuilder:
        """Context keys that must be present for the step to run."""
        self._requires.update(keys)
        return self

    def request(self, builder: RequestBuilder) -> StepBuilder:
        """Set the function building call arguments from the context."""
        self._build_request = builder
        return self

    def outputs(self, mapper: OutputMapper, provides: Iterable[str]) -> StepBuilder:
        """Set the function mapping the envelope to context updates."""
        self._map_output = mapper
        self._provides.update(provides)
        return self

    def best_effort(self) -> StepBuilder:
        """Failures of this step are logged and the saga continues."""
        self._mandatory = False
        return self

    # ── Finalisation ──────────────────────────────────────────

    def add(self) -> SagaBuilder:
        self._parent._add_step(self._build())  # noqa: SLF001
        return self._parent

    def _build(self) -> Step:
        if self._operation is None:
            raise SagaDefinitionError(f"Step '{self._name}' has no operation")
        return Step(
            name=self._name,
            operation=self._operation,
            mandatory=self._mandatory,
            requires=frozenset(self._requires),
            provides=frozenset(self._provides),
            build_request=self._build_request,
            map_output=self._map_output,
        )


class SagaBuilder:
    """Fluent builder producing a validated :class:`SagaDefinition`."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._inputs: set[str] = set()
        self._steps: list[Step] = []

    def inputs(self, *keys: str) -> SagaBuilder:
        """Declare keys supplied by the caller when the saga starts."""
        self._inputs.update(keys)
        return self

    def step(self, name: str) -> StepBuilder:
        """Begin configuring a new step."""
        return StepBuilder(name, self)

    def include(self, definition: SagaDefinition) -> SagaBuilder:
        """Append every step (and input) of another definition."""
        self._inputs.update(definition.inputs)
        for step in definition.steps:
            self._add_step(step)
        return self

    def _add_step(self, step: Step) -> None:
        self._steps.append(step)

    def build(self) -> SagaDefinition:
        """Validate and return the definition.

        Raises:
            SagaDefinitionError: duplicate step names, or a guard key that
                is neither an input nor provided by an earlier step.
        """
        seen: set[str] = set()
        available = set(self._inputs)
        for step in self._steps:
            if step.name in seen:
                raise SagaDefinitionError(f"Duplicate step name '{step.name}' in saga '{self._name}'")
            seen.add(step.name)
            unknown = step.requires - available
            if unknown:
                raise SagaDefinitionError(
                    f"Step '{step.name}' requires {sorted(unknown)} which no earlier step provides"
                )
            available |= step.provides
        return SagaDefinition(name=self._name, steps=tuple(self._steps), inputs=frozenset(self._inputs))
