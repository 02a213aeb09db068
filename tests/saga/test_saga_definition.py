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
"""Tests for OrchestrationContext and the saga builder."""

from __future__ import annotations

import pytest

from rentfly.client.envelope import AbpEnvelope
from rentfly.client.operations import Operation, OperationArgs
from rentfly.kernel.exceptions import MissingDependencyException
from rentfly.saga.context import OrchestrationContext
from rentfly.saga.step import SagaBuilder, SagaDefinitionError, Step

GET_COUNTRIES = Operation("GetOperationalCountries", "GET", "/Country/GetOperationalCountries")
GET_BRANCHES = Operation("GetUserBranchesForCombobox", "GET", "/Branch/GetUserBranchesForCombobox")


class TestOrchestrationContext:
    def test_none_counts_as_absent(self):
        ctx = OrchestrationContext({"country_id": None, "branch_id": 4})
        assert "country_id" not in ctx
        assert "branch_id" in ctx
        assert ctx.missing(["country_id", "branch_id", "model_id"]) == ["country_id", "model_id"]

    def test_require_raises_with_step(self):
        ctx = OrchestrationContext()
        with pytest.raises(MissingDependencyException) as info:
            ctx.require("booking_id", step="ExecuteBooking")
        assert info.value.key == "booking_id"
        assert info.value.step == "ExecuteBooking"

    def test_get_optional_default(self):
        ctx = OrchestrationContext({"fuel_id": None})
        assert ctx.get_optional("fuel_id", 8) == 8
        assert ctx.get_optional("odometer") is None

    def test_set_update_snapshot(self):
        ctx = OrchestrationContext(saga_name="execute-booking")
        ctx.set("vehicle_id", 77)
        ctx.update({"branch_id": 12})
        snapshot = ctx.snapshot()
        snapshot["vehicle_id"] = 0
        assert ctx.require("vehicle_id") == 77
        assert sorted(ctx) == ["branch_id", "vehicle_id"]
        assert len(ctx) == 2

    def test_correlation_id_generated(self):
        assert OrchestrationContext().correlation_id
        assert OrchestrationContext(correlation_id="abc").correlation_id == "abc"


class TestStep:
    def test_defaults(self):
        step = Step("GetCountries", GET_COUNTRIES)
        assert step.mandatory is True
        assert step.request_for(OrchestrationContext()) == OperationArgs()
        assert step.outputs_for(AbpEnvelope.of([]), OrchestrationContext()) == {}

    def test_undeclared_output_rejected(self):
        step = Step(
            "GetCountries",
            GET_COUNTRIES,
            provides=frozenset({"country_id"}),
            map_output=lambda envelope, ctx: {"country_id": 1, "branch_id": 2},
        )
        with pytest.raises(ValueError, match="undeclared context keys"):
            step.outputs_for(AbpEnvelope.of([]), OrchestrationContext())


class TestSagaBuilder:
    def test_builds_steps_in_order(self):
        definition = (
            SagaBuilder("lookups")
            .inputs("country_name")
            .step("GetCountries").invoke(GET_COUNTRIES)
                .requires("country_name")
                .outputs(lambda envelope, ctx: {"country_id": 1}, provides=["country_id"]).add()
            .step("GetBranches").invoke(GET_BRANCHES)
                .requires("country_id").best_effort().add()
            .build()
        )
        assert definition.step_names == ["GetCountries", "GetBranches"]
        assert definition.step("GetBranches").mandatory is False
        assert definition.inputs == frozenset({"country_name"})
        assert len(definition) == 2

    def test_duplicate_names_rejected(self):
        builder = (
            SagaBuilder("dupes")
            .step("GetCountries").invoke(GET_COUNTRIES).add()
            .step("GetCountries").invoke(GET_COUNTRIES).add()
        )
        with pytest.raises(SagaDefinitionError, match="Duplicate step name"):
            builder.build()

    def test_unsatisfiable_guard_rejected(self):
        builder = SagaBuilder("broken").step("GetBranches").invoke(GET_BRANCHES).requires("country_id").add()
        with pytest.raises(SagaDefinitionError, match="country_id"):
            builder.build()

    def test_guard_on_later_output_rejected(self):
        builder = (
            SagaBuilder("backwards")
            .step("GetBranches").invoke(GET_BRANCHES).requires("country_id").add()
            .step("GetCountries").invoke(GET_COUNTRIES)
                .outputs(lambda envelope, ctx: {"country_id": 1}, provides=["country_id"]).add()
        )
        with pytest.raises(SagaDefinitionError):
            builder.build()

    def test_step_without_operation_rejected(self):
        with pytest.raises(SagaDefinitionError, match="has no operation"):
            SagaBuilder("empty").step("Nothing").add()

    def test_include_appends_steps_and_inputs(self):
        first = (
            SagaBuilder("first")
            .inputs("country_name")
            .step("GetCountries").invoke(GET_COUNTRIES)
                .outputs(lambda envelope, ctx: {"country_id": 1}, provides=["country_id"]).add()
            .build()
        )
        combined = (
            SagaBuilder("combined")
            .include(first)
            .step("GetBranches").invoke(GET_BRANCHES).requires("country_id").add()
            .build()
        )
        assert combined.step_names == ["GetCountries", "GetBranches"]
        assert "country_name" in combined.inputs

    def test_unknown_step_lookup(self):
        definition = SagaBuilder("one").step("GetCountries").invoke(GET_COUNTRIES).add().build()
        with pytest.raises(KeyError):
            definition.step("Missing")
