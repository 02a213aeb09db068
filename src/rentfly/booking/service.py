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
"""Service facade for executing a freshly created booking."""

from __future__ import annotations

from typing import Any

import structlog

from rentfly.booking import keys as k
from rentfly.booking.execute_booking import EXECUTE_BOOKING_SAGA
from rentfly.client.envelope import AbpEnvelope
from rentfly.config.properties.booking import BookingProperties
from rentfly.kernel.exceptions import ValidationException
from rentfly.logging.timing import log_execution_time
from rentfly.saga.controller import SagaController
from rentfly.saga.result import SagaResult
from rentfly.saga.step import SagaDefinition

logger = structlog.get_logger("rentfly.booking.service")


class ExecuteBookingService:
    """Creates a customer and a booking, then executes it into a contract."""

    def __init__(
        self,
        controller: SagaController,
        properties: BookingProperties | None = None,
        definition: SagaDefinition = EXECUTE_BOOKING_SAGA,
    ) -> None:
        self._controller = controller
        self._properties = properties or BookingProperties()
        self._definition = definition

    @property
    def definition(self) -> SagaDefinition:
        return self._definition

    def inputs_for(self, country_name: str, branch_name: str) -> dict[str, Any]:
        """Saga inputs for *country_name* and *branch_name*.

        Raises:
            ValidationException: either name is blank.
        """
        if not country_name or not country_name.strip():
            raise ValidationException("Country name must not be blank", context={"field": "country_name"})
        if not branch_name or not branch_name.strip():
            raise ValidationException("Branch name must not be blank", context={"field": "branch_name"})
        props = self._properties
        return {
            k.COUNTRY_NAME: country_name.strip(),
            k.BRANCH_NAME: branch_name.strip(),
            k.CAR_MODEL_NAME: props.car_model_name,
            k.CAR_CATEGORY_NAME: props.car_category_name,
            k.VEHICLE_YEAR: props.vehicle_year,
            k.RENTAL_RATE_SCHEMA_NAME: props.rental_rate_schema_name,
            k.PHONE_CODE: props.phone_code,
            k.AUTHORIZATION_PHONE_NUMBER: props.authorization_phone_number,
            k.VERIFICATION_CODE: props.verification_code,
        }

    async def run(self, country_name: str, branch_name: str, *, correlation_id: str | None = None) -> SagaResult:
        """Run the saga and return the full result, failed or not."""
        inputs = self.inputs_for(country_name, branch_name)
        return await self._controller.run(self._definition, inputs, correlation_id=correlation_id)

    @log_execution_time("execute_created_booking_with_new_customer_and_new_vehicle")
    async def execute_created_booking_with_new_customer_and_new_vehicle(
        self,
        country_name: str,
        branch_name: str,
        *,
        correlation_id: str | None = None,
    ) -> AbpEnvelope | None:
        """Execute the whole flow and return the ExecuteBooking envelope.

        Raises:
            ValidationException: blank country or branch name.
            RentflyException: the error of the mandatory step that aborted the run.
        """
        result = await self.run(country_name, branch_name, correlation_id=correlation_id)
        if not result.success:
            logger.error(
                "booking_execution_failed",
                country=country_name,
                branch=branch_name,
                step=result.error.step if result.error else None,
            )
        return result.raise_for_error()
