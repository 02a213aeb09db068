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
"""Create-booking phase: a new customer books the configured model at a branch.

Every step is declared once, at import time; request builders and output
mappers are plain functions over the context.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rentfly.booking import keys as k
from rentfly.booking import operations as ops
from rentfly.booking.customer import (
    DEFAULT_GENDER_ID,
    DEFAULT_IDENTITY_TYPE_ID,
    DEFAULT_LICENSE_TYPE_ID,
    random_customer,
)
from rentfly.booking.dates import add_days
from rentfly.booking.models import (
    Amount,
    AvailableModelsPage,
    BestRentalRate,
    CashPaymentInformation,
    ComboboxPage,
    CreateBookingDateInputs,
    CreatedBooking,
    CreatedCustomer,
    OperationalCountry,
    RentalRatesSchemaPage,
    VoucherCreateInput,
)
from rentfly.client.envelope import AbpEnvelope
from rentfly.client.operations import OperationArgs
from rentfly.kernel.exceptions import ValidationException
from rentfly.saga.context import OrchestrationContext
from rentfly.saga.step import SagaBuilder, SagaDefinition

SOURCE_ID = 120
BOOKING_TYPE_STANDARD = 6102
BOOKING_STATUS_ID = 210
BOOKING_VOUCHER_OPERATION_TYPE_ID = 2306
LOOKUP_GENDERS = 6
LOOKUP_DOCUMENT_TYPES = 17

COUNTRY_SETTING_KEYS = (
    "App.CountryManagement.MinimumHoursToBooking",
    "App.CountryManagement.MinimumHoursToBrokerBooking",
    "App.CountryManagement.EnablePaymentOnSystemBooking",
    "App.CountryManagement.MaximumHoursToExecuteImmediateBooking",
    "App.CountryManagement.EnableExternalAuthorizationOnBooking",
    "App.CountryManagement.ContractMinimumHours",
    "App.CountryManagement.MaxDaysWhenAddContract",
    "App.CountryManagement.FreeHours",
    "App.CountryManagement.EnableFuelCost",
    "App.CountryManagement.MaxOdometerChange",
    "App.CountryManagement.MediumMaxAmount",
    "App.CountryManagement.ApplyExternalDriverAuthorizationOn",
)

Updates = Mapping[str, Any]


def _int(value: Any) -> int:
    return int(value)


def lookup_items(type_id: int, include_inactive: bool = False, include_not_assign: bool = False) -> OperationArgs:
    return OperationArgs(
        params={"typeId": type_id, "includeInActive": include_inactive, "includeNotAssign": include_not_assign}
    )


# ── country and branch ───────────────────────────────────────


def map_country(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    name = str(ctx.require(k.COUNTRY_NAME)).strip()
    for country in envelope.result_as(list[OperationalCountry]):
        if country.name.strip() == name:
            return {k.COUNTRY_ID: country.id}
    raise ValidationException(f"Unknown operational country '{name}'", context={"country_name": name})


def branches_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={"includeInActive": False, "countryId": ctx.require(k.COUNTRY_ID), "includeAll": False}
    )


def map_branch(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    name = str(ctx.require(k.BRANCH_NAME))
    value = envelope.result_as(ComboboxPage).value_of(name)
    if value is None:
        raise ValidationException(f"Unknown branch '{name}'", context={"branch_name": name})
    return {k.BRANCH_ID: _int(value)}


def country_settings_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(params={"countryId": ctx.require(k.COUNTRY_ID), "keys": list(COUNTRY_SETTING_KEYS)})


# ── dates and availability ───────────────────────────────────


def date_inputs_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(params={"countryId": ctx.require(k.COUNTRY_ID)})


def map_dates(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    pickup = envelope.result_as(CreateBookingDateInputs).minimum_pickup_date
    return {k.PICKUP_DATE: pickup, k.DROPOFF_DATE: add_days(pickup, 1)}


def validate_duration_request(ctx: OrchestrationContext) -> OperationArgs:
    pickup, dropoff = ctx.require(k.PICKUP_DATE), ctx.require(k.DROPOFF_DATE)
    branch_id = ctx.require(k.BRANCH_ID)
    return OperationArgs(
        params={"pickupDate": pickup, "dropOffDate": dropoff},
        body={
            "branchCountryId": ctx.require(k.COUNTRY_ID),
            "pickupBranchId": branch_id,
            "dropoffBranchId": branch_id,
            "pickupDate": pickup,
            "dropOffDate": dropoff,
            "bookingType": BOOKING_TYPE_STANDARD,
            "validatePickUpDate": True,
            "rentalRateSchemaPeriodId": None,
            "contractDuration": None,
        },
    )


def available_models_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        body={
            "branchId": ctx.require(k.BRANCH_ID),
            "pickupDate": ctx.require(k.PICKUP_DATE),
            "dropOffDate": ctx.require(k.DROPOFF_DATE),
            "source": str(SOURCE_ID),
            "bookingCategoryId": -1,
            "bookingModelId": -1,
            "bookingVehicleYear": -1,
        }
    )


def map_available_model(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    found = envelope.result_as(AvailableModelsPage).find(
        str(ctx.require(k.CAR_CATEGORY_NAME)), str(ctx.require(k.CAR_MODEL_NAME))
    )
    if found is None:
        return {}
    category_id, model_id = found
    return {k.CATEGORY_ID: _int(category_id), k.MODEL_ID: _int(model_id)}


# ── customer ─────────────────────────────────────────────────


def map_gender(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    value = envelope.result_as(ComboboxPage).value_of("Male")
    return {k.GENDER_ID: value} if value is not None else {}


def map_document_types(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    page = envelope.result_as(ComboboxPage)
    updates: dict[str, Any] = {}
    identity = page.value_of("Identity")
    license_ = page.value_of("Driver License")
    if identity is not None:
        updates[k.IDENTITY_DOCUMENT_TYPE_ID] = identity
    if license_ is not None:
        updates[k.LICENSE_DOCUMENT_TYPE_ID] = license_
    return updates


def customer_request(ctx: OrchestrationContext) -> OperationArgs:
    request = random_customer(
        ctx.require(k.COUNTRY_ID),
        ctx.get_optional(k.COUNTRY_NAME),
        phone_code=str(ctx.get_optional(k.PHONE_CODE, "966")),
        identity_type_id=ctx.get_optional(k.IDENTITY_DOCUMENT_TYPE_ID, DEFAULT_IDENTITY_TYPE_ID),
        license_type_id=ctx.get_optional(k.LICENSE_DOCUMENT_TYPE_ID, DEFAULT_LICENSE_TYPE_ID),
        gender_id=ctx.get_optional(k.GENDER_ID, DEFAULT_GENDER_ID),
    )
    return OperationArgs(body=request.to_payload())


def map_customer(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    customer = envelope.result_as(CreatedCustomer)
    name = customer.full_name.display_name if customer.full_name else None
    return {k.CUSTOMER_ID: customer.id, k.CUSTOMER_NAME: name}


def renting_restriction_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={
            "customerId": ctx.require(k.CUSTOMER_ID),
            "pickupBranchId": ctx.require(k.BRANCH_ID),
            "vehicleModelId": ctx.require(k.MODEL_ID),
            "pickupDate": ctx.require(k.PICKUP_DATE),
        }
    )


def contract_information_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(params={"customerName": ctx.require(k.CUSTOMER_NAME)})


# ── rates and booking ────────────────────────────────────────


def map_rental_rates_schema(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    wanted = ctx.get_optional(k.RENTAL_RATE_SCHEMA_NAME)
    for schema in envelope.result_as(RentalRatesSchemaPage).items:
        if schema.name == wanted and (schema.type is None or schema.type == "Daily"):
            return {k.RENTAL_RATES_SCHEMA_ID: schema.id}
    return {}


def best_rate_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={
            "countryId": ctx.require(k.COUNTRY_ID),
            "branchId": ctx.require(k.BRANCH_ID),
            "modelId": ctx.require(k.MODEL_ID),
            "year": ctx.require(k.VEHICLE_YEAR),
            "pickupDate": ctx.require(k.PICKUP_DATE),
            "dropoffDate": ctx.require(k.DROPOFF_DATE),
        }
    )


def map_best_rate(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    return {k.RENTAL_RATE_ID: envelope.result_as(BestRentalRate).rental_rate_id}


def booking_billing_request(ctx: OrchestrationContext) -> OperationArgs:
    branch_id = ctx.require(k.BRANCH_ID)
    return OperationArgs(
        body={
            "extras": [],
            "userDiscounts": [],
            "modelId": str(ctx.require(k.MODEL_ID)),
            "year": ctx.require(k.VEHICLE_YEAR),
            "vehicleId": None,
            "rentalRateId": ctx.require(k.RENTAL_RATE_ID),
            "dropoffDate": ctx.require(k.DROPOFF_DATE),
            "pickupDate": ctx.require(k.PICKUP_DATE),
            "statusId": BOOKING_STATUS_ID,
            "voucherOperationTypeId": BOOKING_VOUCHER_OPERATION_TYPE_ID,
            "pickupBranchId": branch_id,
            "dropoffBranchId": branch_id,
            "customerId": ctx.require(k.CUSTOMER_ID),
            "categoryId": str(ctx.require(k.CATEGORY_ID)),
            "couponCode": "",
        }
    )


def create_booking_request(ctx: OrchestrationContext) -> OperationArgs:
    branch_id = ctx.require(k.BRANCH_ID)
    voucher = VoucherCreateInput(
        voucher_operation_type_id=BOOKING_VOUCHER_OPERATION_TYPE_ID,
        base_payment_information_dto=CashPaymentInformation(amount=Amount(value=0, iso_code=None)),
        source_id=SOURCE_ID,
    )
    return OperationArgs(
        body={
            "countryId": ctx.require(k.COUNTRY_ID),
            "pickupDate": ctx.require(k.PICKUP_DATE),
            "dropoffDate": ctx.require(k.DROPOFF_DATE),
            "pickupBranchId": branch_id,
            "dropoffBranchId": branch_id,
            "categoryId": str(ctx.require(k.CATEGORY_ID)),
            "modelId": str(ctx.require(k.MODEL_ID)),
            "year": ctx.require(k.VEHICLE_YEAR),
            "driverId": ctx.require(k.CUSTOMER_ID),
            "rentalRateId": ctx.require(k.RENTAL_RATE_ID),
            "transferCostId": None,
            "sourceId": SOURCE_ID,
            "voucherCreateInputList": [voucher.to_payload()],
            "extras": [],
            "couponCode": "",
            "userDiscounts": [],
            "bookingOffers": [],
        }
    )


def map_created_booking(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    booking = envelope.result_as(CreatedBooking)
    return {k.BOOKING_ID: booking.booking_id, k.BOOKING_NUMBER: str(booking.booking_number)}


CREATE_BOOKING_INPUTS = (
    k.COUNTRY_NAME,
    k.BRANCH_NAME,
    k.CAR_MODEL_NAME,
    k.CAR_CATEGORY_NAME,
    k.VEHICLE_YEAR,
    k.RENTAL_RATE_SCHEMA_NAME,
    k.PHONE_CODE,
)

CREATE_BOOKING_SAGA: SagaDefinition = (
    SagaBuilder("create-booking")
    .inputs(*CREATE_BOOKING_INPUTS)
    .step("GetOperationalCountries").invoke(ops.GET_OPERATIONAL_COUNTRIES)
        .requires(k.COUNTRY_NAME)
        .outputs(map_country, provides=[k.COUNTRY_ID]).add()
    .step("GetUserBranchesForCombobox").invoke(ops.GET_USER_BRANCHES_FOR_COMBOBOX)
        .requires(k.COUNTRY_ID, k.BRANCH_NAME).request(branches_request)
        .outputs(map_branch, provides=[k.BRANCH_ID]).add()
    .step("GetCountrySettings").invoke(ops.GET_COUNTRY_SETTINGS)
        .requires(k.COUNTRY_ID).request(country_settings_request).best_effort().add()
    .step("GetExtrasNamesExcludedFromBookingPaymentDetails").invoke(ops.GET_EXTRAS_NAMES_EXCLUDED)
        .best_effort().add()
    .step("GetCountriesPhone").invoke(ops.GET_COUNTRIES_PHONE).best_effort().add()
    .step("GetGenders").invoke(ops.GET_ALL_ITEMS_COMBOBOX_ITEMS)
        .request(lambda ctx: lookup_items(LOOKUP_GENDERS))
        .outputs(map_gender, provides=[k.GENDER_ID]).best_effort().add()
    .step("GetPrivacyPolicyTypes").invoke(ops.GET_ITEMS_BY_TYPE)
        .request(lambda ctx: OperationArgs(params={"typeId": 266, "includeInActive": False}))
        .best_effort().add()
    .step("GetCreateBookingDateInputs").invoke(ops.GET_CREATE_BOOKING_DATE_INPUTS)
        .requires(k.COUNTRY_ID).request(date_inputs_request)
        .outputs(map_dates, provides=[k.PICKUP_DATE, k.DROPOFF_DATE]).add()
    .step("ValidateDurationAndLocations").invoke(ops.VALIDATE_DURATION_AND_LOCATIONS)
        .requires(k.COUNTRY_ID, k.BRANCH_ID, k.PICKUP_DATE, k.DROPOFF_DATE)
        .request(validate_duration_request).add()
    .step("GetAllCarModels").invoke(ops.GET_ALL_CAR_MODELS).best_effort().add()
    .step("GetBranchAvailableModelsForBooking").invoke(ops.GET_BRANCH_AVAILABLE_MODELS)
        .requires(k.BRANCH_ID, k.PICKUP_DATE, k.DROPOFF_DATE, k.CAR_MODEL_NAME, k.CAR_CATEGORY_NAME)
        .request(available_models_request)
        .outputs(map_available_model, provides=[k.CATEGORY_ID, k.MODEL_ID]).add()
    .step("GetDocumentTypes").invoke(ops.GET_ALL_ITEMS_COMBOBOX_ITEMS)
        .request(lambda ctx: lookup_items(LOOKUP_DOCUMENT_TYPES))
        .outputs(map_document_types, provides=[k.IDENTITY_DOCUMENT_TYPE_ID, k.LICENSE_DOCUMENT_TYPE_ID])
        .best_effort().add()
    .step("CreateOrUpdateCustomer").invoke(ops.CREATE_OR_UPDATE_CUSTOMER)
        .requires(k.COUNTRY_ID).request(customer_request)
        .outputs(map_customer, provides=[k.CUSTOMER_ID, k.CUSTOMER_NAME]).add()
    .step("ValidateBookingRentingRestriction").invoke(ops.VALIDATE_BOOKING_RENTING_RESTRICTION)
        .requires(k.CUSTOMER_ID, k.BRANCH_ID, k.MODEL_ID, k.PICKUP_DATE)
        .request(renting_restriction_request).best_effort().add()
    .step("GetCustomerContractInformationByName").invoke(ops.GET_CUSTOMER_CONTRACT_INFORMATION_BY_NAME)
        .requires(k.CUSTOMER_NAME).request(contract_information_request).best_effort().add()
    .step("GetAllRentalRatesSchemas").invoke(ops.GET_ALL_RENTAL_RATES_SCHEMAS)
        .request(lambda ctx: OperationArgs(params={"countryId": ctx.require(k.COUNTRY_ID)}))
        .outputs(map_rental_rates_schema, provides=[k.RENTAL_RATES_SCHEMA_ID]).best_effort().add()
    .step("GetIntegratedLoyalties").invoke(ops.GET_INTEGRATED_LOYALTIES).best_effort().add()
    .step("GetBestRentalRateForModel").invoke(ops.GET_BEST_RENTAL_RATE_FOR_MODEL)
        .requires(k.COUNTRY_ID, k.BRANCH_ID, k.MODEL_ID, k.VEHICLE_YEAR, k.PICKUP_DATE, k.DROPOFF_DATE)
        .request(best_rate_request)
        .outputs(map_best_rate, provides=[k.RENTAL_RATE_ID]).add()
    .step("CalculateBookingBilling").invoke(ops.CALCULATE_BOOKING_BILLING)
        .requires(k.RENTAL_RATE_ID, k.CUSTOMER_ID, k.CATEGORY_ID, k.MODEL_ID)
        .request(booking_billing_request).best_effort().add()
    .step("CreateBooking").invoke(ops.CREATE_BOOKING)
        .requires(k.COUNTRY_ID, k.BRANCH_ID, k.CATEGORY_ID, k.MODEL_ID, k.CUSTOMER_ID, k.RENTAL_RATE_ID)
        .request(create_booking_request)
        .outputs(map_created_booking, provides=[k.BOOKING_ID, k.BOOKING_NUMBER]).add()
    .build()
)
