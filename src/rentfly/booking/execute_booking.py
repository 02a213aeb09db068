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
"""Execute-booking phase: turn the created booking into a running contract."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rentfly.booking import keys as k
from rentfly.booking import operations as ops
from rentfly.booking.create_booking import CREATE_BOOKING_SAGA, SOURCE_ID, lookup_items
from rentfly.booking.dates import add_days
from rentfly.booking.models import (
    Amount,
    BookingPage,
    CashPaymentInformation,
    CheckItemStatus,
    ComboboxItem,
    ContractBilling,
    ContractPaymentInfo,
    CustomerInfo,
    ExecuteBookingRequest,
    LiteCustomer,
    QuickSearchBooking,
    ReadyVehiclesPage,
    ReferenceDetails,
    SkeletonReference,
    VehicleCheckDamages,
    VehicleCheckData,
    VehicleCheckPreparation,
    VehicleInfo,
    VoucherCreateInput,
)
from rentfly.client.envelope import AbpEnvelope
from rentfly.client.operations import OperationArgs
from rentfly.saga.context import OrchestrationContext
from rentfly.saga.step import SagaBuilder, SagaDefinition

READY_VEHICLES_MODE_ID = 32200
CONTRACT_MODE = 240
CONTRACT_TYPE = 230
CONTRACT_STATUS_ID = 210
CONTRACT_VOUCHER_OPERATION_TYPE_ID = 2300
EXTRAS_OPERATION_TYPE = 1800
DAILY_RATES_SCHEMA_PERIOD_ID = 2
DRIVER_AUTHORIZATION_CORRELATION_ID = 1234
DRIVER_AUTHORIZATION_REFERENCE_TYPE_ID = 1100
VEHICLE_CHECK_TYPE_ID = 1
CHECK_ITEM_CHOICE_OK = 5000
LOOKUP_CONTRACT_STATES = 26
LOOKUP_FUEL_LEVELS = 12
LOOKUP_PRIVACY_POLICY_TYPES = 266
PAGE_TRACKING_SETTING = "App.TenantManagement.EnablePageTracking"

Updates = Mapping[str, Any]


# ── booking lookups ──────────────────────────────────────────


def all_bookings_request(ctx: OrchestrationContext) -> OperationArgs:
    number = ctx.require(k.BOOKING_NUMBER)
    return OperationArgs(
        params={"Request": f"page=1&pageSize=15&filter=bookingNumber~eq~'{number}'&sort=pickupDate-"}
    )


def map_booking_row(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    page = envelope.result_as(BookingPage)
    if not page.data:
        return {}
    row = page.data[0]
    return {k.DRIVER_ID: row.driver_id, k.CUSTOMER_PHONE: row.customer_primary_phone}


def quick_search_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(params={"bookingNo": ctx.require(k.BOOKING_NUMBER)})


def map_quick_search(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    booking = envelope.result_as(QuickSearchBooking)
    return {
        k.PICKUP_BRANCH_ID: booking.pickup_branch_id,
        k.BOOKING_TYPE_ID: booking.booking_type_id,
        k.BOOKING_PICKUP_DATE: booking.pickup_date,
        k.VEHICLE_ID: booking.vehicle_id,
    }


def map_lite_customer(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    customer = envelope.result_as(LiteCustomer)
    return {k.IDENTITY_ID: customer.identity_id}


def phone_request(ctx: OrchestrationContext) -> OperationArgs:
    code, _, number = str(ctx.require(k.CUSTOMER_PHONE)).partition("-")
    return OperationArgs(params={"phoneNumber": number, "phoneCode": code})


# ── ready vehicle ────────────────────────────────────────────


def ready_models_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={
            "branchId": ctx.require(k.PICKUP_BRANCH_ID),
            "categoryId": ctx.require(k.CATEGORY_ID),
            "modeId": READY_VEHICLES_MODE_ID,
        }
    )


def ready_vehicles_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        body={
            "categoryId": ctx.require(k.CATEGORY_ID),
            "modelId": ctx.require(k.MODEL_ID),
            "branchId": ctx.require(k.PICKUP_BRANCH_ID),
            "isBooking": False,
            "isMonthlyContract": False,
        }
    )


def map_ready_vehicle(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    page = envelope.result_as(ReadyVehiclesPage)
    if not page.items:
        return {}
    booked = ctx.get_optional(k.VEHICLE_ID)
    # the vehicle already assigned to the booking wins over the first ready one
    vehicle = next((item for item in page.items if item.id == booked), page.items[0])
    return {
        k.VEHICLE_ID: booked if booked is not None else vehicle.id,
        k.MODEL_ID: vehicle.model_id if vehicle.model_id is not None else ctx.get_optional(k.MODEL_ID),
        k.CATEGORY_ID: vehicle.category_id if vehicle.category_id is not None else ctx.get_optional(k.CATEGORY_ID),
        k.VEHICLE_YEAR: vehicle.year if vehicle.year is not None else ctx.get_optional(k.VEHICLE_YEAR),
        k.FUEL_ID: vehicle.fuel_id,
        k.ODOMETER: vehicle.odometer,
        k.CONTRACT_RENTAL_RATE_ID: vehicle.rental_rate.rental_rate_id if vehicle.rental_rate else None,
    }


# ── contract validation ──────────────────────────────────────


def _contract_dates(ctx: OrchestrationContext) -> tuple[str, str]:
    pickup = ctx.require(k.BOOKING_PICKUP_DATE)
    return pickup, add_days(pickup, 1)


def validate_contract_request(ctx: OrchestrationContext) -> OperationArgs:
    pickup, dropoff = _contract_dates(ctx)
    branch_id = ctx.require(k.PICKUP_BRANCH_ID)
    return OperationArgs(
        body={
            "vehicleId": ctx.require(k.VEHICLE_ID),
            "pickupBranchId": branch_id,
            "dropoffBranchId": branch_id,
            "pickupDate": pickup,
            "dropoffDate": dropoff,
            "bookingId": str(ctx.require(k.BOOKING_ID)),
            "customerInfo": {"driverId": ctx.require(k.DRIVER_ID), "identityId": ctx.get_optional(k.IDENTITY_ID)},
            "skipTajeerIntegration": True,
        }
    )


def contract_restriction_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={
            "customerId": ctx.require(k.DRIVER_ID),
            "pickupBranchId": ctx.require(k.PICKUP_BRANCH_ID),
            "vehicleModelId": ctx.require(k.MODEL_ID),
            "pickupDate": ctx.require(k.BOOKING_PICKUP_DATE),
        }
    )


def matching_offers_request(ctx: OrchestrationContext) -> OperationArgs:
    pickup, dropoff = _contract_dates(ctx)
    return OperationArgs(
        params={
            "CustomerId": ctx.require(k.DRIVER_ID),
            "VehicleId": ctx.require(k.VEHICLE_ID),
            "PickupBranchId": ctx.require(k.PICKUP_BRANCH_ID),
            "ContractDateTimeRange.Start": pickup,
            "ContractDateTimeRange.End": dropoff,
            "VehicleModelId": ctx.require(k.MODEL_ID),
            "VehicleYear": ctx.require(k.VEHICLE_YEAR),
            "IsBookingOffers": False,
            "ExcludeZeroBenefits": True,
            "IsExecuteBooking": True,
        }
    )


def extra_items_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={
            "branchId": ctx.require(k.PICKUP_BRANCH_ID),
            "categoryId": ctx.require(k.CATEGORY_ID),
            "rentalRatesSchemaPeriodId": DAILY_RATES_SCHEMA_PERIOD_ID,
            "operationType": EXTRAS_OPERATION_TYPE,
            "contractType": CONTRACT_TYPE,
            "source": SOURCE_ID,
            "includeInactive": False,
        }
    )


# ── driver authorization ─────────────────────────────────────


def driver_authorizations_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={
            "vehicleId": ctx.require(k.VEHICLE_ID),
            "customerId": ctx.require(k.DRIVER_ID),
            "contractMode": CONTRACT_MODE,
        }
    )


def map_driver_authorization(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    items = envelope.result_as(list[ComboboxItem])
    if not items:
        return {}
    chosen = next((item for item in items if item.is_selected), items[0])
    return {k.DRIVER_AUTHORIZATION_TYPE_ID: int(chosen.value)}


def _authorization_body(ctx: OrchestrationContext) -> dict[str, Any]:
    pickup, dropoff = _contract_dates(ctx)
    return {
        "branchId": str(ctx.require(k.PICKUP_BRANCH_ID)),
        "contractMode": CONTRACT_MODE,
        "correlationId": DRIVER_AUTHORIZATION_CORRELATION_ID,
        "driverAuthorizationTypeId": ctx.require(k.DRIVER_AUTHORIZATION_TYPE_ID),
        "driverId": str(ctx.require(k.DRIVER_ID)),
        "end": dropoff,
        "isManual": False,
        "referenceTypeId": DRIVER_AUTHORIZATION_REFERENCE_TYPE_ID,
        "start": pickup,
        "vehicleId": str(ctx.require(k.VEHICLE_ID)),
    }


def cancel_authorization_request(ctx: OrchestrationContext) -> OperationArgs:
    body = _authorization_body(ctx)
    body.update({"referenceId": None, "referenceNumber": None})
    return OperationArgs(params={"enableAuthorization": True}, body=body)


def authorize_driver_request(ctx: OrchestrationContext) -> OperationArgs:
    body = _authorization_body(ctx)
    body.update(
        {
            "phoneNumber": ctx.require(k.AUTHORIZATION_PHONE_NUMBER),
            "verificationCode": ctx.require(k.VERIFICATION_CODE),
        }
    )
    return OperationArgs(body=body)


# ── billing, vehicle check and blocking ──────────────────────


def contract_billing_request(ctx: OrchestrationContext) -> OperationArgs:
    pickup, dropoff = _contract_dates(ctx)
    branch_id = ctx.require(k.PICKUP_BRANCH_ID)
    return OperationArgs(
        body={
            "vehicleId": ctx.require(k.VEHICLE_ID),
            "rentalRateId": ctx.require(k.CONTRACT_RENTAL_RATE_ID),
            "pickupDate": pickup,
            "dropoffDate": dropoff,
            "statusId": CONTRACT_STATUS_ID,
            "voucherOperationTypeId": CONTRACT_VOUCHER_OPERATION_TYPE_ID,
            "pickupBranchId": branch_id,
            "dropoffBranchId": branch_id,
            "fuelOutId": None,
            "extras": [],
            "userDiscounts": [],
            "offers": [],
            "categoryId": ctx.require(k.CATEGORY_ID),
            "driverAuthorizationTypeId": ctx.get_optional(k.DRIVER_AUTHORIZATION_TYPE_ID),
            "customerId": ctx.require(k.DRIVER_ID),
            "modelId": ctx.require(k.MODEL_ID),
            "contractType": CONTRACT_TYPE,
        }
    )


def map_contract_billing(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    billing = envelope.result_as(ContractBilling)
    remaining = billing.payment_info.remaining_amount if billing.payment_info else 0.0
    return {k.CALCULATION_RESULT: billing.calculation_result, k.REMAINING_AMOUNT: remaining}


def vehicle_check_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(
        params={"VehicleId": ctx.require(k.VEHICLE_ID), "CheckTypeId": VEHICLE_CHECK_TYPE_ID, "SourceId": SOURCE_ID}
    )


def map_vehicle_check(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    return {k.VEHICLE_CHECK: envelope.result_as(VehicleCheckPreparation)}


def block_vehicle_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(params={"vehicleId": ctx.require(k.VEHICLE_ID), "branchId": ctx.require(k.PICKUP_BRANCH_ID)})


def map_blocking_key(envelope: AbpEnvelope, ctx: OrchestrationContext) -> Updates:
    key = envelope.result_as(str | int | None)
    return {k.READY_VEHICLE_BLOCKING_KEY: str(key) if key is not None else None}


def build_vehicle_check_data(ctx: OrchestrationContext) -> VehicleCheckData:
    """Vehicle check payload marking every checklist item as fine."""
    preparation: VehicleCheckPreparation = ctx.require(k.VEHICLE_CHECK)
    skeleton = preparation.vehicle_skeleton_details
    statuses = [
        CheckItemStatus(checklist_id=checklist.id, check_item_id=item.id, choice_id=CHECK_ITEM_CHOICE_OK)
        for checklist in preparation.checklist_details
        for item in checklist.check_items
    ]
    return VehicleCheckData(
        vehicle_id=ctx.require(k.VEHICLE_ID),
        fuel_id=ctx.require(k.FUEL_ID),
        odometer=ctx.require(k.ODOMETER),
        reference_details=ReferenceDetails(
            check_type_id=preparation.check_type.id if preparation.check_type else VEHICLE_CHECK_TYPE_ID
        ),
        skeleton_details=SkeletonReference(
            skeleton_id=skeleton.id if skeleton else None,
            skeleton_image=skeleton.image if skeleton else None,
        ),
        vehicle_check_damages=VehicleCheckDamages(check_item_statuses=statuses),
    )


def build_execute_booking_request(ctx: OrchestrationContext) -> ExecuteBookingRequest:
    """The ``/Contract/ExecuteBooking`` body assembled from everything gathered so far."""
    pickup, dropoff = _contract_dates(ctx)
    branch_id = ctx.require(k.PICKUP_BRANCH_ID)
    vehicle_id = ctx.require(k.VEHICLE_ID)
    voucher = VoucherCreateInput(
        voucher_operation_type_id=CONTRACT_VOUCHER_OPERATION_TYPE_ID,
        base_payment_information_dto=CashPaymentInformation(
            amount=Amount(value=ctx.get_optional(k.REMAINING_AMOUNT, 0.0))
        ),
        voucher_date_time=pickup,
        source_id=SOURCE_ID,
    )
    return ExecuteBookingRequest(
        rental_rate_id=ctx.require(k.CONTRACT_RENTAL_RATE_ID),
        contract_payment_info=ContractPaymentInfo(voucher_create_input_list=[voucher]),
        booking_id=str(ctx.require(k.BOOKING_ID)),
        calculation_result=ctx.require(k.CALCULATION_RESULT),
        pickup_branch_id=branch_id,
        dropoff_branch_id=branch_id,
        pickup_date=pickup,
        dropoff_date=dropoff,
        vehicle_info=VehicleInfo(
            vehicle_id=vehicle_id,
            category_id=ctx.require(k.CATEGORY_ID),
            odometer=ctx.require(k.ODOMETER),
            fuel_id=ctx.require(k.FUEL_ID),
            branch_id=branch_id,
        ),
        customer_info=CustomerInfo(driver_id=ctx.require(k.DRIVER_ID), identity_id=ctx.get_optional(k.IDENTITY_ID)),
        ready_vehicle_blocking_key=ctx.require(k.READY_VEHICLE_BLOCKING_KEY),
        driver_authorization_type_id=ctx.get_optional(k.DRIVER_AUTHORIZATION_TYPE_ID),
        vehicle_check_data=build_vehicle_check_data(ctx),
    )


def execute_booking_request(ctx: OrchestrationContext) -> OperationArgs:
    return OperationArgs(body=build_execute_booking_request(ctx).to_payload())


_CONTRACT_KEYS = (k.VEHICLE_ID, k.PICKUP_BRANCH_ID, k.BOOKING_PICKUP_DATE, k.DRIVER_ID)

EXECUTE_BOOKING_PHASE: SagaDefinition = (
    SagaBuilder("execute-booking-phase")
    .inputs(k.BOOKING_ID, k.BOOKING_NUMBER, k.CATEGORY_ID, k.MODEL_ID, k.VEHICLE_YEAR)
    .inputs(k.AUTHORIZATION_PHONE_NUMBER, k.VERIFICATION_CODE)
    .step("GetAllBookings").invoke(ops.GET_ALL_BOOKINGS)
        .requires(k.BOOKING_NUMBER).request(all_bookings_request)
        .outputs(map_booking_row, provides=[k.DRIVER_ID, k.CUSTOMER_PHONE]).add()
    .step("GetBookingForQuickSearch").invoke(ops.GET_BOOKING_FOR_QUICK_SEARCH)
        .requires(k.BOOKING_NUMBER).request(quick_search_request)
        .outputs(
            map_quick_search,
            provides=[k.PICKUP_BRANCH_ID, k.BOOKING_TYPE_ID, k.BOOKING_PICKUP_DATE, k.VEHICLE_ID],
        ).add()
    .step("IsAllowedToExecuteBooking").invoke(ops.IS_ALLOWED_TO_EXECUTE_BOOKING)
        .requires(k.BOOKING_ID).request(lambda ctx: OperationArgs(params={"id": ctx.require(k.BOOKING_ID)}))
        .best_effort().add()
    .step("GetLiteCustomer").invoke(ops.GET_LITE_CUSTOMER)
        .requires(k.DRIVER_ID).request(lambda ctx: OperationArgs(params={"id": ctx.require(k.DRIVER_ID)}))
        .outputs(map_lite_customer, provides=[k.IDENTITY_ID]).best_effort().add()
    .step("ValidatePhone").invoke(ops.VALIDATE_PHONE)
        .requires(k.CUSTOMER_PHONE).request(phone_request).best_effort().add()
    .step("GetPageTrackingSetting").invoke(ops.GET_TENANT_SETTING_BY_KEY)
        .request(lambda ctx: OperationArgs(params={"settingKey": PAGE_TRACKING_SETTING}))
        .best_effort().add()
    .step("GetContractStates").invoke(ops.GET_ALL_ITEMS_COMBOBOX_ITEMS)
        .request(lambda ctx: lookup_items(LOOKUP_CONTRACT_STATES, include_not_assign=True))
        .best_effort().add()
    .step("GetContractPrivacyPolicyTypes").invoke(ops.GET_ITEMS_BY_TYPE)
        .request(lambda ctx: OperationArgs(params={"typeId": LOOKUP_PRIVACY_POLICY_TYPES, "includeInActive": False}))
        .best_effort().add()
    .step("GetContractCountriesPhone").invoke(ops.GET_COUNTRIES_PHONE).best_effort().add()
    .step("GetContractCarModels").invoke(ops.GET_ALL_CAR_MODELS).best_effort().add()
    .step("GetFuelLevels").invoke(ops.GET_ALL_ITEMS_COMBOBOX_ITEMS)
        .request(lambda ctx: lookup_items(LOOKUP_FUEL_LEVELS))
        .best_effort().add()
    .step("GetExternalLoyaltiesConfigurations").invoke(ops.GET_EXTERNAL_LOYALTIES_CONFIGURATIONS)
        .request(lambda ctx: OperationArgs(params={"includeInActive": False}))
        .best_effort().add()
    .step("GetReadyVehiclesModel").invoke(ops.GET_READY_VEHICLES_MODEL)
        .requires(k.PICKUP_BRANCH_ID, k.CATEGORY_ID).request(ready_models_request).best_effort().add()
    .step("GetReadyVehiclesByCategoryAndModel").invoke(ops.GET_READY_VEHICLES_BY_CATEGORY_AND_MODEL)
        .requires(k.PICKUP_BRANCH_ID, k.CATEGORY_ID, k.MODEL_ID).request(ready_vehicles_request)
        .outputs(
            map_ready_vehicle,
            provides=[
                k.VEHICLE_ID,
                k.MODEL_ID,
                k.CATEGORY_ID,
                k.VEHICLE_YEAR,
                k.FUEL_ID,
                k.ODOMETER,
                k.CONTRACT_RENTAL_RATE_ID,
            ],
        ).add()
    .step("ValidateContractInfo").invoke(ops.VALIDATE_CONTRACT_INFO)
        .requires(*_CONTRACT_KEYS, k.BOOKING_ID).request(validate_contract_request).best_effort().add()
    .step("ValidateContractRentingRestriction").invoke(ops.VALIDATE_CONTRACT_RENTING_RESTRICTION)
        .requires(k.DRIVER_ID, k.PICKUP_BRANCH_ID, k.MODEL_ID, k.BOOKING_PICKUP_DATE)
        .request(contract_restriction_request).best_effort().add()
    .step("GetExternalLoyaltiesWithAllowEarn").invoke(ops.GET_EXTERNAL_LOYALTIES_WITH_ALLOW_EARN)
        .requires(k.DRIVER_ID, k.PICKUP_BRANCH_ID)
        .request(lambda ctx: OperationArgs(
            params={"customerId": ctx.require(k.DRIVER_ID), "branchId": ctx.require(k.PICKUP_BRANCH_ID)}
        ))
        .best_effort().add()
    .step("ValidateCustomer").invoke(ops.VALIDATE_CUSTOMER)
        .requires(k.DRIVER_ID).request(lambda ctx: OperationArgs(params={"customerId": ctx.require(k.DRIVER_ID)}))
        .best_effort().add()
    .step("IsCustomerEligibleForProvidersIntegration").invoke(ops.IS_CUSTOMER_ELIGIBLE_FOR_PROVIDERS_INTEGRATION)
        .requires(k.DRIVER_ID).request(lambda ctx: OperationArgs(params={"customerId": ctx.require(k.DRIVER_ID)}))
        .best_effort().add()
    .step("GetMatchingOffers").invoke(ops.GET_MATCHING_OFFERS)
        .requires(*_CONTRACT_KEYS, k.MODEL_ID, k.VEHICLE_YEAR).request(matching_offers_request)
        .best_effort().add()
    .step("GetContractExtraItems").invoke(ops.GET_CONTRACT_EXTRA_ITEMS)
        .requires(k.PICKUP_BRANCH_ID, k.CATEGORY_ID).request(extra_items_request).best_effort().add()
    .step("GetApplicableDriverAuthorizations").invoke(ops.GET_APPLICABLE_DRIVER_AUTHORIZATIONS)
        .requires(k.VEHICLE_ID, k.DRIVER_ID).request(driver_authorizations_request)
        .outputs(map_driver_authorization, provides=[k.DRIVER_AUTHORIZATION_TYPE_ID]).best_effort().add()
    .step("CancelDriverAuthorizationIfRequired").invoke(ops.CANCEL_DRIVER_AUTHORIZATION_IF_REQUIRED)
        .requires(*_CONTRACT_KEYS, k.DRIVER_AUTHORIZATION_TYPE_ID).request(cancel_authorization_request)
        .outputs(lambda envelope, ctx: {k.DRIVER_AUTHORIZATION_CHECKED: True}, provides=[k.DRIVER_AUTHORIZATION_CHECKED])
        .best_effort().add()
    .step("AuthorizeDriver").invoke(ops.AUTHORIZE_DRIVER)
        .requires(*_CONTRACT_KEYS, k.DRIVER_AUTHORIZATION_TYPE_ID, k.DRIVER_AUTHORIZATION_CHECKED)
        .request(authorize_driver_request).best_effort().add()
    .step("CalculateContractBilling").invoke(ops.CALCULATE_CONTRACT_BILLING)
        .requires(*_CONTRACT_KEYS, k.CONTRACT_RENTAL_RATE_ID, k.CATEGORY_ID, k.MODEL_ID)
        .request(contract_billing_request)
        .outputs(map_contract_billing, provides=[k.CALCULATION_RESULT, k.REMAINING_AMOUNT]).add()
    .step("GetVehicleCheckPreparationData").invoke(ops.GET_VEHICLE_CHECK_PREPARATION_DATA)
        .requires(k.VEHICLE_ID).request(vehicle_check_request)
        .outputs(map_vehicle_check, provides=[k.VEHICLE_CHECK]).add()
    .step("BlockVehicleUsage").invoke(ops.BLOCK_VEHICLE_USAGE)
        .requires(k.VEHICLE_ID, k.PICKUP_BRANCH_ID).request(block_vehicle_request)
        .outputs(map_blocking_key, provides=[k.READY_VEHICLE_BLOCKING_KEY]).add()
    .step("ExecuteBooking").invoke(ops.EXECUTE_BOOKING)
        .requires(
            *_CONTRACT_KEYS,
            k.BOOKING_ID,
            k.CONTRACT_RENTAL_RATE_ID,
            k.CALCULATION_RESULT,
            k.CATEGORY_ID,
            k.FUEL_ID,
            k.ODOMETER,
            k.VEHICLE_CHECK,
            k.READY_VEHICLE_BLOCKING_KEY,
        )
        .request(execute_booking_request).add()
    .build()
)

EXECUTE_BOOKING_SAGA: SagaDefinition = (
    SagaBuilder("execute-created-booking-with-new-customer-and-new-vehicle")
    .include(CREATE_BOOKING_SAGA)
    .include(EXECUTE_BOOKING_PHASE)
    .build()
)
