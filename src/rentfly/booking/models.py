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
"""Typed views of the platform payloads the booking saga reads and writes.

Response schemas ignore fields they do not name; request models are dumped
with camelCase aliases to match the platform's JSON.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Id = int | str


class RenteyModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys, ``None`` fields included."""
        return self.model_dump(by_alias=True, mode="json")


# =============================================================================
# Lookups
# =============================================================================


class OperationalCountry(RenteyModel):
    id: int
    name: str


class ComboboxItem(RenteyModel):
    value: Id
    display_text: str | None = None
    is_selected: bool | None = False


class ComboboxPage(RenteyModel):
    items: list[ComboboxItem] = Field(default_factory=list)

    def value_of(self, display_text: str) -> Id | None:
        for item in self.items:
            if item.display_text is not None and item.display_text.strip() == display_text.strip():
                return item.value
        return None


class AvailableModel(RenteyModel):
    value: Id
    display_text: str | None = None
    years_combobox_items: list[ComboboxItem] = Field(default_factory=list)


class AvailableCategory(RenteyModel):
    value: Id
    display_text: str | None = None
    booking_available_model_combobox_items: list[AvailableModel] = Field(default_factory=list)


class AvailableModelsPage(RenteyModel):
    items: list[AvailableCategory] = Field(default_factory=list)

    def find(self, category_name: str, model_name: str) -> tuple[Id, Id] | None:
        """``(category value, model value)`` of the named model, preferring the named category."""
        fallback: tuple[Id, Id] | None = None
        for category in self.items:
            for model in category.booking_available_model_combobox_items:
                if model.display_text != model_name:
                    continue
                if category.display_text == category_name:
                    return category.value, model.value
                if fallback is None:
                    fallback = (category.value, model.value)
        return fallback


class RentalRatesSchemaItem(RenteyModel):
    id: int
    name: str | None = None
    type: str | None = None
    is_active: bool | None = None


class RentalRatesSchemaPage(RenteyModel):
    items: list[RentalRatesSchemaItem] = Field(default_factory=list)


# =============================================================================
# Booking
# =============================================================================


class CreateBookingDateInputs(RenteyModel):
    now_date: str | None = None
    minimum_pickup_date: str
    maximum_pickup_date: str | None = None


class CustomerFullName(RenteyModel):
    display_name: str | None = None


class CreatedCustomer(RenteyModel):
    id: int
    full_name: CustomerFullName | None = None


class BestRentalRate(RenteyModel):
    rental_rate_id: int
    daily_rate: float | None = None
    currency_iso: str | None = None


class CreatedBooking(RenteyModel):
    booking_id: int
    booking_number: Id


class BookingRow(RenteyModel):
    id: int | None = None
    driver_id: int | None = None
    customer_primary_phone: str | None = None
    vehicle_id: int | None = None


class BookingPage(RenteyModel):
    total: int | None = None
    data: list[BookingRow] = Field(default_factory=list)


class QuickSearchBooking(RenteyModel):
    id: int | None = None
    booking_no: str | None = None
    pickup_branch_id: int | None = None
    booking_type_id: int | None = None
    pickup_date: str | None = None
    vehicle_id: int | None = None


class LiteCustomer(RenteyModel):
    id: int | None = None
    identity_id: int | None = None


# =============================================================================
# Vehicles and contract
# =============================================================================


class ReadyVehicleRate(RenteyModel):
    rental_rate_id: int | None = None


class ReadyVehicle(RenteyModel):
    id: int
    model_id: int | None = None
    category_id: int | None = None
    year: int | None = None
    fuel_id: int | None = None
    odometer: int | None = None
    rental_rate: ReadyVehicleRate | None = None


class ReadyVehiclesPage(RenteyModel):
    items: list[ReadyVehicle] = Field(default_factory=list)


class PaymentInfo(RenteyModel):
    remaining_amount: float = 0.0


class ContractBilling(RenteyModel):
    calculation_result: dict[str, Any]
    payment_info: PaymentInfo | None = None


class CheckType(RenteyModel):
    id: int


class SkeletonImage(RenteyModel):
    id: Id | None = None
    url: str | None = None
    is_new_document: bool | None = None


class SkeletonDetails(RenteyModel):
    id: int | None = None
    image: SkeletonImage | None = None


class CheckItem(RenteyModel):
    id: int


class ChecklistDetail(RenteyModel):
    id: int
    check_items: list[CheckItem] = Field(default_factory=list)


class VehicleCheckPreparation(RenteyModel):
    check_type: CheckType | None = None
    vehicle_skeleton_details: SkeletonDetails | None = None
    checklist_details: list[ChecklistDetail] = Field(default_factory=list)


# =============================================================================
# Requests
# =============================================================================


class Amount(RenteyModel):
    value: float
    currency_id: int = 1
    iso_code: str | None = "SAR"


class CashPaymentInformation(RenteyModel):
    discriminator: Literal["CashPaymentInformationDto"] = "CashPaymentInformationDto"
    payment_method_id: int = 290
    amount: Amount


class VoucherCreateInput(RenteyModel):
    reference_id: int | None = None
    voucher_operation_type_id: int
    voucher_type_id: int = 270
    base_payment_information_dto: CashPaymentInformation
    voucher_date_time: str | None = None
    source_id: int = 120


class ContractPaymentInfo(RenteyModel):
    voucher_create_input_list: list[VoucherCreateInput]


class VehicleInfo(RenteyModel):
    vehicle_id: int
    category_id: int
    odometer: int
    fuel_id: int
    branch_id: int


class CustomerInfo(RenteyModel):
    driver_id: int
    identity_id: int | None = None


class Signature(RenteyModel):
    url: str | None = None


class ReferenceDetails(RenteyModel):
    check_type_id: int


class SkeletonReference(RenteyModel):
    skeleton_id: int | None = None
    skeleton_image: SkeletonImage | None = None


class CheckItemStatus(RenteyModel):
    checklist_id: int
    check_item_id: int
    choice_id: int = 5000


class VehicleCheckDamages(RenteyModel):
    check_item_statuses: list[CheckItemStatus] = Field(default_factory=list)
    skeleton_body_damages: list[Any] = Field(default_factory=list)
    other_damages: list[Any] = Field(default_factory=list)


class VehicleCheckData(RenteyModel):
    vehicle_id: int
    fuel_id: int
    odometer: int
    signature: Signature = Field(default_factory=Signature)
    reference_details: ReferenceDetails
    skeleton_details: SkeletonReference
    vehicle_check_damages: VehicleCheckDamages
    snapshots: list[Any] = Field(default_factory=list)
    total_damages_cost: Amount = Field(default_factory=lambda: Amount(value=0.0))
    damage_status_id: int | None = None
    franchise_id: int | None = None


class ExecuteBookingRequest(RenteyModel):
    """Body of ``/Contract/ExecuteBooking``."""

    rental_rate_id: int
    contract_payment_info: ContractPaymentInfo
    user_discounts: list[Any] = Field(default_factory=list)
    external_loyalty_id: int | None = None
    contract_offers: list[Any] = Field(default_factory=list)
    booking_id: str
    calculation_result: dict[str, Any]
    pickup_branch_id: int
    dropoff_branch_id: int
    dropoff_date: str
    source: int = 120
    transfer_cost_id: int | None = None
    extras: list[Any] = Field(default_factory=list)
    vehicle_info: VehicleInfo
    customer_info: CustomerInfo
    skip_authorization: bool = True
    ready_vehicle_blocking_key: str
    pickup_date: str
    comments: dict[str, Any] = Field(default_factory=dict)
    coupon_code: str = ""
    driver_authorization_type_id: int | None = None
    vehicle_check_data: VehicleCheckData
