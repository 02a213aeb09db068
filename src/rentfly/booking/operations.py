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
"""Catalog of the Rentey platform operations used by the booking saga."""

from __future__ import annotations

from rentfly.client.operations import BasePath, Operation

# ── country, branch and settings lookups ─────────────────────

GET_OPERATIONAL_COUNTRIES = Operation(
    "GetOperationalCountries", "GET", "/Country/GetOperationalCountries", cacheable=True
)
GET_USER_BRANCHES_FOR_COMBOBOX = Operation(
    "GetUserBranchesForCombobox", "GET", "/Branch/GetUserBranchesForCombobox", cacheable=True
)
GET_COUNTRY_SETTINGS = Operation("GetCountrySettings", "GET", "/CountrySettings/GetSettings", cacheable=True)
GET_COUNTRIES_PHONE = Operation("GetCountriesPhone", "GET", "/Country/GetCountriesPhone", cacheable=True)
GET_TENANT_SETTING_BY_KEY = Operation(
    "GetTenantSettingBySettingKey", "GET", "/TenantSettings/GetTenantSettingBySettingKey", cacheable=True
)
GET_ALL_ITEMS_COMBOBOX_ITEMS = Operation(
    "GetAllItemsComboboxItems", "GET", "/Lookups/GetAllItemsComboboxItems", cacheable=True
)
GET_ITEMS_BY_TYPE = Operation("GetItemsByType", "GET", "/Lookups/GetItemsByType", cacheable=True)
VALIDATE_PHONE = Operation("IsValidPhone", "GET", "/ValidatePhone/IsValid", base=BasePath.ROOT, cacheable=True)

# ── vehicles, models and rates ───────────────────────────────

GET_ALL_CAR_MODELS = Operation("GetAllCarModels", "GET", "/CarModel/GetAllCarModels", cacheable=True)
GET_BRANCH_AVAILABLE_MODELS = Operation(
    "GetBranchAvailableModelsForBookingComboboxItems",
    "POST",
    "/RentalVehicle/GetBranchAvailableModelsForBookingComboboxItems",
    cacheable=True,
)
GET_ALL_RENTAL_RATES_SCHEMAS = Operation(
    "GetAllRentalRatesSchemas", "GET", "/RentalRatesSchema/GetAllRentalRatesSchemas", cacheable=True
)
GET_BEST_RENTAL_RATE_FOR_MODEL = Operation(
    "GetBestRentalRateForModel", "GET", "/RentalVehicle/GetBestRentalRateForModel"
)
GET_READY_VEHICLES_MODEL = Operation(
    "GetReadyVehiclesModel", "GET", "/RentalVehicle/GetReadyVehiclesModel", cacheable=True
)
GET_READY_VEHICLES_BY_CATEGORY_AND_MODEL = Operation(
    "GetReadyVehiclesByCategoryAndModel", "POST", "/RentalVehicle/GetReadyVehiclesByCategoryAndModel"
)
BLOCK_VEHICLE_USAGE = Operation(
    "BlockVehicleUsageForLongPeriod", "POST", "/RentalVehicle/BlockVehicleUsageForLongPeriod"
)
GET_VEHICLE_CHECK_PREPARATION_DATA = Operation(
    "GetVehicleCheckPreparationData", "GET", "/VehicleCheck/GetVehicleCheckPreparationData", cacheable=True
)

# ── customers ────────────────────────────────────────────────

CREATE_OR_UPDATE_CUSTOMER = Operation("CreateOrUpdateCustomer", "POST", "/Customer/CreateOrUpdateCustomer")
GET_CUSTOMER_CONTRACT_INFORMATION_BY_NAME = Operation(
    "GetCustomerContractInformationByName", "GET", "/Customer/GetCustomerContractInformationByName"
)
GET_LITE_CUSTOMER = Operation("GetLiteCustomer", "GET", "/Customer/GetLiteCustomer", cacheable=True)
IS_CUSTOMER_ELIGIBLE_FOR_PROVIDERS_INTEGRATION = Operation(
    "IsCustomerEligibleForCustomerProvidersIntegration",
    "POST",
    "/Customer/IsCustomerEligibleForCustomerProvidersIntegration",
)

# ── bookings ─────────────────────────────────────────────────

GET_EXTRAS_NAMES_EXCLUDED = Operation(
    "GetExtrasNamesExcludedFromBookingPaymentDetails",
    "GET",
    "/ContractExtraConfiguration/GetExtrasNamesExcludedFromBookingPaymentDetails",
    cacheable=True,
)
GET_CREATE_BOOKING_DATE_INPUTS = Operation(
    "GetCreateBookingDateInputs", "GET", "/Booking/GetCreateBookingDateInputs"
)
VALIDATE_DURATION_AND_LOCATIONS = Operation(
    "ValidateDurationANDLocations", "POST", "/Booking/ValidateDurationANDLocations"
)
VALIDATE_BOOKING_RENTING_RESTRICTION = Operation(
    "BookingValidatePreventRentingRestriction", "POST", "/Booking/ValidatePreventRentingRestriction"
)
CALCULATE_BOOKING_BILLING = Operation(
    "BookingCalculateBillingInformation", "POST", "/Booking/CalculateBillingInformation"
)
CREATE_BOOKING = Operation("CreateBooking", "POST", "/CreateBooking/CreateBooking")
GET_ALL_BOOKINGS = Operation("GetAllBookings", "GET", "/Booking/GetAllBookings")
GET_BOOKING_FOR_QUICK_SEARCH = Operation("GetBookingForQuickSearch", "GET", "/Booking/GetBookingForQuickSearch")
IS_ALLOWED_TO_EXECUTE_BOOKING = Operation(
    "IsAllowedToExecuteBooking", "POST", "/Booking/IsAllowedToExecuteBooking"
)

# ── contracts and driver authorization ───────────────────────

VALIDATE_CONTRACT_INFO = Operation("ValidateContractInfo", "POST", "/Contract/ValidateContractInfo")
VALIDATE_CONTRACT_RENTING_RESTRICTION = Operation(
    "ContractValidatePreventRentingRestriction", "POST", "/Contract/ValidatePreventRentingRestriction"
)
VALIDATE_CUSTOMER = Operation("ValidateCustomer", "POST", "/Contract/ValidateCustomer")
GET_MATCHING_OFFERS = Operation("GetMatchingOffers", "GET", "/Contract/GetMatchingOffers")
GET_CONTRACT_EXTRA_ITEMS = Operation(
    "GetContractExtraItems", "GET", "/ContractExtraConfiguration/GetContractExtraItems", cacheable=True
)
GET_APPLICABLE_DRIVER_AUTHORIZATIONS = Operation(
    "GetAllApplicableDriverAuthorizationComboboxItems",
    "GET",
    "/DriverAuthorization/GetAllApplicableDriverAuthorizationComboboxItems",
)
CANCEL_DRIVER_AUTHORIZATION_IF_REQUIRED = Operation(
    "CancelDriverAuthorizationIfCancellationRequired",
    "POST",
    "/DriverAuthorization/CancelDriverAuthorizationIfCancellationRequired",
)
AUTHORIZE_DRIVER = Operation("AuthorizeDriver", "POST", "/DriverAuthorization/AuthorizeDriver")
CALCULATE_CONTRACT_BILLING = Operation(
    "ContractCalculateBillingInformation", "POST", "/Contract/CalculateBillingInformation"
)
EXECUTE_BOOKING = Operation("ExecuteBooking", "POST", "/Contract/ExecuteBooking")

# ── loyalty gateway ──────────────────────────────────────────

GET_INTEGRATED_LOYALTIES = Operation(
    "GetIntegratedLoyalties",
    "GET",
    "/api/app/external-loyalty-configuration/integrated-loyalties",
    base=BasePath.GATEWAY,
    cacheable=True,
)
GET_EXTERNAL_LOYALTIES_CONFIGURATIONS = Operation(
    "GetExternalLoyaltiesConfigurationsItems",
    "GET",
    "/api/app/external-loyalty-configuration/external-loyalties-configurations-items",
    base=BasePath.GATEWAY,
    cacheable=True,
)
GET_EXTERNAL_LOYALTIES_WITH_ALLOW_EARN = Operation(
    "GetExternalLoyaltiesWithAllowEarnCombobox",
    "GET",
    "/api/app/customer-membership/external-loyalties-with-allow-earn-combobox",
    base=BasePath.GATEWAY,
)
