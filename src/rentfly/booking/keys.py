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
"""Context keys shared by the booking steps."""

# inputs
COUNTRY_NAME = "country_name"
BRANCH_NAME = "branch_name"
CAR_MODEL_NAME = "car_model_name"
CAR_CATEGORY_NAME = "car_category_name"
VEHICLE_YEAR = "vehicle_year"
RENTAL_RATE_SCHEMA_NAME = "rental_rate_schema_name"
PHONE_CODE = "phone_code"
AUTHORIZATION_PHONE_NUMBER = "authorization_phone_number"
VERIFICATION_CODE = "verification_code"

# create-booking phase
COUNTRY_ID = "country_id"
BRANCH_ID = "branch_id"
PICKUP_DATE = "pickup_date"
DROPOFF_DATE = "dropoff_date"
MODEL_ID = "model_id"
CATEGORY_ID = "category_id"
GENDER_ID = "gender_id"
IDENTITY_DOCUMENT_TYPE_ID = "identity_document_type_id"
LICENSE_DOCUMENT_TYPE_ID = "license_document_type_id"
CUSTOMER_ID = "customer_id"
CUSTOMER_NAME = "customer_name"
RENTAL_RATES_SCHEMA_ID = "rental_rates_schema_id"
RENTAL_RATE_ID = "rental_rate_id"
BOOKING_ID = "booking_id"
BOOKING_NUMBER = "booking_number"

# execute-booking phase
DRIVER_ID = "driver_id"
CUSTOMER_PHONE = "customer_phone"
PICKUP_BRANCH_ID = "pickup_branch_id"
BOOKING_TYPE_ID = "booking_type_id"
BOOKING_PICKUP_DATE = "booking_pickup_date"
VEHICLE_ID = "vehicle_id"
IDENTITY_ID = "identity_id"
FUEL_ID = "fuel_id"
ODOMETER = "odometer"
CONTRACT_RENTAL_RATE_ID = "contract_rental_rate_id"
DRIVER_AUTHORIZATION_TYPE_ID = "driver_authorization_type_id"
DRIVER_AUTHORIZATION_CHECKED = "driver_authorization_checked"
CALCULATION_RESULT = "calculation_result"
REMAINING_AMOUNT = "remaining_amount"
VEHICLE_CHECK = "vehicle_check"
READY_VEHICLE_BLOCKING_KEY = "ready_vehicle_blocking_key"
