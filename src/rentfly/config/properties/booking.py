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
"""Booking scenario configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from rentfly.core.config import config_properties


@config_properties(prefix="rentfly.booking")
@dataclass
class BookingProperties:
    """Vehicle, rate and customer choices used when booking (rentfly.booking.*)."""

    car_model_name: str = "Accent"
    car_category_name: str = "Economy"
    vehicle_year: int = 2024
    rental_rate_schema_name: str = "Daily"
    phone_code: str = "966"
    authorization_phone_number: str = "966-515546871"
    verification_code: int = 1111
