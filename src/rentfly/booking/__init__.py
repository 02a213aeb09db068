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
"""Booking flows: create a booking and execute it into a contract."""

from rentfly.booking.create_booking import CREATE_BOOKING_SAGA
from rentfly.booking.execute_booking import EXECUTE_BOOKING_PHASE, EXECUTE_BOOKING_SAGA
from rentfly.booking.service import ExecuteBookingService

__all__ = [
    "CREATE_BOOKING_SAGA",
    "EXECUTE_BOOKING_PHASE",
    "EXECUTE_BOOKING_SAGA",
    "ExecuteBookingService",
]
