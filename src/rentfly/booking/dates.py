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
"""Date helpers for the platform's ISO-8601 timestamps with offsets."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from rentfly.kernel.exceptions import ValidationException

RENTEY_OFFSET = "+03:00"


def add_days(timestamp: str, days: int) -> str:
    """Shift an ISO timestamp by *days*, keeping its offset notation."""
    try:
        parsed = datetime.fromisoformat(timestamp)
    except ValueError as exc:
        raise ValidationException(f"Not an ISO-8601 timestamp: {timestamp!r}") from exc
    return (parsed + timedelta(days=days)).isoformat()


def rentey_date(day: date) -> str:
    """Midnight of *day* in the platform's format, e.g. ``2024-05-01T00:00:00+03:00``."""
    return f"{day.isoformat()}T00:00:00{RENTEY_OFFSET}"
