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
"""Random customer data for the ``CreateOrUpdateCustomer`` call."""

from __future__ import annotations

import random
import string
from datetime import date, timedelta
from typing import Any

from pydantic import Field

from rentfly.booking.dates import rentey_date
from rentfly.booking.models import RenteyModel

DEFAULT_IDENTITY_TYPE_ID = "250"
DEFAULT_LICENSE_TYPE_ID = "253"
DEFAULT_GENDER_ID = "110"
ATTACHMENT_URL = "Temp/Downloads/automation-document.png"


class FullName(RenteyModel):
    first: str
    second: str
    family: str


class ContactInformation(RenteyModel):
    primary_phone: str
    email: str


class BasicInformation(RenteyModel):
    nationality_id: str
    gender_id: str
    date_of_birth: str


class ProfessionalInformation(RenteyModel):
    organization_id: str | None = None
    organization_name: str | None = None
    occupation_id: str | None = None


class CustomerPolicyVerification(RenteyModel):
    is_terms_conditions_and_privacy_policy_approved: bool = True
    is_marketing_materials_approved: bool | None = None
    is_data_sharing_policy_approved: bool | None = None


class Address(RenteyModel):
    country_id: str
    city_id: int = -1


class SecondaryAddress(RenteyModel):
    country_id: str | None = None
    city_id: int | None = None
    details: str | None = None


class PersonalPhoto(RenteyModel):
    id: str = ""
    url: str = ""
    size: int = 0
    type: str = ""


class Attachment(RenteyModel):
    url: str = ATTACHMENT_URL
    size: int = 11649
    type: str = ".PNG"


class Document(RenteyModel):
    discriminator: str
    issue_country_id: str
    type_id: str
    number: str
    copy_number: int | None = None
    issue_date: str
    expiry_date: str
    type_name: str
    issue_country: str | None = None
    attachment: Attachment = Field(default_factory=Attachment)
    license_category_id: str | None = None


class CustomerData(RenteyModel):
    id: int = 0
    full_name: FullName
    contact_information: ContactInformation
    basic_information: BasicInformation
    professional_information: ProfessionalInformation = Field(default_factory=ProfessionalInformation)
    customer_policy_verification: CustomerPolicyVerification = Field(default_factory=CustomerPolicyVerification)
    address: Address
    secondary_address: SecondaryAddress = Field(default_factory=SecondaryAddress)
    emergency_contacts: list[Any] = Field(default_factory=list)
    personal_photo: PersonalPhoto = Field(default_factory=PersonalPhoto)
    documents: list[Document] = Field(default_factory=list)
    external_loyalties: list[Any] = Field(default_factory=list)
    source_id: int = 120


class CreateOrUpdateCustomerRequest(RenteyModel):
    customer: CustomerData


def _digits(rng: random.Random, count: int) -> str:
    return "".join(rng.choice(string.digits) for _ in range(count))


def _letters(rng: random.Random, count: int) -> str:
    return "".join(rng.choice(string.ascii_lowercase) for _ in range(count))


def random_customer(
    country_id: str | int,
    country_name: str | None = None,
    *,
    phone_code: str = "966",
    identity_type_id: str | int = DEFAULT_IDENTITY_TYPE_ID,
    license_type_id: str | int = DEFAULT_LICENSE_TYPE_ID,
    gender_id: str | int = DEFAULT_GENDER_ID,
    today: date | None = None,
    rng: random.Random | None = None,
) -> CreateOrUpdateCustomerRequest:
    """A new adult customer with an identity document and a driver license."""
    rng = rng or random.Random()
    today = today or date.today()
    suffix = _letters(rng, 12)
    name = f"Automation Customer {suffix}"
    country = str(country_id)

    birth = today - timedelta(days=365 * rng.randint(21, 60))
    issued = today - timedelta(days=365 * 2)

    documents = [
        Document(
            discriminator="IdentityDto",
            issue_country_id=country,
            type_id=str(identity_type_id),
            number=_digits(rng, 10),
            copy_number=1,
            issue_date=rentey_date(issued),
            expiry_date=rentey_date(today + timedelta(days=365 * 5)),
            type_name="Identity",
            issue_country=country_name,
        ),
        Document(
            discriminator="DriverLicenseDto",
            issue_country_id=country,
            type_id=str(license_type_id),
            number=_digits(rng, 10),
            issue_date=rentey_date(issued),
            expiry_date=rentey_date(today + timedelta(days=365 * 4)),
            type_name="Driver License",
            issue_country=country_name,
            license_category_id="-1",
        ),
    ]

    return CreateOrUpdateCustomerRequest(
        customer=CustomerData(
            full_name=FullName(first=name, second=name, family=name),
            contact_information=ContactInformation(
                primary_phone=f"{phone_code}-5{_digits(rng, 8)}",
                email=f"automation.{suffix}@example.com",
            ),
            basic_information=BasicInformation(
                nationality_id=country,
                gender_id=str(gender_id),
                date_of_birth=rentey_date(birth),
            ),
            address=Address(country_id=country),
            documents=documents,
        )
    )
