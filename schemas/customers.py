from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.fields import Email, ClearableEmail, DisplayName, Address, Phone, MeterNumber


class CustomerCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: DisplayName
    email: Optional[Email] = None
    phone: Phone
    meter_number: MeterNumber
    address: Address


class CustomerUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[DisplayName] = None
    email: Optional[ClearableEmail] = None
    phone: Optional[Phone] = None
    meter_number: Optional[MeterNumber] = None
    address: Optional[Address] = None


class ShareVerifyRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    phone: str = Field(min_length=1)
