from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.fields import Email, PersonName, DisplayName, Address, Phone, MeterNumber
from utils.validators import validate_password, validate_upi_id

UPI_INVALID_MSG = 'Please enter a valid UPI ID (e.g., yourname@paytm)'


class RegisterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: PersonName
    email: Email
    password: str
    meter_number: MeterNumber
    address: Address
    phone: Phone

    @field_validator('password')
    @classmethod
    def _strong_password(cls, value):
        ok, message = validate_password(value)
        if not ok:
            raise ValueError(message)
        return value


class LoginRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: Email
    password: str = Field(min_length=1)


class ProfileUpdate(BaseModel):
    """Self-service profile edit; omitted fields are left unchanged, a blank UPI id clears it."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[DisplayName] = None
    address: Optional[Address] = None
    phone: Optional[Phone] = None
    upi_id: Optional[str] = None

    @field_validator('upi_id')
    @classmethod
    def _upi(cls, value):
        if not validate_upi_id(value):
            raise ValueError(UPI_INVALID_MSG)
        return value


class UpiUpdate(BaseModel):
    """Admin UPI edit; blank or missing clears it."""
    model_config = ConfigDict(str_strip_whitespace=True)

    upi_id: Optional[str] = None

    @field_validator('upi_id')
    @classmethod
    def _upi(cls, value):
        if not validate_upi_id(value):
            raise ValueError(UPI_INVALID_MSG)
        return value or ''
