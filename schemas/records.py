from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.billing import MIN_RATE_PER_UNIT, MAX_RATE_PER_UNIT
from utils.payment_status_helper import PENDING, PAID, OVERDUE, normalize_status


# Owner-side status actions; cancelling is an admin action
OWNER_STATUSES = (PAID, PENDING, OVERDUE)


class RecordCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    current_reading: int = Field(ge=0)
    previous_reading: Optional[int] = Field(default=None, ge=0)
    rate_per_unit: Optional[Decimal] = Field(default=None, ge=MIN_RATE_PER_UNIT, le=MAX_RATE_PER_UNIT)
    due_date: date
    customer_id: Optional[int] = None
    remarks: str = Field(default='', max_length=500)
    payment_status: Optional[str] = None

    @field_validator('payment_status')
    @classmethod
    def _status(cls, value):
        if value is None:
            return None
        status = normalize_status(value)
        if status not in OWNER_STATUSES:
            raise ValueError('Invalid payment status')
        return status


class RecordUpdate(BaseModel):
    """Partial update of an existing record; omitted fields are left unchanged."""
    model_config = ConfigDict(str_strip_whitespace=True)

    current_reading: Optional[int] = Field(default=None, ge=0)
    rate_per_unit: Optional[Decimal] = Field(default=None, ge=MIN_RATE_PER_UNIT, le=MAX_RATE_PER_UNIT)
    due_date: Optional[date] = None
    remarks: Optional[str] = Field(default=None, max_length=500)


class PaymentStatusUpdate(BaseModel):
    """Owner action: paid, pending, overdue, or 'unpaid' (alias for pending)."""
    model_config = ConfigDict(str_strip_whitespace=True)

    status: str

    @field_validator('status')
    @classmethod
    def _status(cls, value):
        status = normalize_status(value, allow_aliases=True)
        if status not in OWNER_STATUSES:
            raise ValueError('Invalid payment status')
        return status


class AdminPaymentUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    status: str

    @field_validator('status')
    @classmethod
    def _status(cls, value):
        return normalize_status(value)
