"""
Electricity record model definition
"""
from models import db
from datetime import datetime
from sqlalchemy import event
from utils.billing import DEFAULT_RATE_PER_UNIT, compute_bill, compute_late_fee, days_until_due, validate_rate
from utils.payment_status_helper import PENDING, normalize_status, is_overdue


class ElectricityRecord(db.Model):
    """One billing cycle's reading for an owner's meter or a customer's meter"""
    __tablename__ = 'electricity_records'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customers.id'), nullable=True, index=True)  # None: owner's own meter
    meter_number = db.Column(db.String(12), nullable=False, index=True)
    previous_reading = db.Column(db.Integer, nullable=False, default=0)
    current_reading = db.Column(db.Integer, nullable=False)
    units_consumed = db.Column(db.Integer, nullable=False, default=0)
    rate_per_unit = db.Column(db.Numeric(10, 4), nullable=False, default=DEFAULT_RATE_PER_UNIT)
    total_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    payment_status = db.Column(db.String(20), nullable=False, default=PENDING, index=True)  # pending, paid, overdue, cancelled
    payment_date = db.Column(db.DateTime, nullable=True)
    bill_image = db.Column(db.String(255), nullable=True)
    payment_screenshot = db.Column(db.String(255), nullable=True)
    payment_submitted_at = db.Column(db.DateTime, nullable=True)
    due_date = db.Column(db.Date, nullable=False, index=True)
    remarks = db.Column(db.String(500), nullable=False, default='')
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.now, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    @db.validates('payment_status')
    def _validate_payment_status(self, key, value):
        return normalize_status(value)

    @db.validates('payment_date')
    def _validate_payment_date(self, key, value):
        if value is not None and value > datetime.now():
            raise ValueError('Payment date cannot be in the future')
        return value

    @classmethod
    def latest_for(cls, user_id, customer_id=None):
        """Most recent active record for an owner's meter (customer_id None) or a customer's."""
        query = cls.query.filter(cls.user_id == user_id, cls.is_active.is_(True))
        if customer_id is None:
            query = query.filter(cls.customer_id.is_(None))
        else:
            query = query.filter(cls.customer_id == customer_id)
        return query.order_by(cls.created_at.desc(), cls.id.desc()).first()

    def recalculate(self):
        """Refresh the derived units and amount from the readings and rate."""
        rate = validate_rate(self.rate_per_unit if self.rate_per_unit is not None else DEFAULT_RATE_PER_UNIT)
        self.rate_per_unit = rate
        self.units_consumed, self.total_amount = compute_bill(
            self.previous_reading or 0, self.current_reading, rate
        )
        return self.total_amount

    def late_fee(self, now=None):
        return compute_late_fee(self.total_amount or 0, self.due_date, self.payment_status, now=now)

    def to_dict(self, include_customer=False):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'customer_id': self.customer_id,
            'meter_number': self.meter_number,
            'previous_reading': self.previous_reading,
            'current_reading': self.current_reading,
            'units_consumed': self.units_consumed or 0,
            'rate_per_unit': float(self.rate_per_unit) if self.rate_per_unit is not None else None,
            'total_amount': float(self.total_amount or 0),
            'payment_status': self.payment_status,
            'payment_date': self.payment_date.isoformat() if self.payment_date else None,
            'bill_image': self.bill_image,
            'payment_screenshot': self.payment_screenshot,
            'payment_submitted_at': self.payment_submitted_at.isoformat() if self.payment_submitted_at else None,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'remarks': self.remarks or '',
            'is_overdue': is_overdue(self),
            'days_until_due': days_until_due(self.due_date) if self.due_date else None,
            'late_fee': float(self.late_fee()),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_customer:
            data['customer'] = self.customer.to_dict() if self.customer else None
        return data

    def __repr__(self):
        return f'<ElectricityRecord {self.id} {self.meter_number}>'


@event.listens_for(ElectricityRecord, 'before_insert')
@event.listens_for(ElectricityRecord, 'before_update')
def _derive_billing_fields(mapper, connection, target):
    """Derived fields are never trusted from callers."""
    target.recalculate()
