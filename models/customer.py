"""
Customer model definition
"""
from models import db
from datetime import datetime


class Customer(db.Model):
    """A third party (e.g. a tenant) whose meter an owner tracks"""
    __tablename__ = 'customers'
    __table_args__ = (
        db.UniqueConstraint('added_by', 'meter_number', name='uq_customer_owner_meter'),
    )

    id = db.Column(db.Integer, primary_key=True)
    added_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(20), nullable=False)
    meter_number = db.Column(db.String(12), nullable=False)
    address = db.Column(db.String(200), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    share_token = db.Column(db.String(64), unique=True, nullable=True)  # set once, never changed
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    records = db.relationship('ElectricityRecord', backref='customer', lazy=True)

    def profile(self):
        """Fields shown to the customer on the share view"""
        return {
            'name': self.name,
            'meter_number': self.meter_number,
            'phone': self.phone,
            'email': self.email,
            'address': self.address,
        }

    def to_dict(self):
        data = self.profile()
        data.update({
            'id': self.id,
            'added_by': self.added_by,
            'is_active': self.is_active,
            'has_share_link': self.share_token is not None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        })
        return data

    def __repr__(self):
        return f'<Customer {self.name} ({self.meter_number})>'
