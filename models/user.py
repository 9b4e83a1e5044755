"""
User model definition
"""
from models import db
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash


class User(UserMixin, db.Model):
    """Account owner: holds their own meter and manages customers"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='user', index=True)  # user, admin
    meter_number = db.Column(db.String(12), unique=True, nullable=False, index=True)
    address = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    upi_id = db.Column(db.String(330), nullable=False, default='')
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_login = db.Column(db.DateTime, nullable=True)
    login_attempts = db.Column(db.Integer, nullable=False, default=0)
    lock_until = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    customers = db.relationship('Customer', backref='owner', lazy=True)
    records = db.relationship('ElectricityRecord', backref='user', lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'admin'

    def is_locked(self, now=None):
        now = now or datetime.now()
        return self.lock_until is not None and self.lock_until > now

    def register_failed_login(self, max_attempts, lock_duration, now=None):
        """
        Count a failed password check. An expired lock restarts the count at 1;
        reaching max_attempts locks the account for lock_duration.
        Caller commits.
        """
        now = now or datetime.now()
        if self.lock_until is not None and self.lock_until <= now:
            self.lock_until = None
            self.login_attempts = 1
            return
        self.login_attempts = (self.login_attempts or 0) + 1
        if self.login_attempts >= max_attempts and not self.is_locked(now):
            self.lock_until = now + lock_duration

    def reset_login_attempts(self):
        self.login_attempts = 0
        self.lock_until = None

    @classmethod
    def ensure_admin(cls, email, password):
        """
        Create an admin with this email, or promote and unlock the existing
        account, and set its password. Returns (user, created). Caller commits.
        """
        admin = cls.query.filter_by(email=email).first()
        created = admin is None
        if created:
            meter_number = 'ADMIN0000'
            if cls.query.filter_by(meter_number=meter_number).first():
                meter_number = f"ADM{cls.query.count():06d}"
            admin = cls(
                name='Administrator',
                email=email,
                meter_number=meter_number,
                address='Head Office, Admin Block',
                phone='1000000000',
            )
            db.session.add(admin)
        admin.role = 'admin'
        admin.is_active = True
        admin.reset_login_attempts()
        admin.set_password(password)
        return admin, created

    def to_dict(self):
        """Public profile; never includes the password hash or lock counters"""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'meter_number': self.meter_number,
            'address': self.address,
            'phone': self.phone,
            'upi_id': self.upi_id or '',
            'is_active': self.is_active,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<User {self.email}>'
