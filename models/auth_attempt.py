"""
Authentication attempt log for rate limiting.
Lives in the database so every server process sees the same counts.
"""
from models import db
from datetime import datetime


class AuthAttempt(db.Model):
    """One row per attempt on a rate-limited auth endpoint"""
    __tablename__ = 'auth_attempts'
    __table_args__ = (
        db.Index('ix_auth_attempts_key_time', 'client_ip', 'endpoint', 'attempted_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    client_ip = db.Column(db.String(64), nullable=False)
    endpoint = db.Column(db.String(120), nullable=False)
    attempted_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    def __repr__(self):
        return f'<AuthAttempt {self.client_ip} {self.endpoint}>'
