"""
Create or reset an admin account.

    ADMIN_EMAIL=admin@power.local ADMIN_PASSWORD='S3cure!pass' python create_admin.py
"""
import os
import sys

from app import create_app
from models import db
from models.user import User
from utils.validators import validate_email, validate_password


def main():
    email = os.environ.get('ADMIN_EMAIL', '').strip().lower()
    password = os.environ.get('ADMIN_PASSWORD', '')

    if not validate_email(email):
        print("[ERROR] Set ADMIN_EMAIL to a valid email address")
        return 1
    ok, message = validate_password(password)
    if not ok:
        print(f"[ERROR] ADMIN_PASSWORD: {message}")
        return 1

    app = create_app()
    with app.app_context():
        _, created = User.ensure_admin(email, password)
        db.session.commit()

    if created:
        print(f"[SUCCESS] Admin user created: {email}")
    else:
        print(f"[SUCCESS] Admin user password reset: {email}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
