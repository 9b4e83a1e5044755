"""
Image uploads (bill images, payment screenshots).
Files land in UPLOAD_FOLDER under random names and are served from /uploads/<name>.
"""
import os
import secrets
from datetime import datetime

from flask import current_app
from werkzeug.utils import secure_filename

from utils.errors import ValidationFailed

UPLOAD_URL_PREFIX = '/uploads/'


def _extension(filename):
    name = secure_filename(filename or '')
    if '.' not in name:
        return ''
    return name.rsplit('.', 1)[1].lower()


def is_allowed_image(file_storage):
    allowed = current_app.config['ALLOWED_IMAGE_EXTENSIONS']
    if _extension(file_storage.filename) not in allowed:
        return False
    mimetype = (file_storage.mimetype or '').lower()
    # Some clients send application/octet-stream for images
    return mimetype.startswith('image/') or mimetype in ('', 'application/octet-stream')


def generate_upload_name(filename):
    return f"{int(datetime.now().timestamp() * 1000)}-{secrets.token_hex(8)}.{_extension(filename)}"


def save_image(file_storage, field):
    """Store an uploaded image and return its public path (/uploads/<name>)."""
    if file_storage is None or not file_storage.filename:
        raise ValidationFailed.for_field(field, 'Image file is required')
    if not is_allowed_image(file_storage):
        allowed = ', '.join(sorted(current_app.config['ALLOWED_IMAGE_EXTENSIONS']))
        raise ValidationFailed.for_field(field, f'Only image files are allowed ({allowed})')

    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    name = generate_upload_name(file_storage.filename)
    file_storage.save(os.path.join(folder, name))
    current_app.logger.info("Stored upload %s for %s", name, field)
    return UPLOAD_URL_PREFIX + name


def optional_image(files, field):
    """Save files[field] when present, else None."""
    upload = files.get(field)
    if upload is None or not upload.filename:
        return None
    return save_image(upload, field)
