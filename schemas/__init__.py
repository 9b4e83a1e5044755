"""
Request schemas. Bodies are parsed once at the route boundary; a failed
parse raises pydantic.ValidationError, rendered as a 400 by the app.
"""
from flask import request


def request_data():
    """JSON body, or form fields for multipart uploads (empty fields dropped)."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return {k: v for k, v in request.form.items() if v != ''}


def load(schema, data=None):
    """Validate the current request body (or data) against schema."""
    return schema.model_validate(request_data() if data is None else data)
