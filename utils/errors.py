"""
API error types. Raised from routes and helpers; rendered as JSON by the
handlers registered in app.create_app.
"""


class APIError(Exception):
    status_code = 400
    code = 'BAD_REQUEST'

    def __init__(self, message, code=None, status_code=None, errors=None, **extra):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors
        self.extra = extra

    def to_dict(self):
        body = {'success': False, 'message': self.message, 'code': self.code}
        if self.errors:
            body['errors'] = self.errors
        body.update(self.extra)
        return body


class ValidationFailed(APIError):
    status_code = 400
    code = 'VALIDATION_ERROR'

    @classmethod
    def for_field(cls, field, message):
        return cls(message, errors=[{'field': field, 'message': message}])


class Unauthorized(APIError):
    status_code = 401
    code = 'UNAUTHORIZED'


class Forbidden(APIError):
    status_code = 403
    code = 'FORBIDDEN'


class NotFound(APIError):
    status_code = 404
    code = 'NOT_FOUND'


class Conflict(APIError):
    status_code = 409
    code = 'CONFLICT'


class AccountLocked(APIError):
    status_code = 423
    code = 'ACCOUNT_LOCKED'


class RateLimited(APIError):
    status_code = 429
    code = 'RATE_LIMIT_EXCEEDED'


def pydantic_errors(exc):
    """[{field, message}] from a pydantic ValidationError."""
    details = []
    for err in exc.errors():
        field = '.'.join(str(p) for p in err.get('loc', ())) or None
        message = err.get('msg', 'Invalid value')
        # "Value error, xyz" -> "xyz" for messages raised inside validators
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        details.append({'field': field, 'message': message})
    return details
