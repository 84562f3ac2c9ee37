"""
Domain exception hierarchy.

Services raise these; ``create_app`` registers handlers mapping each class
to an HTML page or a JSON error, so none of them is fatal to a request.

    DigForWebError           500
    ValidationError          400  required field empty, FK target missing
    NotFoundError            404  identifier does not resolve
    PermissionDeniedError    403  role does not allow the operation
    AuthError                401  invalid credentials or token
    TransportError           503  persistence backend failure
"""


class DigForWebError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message='An unexpected error occurred.'):
        self.message = message
        super().__init__(self.message)

    def to_dict(self):
        return {'message': self.message}


class ValidationError(DigForWebError):
    """
    Input rejected by the store.

    ``errors`` maps field names to lists of messages so forms can show them
    inline next to the offending field.
    """

    status_code = 400

    def __init__(self, errors, message='The submitted data is invalid.'):
        self.errors = errors
        super().__init__(message)

    def to_dict(self):
        return {'message': self.message, 'errors': self.errors}


class NotFoundError(DigForWebError):
    """An entity identifier did not resolve."""

    status_code = 404

    def __init__(self, kind, entity_id, message=None):
        self.kind = kind
        self.entity_id = entity_id
        if message is None:
            message = f'{kind.label} #{entity_id} was not found.'
        super().__init__(message)


class PermissionDeniedError(DigForWebError):
    status_code = 403

    def __init__(self, message='You do not have permission to perform this action.'):
        super().__init__(message)


class AuthError(DigForWebError):
    status_code = 401

    def __init__(self, message='Invalid email or password.'):
        super().__init__(message)


class TransportError(DigForWebError):
    """The storage backend failed; prior state is left untouched."""

    status_code = 503

    def __init__(self, message='The data store is unavailable. Please retry.'):
        super().__init__(message)
